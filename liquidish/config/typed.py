from __future__ import annotations

import dataclasses
import typing as t
from dataclasses import fields, is_dataclass

from ..errors import ConfigLoadError


class ConfigCoerceError(ConfigLoadError):
    """Ошибка приведения конфигурации к типу с указанием пути поля."""
    def __init__(self, message: str, path: tuple[str, ...] = ()):
        self.path = path
        prefix = f"{'.'.join(path)}: " if path else ""
        super().__init__(prefix + message)


_T = t.TypeVar("_T")


def build_typed(cls: type[_T], data: t.Any) -> _T:
    """
    Построить dataclass из сырых данных YAML,
    рекурсивно приводя вложенные значения согласно type hints.

    Raises:
        ConfigCoerceError: С точечным путём до проблемного поля
    """
    try:
        return t.cast(_T, _coerce_to_class(cls, data, path=()))
    except ConfigCoerceError:
        raise
    except Exception as e:
        raise ConfigCoerceError(f"failed to build {getattr(cls, '__name__', str(cls))}: {e}") from e


def _coerce_to_class(cls: type, data: t.Any, path: tuple[str, ...]):
    if not is_dataclass(cls):
        raise ConfigCoerceError(f"not a dataclass: {getattr(cls, '__name__', str(cls))}", path)
    if not isinstance(data, dict):
        raise ConfigCoerceError(f"expected mapping for {cls.__name__}, got {type(data).__name__}", path)
    hints = t.get_type_hints(cls)
    allowed = {f.name for f in fields(cls)}
    extras = set(data.keys()) - allowed
    if extras:
        raise ConfigCoerceError(f"unexpected keys: {sorted(extras)!r}", path)

    kwargs = {}
    for f in fields(cls):
        f_path = (*path, f.name)
        if f.name in data:
            kwargs[f.name] = coerce(data[f.name], hints.get(f.name, t.Any), f_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise ConfigCoerceError("required field missing", f_path)
    return cls(**kwargs)


def coerce(value: t.Any, hint: t.Any, path: tuple[str, ...]) -> t.Any:
    """Рекурсивная нормализация значения согласно типу-подсказке."""
    origin = t.get_origin(hint)
    args = t.get_args(hint)

    if hint is t.Any:
        return value

    if origin is t.Literal:
        if value not in args:
            raise ConfigCoerceError(f"expected one of {args!r}, got {value!r}", path)
        return value

    # bool проверяется отдельно: YAML-строка "no" не должна становиться True
    if hint is bool:
        if isinstance(value, bool):
            return value
        raise ConfigCoerceError(f"expected bool, got {type(value).__name__}", path)

    if hint is str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise ConfigCoerceError(f"expected str, got {type(value).__name__}", path)

    if origin is dict:
        k_t, v_t = args or (t.Any, t.Any)
        if not isinstance(value, dict):
            raise ConfigCoerceError(f"expected mapping, got {type(value).__name__}", path)
        out = {}
        for k, v in value.items():
            kk = coerce(k, k_t, (*path, "<key>"))
            out[kk] = coerce(v, v_t, (*path, str(kk)))
        return out

    return value


__all__ = ["ConfigCoerceError", "build_typed", "coerce"]
