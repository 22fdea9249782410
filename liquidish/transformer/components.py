"""
Подключение компонентов директивой render.

Разбор параметров render, поиск файла компонента относительно текущего
файла, переиндентация содержимого и построение скоупа из значений.
"""

from __future__ import annotations

import json
import logging
import re
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .conditions import unescape_value
from ..errors import ComponentNotFoundError, ParseError

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_EXTENSION = ".liquid"

# Служебная переменная и её значения, недоступные пользователю
RESERVED_VARIABLE = "___"
RESERVED_VALUES = ("dont-show-it", "show-it")

# 'component' или "component", затем необязательно: , JSON | key: value, ...
_RENDER_PATTERN = re.compile(
    r"^\s*(?P<component>'[^']+'|\"[^\"]+\")(?:\s*,\s*(?P<variables>[\s\S]*?))?\s*$"
)

_VARIABLE_STRING_PATTERN = re.compile(
    r"(\w+):\s*("
    r"\"(?:[^\"\\]|\\.)*\""
    r"|'(?:[^'\\]|\\.)*'"
    r"|-?\d+\.\d+"
    r"|-?\d+"
    r"|true|false|null"
    r")"
)

_BARE_LITERALS: Dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
}


@dataclass(frozen=True)
class RenderCall:
    """Разобранная директива render."""
    component: str
    variables: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LoadedComponent:
    """Содержимое компонента, готовое к вставке в место вызова."""
    contents: str
    path: str


def _convert_bare_value(raw: str) -> Any:
    """Приводит значение из списка key: value к типу Python."""
    if raw in _BARE_LITERALS:
        return _BARE_LITERALS[raw]
    if raw[:1] in ("'", '"'):
        return unescape_value(raw)
    if "." in raw:
        return float(raw)
    return int(raw)


def check_reserved_variables(variables: Optional[Dict[str, Any]]) -> None:
    """
    Запрещает переменную "___" со служебными значениями.

    Raises:
        ParseError: Если найдено зарезервированное сочетание
    """
    if not variables:
        return

    value = variables.get(RESERVED_VARIABLE)
    if value in RESERVED_VALUES:
        raise ParseError(
            f'The variable name "{RESERVED_VARIABLE}" with the value "{value}" is reserved'
        )


def parse_variables_string(variables_string: str) -> Dict[str, Any]:
    """
    Разбирает переменные render: сначала как JSON-объект, затем как список key: value.

    Args:
        variables_string: Текст после имени компонента

    Returns:
        Словарь переменных
    """
    try:
        parsed = json.loads(variables_string)
    except ValueError:
        parsed = None
    else:
        if isinstance(parsed, dict):
            return dict(parsed)
        logger.debug(f"Render variables parsed as JSON but not an object: {type(parsed).__name__}")
        return {}

    variables: Dict[str, Any] = {}
    for match in _VARIABLE_STRING_PATTERN.finditer(variables_string):
        variables[match.group(1)] = _convert_bare_value(match.group(2))
    return variables


def parse_render_parameters(parameters: Optional[str]) -> RenderCall:
    """
    Разбирает параметры директивы render.

    Raises:
        ParseError: Если не удалось выделить ссылку на компонент
    """
    match = _RENDER_PATTERN.match(parameters or "")
    if match is None:
        raise ParseError("Invalid render statement", parameters)

    component = match.group("component")[1:-1]
    variables_string = match.group("variables")
    variables = parse_variables_string(variables_string) if variables_string else {}

    return RenderCall(component=component, variables=variables)


def try_find_component_path(component_path: Path, extension: str = DEFAULT_COMPONENT_EXTENSION) -> Path:
    """Возвращает путь как есть, если он существует, иначе с добавленным расширением."""
    if component_path.exists():
        return component_path
    return component_path.with_name(component_path.name + extension)


def trim_trailing_newline(contents: str) -> str:
    """Удаляет один завершающий перевод строки."""
    if contents.endswith("\n"):
        return contents[:-1]
    return contents


def indent_following_lines(contents: str, indentation: int) -> str:
    """
    Сдвигает все строки, кроме первой, на indentation пробелов.

    Первая строка уже стоит на месте вызова. Пустые строки не сдвигаются.
    """
    if indentation <= 0:
        return contents

    first, newline, rest = contents.partition("\n")
    if not newline:
        return contents
    return first + newline + textwrap.indent(rest, " " * indentation)


def read_component_with_indentation(
    current_path: Optional[str],
    component: str,
    indentation: int = 0,
    extension: str = DEFAULT_COMPONENT_EXTENSION,
) -> LoadedComponent:
    """
    Читает файл компонента относительно каталога текущего файла.

    Args:
        current_path: Файл, из которого вызван render (None: текущий каталог)
        component: Путь к компоненту из директивы
        indentation: Отступ места вызова
        extension: Расширение, добавляемое если файл не найден как есть

    Returns:
        Переиндентированное содержимое и разрешённый путь

    Raises:
        ComponentNotFoundError: Если файл не найден
    """
    base_dir = Path(current_path).parent if current_path else Path.cwd()
    component_path = try_find_component_path((base_dir / component).resolve(), extension)

    if not component_path.is_file():
        raise ComponentNotFoundError(component, current_path)

    contents = component_path.read_text(encoding="utf-8")
    contents = trim_trailing_newline(indent_following_lines(contents, indentation))

    logger.debug(f"Loaded component '{component}' from {component_path} (indent={indentation})")
    return LoadedComponent(contents=contents, path=str(component_path))


def build_variables_scope(item: Any, item_name: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Связывает значение с именем и рекурсивно синтезирует имена вложенных элементов.

    Для списков создаются ключи name[0], name[1]...; для словарей name.key.

    Args:
        item: Значение
        item_name: Имя переменной
        variables: Словарь для заполнения (создаётся, если не передан)

    Returns:
        Заполненный словарь
    """
    if variables is None:
        variables = {}

    variables[item_name] = item

    if isinstance(item, (list, tuple)):
        for index, element in enumerate(item):
            build_variables_scope(element, f"{item_name}[{index}]", variables)
    elif isinstance(item, dict):
        for key, element in item.items():
            build_variables_scope(element, f"{item_name}.{key}", variables)

    return variables


__all__ = [
    "DEFAULT_COMPONENT_EXTENSION",
    "RESERVED_VARIABLE",
    "RESERVED_VALUES",
    "RenderCall",
    "LoadedComponent",
    "check_reserved_variables",
    "parse_variables_string",
    "parse_render_parameters",
    "try_find_component_path",
    "trim_trailing_newline",
    "indent_following_lines",
    "read_component_with_indentation",
    "build_variables_scope",
]
