"""
Условия директив if/elseif/unless.

Разбирает параметры условия в тройку (имя, оператор, значение) и вычисляет
их истинность для переменных, известных на этапе компиляции.
"""

from __future__ import annotations

import json
import math
import operator as op
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .lexer import VARIABLE_NAME_PATTERN
from ..errors import InvalidOperatorError, ParseError

# Поддерживаемые операторы сравнения
OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": op.eq,
    "!=": op.ne,
    ">": op.gt,
    "<": op.lt,
    ">=": op.ge,
    "<=": op.le,
}

_QUOTED_VALUE = r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\""

_CONDITION_PATTERN = re.compile(
    r"^(?P<name>" + VARIABLE_NAME_PATTERN + r")"
    r"(?:"
    r"(?:\s*(?P<symbol_op>[!=<>]+)\s*|\s+(?P<word_op>[^\s'\"]+)\s+)"
    r"(?P<value>" + _QUOTED_VALUE + r"|\S+)"
    r")?$",
    re.DOTALL,
)

# Десятичное число: знак, цифры с необязательной дробной частью и экспонентой
_NUMBER_PATTERN = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\s*$")

# Литералы, известные без переменных в скоупе
_LITERALS: Dict[str, bool] = {
    "true": True,
    "false": False,
}


@dataclass(frozen=True)
class Condition:
    """Разобранное условие: имя переменной и необязательное сравнение."""
    name: str
    operator: Optional[str] = None
    value: Optional[str] = None


def unescape_value(value: str) -> str:
    """
    Снимает кавычки со строкового литерала и экранирование кавычки того же типа.

    Значения без кавычек возвращаются как есть.
    """
    quote = value[:1]
    if quote not in ("'", '"') or len(value) < 2 or value[-1] != quote:
        return value

    inner = value[1:-1]
    return inner.replace("\\" + quote, quote).replace("\\\\", "\\")


def parse_condition(parameters: Optional[str]) -> Condition:
    """
    Разбирает параметры условия.

    Args:
        parameters: Текст вида "NAME", "NAME == 'VALUE'" или "NAME OP \"VALUE\""

    Returns:
        Разобранное условие

    Raises:
        ParseError: Если условие не распознано
    """
    if not parameters:
        raise ParseError("Missing condition")

    match = _CONDITION_PATTERN.match(parameters.strip())
    if match is None:
        raise ParseError("Invalid condition", parameters)

    operator = match.group("symbol_op") or match.group("word_op")
    value = match.group("value")

    return Condition(
        name=match.group("name"),
        operator=operator,
        value=unescape_value(value) if value is not None else None,
    )


def lookup(name: str, scope: Mapping[str, Any]) -> Tuple[bool, Any]:
    """
    Ищет значение условия в скоупе.

    Returns:
        Пара (известно ли значение, значение)
    """
    if name in scope:
        return True, scope[name]
    if name in _LITERALS:
        return True, _LITERALS[name]
    return False, None


def is_truthy(value: Any) -> bool:
    """Пустая строка, 0, False, None и пустая коллекция ложны; непустой объект истинен."""
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) > 0
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def is_numeric(value: Any) -> bool:
    """Проверяет, является ли значение числом или числовой строкой."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if not isinstance(value, str):
        return False
    return _NUMBER_PATTERN.match(value) is not None


def stringify_value(value: Any) -> str:
    """
    Текстовое представление известного значения для вывода и сравнения.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def perform_if(actual: Any, operator: Optional[str] = None, expected: Optional[str] = None) -> bool:
    """
    Вычисляет условие для известного значения.

    Без оператора проверяется истинность. Числовые операнды сравниваются
    как числа. Для == и != нестроковое значение (bool, None, список)
    сравнивается само по себе, остальное как текстовые представления.

    Raises:
        InvalidOperatorError: Для неподдерживаемого оператора
    """
    if operator is None:
        return is_truthy(actual)

    compare = OPERATORS.get(operator)
    if compare is None:
        raise InvalidOperatorError(operator)

    if is_numeric(actual) and is_numeric(expected):
        return compare(float(actual), float(expected))

    if operator in ("==", "!=") and not isinstance(actual, str):
        return compare(actual, expected)

    return compare(stringify_value(actual), stringify_value(expected))


__all__ = [
    "OPERATORS",
    "Condition",
    "unescape_value",
    "parse_condition",
    "lookup",
    "is_truthy",
    "is_numeric",
    "stringify_value",
    "perform_if",
]
