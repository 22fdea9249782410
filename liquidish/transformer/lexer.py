"""
Лексический анализатор для шаблонов Liquidish.

Строит одно комбинированное регулярное выражение из списка логических тегов
активной стратегии и разбивает исходный текст на плоскую последовательность
токенов: логические теги, интерполяции переменных и обычный текст.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Optional, Pattern, Sequence

from .tokens import LogicTag, Token, TokenKind, canonical_tag_name
from ..errors import ParseError

logger = logging.getLogger(__name__)

# Имя переменной: dotted.path с необязательными индексами, в т.ч. item[0].name
VARIABLE_NAME_PATTERN = r"[\w.]+(?:\[[^\]]*\][\w.]*)*"

_VARIABLE_ALTERNATIVE = (
    r"(?P<var>\{\{(?P<var_pre>-)?\s*"
    r"(?P<var_name>" + VARIABLE_NAME_PATTERN + r")"
    r"\s*(?P<var_post>-)?\}\})"
)

# Текст: минимум один символ, затем всё до следующего {% / {{ или конца ввода
_TEXT_ALTERNATIVE = r"(?P<text>[\s\S][\s\S]*?(?=\{%|\{\{|\Z))"


def build_token_pattern(logic_tags: Sequence[LogicTag]) -> Pattern[str]:
    """
    Строит комбинированный паттерн в порядке приоритета: тег, переменная, текст.

    Args:
        logic_tags: Распознаваемые логические теги

    Returns:
        Скомпилированное регулярное выражение
    """
    alternatives = []

    # Длинные имена раньше коротких, чтобы elseif не распознавался как else
    names = sorted({tag.name for tag in logic_tags}, key=len, reverse=True)
    if names:
        names_alternation = "|".join(re.escape(name) for name in names)
        alternatives.append(
            r"(?P<tag>\{%(?P<tag_pre>-)?\s*"
            r"(?P<tag_name>" + names_alternation + r")(?!\w)"
            r"(?:\s+(?P<tag_params>(?:[^%]|%(?!\}))*?))?"
            r"\s*(?P<tag_post>-)?%\})"
        )

    alternatives.append(_VARIABLE_ALTERNATIVE)
    alternatives.append(_TEXT_ALTERNATIVE)

    return re.compile("|".join(alternatives))


def indentation_from_line_start(text: str, offset: int) -> int:
    """
    Считает пробельные символы в начале строки, содержащей offset.

    Args:
        text: Исходный текст
        offset: Позиция токена

    Returns:
        Количество ведущих пробельных символов строки до позиции offset
    """
    line_start = text.rfind("\n", 0, offset) + 1
    segment = text[line_start:offset]
    return len(segment) - len(segment.lstrip())


class LiquidLexer:
    """
    Лексер Liquidish с настраиваемым словарём логических тегов.

    Обрабатывает модификаторы управления пробелами ({%- -%}, {{- -}}),
    просматривая только непосредственно соседний токен.
    """

    def __init__(self, logic_tags: Sequence[LogicTag]):
        """
        Инициализирует лексер.

        Args:
            logic_tags: Логические теги, предоставленные стратегией
        """
        self.logic_tags = list(logic_tags)
        self.pattern = build_token_pattern(self.logic_tags)

    def tokenize(self, text: str) -> List[Token]:
        """
        Разбивает текст на токены в порядке следования.

        Args:
            text: Исходный текст шаблона

        Returns:
            Список токенов

        Raises:
            ParseError: Если ни одна альтернатива не подошла в текущей позиции
        """
        tokens: List[Token] = []
        position = 0
        length = len(text)

        while position < length:
            match = self.pattern.match(text, position)
            if match is None or match.end() == position:
                raise ParseError(f"Unable to tokenize input at offset {position}", text[position:position + 20])

            token = self._build_token(match, text)
            token = self._apply_whitespace_control(tokens, token)
            tokens.append(token)

            position = match.end()

        logger.debug(f"Tokenized text of length {length} into {len(tokens)} tokens")
        return tokens

    def _build_token(self, match: re.Match, text: str) -> Token:
        """Создаёт токен из совпадения комбинированного паттерна."""
        start = match.start()
        indentation = indentation_from_line_start(text, start)

        if match.group("text") is not None:
            return Token(
                kind=TokenKind.TEXT.value,
                indentation=indentation,
                value=match.group("text"),
                position=start,
            )

        if match.group("var") is not None:
            return Token(
                kind=TokenKind.VARIABLE.value,
                indentation=indentation,
                whitespace_trim_before=match.group("var_pre") is not None,
                whitespace_trim_after=match.group("var_post") is not None,
                parameters=match.group("var_name"),
                position=start,
            )

        parameters: Optional[str] = match.group("tag_params")
        if parameters is not None:
            parameters = parameters.strip() or None

        return Token(
            kind=canonical_tag_name(match.group("tag_name")),
            indentation=indentation,
            whitespace_trim_before=match.group("tag_pre") is not None,
            whitespace_trim_after=match.group("tag_post") is not None,
            parameters=parameters,
            position=start,
        )

    @staticmethod
    def _apply_whitespace_control(tokens: List[Token], token: Token) -> Token:
        """
        Применяет модификаторы '-' к текущему и предыдущему токенам.

        Args:
            tokens: Уже полученные токены (последний может быть изменён)
            token: Текущий токен

        Returns:
            Текущий токен с учётом управления пробелами
        """
        previous = tokens[-1] if tokens else None

        if token.whitespace_trim_before:
            if previous is not None and previous.is_text:
                tokens[-1] = replace(previous, value=previous.value.rstrip())
            token = replace(token, indentation=0)

        if previous is not None and previous.whitespace_trim_after:
            token = replace(token, indentation=0)
            if token.is_text:
                token = replace(token, value=token.value.lstrip())

        return token


def tokenize_liquid(text: str, logic_tags: Sequence[LogicTag]) -> List[Token]:
    """
    Удобная функция для токенизации текста Liquidish.

    Args:
        text: Исходный текст
        logic_tags: Распознаваемые логические теги

    Returns:
        Список токенов
    """
    return LiquidLexer(logic_tags).tokenize(text)


__all__ = [
    "VARIABLE_NAME_PATTERN",
    "LiquidLexer",
    "build_token_pattern",
    "indentation_from_line_start",
    "tokenize_liquid",
]
