"""
Лексические типы для транслятора Liquidish.

Определяет токены, спецификации логических тегов и алиасы имён тегов.
Набор распознаваемых тегов задаётся активной стратегией.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional


class TokenKind(str, enum.Enum):
    """Базовые виды токенов. Логические теги используют собственное имя тега."""

    TEXT = "text"
    VARIABLE = "variable"


# Альтернативные написания тегов, нормализуемые на этапе токенизации
TAG_ALIASES: Dict[str, str] = {
    "elsif": "elseif",
}


def canonical_tag_name(name: str) -> str:
    """Возвращает каноническое имя тега (например, elsif -> elseif)."""
    return TAG_ALIASES.get(name, name)


@dataclass(frozen=True)
class LogicTag:
    """
    Спецификация логического тега {% name ... %}.

    Тег с обоими флагами (elseif, else) закрывает текущую область
    и сразу открывает новую, вложенную в предыдущую ветку.
    """
    name: str
    opens_scope: bool = False
    closes_scope: bool = False


@dataclass(frozen=True)
class Token:
    """
    Токен с информацией об отступе для переиндентации подключаемых компонентов.
    """
    kind: str                            # "text", "variable" или имя логического тега
    indentation: int = 0                 # Пробельные символы от начала строки до токена
    whitespace_trim_before: bool = False # {%- / {{-
    whitespace_trim_after: bool = False  # -%} / -}}
    parameters: Optional[str] = None     # Параметры тега или имя переменной
    value: Optional[str] = None          # Содержимое текстового токена
    position: int = 0                    # Смещение в исходном тексте

    @property
    def is_text(self) -> bool:
        return self.kind == TokenKind.TEXT.value

    def __repr__(self) -> str:
        payload = self.value if self.is_text else self.parameters
        return f"Token({self.kind}, {payload!r}, indent={self.indentation})"


__all__ = [
    "TokenKind",
    "TAG_ALIASES",
    "canonical_tag_name",
    "LogicTag",
    "Token",
]
