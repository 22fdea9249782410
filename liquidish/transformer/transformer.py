"""
Транслятор Liquidish.

Публичная точка входа: объединяет лексер, построитель AST, стек скоупов
и стратегию целевого языка в один вызов transform().
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterator, Optional

from .components import DEFAULT_COMPONENT_EXTENSION
from .lexer import LiquidLexer
from .nodes import LiquidAST
from .parser import LiquidParser
from .scope import ScopeFrame, ScopeStack
from ..errors import RenderCancelled

if TYPE_CHECKING:
    from ..strategies.base import AbstractTransformationStrategy

logger = logging.getLogger(__name__)

StrategyBuilder = Callable[["LiquidishTransformer"], "AbstractTransformationStrategy"]


class LiquidishTransformer:
    """
    Транслятор шаблонов Liquidish в синтаксис целевого языка.

    Один экземпляр владеет одним стеком скоупов; параллельные трансляции
    должны использовать разные экземпляры.
    """

    def __init__(
        self,
        strategy_builder: StrategyBuilder,
        show_comments: bool = False,
        component_extension: str = DEFAULT_COMPONENT_EXTENSION,
    ):
        """
        Инициализирует транслятор.

        Args:
            strategy_builder: Фабрика стратегии, получающая сам транслятор
            show_comments: Выводить ли содержимое comment в результат
            component_extension: Расширение, добавляемое к путям render
        """
        self.show_comments = show_comments
        self.component_extension = component_extension
        self.scope = ScopeStack()

        self.strategy = strategy_builder(self)
        self.logic_tags = list(self.strategy.get_logic_tags())

        self.lexer = LiquidLexer(self.logic_tags)
        self.parser = LiquidParser(self.logic_tags)

    # ---- Скоуп ----

    def push_to_scope(self, frame: ScopeFrame) -> ScopeFrame:
        return self.scope.push(frame)

    def peek_scope(self) -> Optional[ScopeFrame]:
        return self.scope.peek()

    def pop_scope(self) -> ScopeFrame:
        return self.scope.pop()

    def get_scope(self) -> Dict[str, Any]:
        """Плоское представление всех фреймов."""
        return self.scope.flatten()

    def get_path(self) -> Optional[str]:
        """Путь файла, который транслируется в данный момент."""
        return self.scope.current_path()

    def is_root(self) -> bool:
        return self.scope.is_at_root()

    @contextmanager
    def pushed(self, frame: ScopeFrame) -> Iterator[ScopeFrame]:
        """Фрейм на время блока; снимается и при исключении."""
        with self.scope.pushed(frame) as pushed_frame:
            yield pushed_frame

    # ---- Трансляция ----

    def parse(self, contents: str) -> LiquidAST:
        """Токенизирует и строит AST с тегами активной стратегии."""
        return self.parser.parse(self.lexer.tokenize(contents))

    def transform_contents(self, contents: str) -> str:
        """
        Транслирует текст в текущем скоупе.

        Используется рекурсивно для компонентов; RenderCancelled не перехватывается.
        """
        return self.strategy.transform_ast(self.parse(contents))

    def transform(self, contents: str, path: Optional[str] = None) -> Optional[str]:
        """
        Транслирует шаблон верхнего уровня.

        Args:
            contents: Исходный текст
            path: Путь файла верхнего уровня (используется для render и is_root)

        Returns:
            Результат трансляции или None, если файл разрешено использовать только как компонент
        """
        if path is not None:
            self.scope.base_path = path

        try:
            if len(self.scope) == 0:
                # Временный фрейм для значений по умолчанию из meta
                with self.pushed({}):
                    return self.transform_contents(contents)
            return self.transform_contents(contents)
        except RenderCancelled:
            logger.debug(f"Transformation cancelled for {path or '<string>'}")
            return None


__all__ = ["StrategyBuilder", "LiquidishTransformer"]
