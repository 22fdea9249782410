"""
Построитель AST для шаблонов Liquidish.

Поддерживает явный стек открытых областей, начинающийся с синтетического
корня. Теги, одновременно закрывающие и открывающие область (elseif, else),
вкладываются последним потомком предыдущей ветки.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from .lexer import tokenize_liquid
from .nodes import LiquidAST, Node, ParentNode, SelfClosingNode, TextNode
from .tokens import LogicTag, Token, canonical_tag_name
from ..errors import StructuralError

logger = logging.getLogger(__name__)

_ROOT_KIND = "root"


class LiquidParser:
    """
    Парсер плоского потока токенов в дерево узлов.
    """

    def __init__(self, logic_tags: Sequence[LogicTag]):
        """
        Инициализирует парсер.

        Args:
            logic_tags: Те же логические теги, что использовались лексером
        """
        self.logic_tags: Dict[str, LogicTag] = {}
        for tag in logic_tags:
            self.logic_tags[canonical_tag_name(tag.name)] = tag

    def parse(self, tokens: Sequence[Token]) -> LiquidAST:
        """
        Строит AST из токенов.

        Args:
            tokens: Токены в порядке следования

        Returns:
            Список корневых узлов

        Raises:
            StructuralError: При невозможной вложенности областей
        """
        root = ParentNode(kind=_ROOT_KIND)
        stack: List[ParentNode] = [root]

        for token in tokens:
            if token.is_text:
                stack[-1].children.append(TextNode(value=token.value or "", indentation=token.indentation))
                continue

            tag = self.logic_tags.get(token.kind)

            if tag is not None and tag.opens_scope:
                current = stack[-1]
                if not isinstance(current, ParentNode):
                    raise StructuralError(f"Cannot open scope '{token.kind}' inside a non-parent node")

                node = ParentNode(
                    kind=token.kind,
                    parameters=token.parameters,
                    indentation=token.indentation,
                )
                current.children.append(node)

                # elseif/else остаются внутри предыдущей ветки, но заменяют её на вершине стека
                if tag.closes_scope:
                    self._pop(stack, token)
                stack.append(node)
                continue

            if tag is not None and tag.closes_scope:
                self._pop(stack, token)
                continue

            stack[-1].children.append(self._self_closing(token))

        if len(stack) > 1:
            unclosed = ", ".join(node.kind for node in stack[1:])
            logger.warning(f"Unclosed scopes auto-closed at end of input: {unclosed}")

        logger.debug(f"Parsed {len(tokens)} tokens into {len(root.children)} root nodes")
        return root.children

    @staticmethod
    def _pop(stack: List[ParentNode], token: Token) -> ParentNode:
        """Закрывает текущую область; синтетический корень закрыть нельзя."""
        if len(stack) <= 1:
            raise StructuralError(f"Unexpected '{token.kind}' without an open scope")
        return stack.pop()

    @staticmethod
    def _self_closing(token: Token) -> Node:
        return SelfClosingNode(
            kind=token.kind,
            parameters=token.parameters,
            indentation=token.indentation,
        )


def parse_tokens(tokens: Sequence[Token], logic_tags: Sequence[LogicTag]) -> LiquidAST:
    """Строит AST из готового списка токенов."""
    return LiquidParser(logic_tags).parse(tokens)


def parse_liquid(text: str, logic_tags: Sequence[LogicTag]) -> LiquidAST:
    """
    Удобная функция: токенизация и построение AST за один вызов.

    Args:
        text: Исходный текст шаблона
        logic_tags: Распознаваемые логические теги

    Returns:
        Список корневых узлов
    """
    return parse_tokens(tokenize_liquid(text, logic_tags), logic_tags)


__all__ = ["LiquidParser", "parse_tokens", "parse_liquid"]
