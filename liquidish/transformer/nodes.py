"""
AST-узлы шаблона Liquidish.

Цепочки условий хранятся как дерево: ветка elseif/else не является
соседом предыдущей ветки, а добавляется последним элементом её children.
Следующую ветку цепочки возвращает next_branch().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

# Виды узлов-продолжений цепочки условий
BRANCH_CONTINUATION_KINDS = frozenset({"elseif", "else"})


@dataclass(frozen=True)
class TextNode:
    """Обычный текст, выводится как есть."""
    value: str
    indentation: int = 0

    @property
    def kind(self) -> str:
        return "text"


@dataclass(frozen=True)
class SelfClosingNode:
    """
    Одиночная директива без тела: variable, meta, render, dyninclude и т.п.
    """
    kind: str
    parameters: Optional[str] = None
    indentation: int = 0


@dataclass(frozen=True)
class ParentNode:
    """
    Директива с телом: if, elseif, else, unless, for, comment и т.п.

    Список children заполняется построителем AST.
    """
    kind: str
    parameters: Optional[str] = None
    indentation: int = 0
    children: List["Node"] = field(default_factory=list)


Node = Union[TextNode, SelfClosingNode, ParentNode]

# Алиас для списка корневых узлов
LiquidAST = List[Node]


def is_branch_continuation(node: Node) -> bool:
    """Проверяет, является ли узел веткой elseif/else."""
    return isinstance(node, ParentNode) and node.kind in BRANCH_CONTINUATION_KINDS


def next_branch(node: Node) -> Optional[ParentNode]:
    """
    Возвращает следующую ветку цепочки условий.

    Args:
        node: Текущая ветка (if, elseif, unless ...)

    Returns:
        Последний дочерний узел, если это elseif/else, иначе None
    """
    if not isinstance(node, ParentNode) or not node.children:
        return None

    last = node.children[-1]
    if is_branch_continuation(last):
        return last  # type: ignore[return-value]
    return None


def branch_body(node: ParentNode) -> List[Node]:
    """Тело ветки без замыкающего узла-продолжения цепочки."""
    if next_branch(node) is not None:
        return node.children[:-1]
    return node.children


def walk_nodes(node: Node, callback: Callable[[Node], None]) -> None:
    """
    Обходит узел и всех его потомков в глубину.

    Args:
        node: Начальный узел
        callback: Вызывается для каждого посещённого узла
    """
    callback(node)

    if isinstance(node, ParentNode):
        for child in node.children:
            walk_nodes(child, callback)


def format_ast_tree(ast: LiquidAST, indent: int = 0) -> str:
    """Форматирует AST как дерево для отладки."""
    lines = []
    prefix = "  " * indent

    for node in ast:
        if isinstance(node, TextNode):
            # Показываем только начало текста для читабельности
            text_preview = repr(node.value[:50] + "..." if len(node.value) > 50 else node.value)
            lines.append(f"{prefix}TextNode({text_preview})")
        elif isinstance(node, SelfClosingNode):
            lines.append(f"{prefix}SelfClosingNode({node.kind}, {node.parameters!r})")
        elif isinstance(node, ParentNode):
            lines.append(f"{prefix}ParentNode({node.kind}, {node.parameters!r})")
            if node.children:
                lines.append(format_ast_tree(node.children, indent + 1))

    return "\n".join(lines)


__all__ = [
    "BRANCH_CONTINUATION_KINDS",
    "TextNode",
    "SelfClosingNode",
    "ParentNode",
    "Node",
    "LiquidAST",
    "is_branch_continuation",
    "next_branch",
    "branch_body",
    "walk_nodes",
    "format_ast_tree",
]
