"""
Стратегия для шаблонов PHP.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .base import BaseTransformationStrategy, NodeHandler
from ..errors import ParseError
from ..transformer.conditions import unescape_value
from ..transformer.nodes import SelfClosingNode
from ..transformer.tokens import LogicTag


def php_quote(value: str) -> str:
    """Строковый литерал PHP в одинарных кавычках."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def php_condition(name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
    if operator is not None and value is not None:
        return f"${name} {operator} {php_quote(value)}"
    return f"${name}"


class PHPTransformationStrategy(BaseTransformationStrategy):
    """
    Дополнительный тег: include (подключение PHP-файла во время выполнения).

    Комментарии без show_comments выводятся как PHP-комментарии.
    """

    def get_logic_tags(self) -> List[LogicTag]:
        return [
            *super().get_logic_tags(),
            LogicTag("include"),
        ]

    def register_node_handlers(self) -> Dict[str, NodeHandler]:
        handlers = super().register_node_handlers()
        handlers["include"] = self.transform_include
        return handlers

    def transform_include(self, node: SelfClosingNode) -> str:
        if not node.parameters:
            raise ParseError("Missing include component")
        return f"<?php include {php_quote(unescape_value(node.parameters))}; ?>"

    def render_comment(self, comment: str) -> str:
        if self.transformer.show_comments:
            return f"<!--{comment}-->"
        return f"<?php /* {comment} */ ?>"

    def render_if(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        return f"<?php if ({php_condition(name, operator, value)}) : ?>"

    def render_elseif(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        return f"<?php elseif ({php_condition(name, operator, value)}) : ?>"

    def render_else(self) -> str:
        return "<?php else : ?>"

    def render_endif(self) -> str:
        return "<?php endif; ?>"

    def render_unless(self, name: str) -> str:
        return f"<?php if (!${name}) : ?>"

    def render_endunless(self) -> str:
        return "<?php endif; ?>"

    def render_variable(self, name: str) -> str:
        return f"<?php echo ${name}; ?>"


__all__ = ["php_quote", "php_condition", "PHPTransformationStrategy"]
