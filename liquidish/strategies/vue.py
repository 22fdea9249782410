"""
Стратегия для шаблонов Vue (директивы v-if / v-html / v-pre).
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .base import BaseTransformationStrategy, NodeHandler
from ..transformer.conditions import unescape_value
from ..transformer.nodes import ParentNode, SelfClosingNode
from ..transformer.tokens import LogicTag


def vue_condition(name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
    if operator is not None and value is not None:
        return f"${name} {operator} '{value}'"
    return f"${name}"


class VueTransformationStrategy(BaseTransformationStrategy):
    """
    Дополнительные теги: html (v-html) и pre/endpre (v-pre).
    """

    def get_logic_tags(self) -> List[LogicTag]:
        return [
            *super().get_logic_tags(),
            LogicTag("html"),
            LogicTag("pre", opens_scope=True),
            LogicTag("endpre", closes_scope=True),
        ]

    def register_node_handlers(self) -> Dict[str, NodeHandler]:
        handlers = super().register_node_handlers()
        handlers.update({
            "html": self.transform_html,
            "pre": self.transform_pre,
        })
        return handlers

    def transform_html(self, node: SelfClosingNode) -> str:
        markup = unescape_value(node.parameters or "")
        return f"<div v-html=\"'{markup}'\"></div>"

    def transform_pre(self, node: ParentNode) -> str:
        return f"<span v-pre>{self.transform_nodes(node.children)}</span>"

    def render_if(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        return f'<div v-if="{vue_condition(name, operator, value)}">'

    def render_elseif(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        return f'</div><div v-else-if="{vue_condition(name, operator, value)}">'

    def render_else(self) -> str:
        return "</div><div v-else>"

    def render_endif(self) -> str:
        return "</div>"

    def render_unless(self, name: str) -> str:
        return f'<div v-if="!{name}">'

    def render_endunless(self) -> str:
        return "</div>"

    def render_variable(self, name: str) -> str:
        return f"{{{{ {name} }}}}"


__all__ = ["vue_condition", "VueTransformationStrategy"]
