"""
Стратегия для шаблонов ISPConfig ({tmpl_*}).
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .base import BaseTransformationStrategy, NodeHandler
from ..errors import ParseError
from ..transformer.conditions import unescape_value
from ..transformer.nodes import ParentNode, SelfClosingNode
from ..transformer.tokens import LogicTag


class ISPConfigTransformationStrategy(BaseTransformationStrategy):
    """
    Дополнительные теги: loop/endloop (цикл среды выполнения), dyninclude, hook.
    """

    def get_logic_tags(self) -> List[LogicTag]:
        return [
            *super().get_logic_tags(),
            LogicTag("loop", opens_scope=True),
            LogicTag("endloop", closes_scope=True),
            LogicTag("dyninclude"),
            LogicTag("hook"),
        ]

    def register_node_handlers(self) -> Dict[str, NodeHandler]:
        handlers = super().register_node_handlers()
        handlers.update({
            "loop": self.transform_loop,
            "dyninclude": self.transform_dyninclude,
            "hook": self.transform_hook,
        })
        return handlers

    # ---- Собственные директивы ----

    def transform_loop(self, node: ParentNode) -> str:
        if not node.parameters:
            raise ParseError("Missing loop name")
        return self.render_loop(node.parameters) + self.transform_nodes(node.children) + self.render_endloop()

    def transform_dyninclude(self, node: SelfClosingNode) -> str:
        if not node.parameters:
            raise ParseError("Missing dyninclude component")
        return f'{{tmpl_dyninclude name="{unescape_value(node.parameters)}"}}'

    def transform_hook(self, node: SelfClosingNode) -> str:
        if not node.parameters:
            raise ParseError("Missing hook name")
        return f'{{tmpl_hook name="{unescape_value(node.parameters)}"}}'

    def render_loop(self, name: str) -> str:
        return f'{{tmpl_loop name="{name}"}}'

    def render_endloop(self) -> str:
        return "{/tmpl_loop}"

    # ---- Фрагменты синтаксиса ----

    def render_if(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        if operator is not None and value is not None:
            return f'{{tmpl_if name="{name}" op="{operator}" value="{value}"}}'
        return f'{{tmpl_if name="{name}"}}'

    def render_elseif(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        if operator is not None and value is not None:
            return f'{{tmpl_elseif name="{name}" op="{operator}" value="{value}"}}'
        return f'{{tmpl_elseif name="{name}"}}'

    def render_else(self) -> str:
        return "{tmpl_else}"

    def render_endif(self) -> str:
        return "{/tmpl_if}"

    def render_unless(self, name: str) -> str:
        return f'{{tmpl_unless name="{name}"}}'

    def render_endunless(self) -> str:
        return "{/tmpl_unless}"

    def render_variable(self, name: str) -> str:
        return f'{{tmpl_var name="{name}"}}'


__all__ = ["ISPConfigTransformationStrategy"]
