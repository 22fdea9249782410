"""
Ядро транслятора Liquidish: лексер, построитель AST, стек скоупов и точка входа.
"""

from __future__ import annotations

from .lexer import LiquidLexer, tokenize_liquid
from .nodes import ParentNode, SelfClosingNode, TextNode, next_branch, walk_nodes
from .parser import LiquidParser, parse_liquid, parse_tokens
from .scope import ScopeStack
from .tokens import LogicTag, Token
from .transformer import LiquidishTransformer, StrategyBuilder

__all__ = [
    "LiquidLexer",
    "tokenize_liquid",
    "TextNode",
    "SelfClosingNode",
    "ParentNode",
    "next_branch",
    "walk_nodes",
    "LiquidParser",
    "parse_liquid",
    "parse_tokens",
    "ScopeStack",
    "LogicTag",
    "Token",
    "LiquidishTransformer",
    "StrategyBuilder",
]
