"""
Контракт стратегии трансляции и общая семантика директив.

AbstractTransformationStrategy описывает фрагменты синтаксиса целевого языка,
которые движок запрашивает для отложенных конструкций. BaseTransformationStrategy
реализует частичное вычисление общих директив (variable, if, unless, for,
render, meta, comment) поверх стека скоупов транслятора.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from ..errors import NotAnArrayError, ParseError, RenderCancelled, StructuralError
from ..transformer.components import (
    build_variables_scope,
    check_reserved_variables,
    parse_render_parameters,
    read_component_with_indentation,
)
from ..transformer.conditions import is_truthy, lookup, parse_condition, perform_if, stringify_value
from ..transformer.lexer import VARIABLE_NAME_PATTERN
from ..transformer.meta import parse_meta
from ..transformer.nodes import LiquidAST, Node, ParentNode, SelfClosingNode, TextNode, branch_body, next_branch
from ..transformer.scope import PATH_KEY
from ..transformer.tokens import LogicTag

if TYPE_CHECKING:
    from ..transformer.transformer import LiquidishTransformer

logger = logging.getLogger(__name__)

NodeHandler = Callable[[Node], str]

# Теги, общие для всех стратегий
DEFAULT_LOGIC_TAGS: Sequence[LogicTag] = (
    LogicTag("comment", opens_scope=True),
    LogicTag("endcomment", closes_scope=True),
    LogicTag("if", opens_scope=True),
    LogicTag("elseif", opens_scope=True, closes_scope=True),
    LogicTag("elsif", opens_scope=True, closes_scope=True),
    LogicTag("else", opens_scope=True, closes_scope=True),
    LogicTag("endif", closes_scope=True),
    LogicTag("unless", opens_scope=True),
    LogicTag("endunless", closes_scope=True),
    LogicTag("for", opens_scope=True),
    LogicTag("endfor", closes_scope=True),
    LogicTag("meta"),
    LogicTag("render"),
)

_FOR_PATTERN = re.compile(r"^(\w+)\s+in\s+(" + VARIABLE_NAME_PATTERN + r")$")

# Интерполяции внутри строковых значений переменных
_NESTED_VARIABLE_PATTERN = re.compile(r"\{\{-?\s*(" + VARIABLE_NAME_PATTERN + r")\s*-?\}\}")


class AbstractTransformationStrategy(ABC):
    """
    Стратегия целевого языка.

    Получает ссылку на транслятор, чтобы работать с его стеком скоупов
    и рекурсивно транслировать подключаемые компоненты.
    """

    def __init__(self, transformer: "LiquidishTransformer"):
        self.transformer = transformer

    @abstractmethod
    def get_logic_tags(self) -> List[LogicTag]:
        """Логические теги, распознаваемые лексером для этой стратегии."""
        pass

    @abstractmethod
    def transform_ast(self, ast: LiquidAST) -> str:
        """Транслирует корневые узлы в текст целевого языка."""
        pass

    @abstractmethod
    def render_comment(self, comment: str) -> str:
        pass

    @abstractmethod
    def render_if(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        pass

    @abstractmethod
    def render_elseif(self, name: str, operator: Optional[str] = None, value: Optional[str] = None) -> str:
        pass

    @abstractmethod
    def render_else(self) -> str:
        pass

    @abstractmethod
    def render_endif(self) -> str:
        pass

    @abstractmethod
    def render_unless(self, name: str) -> str:
        pass

    @abstractmethod
    def render_endunless(self) -> str:
        pass

    @abstractmethod
    def render_variable(self, name: str) -> str:
        pass


class BaseTransformationStrategy(AbstractTransformationStrategy):
    """
    Общая семантика директив Liquidish.

    Подклассы добавляют собственные теги через get_logic_tags() и собственные
    обработчики через register_node_handlers().
    """

    def __init__(self, transformer: "LiquidishTransformer"):
        super().__init__(transformer)
        self._handlers: Dict[str, NodeHandler] = self.register_node_handlers()

    def get_logic_tags(self) -> List[LogicTag]:
        return list(DEFAULT_LOGIC_TAGS)

    def register_node_handlers(self) -> Dict[str, NodeHandler]:
        """
        Возвращает отображение вида узла на обработчик.

        Подклассы расширяют результат super(): их ключи перекрывают общие.
        """
        return {
            "text": self.transform_text,
            "variable": self.transform_variable,
            "if": self.transform_if,
            "unless": self.transform_unless,
            "for": self.transform_for,
            "render": self.transform_render,
            "meta": self.transform_meta,
            "comment": self.transform_comment,
        }

    # ---- Диспетчеризация ----

    def transform_ast(self, ast: LiquidAST) -> str:
        return self.transform_nodes(ast)

    def transform_nodes(self, nodes: Sequence[Node]) -> str:
        """Транслирует узлы по порядку и склеивает результат."""
        return "".join(self.transform_node(node) for node in nodes)

    def transform_node(self, node: Node) -> str:
        """
        Транслирует один узел через зарегистрированный обработчик.

        Raises:
            StructuralError: Если для вида узла нет обработчика
        """
        handler = self._handlers.get(node.kind)
        if handler is None:
            raise StructuralError(f"Unknown node type: {node.kind}")
        return handler(node)

    # ---- Общие директивы ----

    def transform_text(self, node: TextNode) -> str:
        return node.value

    def transform_variable(self, node: SelfClosingNode) -> str:
        name = node.parameters or ""
        scope = self.transformer.get_scope()

        if name not in scope:
            return self.render_variable(name)

        value = scope[name]
        if isinstance(value, str) and "{{" in value:
            # Один дополнительный проход по вложенным интерполяциям
            return _NESTED_VARIABLE_PATTERN.sub(
                lambda m: self._resolve_nested(m.group(1), name, scope),
                value,
            )
        return stringify_value(value)

    def _resolve_nested(self, nested: str, owner: str, scope: Dict[str, Any]) -> str:
        # Ссылка значения на собственное имя остаётся переменной среды выполнения
        if nested != owner and nested in scope:
            return stringify_value(scope[nested])
        return self.render_variable(nested)

    def transform_if(self, node: ParentNode) -> str:
        """
        Цепочка if/elseif/else с частичным вычислением.

        Пока все условия известны, выводится только тело выбранной ветки.
        С первого неизвестного условия цепочка откладывается: ветки выводятся
        тегами стратегии, известные ложные ветки отбрасываются, известная
        истинная ветка завершает цепочку.
        """
        parts: List[str] = []
        deferred = False
        branch: Optional[ParentNode] = node

        while branch is not None:
            body = branch_body(branch)

            if branch.kind == "else":
                if not deferred:
                    return self.transform_nodes(body)
                parts.append(self.render_else())
                parts.append(self.transform_nodes(body))
                break

            condition = parse_condition(branch.parameters)
            known, actual = lookup(condition.name, self.transformer.get_scope())

            if known:
                if perform_if(actual, condition.operator, condition.value):
                    if not deferred:
                        return self.transform_nodes(body)
                    parts.append(self.render_elseif(condition.name, condition.operator, condition.value))
                    parts.append(self.transform_nodes(body))
                    break
                branch = next_branch(branch)
                continue

            render_tag = self.render_elseif if deferred else self.render_if
            parts.append(render_tag(condition.name, condition.operator, condition.value))
            parts.append(self.transform_nodes(body))
            deferred = True
            branch = next_branch(branch)

        if not deferred:
            return ""

        parts.append(self.render_endif())
        return "".join(parts)

    def transform_unless(self, node: ParentNode) -> str:
        condition = parse_condition(node.parameters)
        if condition.operator is not None:
            raise ParseError("Unless accepts a variable name only", node.parameters)

        body = branch_body(node)
        following = next_branch(node)
        known, actual = lookup(condition.name, self.transformer.get_scope())

        if known:
            if not is_truthy(actual):
                return self.transform_nodes(body)
            if following is None:
                return ""
            return self.transform_if(following)

        parts = [self.render_unless(condition.name), self.transform_nodes(body)]
        if following is not None:
            parts.append(self.render_else())
            parts.append(self.transform_if(following))
        parts.append(self.render_endunless())
        return "".join(parts)

    def transform_for(self, node: ParentNode) -> str:
        match = _FOR_PATTERN.match((node.parameters or "").strip())
        if match is None:
            raise ParseError("Invalid for statement", node.parameters)

        item_name, collection_name = match.group(1), match.group(2)
        collection = self.transformer.get_scope().get(collection_name)

        if not isinstance(collection, (list, tuple)):
            raise NotAnArrayError(collection_name, collection, self.transformer.get_path())

        parts: List[str] = []
        for item in collection:
            with self.transformer.pushed(build_variables_scope(item, item_name)):
                parts.append(self.transform_nodes(node.children))

        logger.debug(f"Unrolled for '{item_name}' over '{collection_name}' ({len(collection)} items)")
        return "".join(parts)

    def transform_render(self, node: SelfClosingNode) -> str:
        call = parse_render_parameters(node.parameters)
        check_reserved_variables(call.variables)

        component = read_component_with_indentation(
            self.transformer.get_path(),
            call.component,
            node.indentation,
            self.transformer.component_extension,
        )

        with self.transformer.pushed({**call.variables, PATH_KEY: component.path}):
            return self.transformer.transform_contents(component.contents)

    def transform_meta(self, node: SelfClosingNode) -> str:
        meta = parse_meta(node.parameters)

        if meta.is_child_only and self.transformer.is_root():
            raise RenderCancelled(self.transformer.get_path())

        check_reserved_variables(meta.defaults)

        scope = self.transformer.get_scope()
        current = self.transformer.peek_scope()
        if current is None:
            logger.debug("No scope frame to receive meta defaults")
            return ""

        # Значения по умолчанию живут только в текущем фрейме
        for key, value in meta.defaults.items():
            if key not in scope:
                build_variables_scope(value, key, current)

        return ""

    def transform_comment(self, node: ParentNode) -> str:
        return self.render_comment(self.transform_nodes(node.children))

    # ---- Общие фрагменты ----

    def render_comment(self, comment: str) -> str:
        if self.transformer.show_comments:
            return f"<!--{comment}-->"
        return ""


__all__ = [
    "NodeHandler",
    "DEFAULT_LOGIC_TAGS",
    "AbstractTransformationStrategy",
    "BaseTransformationStrategy",
]
