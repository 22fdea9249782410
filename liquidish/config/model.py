from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Optional

from ..transformer.components import DEFAULT_COMPONENT_EXTENSION

# Имена встроенных стратегий (см. strategies.registry.default_registry)
StrategyName = Literal["ispconfig", "php", "vue"]

DEFAULT_STRATEGY: StrategyName = "ispconfig"


@dataclass(frozen=True)
class TransformerConfig:
    """
    Настройки трансляции из liquidish.yaml.

    variables образуют начальный фрейм скоупа, известный на этапе компиляции.
    """
    strategy: StrategyName = DEFAULT_STRATEGY
    show_comments: bool = False
    component_extension: str = DEFAULT_COMPONENT_EXTENSION
    variables: Dict[str, Any] = field(default_factory=dict)

    def with_overrides(
        self,
        *,
        strategy: Optional[str] = None,
        show_comments: Optional[bool] = None,
        variables: Optional[Dict[str, Any]] = None,
    ) -> "TransformerConfig":
        """Копия с переопределениями из CLI; переменные сливаются поверх файловых."""
        merged = dict(self.variables)
        if variables:
            merged.update(variables)
        return replace(
            self,
            strategy=strategy if strategy is not None else self.strategy,
            show_comments=show_comments if show_comments is not None else self.show_comments,
            variables=merged,
        )


__all__ = ["StrategyName", "DEFAULT_STRATEGY", "TransformerConfig"]
