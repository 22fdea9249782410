"""
Реестр стратегий трансляции по имени.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from .ispconfig import ISPConfigTransformationStrategy
from .php import PHPTransformationStrategy
from .vue import VueTransformationStrategy
from ..transformer.transformer import StrategyBuilder

logger = logging.getLogger(__name__)


class StrategyRegistry:
    """
    Отображение имени стратегии на её фабрику.
    """

    def __init__(self):
        self._builders: Dict[str, StrategyBuilder] = {}

    def register(self, name: str, builder: StrategyBuilder, *, replace: bool = False) -> None:
        """
        Регистрирует фабрику стратегии.

        Args:
            name: Имя стратегии (используется в CLI и конфигурации)
            builder: Фабрика, принимающая транслятор
            replace: Разрешить перезапись существующей записи

        Raises:
            ValueError: Если имя уже зарегистрировано и replace=False
        """
        if name in self._builders:
            if not replace:
                raise ValueError(f"Strategy '{name}' already registered")
            logger.warning(f"Overwriting strategy '{name}'")
        self._builders[name] = builder

    def get(self, name: str) -> StrategyBuilder:
        """
        Raises:
            ValueError: Для неизвестного имени
        """
        builder = self._builders.get(name)
        if builder is None:
            raise ValueError(f"Unknown strategy '{name}'. Available: {', '.join(self.names())}")
        return builder

    def names(self) -> List[str]:
        return sorted(self._builders)

    def __contains__(self, name: str) -> bool:
        return name in self._builders


def _build_default_registry() -> StrategyRegistry:
    registry = StrategyRegistry()
    registry.register("ispconfig", ISPConfigTransformationStrategy)
    registry.register("php", PHPTransformationStrategy)
    registry.register("vue", VueTransformationStrategy)
    return registry


default_registry = _build_default_registry()


def get_strategy_builder(name: str) -> StrategyBuilder:
    """Фабрика стратегии из реестра по умолчанию."""
    return default_registry.get(name)


__all__ = ["StrategyRegistry", "default_registry", "get_strategy_builder"]
