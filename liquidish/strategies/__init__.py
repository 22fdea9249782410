from .base import AbstractTransformationStrategy, BaseTransformationStrategy, DEFAULT_LOGIC_TAGS
from .ispconfig import ISPConfigTransformationStrategy
from .php import PHPTransformationStrategy
from .vue import VueTransformationStrategy
from .registry import StrategyRegistry, default_registry, get_strategy_builder

__all__ = [
    "AbstractTransformationStrategy",
    "BaseTransformationStrategy",
    "DEFAULT_LOGIC_TAGS",
    "ISPConfigTransformationStrategy",
    "PHPTransformationStrategy",
    "VueTransformationStrategy",
    "StrategyRegistry",
    "default_registry",
    "get_strategy_builder",
]
