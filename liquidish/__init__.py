from .errors import LiquidishUserError, RenderCancelled
from .transformer import LiquidishTransformer
from .strategies import (
    ISPConfigTransformationStrategy,
    PHPTransformationStrategy,
    VueTransformationStrategy,
)

__all__ = [
    "LiquidishUserError",
    "RenderCancelled",
    "LiquidishTransformer",
    "ISPConfigTransformationStrategy",
    "PHPTransformationStrategy",
    "VueTransformationStrategy",
]
