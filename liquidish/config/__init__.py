from .load import CONFIG_FILE_NAME, find_config, load_config, load_variables_file
from .model import DEFAULT_STRATEGY, StrategyName, TransformerConfig
from .typed import ConfigCoerceError, build_typed

__all__ = [
    "CONFIG_FILE_NAME",
    "find_config",
    "load_config",
    "load_variables_file",
    "DEFAULT_STRATEGY",
    "StrategyName",
    "TransformerConfig",
    "ConfigCoerceError",
    "build_typed",
]
