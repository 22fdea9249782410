"""
Unified test infrastructure for Liquidish.

Modules:
- file_utils: Utilities for creating template and component files
- transform_utils: Helpers for running the transformer
- cli_utils: Helpers for running the CLI as a subprocess
"""

from .file_utils import write, write_component
from .transform_utils import make_transformer, transform
from .cli_utils import run_cli, jload

__all__ = [
    "write", "write_component",
    "make_transformer", "transform",
    "run_cli", "jload",
]
