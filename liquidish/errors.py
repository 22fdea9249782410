"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from LiquidishUserError.

Programming errors and bugs should NOT inherit from LiquidishUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class LiquidishUserError(Exception):
    """
    Base class for all user-facing errors in Liquidish.

    These errors indicate problems that the user can fix:
    malformed directives, missing components, invalid collections, etc.
    """
    pass


class ParseError(LiquidishUserError):
    """Malformed directive parameters (e.g. an unparsable if-condition)."""

    def __init__(self, message: str, parameters: Optional[str] = None):
        if parameters is not None:
            message = f"{message}: {parameters!r}"
        super().__init__(message)
        self.parameters = parameters


class StructuralError(LiquidishUserError):
    """Impossible scope nesting in the token stream or an unhandled node kind."""
    pass


class NotAnArrayError(LiquidishUserError):
    """A for-loop collection is missing from the scope or is not a list."""

    def __init__(self, collection_name: str, value: object, path: Optional[str] = None):
        type_name = "undefined" if value is None else type(value).__name__
        location = f" (in {path})" if path else ""
        super().__init__(
            f"The collection {collection_name} is not an array. It's a {type_name}{location}"
        )
        self.collection_name = collection_name
        self.path = path


class ComponentNotFoundError(LiquidishUserError):
    """A render target cannot be located on disk."""

    def __init__(self, component: str, path: Optional[str] = None):
        super().__init__(f"Component file not found: {component} in {path}")
        self.component = component
        self.path = path


class InvalidOperatorError(LiquidishUserError):
    """Unsupported comparison operator in a compile-time condition."""

    def __init__(self, operator: str):
        super().__init__(f"Invalid operator: {operator}")
        self.operator = operator


class ConfigLoadError(LiquidishUserError, ValueError):
    """Configuration file could not be read or coerced into its typed model."""
    pass


class RenderCancelled(Exception):
    """
    Control signal: the file declared itself child-only but was rendered directly.

    Not a failure. The top-level transform call intercepts it and returns None.
    """

    def __init__(self, path: Optional[str] = None):
        super().__init__("Cancellation requested")
        self.path = path


__all__ = [
    "LiquidishUserError",
    "ParseError",
    "StructuralError",
    "NotAnArrayError",
    "ComponentNotFoundError",
    "InvalidOperatorError",
    "ConfigLoadError",
    "RenderCancelled",
]
