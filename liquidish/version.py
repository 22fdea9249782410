from __future__ import annotations

from importlib import metadata

DISTRIBUTION_NAME = "liquidish"


def tool_version() -> str:
    """Версия установленного дистрибутива; 0.0.0 при запуске из исходников."""
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


__all__ = ["DISTRIBUTION_NAME", "tool_version"]
