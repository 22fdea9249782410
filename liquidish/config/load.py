"""
Загрузка конфигурации liquidish.yaml и файлов переменных.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .model import TransformerConfig
from .typed import build_typed
from ..errors import ConfigLoadError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "liquidish.yaml"

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь (пустой файл даёт пустой словарь)."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigLoadError(f"Cannot read {path}: {e}") from e
    except YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"YAML must be a mapping: {path}")
    return raw


def find_config(start: Path) -> Optional[Path]:
    """
    Ищет liquidish.yaml в каталоге start и его родителях.

    Returns:
        Путь к найденному файлу или None
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Path] = None, start: Optional[Path] = None) -> TransformerConfig:
    """
    Загружает конфигурацию транслятора.

    Args:
        path: Явный путь к файлу (должен существовать)
        start: Каталог, от которого искать liquidish.yaml, если path не задан

    Returns:
        Типизированная конфигурация; значения по умолчанию, если файл не найден

    Raises:
        ConfigLoadError: При отсутствии явно указанного файла или ошибке приведения
    """
    if path is None:
        path = find_config(start or Path.cwd())
        if path is None:
            logger.debug("No liquidish.yaml found, using defaults")
            return TransformerConfig()
    elif not path.is_file():
        raise ConfigLoadError(f"Config file not found: {path}")

    raw = _read_yaml_map(path)
    config = build_typed(TransformerConfig, raw)

    if not config.component_extension.startswith("."):
        raise ConfigLoadError(
            f"component_extension: must start with '.', got {config.component_extension!r}"
        )

    logger.debug(f"Loaded config from {path}: strategy={config.strategy}")
    return config


def load_variables_file(path: Path) -> Dict[str, Any]:
    """
    Читает переменные из JSON (*.json) или YAML файла.

    Raises:
        ConfigLoadError: Если файл не читается или содержит не словарь
    """
    if not path.is_file():
        raise ConfigLoadError(f"Variables file not found: {path}")

    if path.suffix.lower() != ".json":
        return _read_yaml_map(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        raise ConfigLoadError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigLoadError(f"JSON must be an object: {path}")
    return data


__all__ = ["CONFIG_FILE_NAME", "find_config", "load_config", "load_variables_file"]
