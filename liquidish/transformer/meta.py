"""
Модель полезной нагрузки директивы meta.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import ParseError


class MetaData(BaseModel):
    """
    {% meta {"isChildOnly": true, "defaults": {...}} %}
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_child_only: bool = Field(default=False, alias="isChildOnly")
    defaults: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("defaults", mode="before")
    @classmethod
    def _null_defaults(cls, value: Any) -> Any:
        return {} if value is None else value


def parse_meta(parameters: Optional[str]) -> MetaData:
    """
    Разбирает JSON из параметров meta.

    Raises:
        ParseError: При отсутствии параметров, невалидном JSON или нарушении схемы
    """
    if not parameters:
        raise ParseError("Missing meta data")

    try:
        return MetaData.model_validate_json(parameters)
    except ValidationError as e:
        raise ParseError(f"Invalid meta data ({e.error_count()} errors)", parameters) from e


__all__ = ["MetaData", "parse_meta"]
