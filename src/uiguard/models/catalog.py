"""Component catalog definitions: prop schemas and component metadata."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class PropType(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    FUNCTION = "function"


class PropSchema(BaseModel):
    """Declared shape of a single component prop."""

    type: PropType
    required: bool = False
    description: str | None = None
    enum: list[str] | None = None
    default: Any = None


class ComponentDefinition(BaseModel):
    """A known component type and its prop schema."""

    name: str
    category: str = "general"
    description: str = ""
    props_schema: dict[str, PropSchema] = Field(default_factory=dict, alias="props")
    deprecated: bool = False
    deprecation_message: str | None = Field(None, alias="deprecationMessage")

    model_config = {"populate_by_name": True}
