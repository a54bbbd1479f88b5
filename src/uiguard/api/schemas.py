"""API request/response Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from uiguard.models.errors import ChainValidationError, ValidationIssue


class HealthResponse(BaseModel):
    status: str
    version: str


class CatalogResponse(BaseModel):
    """Response body for GET /catalog."""

    components: list[str]
    aliases: dict[str, str] = Field(default_factory=dict)


class ValidateRequest(BaseModel):
    """Request body for POST /validate."""

    content: str = Field(description="Complete JSON text of a UI document")
    validate_style_compliance: bool = True
    validate_token_usage_compliance: bool = True
    validate_icon_compliance: bool = True
    strict: bool = False


class ValidateResponse(BaseModel):
    """Response body for POST /validate."""

    valid: bool
    errors: list[ChainValidationError] = []
    warnings: list[ChainValidationError] = []
    timing: dict[str, float] = {}
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")

    model_config = {"populate_by_name": True}


class StreamCreateRequest(BaseModel):
    """Request body for POST /streams."""

    metadata: dict[str, str] = Field(default_factory=dict)


class StreamResponse(BaseModel):
    """Single stream info."""

    stream_id: str
    created_at: datetime
    last_accessed_at: datetime
    chunks_received: int
    chars_received: int
    finalized: bool
    metadata: dict[str, str] = Field(default_factory=dict)


class StreamListResponse(BaseModel):
    streams: list[StreamResponse]


class ChunkRequest(BaseModel):
    """Request body for POST /streams/{stream_id}/chunks."""

    chunk: str


class ComponentDetail(BaseModel):
    path: str
    type: str | None = None
    id: str | None = None
    complete: bool = False


class ChunkResponse(BaseModel):
    """Facts newly established by one chunk."""

    partial: bool
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    components: list[ComponentDetail] = []


class FinalizeResponse(BaseModel):
    valid: bool
    complete: bool
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    partial_schema: Any = None
