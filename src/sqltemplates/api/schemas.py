"""API request/response Pydantic schemas."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from sqltemplates.models.errors import SourcePosition


class RenderRequest(BaseModel):
    """Request body for POST /render."""

    template: str = Field(description="Template source text")
    dialect: str | None = Field(
        default=None, description="Target dialect name; defaults to the server setting"
    )
    capabilities: dict[str, bool] = Field(
        default_factory=dict, description="Exposed to templates as adapter.capabilities"
    )
    context: dict[str, Any] | None = Field(
        default=None, description="Variable bindings, e.g. a 'resources' mapping of handles"
    )
    context_yaml: str | None = Field(
        default=None, description="Variable bindings as YAML; merged under 'context'"
    )


class RenderResponse(BaseModel):
    """Response body for POST /render."""

    sql: str
    dialect: str


class ErrorResponse(BaseModel):
    """Standard error response for render failures."""

    error: str
    message: str
    position: SourcePosition | None = None


class DialectInfoResponse(BaseModel):
    """Information about a dialect with a shipped macro pack."""

    name: str
    quote_style: str
    macros: list[str] = []
    capabilities: dict[str, bool] = {}


class DialectListResponse(BaseModel):
    """Response for GET /dialects."""

    dialects: list[DialectInfoResponse] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""
