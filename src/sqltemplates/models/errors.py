"""Structured error models with template source position tracking."""

from __future__ import annotations

from pydantic import BaseModel


class SourcePosition(BaseModel):
    """Points to an exact location in template source for error reporting."""

    offset: int
    line: int
    column: int


class ErrorDetail(BaseModel):
    """A structured render error with optional source position."""

    code: str
    message: str
    position: SourcePosition | None = None
