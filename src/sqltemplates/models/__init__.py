"""Pydantic models shared by the engine and the REST surface."""

from sqltemplates.models.errors import ErrorDetail, SourcePosition

__all__ = [
    "ErrorDetail",
    "SourcePosition",
]
