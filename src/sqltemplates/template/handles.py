"""Resource handle construction and ``object()`` resolution."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqltemplates.template.context import Context
from sqltemplates.template.errors import EvalError, ResolutionError
from sqltemplates.template.values import (
    HANDLE_TAG,
    Handle,
    Map,
    Str,
    Value,
    from_python,
    type_name,
)


def make_handle(handle_type: str, **fields: Any) -> Handle:
    """Build a handle from keyword fields.

    ``make_handle("postgres_table", schema="public", table="users")``
    """
    return from_python({HANDLE_TAG: handle_type, **fields})  # type: ignore[return-value]


def as_handle(obj: Mapping[str, Any] | Handle) -> Handle:
    """Coerce a tagged mapping into a :class:`Handle`."""
    value = from_python(obj)
    if not isinstance(value, Handle):
        raise EvalError(f"mapping is not a resource handle (missing '{HANDLE_TAG}')")
    return value


def resolve_object(ref: Value, context: Context) -> Handle | Map:
    """Resolve ``ref`` to a handle.

    A string is looked up in ``context["resources"]``; a handle or mapping
    is used as-is.  Either way a shallow copy is returned.
    """
    match ref:
        case Str(value=key):
            resources = context.resources
            resolved = resources.get(key) if resources is not None else None
            if resolved is None:
                raise ResolutionError(key)
            if not isinstance(resolved, Handle | Map):
                raise EvalError(
                    f"resource '{key}' is a {type_name(resolved)}, not a handle"
                )
            return resolved.copy()
        case Handle() | Map():
            return ref.copy()
        case _:
            raise EvalError(f"object() expects a reference string or handle, got {type_name(ref)}")
