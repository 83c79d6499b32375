"""Tests for the runtime value model, context and handle resolution."""

from __future__ import annotations

from typing import Any

import pytest

from sqltemplates.template.context import Context
from sqltemplates.template.errors import EvalError, ResolutionError
from sqltemplates.template.handles import as_handle, make_handle, resolve_object
from sqltemplates.template.values import (
    HANDLE_TAG,
    Bool,
    Func,
    Handle,
    Map,
    Nil,
    Num,
    Str,
    from_python,
    to_python,
    to_text,
)


class TestFromPython:
    def test_scalars(self) -> None:
        assert from_python("x") == Str("x")
        assert from_python(3) == Num(3)
        assert from_python(1.5) == Num(1.5)
        assert from_python(True) == Bool(True)
        assert from_python(None) == Nil()

    def test_bool_is_not_num(self) -> None:
        assert isinstance(from_python(False), Bool)

    def test_tagged_mapping_becomes_handle(self, users_handle: dict[str, Any]) -> None:
        value = from_python(users_handle)
        assert isinstance(value, Handle)
        assert value.handle_type == "postgres_table"
        assert value.get("schema") == Str("public")
        assert HANDLE_TAG not in value.fields

    def test_handle_type_alias_key(self) -> None:
        value = from_python({"handle_type": "view", "table": "v"})
        assert isinstance(value, Handle)
        assert value.handle_type == "view"

    def test_plain_mapping_becomes_map(self) -> None:
        value = from_python({"users": {"a": 1}})
        assert isinstance(value, Map)
        inner = value.get("users")
        assert isinstance(inner, Map)
        assert inner.get("a") == Num(1)

    def test_callable_is_wrapped(self) -> None:
        value = from_python(lambda a, b: f"{a}-{b}")
        assert isinstance(value, Func)
        assert value(Str("x"), Num(2)) == Str("x-2")

    def test_unsupported_type(self) -> None:
        with pytest.raises(EvalError, match="unsupported context value of type list"):
            from_python([1, 2])

    def test_roundtrip_handle(self, users_handle: dict[str, Any]) -> None:
        assert to_python(from_python(users_handle)) == users_handle


class TestToText:
    def test_canonical_forms(self) -> None:
        assert to_text(Str("a")) == "a"
        assert to_text(Num(5)) == "5"
        assert to_text(Num(-7)) == "-7"
        assert to_text(Num(2.5)) == "2.5"
        assert to_text(Bool(True)) == "true"
        assert to_text(Bool(False)) == "false"
        assert to_text(Nil()) == ""

    def test_handle_renders_qualified_name(self, users_handle: dict[str, Any]) -> None:
        assert to_text(from_python(users_handle)) == '"public"."users"'

    def test_handle_without_qualified_name(self, demo_handle: dict[str, Any]) -> None:
        with pytest.raises(EvalError, match="without a qualified_name"):
            to_text(from_python(demo_handle))

    def test_map_is_not_printable(self) -> None:
        with pytest.raises(EvalError, match="mapping"):
            to_text(Map())

    def test_callable_is_not_printable(self) -> None:
        with pytest.raises(EvalError, match="did you forget"):
            to_text(Func(name="f", call=lambda args: Nil()))


class TestContext:
    def test_seeded_bindings(self) -> None:
        ctx = Context({"limit": 5})
        assert ctx.get("limit") == Num(5)
        assert "limit" in ctx
        assert ctx.get("missing") is None

    def test_set_overwrites(self) -> None:
        ctx = Context({"a": 1})
        ctx.set("a", Str("x"))
        assert ctx.get("a") == Str("x")

    def test_bindings_convert_on_lookup(self) -> None:
        ctx = Context({"tags": ["a"], "limit": 5})
        assert "tags" in ctx
        assert ctx.get("limit") == Num(5)
        with pytest.raises(EvalError, match="unsupported context value of type list"):
            ctx.get("tags")

    def test_set_replaces_unconverted_binding(self) -> None:
        ctx = Context({"tags": ["a"]})
        ctx.set("tags", Str("x"))
        assert ctx.get("tags") == Str("x")

    def test_resources(self, resource_context: dict[str, Any]) -> None:
        ctx = Context(resource_context)
        assert isinstance(ctx.resources, Map)
        assert Context().resources is None
        assert Context({"resources": "nope"}).resources is None


class TestHandles:
    def test_make_handle(self) -> None:
        handle = make_handle("postgres_table", schema="demo", table="users")
        assert handle.handle_type == "postgres_table"
        assert handle.text_field("schema") == "demo"
        assert handle.text_field("missing") == ""

    def test_as_handle_rejects_untagged(self) -> None:
        with pytest.raises(EvalError, match="not a resource handle"):
            as_handle({"schema": "demo"})

    def test_resolve_by_reference(
        self, resource_context: dict[str, Any], users_handle: dict[str, Any]
    ) -> None:
        ctx = Context(resource_context)
        resolved = resolve_object(Str("postgres_table.users"), ctx)
        assert resolved == from_python(users_handle)

    def test_resolve_returns_copy(self, resource_context: dict[str, Any]) -> None:
        ctx = Context(resource_context)
        first = resolve_object(Str("table.users"), ctx)
        second = resolve_object(Str("table.users"), ctx)
        assert first == second
        assert first is not second
        assert first.handle_type == "postgres_table"  # type: ignore[union-attr]

    def test_resolve_existing_handle(self, demo_handle: dict[str, Any]) -> None:
        handle = as_handle(demo_handle)
        resolved = resolve_object(handle, Context())
        assert resolved == handle
        assert resolved is not handle

    def test_unknown_resource(self, resource_context: dict[str, Any]) -> None:
        with pytest.raises(ResolutionError, match="unknown resource handle: nope") as exc_info:
            resolve_object(Str("nope"), Context(resource_context))
        assert exc_info.value.ref == "nope"

    def test_no_resources_binding(self) -> None:
        with pytest.raises(ResolutionError):
            resolve_object(Str("postgres_table.users"), Context())

    def test_bad_reference_type(self) -> None:
        with pytest.raises(EvalError, match="object\\(\\) expects"):
            resolve_object(Num(1), Context())
