"""Shared test fixtures for sqltemplates."""

from __future__ import annotations

from typing import Any

import pytest

from sqltemplates.loader import ContextLoader
from sqltemplates.template.macros import MacroRegistry
from sqltemplates.template.renderer import TemplateRenderer


@pytest.fixture
def registry() -> MacroRegistry:
    """An isolated registry so tests never see each other's macros."""
    return MacroRegistry()


@pytest.fixture
def renderer(registry: MacroRegistry) -> TemplateRenderer:
    return TemplateRenderer(registry)


@pytest.fixture
def loader() -> ContextLoader:
    return ContextLoader()


@pytest.fixture
def users_handle() -> dict[str, Any]:
    return {
        "__handle_type": "postgres_table",
        "schema": "public",
        "table": "users",
        "qualified_name": '"public"."users"',
        "id": '"public"."users"."id"',
    }


@pytest.fixture
def demo_handle() -> dict[str, Any]:
    return {
        "__handle_type": "postgres_table",
        "schema": "demo",
        "table": "users",
    }


@pytest.fixture
def resource_context(users_handle: dict[str, Any], demo_handle: dict[str, Any]) -> dict[str, Any]:
    """Context with a ``resources`` table plus a ``table`` alias mapping."""
    return {
        "resources": {
            "postgres_table.users": users_handle,
            "table.users": demo_handle,
        },
        "table": {"users": demo_handle},
    }


SAMPLE_CONTEXT_YAML = """\
resources:
  postgres_table.users:
    __handle_type: postgres_table
    schema: public
    table: users
    qualified_name: '"public"."users"'
    id: '"public"."users"."id"'
table:
  users:
    __handle_type: postgres_table
    schema: demo
    table: users
limit: 25
"""


@pytest.fixture
def sample_context_yaml() -> str:
    return SAMPLE_CONTEXT_YAML
