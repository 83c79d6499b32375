"""Integration tests for the FastAPI REST API."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from sqltemplates.api.app import create_app
from sqltemplates.api.deps import reset_renderer
from sqltemplates.dialect.base import DialectInfo
from sqltemplates.settings import Settings
from sqltemplates.template.macros import MacroRegistry

SELECT_EMAIL = 'SELECT {{ column("email") }} FROM {{ relation("public","users") }}'

CONTEXT_YAML = """\
resources:
  postgres_table.users:
    __handle_type: postgres_table
    schema: public
    table: users
    qualified_name: '"public"."users"'
    id: '"public"."users"."id"'
"""


@pytest.fixture
def api_registry() -> MacroRegistry:
    registry = MacroRegistry()

    @registry.macro("duckdb", "current_timestamp")
    def now(dialect: DialectInfo, *args) -> str:
        return "now()"

    return registry


@pytest.fixture
def app(api_registry: MacroRegistry):
    settings = Settings(max_template_size=10_000)
    application = create_app(settings=settings, registry=api_registry)
    yield application
    reset_renderer()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Health & Dialects
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data

    async def test_timing_header(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert "x-request-duration-ms" in response.headers


class TestDialectsEndpoint:
    async def test_list_dialects(self, client: AsyncClient) -> None:
        response = await client.get("/dialects")
        assert response.status_code == 200
        names = [d["name"] for d in response.json()["dialects"]]
        for name in ("postgres", "mysql", "mssql", "snowflake", "redshift", "mariadb"):
            assert name in names

    async def test_registered_dialect_listed(self, client: AsyncClient) -> None:
        response = await client.get("/dialects")
        by_name = {d["name"]: d for d in response.json()["dialects"]}
        assert by_name["duckdb"]["macros"] == ["current_timestamp"]
        assert by_name["duckdb"]["capabilities"] == {}

    async def test_quote_style_and_macros(self, client: AsyncClient) -> None:
        response = await client.get("/dialects")
        by_name = {d["name"]: d for d in response.json()["dialects"]}
        assert by_name["mssql"]["quote_style"] == "[identifier]"
        assert by_name["mysql"]["quote_style"] == "`identifier`"
        assert by_name["postgres"]["quote_style"] == '"identifier"'
        assert "date_add" in by_name["snowflake"]["macros"]
        assert by_name["mssql"]["capabilities"]["fetch_first"] is True


# ---------------------------------------------------------------------------
# Render
# ---------------------------------------------------------------------------


class TestRenderEndpoint:
    async def test_render(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render", json={"template": SELECT_EMAIL, "dialect": "postgres"}
        )
        assert response.status_code == 200
        assert response.json() == {
            "sql": 'SELECT "email" FROM "public"."users"',
            "dialect": "postgres",
        }

    async def test_default_dialect(self, client: AsyncClient) -> None:
        response = await client.post("/render", json={"template": '{{ column("a") }}'})
        assert response.status_code == 200
        assert response.json()["dialect"] == "postgres"

    async def test_render_mysql(self, client: AsyncClient) -> None:
        response = await client.post("/render", json={"template": SELECT_EMAIL, "dialect": "MySQL"})
        assert response.json()["sql"] == "SELECT `email` FROM `public`.`users`"

    async def test_registered_macro(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render", json={"template": "{{ current_timestamp() }}", "dialect": "duckdb"}
        )
        assert response.json()["sql"] == "now()"

    async def test_capabilities_passed_through(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render",
            json={
                "template": "{{ adapter.capabilities.supports_merge }}",
                "dialect": "duckdb",
                "capabilities": {"supports_merge": True},
            },
        )
        assert response.json()["sql"] == "true"

    async def test_context(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render",
            json={
                "template": "{{ limit_clause(n) }}",
                "dialect": "mssql",
                "context": {"n": 10},
            },
        )
        assert response.json()["sql"] == "OFFSET 0 ROWS FETCH NEXT 10 ROWS ONLY"

    async def test_context_yaml(self, client: AsyncClient) -> None:
        template = (
            '{% set users = object("postgres_table.users") %}'
            "SELECT {{ users.id }} FROM {{ relation(users) }}"
        )
        response = await client.post(
            "/render",
            json={"template": template, "dialect": "postgres", "context_yaml": CONTEXT_YAML},
        )
        assert response.status_code == 200
        assert response.json()["sql"] == 'SELECT "public"."users"."id" FROM "public"."users"'

    async def test_context_overrides_yaml(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render",
            json={
                "template": "{{ n }}",
                "context_yaml": "n: 1\n",
                "context": {"n": 2},
            },
        )
        assert response.json()["sql"] == "2"


class TestRenderErrors:
    async def test_parse_error(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render", json={"template": "SELECT {{ column(", "dialect": "postgres"}
        )
        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "PARSE_ERROR"
        assert data["position"]["line"] == 1
        assert data["position"]["offset"] >= 7

    async def test_undefined_variable(self, client: AsyncClient) -> None:
        response = await client.post("/render", json={"template": "{{ missing }}"})
        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "EVAL_ERROR"
        assert "undefined variable 'missing'" in data["message"]
        assert data["position"] is None

    async def test_no_such_macro(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render", json={"template": "{{ bool_literal(true) }}", "dialect": "oracle"}
        )
        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "NO_SUCH_MACRO"
        assert data["message"] == "adapter oracle cannot dispatch macro bool_literal"

    async def test_unknown_resource(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render",
            json={"template": '{{ object("t.missing") }}', "context_yaml": CONTEXT_YAML},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "RESOLUTION_ERROR"

    async def test_invalid_context_yaml(self, client: AsyncClient) -> None:
        response = await client.post(
            "/render", json={"template": "{{ 1 }}", "context_yaml": "a: &x 1\nb: *x\n"}
        )
        assert response.status_code == 400
        assert "Invalid context_yaml" in response.json()["detail"]

    async def test_missing_template(self, client: AsyncClient) -> None:
        response = await client.post("/render", json={"dialect": "postgres"})
        assert response.status_code == 422
        assert "detail" in response.json()

    async def test_template_too_large(self, client: AsyncClient) -> None:
        response = await client.post("/render", json={"template": "x" * 10_001})
        assert response.status_code == 413

    async def test_body_over_limit(self, client: AsyncClient) -> None:
        oversized = b"x" * (10_000 * 4 + 1024 * 1024 + 1)
        response = await client.post(
            "/render",
            content=oversized,
            headers={"transfer-encoding": "chunked", "content-type": "application/json"},
        )
        assert response.status_code == 413
        assert "too large" in response.json()["detail"]

    async def test_non_integer_content_length(self, client: AsyncClient) -> None:
        response = await client.post(
            "/health",
            content=b"small body",
            headers={"content-length": "not-a-number"},
        )
        assert response.status_code != 500
