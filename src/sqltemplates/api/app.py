"""FastAPI application factory for sqltemplates."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from sqltemplates import __version__
from sqltemplates.api.deps import init_renderer
from sqltemplates.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from sqltemplates.api.routers import dialects, render
from sqltemplates.api.schemas import HealthResponse
from sqltemplates.settings import Settings
from sqltemplates.template.macros import MacroRegistry, default_registry
from sqltemplates.template.renderer import TemplateRenderer


def create_app(
    settings: Settings | None = None,
    registry: MacroRegistry | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Macros registered with :func:`sqltemplates.register_macro` are visible
    unless an explicit ``registry`` is given.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="sqltemplates",
        description="Renders dialect-aware SQL templates for postgres, mysql, mssql and snowflake.",
        version=__version__,
    )
    app.state.settings = settings

    renderer = TemplateRenderer(
        registry if registry is not None else default_registry,
        cache_size=settings.template_cache_size,
    )
    init_renderer(renderer, settings)

    # Middleware
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(
        RequestBodyLimitMiddleware, max_template_size=settings.max_template_size
    )

    app.include_router(render.router, prefix="/render", tags=["render"])
    app.include_router(dialects.router, prefix="/dialects", tags=["dialects"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("sqltemplates.api")
    logger.info(
        "sqltemplates API server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "sqltemplates.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
