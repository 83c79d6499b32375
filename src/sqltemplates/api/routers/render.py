"""Render endpoint: POST /render."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from sqltemplates.api.deps import get_renderer, get_settings
from sqltemplates.api.schemas import ErrorResponse, RenderRequest, RenderResponse
from sqltemplates.dialect.base import DialectInfo
from sqltemplates.loader import ContextLoader, ContextLoadError, YAMLSafetyError
from sqltemplates.settings import Settings
from sqltemplates.template.errors import TemplateError
from sqltemplates.template.renderer import TemplateRenderer

logger = logging.getLogger("sqltemplates.api")

router = APIRouter()

_loader = ContextLoader()


def _build_context(body: RenderRequest) -> dict[str, Any] | None:
    if body.context_yaml is None:
        return body.context
    try:
        loaded = _loader.load_string(body.context_yaml)
    except (ContextLoadError, YAMLSafetyError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid context_yaml: {exc}") from None
    if body.context:
        loaded.update(body.context)
    return loaded


@router.post(
    "",
    response_model=RenderResponse,
    responses={422: {"model": ErrorResponse}},
)
async def render_template(
    body: RenderRequest,
    renderer: TemplateRenderer = Depends(get_renderer),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> RenderResponse | JSONResponse:
    """Render a template for a dialect."""
    if len(body.template) > settings.max_template_size:
        raise HTTPException(
            status_code=413,
            detail=f"Template too large (max {settings.max_template_size:,} characters)",
        )
    dialect = DialectInfo(
        name=body.dialect or settings.default_dialect,
        capabilities=body.capabilities,
    )
    context = _build_context(body)
    try:
        sql = renderer.render_with_context(body.template, dialect, context)
    except TemplateError as exc:
        logger.warning("render failed (dialect=%s): %s", dialect.name, exc)
        detail = exc.to_detail()
        error = ErrorResponse(error=detail.code, message=detail.message, position=detail.position)
        return JSONResponse(status_code=422, content=error.model_dump())
    return RenderResponse(sql=sql, dialect=dialect.name)
