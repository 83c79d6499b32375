"""Dialect listing endpoint: GET /dialects."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from sqltemplates.api.deps import get_renderer
from sqltemplates.api.schemas import DialectInfoResponse, DialectListResponse
from sqltemplates.dialect.base import identifier_quotes
from sqltemplates.dialect.registry import PackRegistry
from sqltemplates.template.renderer import TemplateRenderer

router = APIRouter()


@router.get("", response_model=DialectListResponse)
async def list_dialects(
    renderer: TemplateRenderer = Depends(get_renderer),  # noqa: B008
) -> DialectListResponse:
    """List dialects with a shipped pack or registered macros, with their quoting and macros."""
    names = sorted((set(PackRegistry.available()) | set(renderer.registry.dialects())) - {"*"})
    dialects = []
    for name in names:
        pack = PackRegistry.find(name)
        left, right = identifier_quotes(name)
        dialects.append(
            DialectInfoResponse(
                name=name,
                quote_style=f"{left}identifier{right}",
                macros=renderer.registry.macros_for(name),
                capabilities=asdict(pack.capabilities) if pack is not None else {},
            )
        )
    return DialectListResponse(dialects=dialects)
