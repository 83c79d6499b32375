"""Orchestrates parsing and evaluation: template + dialect + context -> SQL."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict
from functools import lru_cache
from typing import Any

from sqltemplates.dialect.base import DialectInfo
from sqltemplates.dialect.registry import PackRegistry
from sqltemplates.template.context import Context
from sqltemplates.template.dispatch import build_adapter
from sqltemplates.template.evaluator import Evaluator
from sqltemplates.template.macros import MacroRegistry, default_registry
from sqltemplates.template.parser import Comment, Literal, Output, Set, Template, parse_template
from sqltemplates.template.values import to_text

logger = logging.getLogger("sqltemplates.renderer")

DEFAULT_CACHE_SIZE = 256


class TemplateRenderer:
    """Renders templates against one :class:`MacroRegistry`.

    Parsed templates are cached by source text.  Each render takes a single
    registry snapshot and owns its own :class:`Context`, so renders may run
    concurrently with each other and with macro registration.
    """

    def __init__(
        self,
        registry: MacroRegistry | None = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ) -> None:
        self.registry = registry if registry is not None else MacroRegistry()
        self._parse = lru_cache(maxsize=cache_size)(parse_template)

    def parse(self, template: str) -> Template:
        return self._parse(template)

    def render(self, template: str, dialect: str | DialectInfo) -> str:
        return self.render_with_context(template, dialect, None)

    def render_with_context(
        self,
        template: str,
        dialect: str | DialectInfo,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Render ``template`` for ``dialect`` with optional caller bindings.

        Raises:
            ParseError, EvalError, ResolutionError, NoSuchMacroError: The
                render is aborted and no partial output is returned.
        """
        if not template.strip():
            return ""
        info = _with_default_capabilities(DialectInfo.of(dialect))
        logger.debug("Rendering template (length=%d, dialect=%s)", len(template), info.name)

        parsed = self._parse(template)
        snapshot = self.registry.snapshot()
        ctx = Context(context)
        # A caller-supplied adapter binding wins over the built-in one
        if "adapter" not in ctx:
            ctx.set("adapter", build_adapter(info, ctx, snapshot))
        evaluator = Evaluator(info, ctx, snapshot)

        parts: list[str] = []
        for node in parsed.nodes:
            match node:
                case Literal(text=text):
                    parts.append(text)
                case Set(name=name, expr=expr):
                    ctx.set(name, evaluator.evaluate(expr))
                case Output(expr=expr):
                    parts.append(to_text(evaluator.evaluate(expr)))
                case Comment():
                    pass
        return "".join(parts).strip()

    def clear_cache(self) -> None:
        self._parse.cache_clear()


def _with_default_capabilities(info: DialectInfo) -> DialectInfo:
    if info.capabilities:
        return info
    pack = PackRegistry.find(info.name)
    if pack is None:
        return info
    return DialectInfo(name=info.name, capabilities=asdict(pack.capabilities))


default_renderer = TemplateRenderer(default_registry)


def render(template: str, dialect: str | DialectInfo) -> str:
    """Render ``template`` with the default renderer and no context."""
    return default_renderer.render(template, dialect)


def render_with_context(
    template: str,
    dialect: str | DialectInfo,
    context: Mapping[str, Any] | None = None,
) -> str:
    """Render ``template`` with the default renderer and caller bindings."""
    return default_renderer.render_with_context(template, dialect, context)
