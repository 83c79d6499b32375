"""Dependency injection for FastAPI: TemplateRenderer singleton."""

from __future__ import annotations

from sqltemplates.settings import Settings
from sqltemplates.template.renderer import TemplateRenderer

_renderer: TemplateRenderer | None = None
_settings: Settings | None = None


def init_renderer(renderer: TemplateRenderer, settings: Settings) -> None:
    """Set the global renderer (called at app creation)."""
    global _renderer, _settings  # noqa: PLW0603
    _renderer = renderer
    _settings = settings


def get_renderer() -> TemplateRenderer:
    """FastAPI ``Depends`` provider for the TemplateRenderer."""
    if _renderer is None:
        raise RuntimeError("TemplateRenderer not initialised; call init_renderer() first")
    return _renderer


def get_settings() -> Settings:
    """FastAPI ``Depends`` provider for Settings."""
    if _settings is None:
        raise RuntimeError("Settings not initialised; call init_renderer() first")
    return _settings


def reset_renderer() -> None:
    """Clear the global renderer (for tests)."""
    global _renderer, _settings  # noqa: PLW0603
    _renderer = None
    _settings = None
