"""sqltemplates: dialect-aware SQL templating with per-dialect macros.

Public API
----------
``render`` / ``render_with_context``
    Render a template for a dialect, optionally with caller bindings such
    as a ``resources`` mapping of handles.

``register_macro``
    Add or override a macro for a dialect in the default registry.

``TemplateRenderer`` / ``MacroRegistry``
    Explicitly constructed renderer and registry, for isolated use.

Example::

    import sqltemplates

    sqltemplates.render(
        'SELECT {{ column("email") }} FROM {{ relation("public", "users") }}',
        "postgres",
    )
    # 'SELECT "email" FROM "public"."users"'
"""

from __future__ import annotations

from sqltemplates.dialect import DialectInfo, MacroPack, PackRegistry, quote_identifier
from sqltemplates.template.errors import (
    EvalError,
    NoSuchMacroError,
    ParseError,
    ResolutionError,
    TemplateError,
)
from sqltemplates.template.handles import make_handle
from sqltemplates.template.macros import MacroRegistry, default_registry, register_macro
from sqltemplates.template.renderer import TemplateRenderer, render, render_with_context
from sqltemplates.template.values import (
    HANDLE_TAG,
    Bool,
    Func,
    Handle,
    Map,
    Nil,
    Num,
    Str,
    Value,
    to_text,
)

__version__ = "0.3.0"

__all__ = [
    "__version__",
    # Rendering
    "render",
    "render_with_context",
    "TemplateRenderer",
    # Macros
    "MacroRegistry",
    "default_registry",
    "register_macro",
    # Dialects
    "DialectInfo",
    "MacroPack",
    "PackRegistry",
    "quote_identifier",
    # Values
    "HANDLE_TAG",
    "Value",
    "Str",
    "Num",
    "Bool",
    "Handle",
    "Map",
    "Func",
    "Nil",
    "make_handle",
    "to_text",
    # Errors
    "TemplateError",
    "ParseError",
    "EvalError",
    "ResolutionError",
    "NoSuchMacroError",
]
