"""Macro registry: caller-registered macros layered over the shipped packs.

Lookup for ``name`` while rendering under dialect ``D``:

1. an entry registered for exactly ``(D, name)``
2. the shipped pack for ``D``, if ``D`` has one
3. an entry registered for ``("*", name)``

Otherwise :class:`NoSuchMacroError` is raised.

Registration overwrites (last write wins).  This is deliberately looser than
:class:`~sqltemplates.dialect.registry.PackRegistry`, which rejects duplicate
dialect names; provider code relies on re-registering a name to override a
shipped default.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import sqltemplates.dialect  # noqa: F401  (registers shipped packs)
from sqltemplates.dialect.base import DialectInfo, Macro
from sqltemplates.dialect.registry import PackRegistry
from sqltemplates.template.errors import EvalError, NoSuchMacroError, TemplateError
from sqltemplates.template.values import Str, Value

logger = logging.getLogger("sqltemplates.macros")

ANY_DIALECT = "*"


def _normalise(dialect: str, name: str) -> tuple[str, str]:
    dialect = dialect.strip().lower() or ANY_DIALECT
    return dialect, name.strip().lower()


def invoke_macro(name: str, fn: Macro, dialect: DialectInfo, args: tuple[Value, ...]) -> Str:
    """Call a macro and check that it produced SQL text."""
    try:
        result = fn(dialect, *args)
    except TemplateError:
        raise
    except Exception as exc:
        raise EvalError(f"macro {name} failed: {exc}") from exc
    match result:
        case str():
            return Str(result)
        case Str():
            return result
        case _:
            raise EvalError(
                f"macro {name} returned {type(result).__name__}, expected a SQL string"
            )


@dataclass(frozen=True)
class MacroSnapshot:
    """An immutable view of a registry, taken once per render."""

    entries: Mapping[tuple[str, str], Macro]

    def lookup(self, dialect: str, name: str) -> Macro | None:
        dialect, name = _normalise(dialect, name)
        fn = self.entries.get((dialect, name))
        if fn is not None:
            return fn
        pack = PackRegistry.find(dialect)
        if pack is not None:
            fn = pack.macro(name)
            if fn is not None:
                return fn
        return self.entries.get((ANY_DIALECT, name))

    def resolve(self, dialect: str, name: str) -> Macro:
        fn = self.lookup(dialect, name)
        if fn is None:
            raise NoSuchMacroError(dialect, name)
        return fn

    def names_for(self, dialect: str) -> list[str]:
        """All macro names callable under ``dialect``."""
        dialect = dialect.strip().lower()
        names = {n for (d, n) in self.entries if d in (dialect, ANY_DIALECT)}
        pack = PackRegistry.find(dialect)
        if pack is not None:
            names.update(pack.macro_names)
        return sorted(names)


class MacroRegistry:
    """Thread-safe table of ``(dialect, name) -> macro``.

    Writes serialise on an internal lock.  Readers take a
    :class:`MacroSnapshot`, which is rebuilt lazily after a write, so a
    render never observes a half-applied registration.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._macros: dict[tuple[str, str], Macro] = {}
        self._snapshot: MacroSnapshot | None = None

    def register(self, dialect: str, name: str, fn: Macro) -> None:
        """Install ``fn`` for ``(dialect, name)``; ``"*"`` applies to every dialect."""
        if not name.strip():
            raise ValueError("macro name cannot be empty")
        key = _normalise(dialect, name)
        with self._lock:
            if key in self._macros:
                logger.debug("Overwriting macro %s for dialect %s", key[1], key[0])
            self._macros[key] = fn
            self._snapshot = None

    def macro(self, dialect: str, name: str) -> Callable[[Macro], Macro]:
        """Decorator form of :meth:`register`."""

        def decorator(fn: Macro) -> Macro:
            self.register(dialect, name, fn)
            return fn

        return decorator

    def snapshot(self) -> MacroSnapshot:
        with self._lock:
            if self._snapshot is None:
                self._snapshot = MacroSnapshot(MappingProxyType(dict(self._macros)))
            return self._snapshot

    def dialects(self) -> list[str]:
        """Dialect names with at least one caller-registered macro."""
        with self._lock:
            return sorted({d for (d, _) in self._macros})

    def macros_for(self, dialect: str) -> list[str]:
        return self.snapshot().names_for(dialect)


default_registry = MacroRegistry()


def register_macro(dialect: str, name: str, fn: Macro) -> None:
    """Register a macro in the process-wide default registry."""
    default_registry.register(dialect, name, fn)
