"""The ``adapter`` template variable and its ``dispatch`` bridge."""

from __future__ import annotations

from functools import partial
from types import MappingProxyType

from sqltemplates.dialect.base import DialectInfo
from sqltemplates.template.builtins import BUILTINS
from sqltemplates.template.context import Context
from sqltemplates.template.errors import EvalError, NoSuchMacroError
from sqltemplates.template.macros import MacroSnapshot, invoke_macro
from sqltemplates.template.values import Bool, Func, Map, Str, Value, type_name


def macro_callable(name: str, dialect: DialectInfo, snapshot: MacroSnapshot) -> Func:
    """Bind the macro ``name`` for ``dialect`` into a callable value."""
    fn = snapshot.resolve(dialect.name, name)

    def call(args: tuple[Value, ...]) -> Value:
        return invoke_macro(name, fn, dialect, args)

    return Func(name=name, call=call)


def find_callable(
    name: str, dialect: DialectInfo, context: Context, snapshot: MacroSnapshot
) -> Func | None:
    """Resolve ``name`` to a registered macro, a pack macro or a builtin.

    Registered macros (exact dialect or ``"*"``) shadow the builtins of the
    same name, so ``column`` can be overridden per dialect.
    """
    if snapshot.lookup(dialect.name, name) is not None:
        return macro_callable(name, dialect, snapshot)
    builtin = BUILTINS.get(name.strip().lower())
    if builtin is not None:
        return Func(name=name, call=partial(builtin, dialect, context))
    return None


def build_adapter(dialect: DialectInfo, context: Context, snapshot: MacroSnapshot) -> Map:
    """Build the ``adapter`` mapping exposed to templates.

    ``adapter.dispatch("date_add")`` returns the ``date_add`` macro for the
    active dialect; ``adapter.dispatch("date_add", "day", 1, x)`` calls it
    immediately.  Builtins such as ``relation`` are reachable the same way.
    """

    def dispatch(args: tuple[Value, ...]) -> Value:
        if not args:
            raise EvalError("adapter.dispatch expects macro name")
        match args[0]:
            case Str(value=name):
                pass
            case other:
                raise EvalError(
                    f"adapter.dispatch expects a macro name string, got {type_name(other)}"
                )
        target = find_callable(name, dialect, context, snapshot)
        if target is None:
            raise NoSuchMacroError(dialect.name, name)
        if len(args) > 1:
            return target(*args[1:])
        return target

    capabilities = Map(
        MappingProxyType({k: Bool(v) for k, v in dialect.capabilities.items()})
    )
    return Map(
        MappingProxyType(
            {
                "name": Str(dialect.name),
                "capabilities": capabilities,
                "dispatch": Func(name="dispatch", call=dispatch),
            }
        )
    )
