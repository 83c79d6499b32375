"""Builtin template functions: identifier quoting and resource resolution."""

from __future__ import annotations

from collections.abc import Callable

from sqltemplates.dialect.base import DialectInfo, quote_identifier
from sqltemplates.template.context import Context
from sqltemplates.template.errors import EvalError
from sqltemplates.template.handles import resolve_object
from sqltemplates.template.values import Handle, Map, Nil, Num, Str, Value, to_text, type_name

#: ``(dialect, context, args) -> Value``
Builtin = Callable[[DialectInfo, Context, tuple[Value, ...]], Value]


def _segment(name: str, value: Value) -> str:
    match value:
        case Str(value=text):
            return text
        case Num() as number:
            return to_text(number)
        case Nil():
            return ""
        case _:
            raise EvalError(f"{name}() expects identifier strings, got {type_name(value)}")


def _qualified(dialect: DialectInfo, schema: str, table: str) -> str:
    if not schema.strip():
        return quote_identifier(dialect.name, table)
    return f"{quote_identifier(dialect.name, schema)}.{quote_identifier(dialect.name, table)}"


def column(dialect: DialectInfo, context: Context, args: tuple[Value, ...]) -> Value:
    if len(args) != 1:
        raise EvalError(f"column() expects 1 argument, got {len(args)}")
    return Str(quote_identifier(dialect.name, _segment("column", args[0])))


def identifier(dialect: DialectInfo, context: Context, args: tuple[Value, ...]) -> Value:
    if not args:
        raise EvalError("identifier() requires at least one part")
    parts = (quote_identifier(dialect.name, _segment("identifier", a)) for a in args)
    return Str(".".join(parts))


def relation(dialect: DialectInfo, context: Context, args: tuple[Value, ...]) -> Value:
    match args:
        case (Handle() as handle,):
            return Str(_qualified(dialect, handle.text_field("schema"), handle.text_field("table")))
        case (Map() as mapping,):
            raise EvalError(
                "relation() expects a resource handle; mapping has keys "
                f"{sorted(mapping.entries)}"
            )
        case (table,):
            return Str(_qualified(dialect, "", _segment("relation", table)))
        case (schema, table):
            return Str(
                _qualified(dialect, _segment("relation", schema), _segment("relation", table))
            )
        case _:
            raise EvalError(
                f"relation() expects (schema, name) or a single handle, got {len(args)} arguments"
            )


def object_(dialect: DialectInfo, context: Context, args: tuple[Value, ...]) -> Value:
    if len(args) != 1:
        raise EvalError(f"object() expects 1 argument, got {len(args)}")
    return resolve_object(args[0], context)


BUILTINS: dict[str, Builtin] = {
    "column": column,
    "identifier": identifier,
    "relation": relation,
    "object": object_,
}
