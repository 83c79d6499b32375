"""Runtime values. Every template expression evaluates to one of these variants."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from sqltemplates.template.errors import EvalError, TemplateError

#: Reserved key that marks a context mapping as a resource handle.
HANDLE_TAG = "__handle_type"
_HANDLE_TAG_ALIASES = (HANDLE_TAG, "handle_type")


@dataclass(frozen=True)
class Str:
    value: str


@dataclass(frozen=True)
class Num:
    value: int | float


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Nil:
    pass


@dataclass(frozen=True, eq=False)
class Handle:
    """A resolved schema-object reference (table, view, ...).

    ``fields`` holds everything except the type tag, e.g. ``schema``,
    ``table``, ``qualified_name`` and one entry per column identifier.
    """

    handle_type: str
    fields: Mapping[str, Value] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, name: str) -> Value | None:
        if name in _HANDLE_TAG_ALIASES:
            return Str(self.handle_type)
        return self.fields.get(name)

    def text_field(self, name: str) -> str:
        """Return a field as text, or ``""`` when absent or nil."""
        value = self.fields.get(name)
        if value is None or isinstance(value, Nil):
            return ""
        return to_text(value)

    def copy(self) -> Handle:
        return Handle(self.handle_type, MappingProxyType(dict(self.fields)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Handle):
            return NotImplemented
        return self.handle_type == other.handle_type and dict(self.fields) == dict(other.fields)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True, eq=False)
class Map:
    """A plain keyed mapping (e.g. ``resources`` or an alias table like ``table``)."""

    entries: Mapping[str, Value] = field(default_factory=lambda: MappingProxyType({}))

    def get(self, name: str) -> Value | None:
        return self.entries.get(name)

    def copy(self) -> Map:
        return Map(MappingProxyType(dict(self.entries)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Map):
            return NotImplemented
        return dict(self.entries) == dict(other.entries)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class Func:
    """A callable value: builtin, macro, dispatch target or caller helper."""

    name: str
    call: Callable[[tuple[Value, ...]], Value] = field(compare=False)

    def __call__(self, *args: Value) -> Value:
        return self.call(args)


Value = Str | Num | Bool | Handle | Map | Func | Nil


def is_handle_mapping(obj: Mapping[str, Any]) -> bool:
    return any(tag in obj for tag in _HANDLE_TAG_ALIASES)


def from_python(obj: Any) -> Value:
    """Convert a caller-supplied Python object into a :data:`Value`."""
    match obj:
        case Str() | Num() | Bool() | Handle() | Map() | Func() | Nil():
            return obj
        case None:
            return Nil()
        case bool():
            return Bool(obj)
        case int() | float():
            return Num(obj)
        case str():
            return Str(obj)
        case Mapping() if is_handle_mapping(obj):
            return _handle_from_mapping(obj)
        case Mapping():
            return Map(MappingProxyType({str(k): from_python(v) for k, v in obj.items()}))
        case _ if callable(obj):
            return _wrap_callable(obj)
        case _:
            raise EvalError(f"unsupported context value of type {type(obj).__name__}")


def _handle_from_mapping(obj: Mapping[str, Any]) -> Handle:
    tag = obj.get(HANDLE_TAG, obj.get("handle_type"))
    fields = {
        str(k): from_python(v) for k, v in obj.items() if k not in _HANDLE_TAG_ALIASES
    }
    return Handle(handle_type=str(tag), fields=MappingProxyType(fields))


def _wrap_callable(fn: Callable[..., Any]) -> Func:
    name = getattr(fn, "__name__", "callable")

    def call(args: tuple[Value, ...]) -> Value:
        try:
            result = fn(*(to_python(a) for a in args))
        except TemplateError:
            raise
        except Exception as exc:
            raise EvalError(f"context callable {name} failed: {exc}") from exc
        return from_python(result)

    return Func(name=name, call=call)


def to_python(value: Value) -> Any:
    """Convert a :data:`Value` back into plain Python data."""
    match value:
        case Str(value=v) | Num(value=v) | Bool(value=v):
            return v
        case Nil():
            return None
        case Handle(handle_type=tag, fields=fields):
            data = {k: to_python(v) for k, v in fields.items()}
            data[HANDLE_TAG] = tag
            return data
        case Map(entries=entries):
            return {k: to_python(v) for k, v in entries.items()}
        case Func():
            return value


def to_text(value: Value) -> str:
    """Canonical string form used when a value is written to the output."""
    match value:
        case Str(value=v):
            return v
        case Bool(value=v):
            return "true" if v else "false"
        case Num(value=v) if isinstance(v, int):
            return str(v)
        case Num(value=v):
            return repr(v)
        case Nil():
            return ""
        case Handle() as handle:
            qualified = handle.fields.get("qualified_name")
            if qualified is None:
                raise EvalError(
                    f"cannot render {handle.handle_type} handle without a qualified_name"
                )
            return to_text(qualified)
        case Map():
            raise EvalError("cannot render a mapping as SQL text")
        case Func(name=name):
            raise EvalError(f"cannot render callable '{name}' as SQL text; did you forget ()?")


def type_name(value: Value) -> str:
    """Short variant name for error messages."""
    return type(value).__name__.lower()
