"""Dialect descriptor, identifier quoting and the abstract default macro pack."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

from sqltemplates.template.errors import EvalError
from sqltemplates.template.values import Bool, Num, Str, Value, to_text, type_name

# ---------------------------------------------------------------------------
# Dialect descriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DialectInfo:
    """The target backend a template is rendered for.

    ``name`` is the only key used for quoting and macro lookup; it is
    normalised to lower case.  ``capabilities`` is passed through to
    templates as ``adapter.capabilities``.
    """

    name: str
    capabilities: dict[str, bool] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.strip().lower())

    @classmethod
    def of(cls, dialect: str | DialectInfo) -> DialectInfo:
        if isinstance(dialect, DialectInfo):
            return dialect
        return cls(name=dialect)


#: ``(dialect, *args) -> sql``
Macro = Callable[..., str]

# ---------------------------------------------------------------------------
# Identifier quoting
# ---------------------------------------------------------------------------

_DEFAULT_QUOTES = ('"', '"')
_QUOTES: dict[str, tuple[str, str]] = {
    "mysql": ("`", "`"),
    "mariadb": ("`", "`"),
    "mssql": ("[", "]"),
}


def identifier_quotes(dialect_name: str) -> tuple[str, str]:
    """Return the ``(open, close)`` quote characters for a dialect.

    Unknown dialects fall back to ANSI double quotes.
    """
    return _QUOTES.get(dialect_name.strip().lower(), _DEFAULT_QUOTES)


def quote_identifier(dialect_name: str, ident: str) -> str:
    """Quote one identifier segment, doubling any embedded closing quote."""
    left, right = identifier_quotes(dialect_name)
    escaped = ident.strip().replace(right, right + right)
    return f"{left}{escaped}{right}"


# ---------------------------------------------------------------------------
# Default macro pack
# ---------------------------------------------------------------------------


@dataclass
class PackCapabilities:
    """Flags describing the SQL shape a pack emits."""

    native_boolean: bool = True
    interval_literals: bool = False
    trailing_limit: bool = True
    fetch_first: bool = False


def _expect_arity(macro: str, args: tuple[Value, ...], count: int) -> None:
    if len(args) != count:
        raise EvalError(f"{macro}() expects {count} argument(s), got {len(args)}")


def _parse_bool(value: Value) -> bool:
    match value:
        case Bool(value=flag):
            return flag
        case Num(value=1) | Str(value="1"):
            return True
        case Num(value=0) | Str(value="0"):
            return False
        case Str(value=text) if text.strip().lower() in ("true", "1"):
            return True
        case Str(value=text) if text.strip().lower() in ("false", "0"):
            return False
        case _:
            raise EvalError(f"unsupported boolean literal: {_describe(value)}")


def _parse_count(value: Value) -> int:
    match value:
        case Num(value=int() as count) if count >= 0:
            return count
        case Str(value=text) if text.strip().isdigit():
            return int(text.strip())
        case _:
            raise EvalError(
                f"limit_clause() expects a non-negative integer, got {_describe(value)}"
            )


def _describe(value: Value) -> str:
    match value:
        case Str(value=text):
            return repr(text)
        case Num(value=number):
            return str(number)
        case _:
            return type_name(value)


class MacroPack(ABC):
    """Default implementations of the shipped macros for one dialect.

    Subclasses supply the SQL shapes; argument checking lives here so every
    pack accepts and rejects the same inputs.
    """

    macro_names = (
        "bool_literal",
        "limit_clause",
        "date_add",
        "recent_usage_expr",
        "current_timestamp",
    )

    #: Additional dialect names served by the same pack.
    aliases: tuple[str, ...] = ()

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    def capabilities(self) -> PackCapabilities:
        return PackCapabilities()

    @abstractmethod
    def bool_sql(self, flag: bool) -> str:
        """Return the boolean literal for ``flag``."""

    @abstractmethod
    def limit_sql(self, count: int) -> str:
        """Return the row-limiting fragment for ``count`` rows."""

    @abstractmethod
    def date_add_sql(self, unit: str, amount: str, expr: str) -> str:
        """Return SQL that adds ``amount`` ``unit``s to ``expr``."""

    @abstractmethod
    def recent_usage_sql(self, prefix: str) -> str:
        """Return a predicate on ``<prefix>.last_used_at`` within the last 30 days."""

    @abstractmethod
    def current_timestamp_sql(self) -> str:
        """Return SQL for the current timestamp."""

    # -- macro entry points: (dialect, *args) -> str -------------------------

    def macro(self, name: str) -> Macro | None:
        if name not in self.macro_names:
            return None
        return getattr(self, name)

    def bool_literal(self, dialect: DialectInfo, *args: Value) -> str:
        _expect_arity("bool_literal", args, 1)
        return self.bool_sql(_parse_bool(args[0]))

    def limit_clause(self, dialect: DialectInfo, *args: Value) -> str:
        _expect_arity("limit_clause", args, 1)
        return self.limit_sql(_parse_count(args[0]))

    def date_add(self, dialect: DialectInfo, *args: Value) -> str:
        if len(args) != 3:
            raise EvalError("date_add() expects unit, amount, expression")
        unit, amount, expr = (to_text(a).strip() for a in args)
        return self.date_add_sql(unit, amount, expr)

    def recent_usage_expr(self, dialect: DialectInfo, *args: Value) -> str:
        _expect_arity("recent_usage_expr", args, 1)
        prefix = to_text(args[0]).strip()
        if not prefix:
            raise EvalError("recent_usage_expr() prefix cannot be empty")
        return self.recent_usage_sql(prefix)

    def current_timestamp(self, dialect: DialectInfo, *args: Value) -> str:
        _expect_arity("current_timestamp", args, 0)
        return self.current_timestamp_sql()
