"""Dialect quoting rules and shipped macro packs."""

# Import packs to trigger registration
import sqltemplates.dialect.mssql as _mssql  # noqa: F401
import sqltemplates.dialect.mysql as _mysql  # noqa: F401
import sqltemplates.dialect.postgres as _postgres  # noqa: F401
import sqltemplates.dialect.snowflake as _snowflake  # noqa: F401
from sqltemplates.dialect.base import (
    DialectInfo,
    Macro,
    MacroPack,
    PackCapabilities,
    identifier_quotes,
    quote_identifier,
)
from sqltemplates.dialect.registry import (
    DuplicatePackError,
    PackRegistry,
    UnsupportedDialectError,
)

__all__ = [
    "DialectInfo",
    "DuplicatePackError",
    "Macro",
    "MacroPack",
    "PackCapabilities",
    "PackRegistry",
    "UnsupportedDialectError",
    "identifier_quotes",
    "quote_identifier",
]
