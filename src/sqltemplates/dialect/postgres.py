"""PostgreSQL macro pack (also serves Redshift)."""

from __future__ import annotations

from sqltemplates.dialect.base import MacroPack, PackCapabilities
from sqltemplates.dialect.registry import PackRegistry


@PackRegistry.register
class PostgresPack(MacroPack):
    """PostgreSQL: native booleans, trailing LIMIT, INTERVAL literals."""

    aliases = ("redshift",)

    @property
    def name(self) -> str:
        return "postgres"

    @property
    def capabilities(self) -> PackCapabilities:
        return PackCapabilities(
            native_boolean=True,
            interval_literals=True,
            trailing_limit=True,
        )

    def bool_sql(self, flag: bool) -> str:
        return "TRUE" if flag else "FALSE"

    def limit_sql(self, count: int) -> str:
        return f"LIMIT {count}"

    def date_add_sql(self, unit: str, amount: str, expr: str) -> str:
        return f"({expr} + INTERVAL '{amount} {unit.lower()}')"

    def recent_usage_sql(self, prefix: str) -> str:
        return f"({prefix}.last_used_at > NOW() - INTERVAL '30 days')"

    def current_timestamp_sql(self) -> str:
        return "CURRENT_TIMESTAMP"
