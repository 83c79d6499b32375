"""Snowflake macro pack."""

from __future__ import annotations

from sqltemplates.dialect.base import MacroPack, PackCapabilities
from sqltemplates.dialect.registry import PackRegistry


@PackRegistry.register
class SnowflakePack(MacroPack):
    """Snowflake: ``DATEADD(UNIT, n, expr)``, ``CURRENT_TIMESTAMP()``."""

    @property
    def name(self) -> str:
        return "snowflake"

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
        return f"DATEADD({unit.upper()}, {amount}, {expr})"

    def recent_usage_sql(self, prefix: str) -> str:
        return f"({prefix}.last_used_at > DATEADD('day', -30, CURRENT_TIMESTAMP()))"

    def current_timestamp_sql(self) -> str:
        return "CURRENT_TIMESTAMP()"
