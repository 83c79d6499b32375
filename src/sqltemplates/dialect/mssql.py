"""SQL Server macro pack."""

from __future__ import annotations

from sqltemplates.dialect.base import MacroPack, PackCapabilities
from sqltemplates.dialect.registry import PackRegistry


@PackRegistry.register
class MSSQLPack(MacroPack):
    """SQL Server: bracket identifiers, BIT booleans, ``OFFSET ... FETCH NEXT``.

    ``limit_clause`` emits the ``OFFSET 0 ROWS FETCH NEXT n ROWS ONLY`` form,
    which must follow an ``ORDER BY``.
    """

    @property
    def name(self) -> str:
        return "mssql"

    @property
    def capabilities(self) -> PackCapabilities:
        return PackCapabilities(
            native_boolean=False,
            interval_literals=False,
            trailing_limit=True,
            fetch_first=True,
        )

    def bool_sql(self, flag: bool) -> str:
        return "1" if flag else "0"

    def limit_sql(self, count: int) -> str:
        return f"OFFSET 0 ROWS FETCH NEXT {count} ROWS ONLY"

    def date_add_sql(self, unit: str, amount: str, expr: str) -> str:
        return f"DATEADD({unit.upper()}, {amount}, {expr})"

    def recent_usage_sql(self, prefix: str) -> str:
        return f"({prefix}.last_used_at > DATEADD(day, -30, GETDATE()))"

    def current_timestamp_sql(self) -> str:
        return "CURRENT_TIMESTAMP"
