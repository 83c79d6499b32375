"""MySQL macro pack (also serves MariaDB)."""

from __future__ import annotations

from sqltemplates.dialect.base import MacroPack, PackCapabilities
from sqltemplates.dialect.registry import PackRegistry


@PackRegistry.register
class MySQLPack(MacroPack):
    """MySQL: backtick identifiers, ``DATE_ADD(expr, INTERVAL n UNIT)``.

    ``TRUE``/``FALSE`` are aliases for ``1``/``0`` but are accepted everywhere.
    """

    aliases = ("mariadb",)

    @property
    def name(self) -> str:
        return "mysql"

    @property
    def capabilities(self) -> PackCapabilities:
        return PackCapabilities(
            native_boolean=False,
            interval_literals=True,
            trailing_limit=True,
        )

    def bool_sql(self, flag: bool) -> str:
        return "TRUE" if flag else "FALSE"

    def limit_sql(self, count: int) -> str:
        return f"LIMIT {count}"

    def date_add_sql(self, unit: str, amount: str, expr: str) -> str:
        return f"DATE_ADD({expr}, INTERVAL {amount} {unit.upper()})"

    def recent_usage_sql(self, prefix: str) -> str:
        return f"({prefix}.last_used_at > DATE_ADD(CURRENT_TIMESTAMP(), INTERVAL -30 DAY))"

    def current_timestamp_sql(self) -> str:
        return "CURRENT_TIMESTAMP()"
