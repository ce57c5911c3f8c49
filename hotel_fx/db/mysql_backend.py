"""MySQL backend strategy."""

from __future__ import annotations

from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection

from hotel_fx.db.relational_backend import RelationalBackend

UPSERT_SQL = """
INSERT INTO currency_rates(tenant_id, location_id, currency_code, usd_rate, is_custom, updated_at)
VALUES(:tenant_id, :location_id, :currency_code, :usd_rate, :is_custom, :updated_at)
ON DUPLICATE KEY UPDATE
    usd_rate = VALUES(usd_rate),
    is_custom = VALUES(is_custom),
    updated_at = VALUES(updated_at)
"""


class MySQLBackend(RelationalBackend):
    """Relational backend that upserts with ``ON DUPLICATE KEY UPDATE``."""

    def _upsert_row(self, connection: Connection, params: dict[str, Any]) -> bool:
        # MySQL reports 1 affected row for an insert and 2 (or 0) for an update.
        return connection.execute(text(UPSERT_SQL), params).rowcount == 1


__all__ = ["MySQLBackend"]
