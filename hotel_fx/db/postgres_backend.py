"""PostgreSQL backend strategy."""

from __future__ import annotations

from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection

from hotel_fx.db.relational_backend import RelationalBackend

# ``xmax`` is zero only for tuples created by this statement, which tells a
# fresh insert apart from a conflict update.
UPSERT_SQL = """
INSERT INTO currency_rates(tenant_id, location_id, currency_code, usd_rate, is_custom, updated_at)
VALUES(:tenant_id, :location_id, :currency_code, :usd_rate, :is_custom, :updated_at)
ON CONFLICT (tenant_id, location_id, currency_code) DO UPDATE
SET usd_rate = EXCLUDED.usd_rate,
    is_custom = EXCLUDED.is_custom,
    updated_at = EXCLUDED.updated_at
RETURNING (xmax = 0) AS inserted
"""


class PostgresBackend(RelationalBackend):
    """Relational backend that upserts with ``ON CONFLICT``."""

    def _upsert_row(self, connection: Connection, params: dict[str, Any]) -> bool:
        return bool(connection.execute(text(UPSERT_SQL), params).scalar())


__all__ = ["PostgresBackend"]
