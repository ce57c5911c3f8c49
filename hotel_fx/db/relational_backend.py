"""Shared logic for SQL (Postgres/MySQL) backends."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from hotel_fx.db.base_backend import BackendStrategy
from hotel_fx.db.sqlite_manager import PersistenceResult, utc_now
from hotel_fx.ingestion.models import CurrencyRate
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS currency_rates (
    tenant_id VARCHAR(64) NOT NULL,
    location_id VARCHAR(64) NOT NULL,
    currency_code VARCHAR(10) NOT NULL,
    usd_rate NUMERIC(18, 6) NULL,
    is_custom BOOLEAN NOT NULL DEFAULT FALSE,
    updated_at TIMESTAMP NULL,
    PRIMARY KEY(tenant_id, location_id, currency_code)
);
"""

DELETE_SQL = """
DELETE FROM currency_rates
WHERE tenant_id = :tenant_id AND location_id = :location_id AND currency_code = :currency_code
"""
INSERT_SQL = """
INSERT INTO currency_rates(tenant_id, location_id, currency_code, usd_rate, is_custom, updated_at)
VALUES(:tenant_id, :location_id, :currency_code, :usd_rate, :is_custom, :updated_at)
"""
SELECT_RATES_SQL = """
SELECT tenant_id, location_id, currency_code, usd_rate, is_custom, updated_at
FROM currency_rates
WHERE tenant_id = :tenant_id
  AND location_id = :location_id
  AND currency_code IS NOT NULL
  AND usd_rate IS NOT NULL
ORDER BY currency_code
"""
SELECT_CODES_SQL = """
SELECT DISTINCT currency_code
FROM currency_rates
WHERE tenant_id = :tenant_id
  AND location_id = :location_id
  AND currency_code IS NOT NULL
ORDER BY currency_code
"""


class RelationalBackend(BackendStrategy):
    """Base class that encapsulates SQLAlchemy powered interactions."""

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine_instance: Engine | None = None

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True)
        return self._engine_instance

    def ensure_schema(self) -> None:
        engine = self._get_engine()
        with engine.begin() as connection:
            LOGGER.info("Ensuring currency_rates schema exists")
            connection.execute(text("SELECT 1"))
            connection.execute(text(SCHEMA_SQL))

    def _upsert_row(self, connection: Connection, params: dict[str, Any]) -> bool:
        """Write one row and return True when it did not exist before."""

        deleted = connection.execute(text(DELETE_SQL), params).rowcount
        connection.execute(text(INSERT_SQL), params)
        return not deleted

    def upsert_rates(self, rows: Sequence[CurrencyRate]) -> PersistenceResult:
        result = PersistenceResult()
        if not rows:
            return result
        engine = self._get_engine()
        with engine.begin() as connection:
            for row in rows:
                params = {
                    "tenant_id": row.tenant_id,
                    "location_id": row.location_id,
                    "currency_code": row.currency_code,
                    "usd_rate": row.usd_rate,
                    "is_custom": row.is_custom,
                    "updated_at": row.updated_at or utc_now(),
                }
                if self._upsert_row(connection, params):
                    result.inserted += 1
                else:
                    result.updated += 1
        return result

    def fetch_rates(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        engine = self._get_engine()
        params = {"tenant_id": tenant_id, "location_id": location_id}
        records: list[CurrencyRate] = []
        with engine.connect() as connection:
            for row in connection.execute(text(SELECT_RATES_SQL), params):
                mapping = row._mapping
                records.append(
                    CurrencyRate(
                        currency_code=mapping["currency_code"],
                        usd_rate=float(mapping["usd_rate"]),
                        tenant_id=mapping["tenant_id"],
                        location_id=mapping["location_id"],
                        is_custom=bool(mapping["is_custom"]),
                        updated_at=_normalise_timestamp(mapping["updated_at"]),
                    )
                )
        return records

    def fetch_currency_codes(self, tenant_id: str, location_id: str) -> list[str]:
        engine = self._get_engine()
        params = {"tenant_id": tenant_id, "location_id": location_id}
        with engine.connect() as connection:
            return [row[0] for row in connection.execute(text(SELECT_CODES_SQL), params)]

    def close(self) -> None:  # pragma: no cover - trivial resource cleanup
        if self._engine_instance is not None:
            self._engine_instance.dispose()


def _normalise_timestamp(value: object) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


__all__ = ["RelationalBackend"]
