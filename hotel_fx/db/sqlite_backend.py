"""SQLite backend strategy implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from hotel_fx.db import DEFAULT_SQLITE_DB_PATH
from hotel_fx.db.base_backend import BackendStrategy
from hotel_fx.db.sqlite_manager import PersistenceResult, SQLiteManager
from hotel_fx.ingestion.models import CurrencyRate


class SQLiteBackend(BackendStrategy):
    """Backend strategy that stores rate tables in a local SQLite file."""

    def __init__(
        self,
        db_path: str | Path = DEFAULT_SQLITE_DB_PATH,
        *,
        manager: SQLiteManager | None = None,
    ) -> None:
        self.manager = manager or SQLiteManager(db_path)
        self.db_path = Path(self.manager.db_path)

    def ensure_schema(self) -> None:
        # ``SQLiteManager`` creates the schema in its constructor.
        return None

    def upsert_rates(self, rows: Sequence[CurrencyRate]) -> PersistenceResult:
        return self.manager.upsert_rates(rows)

    def fetch_rates(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        return self.manager.fetch_rates(tenant_id, location_id)

    def fetch_currency_codes(self, tenant_id: str, location_id: str) -> list[str]:
        return self.manager.fetch_currency_codes(tenant_id, location_id)

    def close(self) -> None:  # pragma: no cover - trivial delegator
        self.manager.close()


__all__ = ["SQLiteBackend"]
