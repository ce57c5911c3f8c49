"""Backend strategy interface for rate tables."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from hotel_fx.db.sqlite_manager import PersistenceResult
from hotel_fx.ingestion.models import CurrencyRate


class BackendStrategy(ABC):
    """Common interface implemented by every database backend."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create required tables/collections and verify connectivity."""

    @abstractmethod
    def upsert_rates(self, rows: Sequence[CurrencyRate]) -> PersistenceResult:
        """Insert or update rate rows keyed by tenant, location and currency."""

    @abstractmethod
    def fetch_rates(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        """Return rows of the scope whose code and rate are both present."""

    @abstractmethod
    def fetch_currency_codes(self, tenant_id: str, location_id: str) -> list[str]:
        """Return distinct non-null currency codes of the scope, sorted."""

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""


__all__ = ["BackendStrategy"]
