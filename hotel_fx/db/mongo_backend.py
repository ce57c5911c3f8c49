"""MongoDB backend strategy."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from pymongo import MongoClient, UpdateOne
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from hotel_fx.db.base_backend import BackendStrategy
from hotel_fx.db.sqlite_manager import PersistenceResult, utc_now
from hotel_fx.ingestion.models import CurrencyRate
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)

COLLECTION_NAME = "currency_rates"
SCOPE_INDEX = [("tenant_id", 1), ("location_id", 1), ("currency_code", 1)]


class MongoBackend(BackendStrategy):
    """Backend strategy that persists rate tables inside MongoDB."""

    def __init__(self, url: str, *, database: str | None = None) -> None:
        if MongoClient is None:  # pragma: no cover - tests may patch the driver out
            raise ModuleNotFoundError("pymongo is required for MongoDB backends")
        self.url = url
        self._client = MongoClient(url)
        db = self._client.get_default_database() if database is None else self._client[database]
        if db is None:
            raise ValueError("MongoDB connection URI must include a database name")
        self._collection: Collection = db[COLLECTION_NAME]

    def ensure_schema(self) -> None:
        try:
            LOGGER.info("Ensuring MongoDB %s collection exists", COLLECTION_NAME)
            self._client.admin.command("ping")
            self._collection.create_index(SCOPE_INDEX, unique=True)
        except PyMongoError as exc:
            raise RuntimeError(f"Failed to ensure MongoDB schema: {exc}") from exc

    def upsert_rates(self, rows: Sequence[CurrencyRate]) -> PersistenceResult:
        result = PersistenceResult()
        if not rows:
            return result
        operations: list[UpdateOne] = []
        for row in rows:
            key = {
                "tenant_id": row.tenant_id,
                "location_id": row.location_id,
                "currency_code": row.currency_code,
            }
            doc = {
                **key,
                "usd_rate": row.usd_rate,
                "is_custom": row.is_custom,
                "updated_at": row.updated_at or utc_now(),
            }
            operations.append(UpdateOne(key, {"$set": doc}, upsert=True))
        try:
            outcome = self._collection.bulk_write(operations, ordered=False)
        except PyMongoError as exc:
            raise RuntimeError(f"Failed to upsert MongoDB rates: {exc}") from exc
        result.inserted = outcome.upserted_count
        result.updated = len(operations) - outcome.upserted_count
        return result

    def fetch_rates(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        query: dict[str, Any] = {
            "tenant_id": tenant_id,
            "location_id": location_id,
            "currency_code": {"$ne": None},
            "usd_rate": {"$ne": None},
        }
        try:
            docs = list(self._collection.find(query).sort("currency_code", 1))
        except PyMongoError as exc:
            raise RuntimeError(f"Failed to read MongoDB rates: {exc}") from exc
        return [
            CurrencyRate(
                currency_code=doc["currency_code"],
                usd_rate=float(doc["usd_rate"]),
                tenant_id=doc["tenant_id"],
                location_id=doc["location_id"],
                is_custom=bool(doc.get("is_custom", False)),
                updated_at=_as_datetime(doc.get("updated_at")),
            )
            for doc in docs
        ]

    def fetch_currency_codes(self, tenant_id: str, location_id: str) -> list[str]:
        query = {
            "tenant_id": tenant_id,
            "location_id": location_id,
            "currency_code": {"$ne": None},
        }
        try:
            codes = self._collection.distinct("currency_code", query)
        except PyMongoError as exc:
            raise RuntimeError(f"Failed to read MongoDB currency codes: {exc}") from exc
        return sorted(code for code in codes if code is not None)

    def close(self) -> None:  # pragma: no cover - trivial cleanup
        self._client.close()


def _as_datetime(value: object) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


__all__ = ["MongoBackend"]
