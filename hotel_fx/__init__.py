"""Public interface for the hotel_fx package."""

from __future__ import annotations

from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any, Iterable, Sequence

from sqlalchemy import create_engine, text

from hotel_fx.config import HotelFxSettings
from hotel_fx.conversion import Converter
from hotel_fx.currency import PIVOT_CURRENCY, Currency, KnownCurrency
from hotel_fx.db import DEFAULT_SQLITE_DB_PATH
from hotel_fx.db.base_backend import BackendStrategy
from hotel_fx.db.connection import DatabaseBackend, DatabaseConnectionInfo
from hotel_fx.db.mongo_backend import MongoBackend, MongoClient
from hotel_fx.db.mysql_backend import MySQLBackend
from hotel_fx.db.postgres_backend import PostgresBackend
from hotel_fx.db.sqlite_backend import SQLiteBackend
from hotel_fx.db.sqlite_manager import PersistenceResult, SQLiteManager
from hotel_fx.formatting import (
    format_amount,
    format_amount_with_symbol,
    format_currency,
    get_currency_symbol,
)
from hotel_fx.ingestion.models import CurrencyRate, CurrencyRates, RateScope
from hotel_fx.rates.cache import Clock, RateCache
from hotel_fx.rates.store import RateStore
from hotel_fx.reporting import (
    FinancialReporter,
    FinancialSummary,
    Reservation,
    ReservationCharge,
    ReservationFinancial,
    Transaction,
    TransactionKind,
)
from hotel_fx.utils.logger import configure_package_logging, get_logger

LOGGER = get_logger(__name__)

__all__ = [
    "__version__",
    "Currency",
    "CurrencyRate",
    "CurrencyRates",
    "DatabaseBackend",
    "DatabaseConnectionInfo",
    "FinancialSummary",
    "HotelFx",
    "HotelFxSettings",
    "KnownCurrency",
    "PersistenceResult",
    "RateScope",
    "Reservation",
    "ReservationCharge",
    "ReservationFinancial",
    "Transaction",
    "TransactionKind",
    "format_amount",
    "format_amount_with_symbol",
    "format_currency",
    "get_currency_symbol",
    "seed_rates",
]

try:
    __version__ = importlib_metadata.version("hotel-fx")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


def seed_rates(*args, **kwargs):
    from hotel_fx.seeds.populate_rates import seed_rates as _seed_rates

    return _seed_rates(*args, **kwargs)


class HotelFx:
    """Package facade wiring backend, rate store, cache, converter and reports."""

    __slots__ = (
        "settings",
        "connection_info",
        "backend",
        "sqlite_manager",
        "store",
        "cache",
        "converter",
        "reporter",
        "_backend_strategy",
    )

    _DRIVER_HINTS: dict[DatabaseBackend, str] = {
        DatabaseBackend.POSTGRES: "Install psycopg2 via 'pip install psycopg2-binary'.",
        DatabaseBackend.MYSQL: "Install PyMySQL via 'pip install PyMySQL'.",
        DatabaseBackend.MONGODB: "Install pymongo via 'pip install pymongo'.",
    }

    __version__ = __version__

    def __init__(
        self,
        db_config: DatabaseConnectionInfo | str | None = None,
        *,
        settings: HotelFxSettings | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Configure persistence and the conversion pipeline.

        ``db_config`` may be a ``DatabaseConnectionInfo`` or a DSN string.
        When omitted, ``settings.db_url`` (``HOTEL_FX_DB_URL``) is used, and
        when that is unset too the local SQLite file is used.
        """

        self.settings = settings or HotelFxSettings()
        configure_package_logging(self.settings.log_level)
        self.connection_info = self._build_connection_info(db_config or self.settings.db_url)
        self.backend = self.connection_info.backend.value
        self.sqlite_manager: SQLiteManager | None = None
        self._backend_strategy = self._build_backend()
        self.store = RateStore(self._backend_strategy)
        cache_kwargs: dict[str, Any] = {"ttl_seconds": self.settings.rate_cache_ttl_seconds}
        if clock is not None:
            cache_kwargs["clock"] = clock
        self.cache = RateCache(self.store, **cache_kwargs)
        self.converter = Converter(self.cache)
        self.reporter = FinancialReporter(self.converter)

    @staticmethod
    def _build_connection_info(db_config: DatabaseConnectionInfo | str | None) -> DatabaseConnectionInfo:
        if isinstance(db_config, DatabaseConnectionInfo):
            return db_config
        if isinstance(db_config, str):
            return DatabaseConnectionInfo.from_url(db_config)
        return DatabaseConnectionInfo.sqlite(DEFAULT_SQLITE_DB_PATH)

    def _build_backend(self) -> BackendStrategy:
        info = self.connection_info
        if info.backend is DatabaseBackend.SQLITE:
            manager = SQLiteManager(Path(info.name or DEFAULT_SQLITE_DB_PATH))
            self.sqlite_manager = manager
            return SQLiteBackend(manager=manager)
        if info.backend is DatabaseBackend.POSTGRES:
            return PostgresBackend(info.url)
        if info.backend is DatabaseBackend.MYSQL:
            return MySQLBackend(info.url)
        if info.backend is DatabaseBackend.MONGODB:
            return MongoBackend(info.url, database=info.name)
        raise ValueError(f"Unsupported backend: {info.backend}")

    @property
    def backend_strategy(self) -> BackendStrategy:
        return self._backend_strategy

    def uses_local_sqlite(self) -> bool:
        return self.connection_info.is_sqlite

    def ensure_schema(self) -> None:
        self._backend_strategy.ensure_schema()

    def upsert_rates(self, rows: Sequence[CurrencyRate]) -> PersistenceResult:
        """Write rate rows; cached tables keep serving until their TTL lapses."""

        return self._backend_strategy.upsert_rates(rows)

    def list_available_currencies(self, tenant_id: str, location_id: str) -> list[str]:
        return self.store.list_available_currencies(tenant_id, location_id)

    def rate_details(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        return self.store.rate_details(tenant_id, location_id)

    def get_rates(self, tenant_id: str, location_id: str) -> CurrencyRates:
        return self.cache.get_rates(tenant_id, location_id)

    def convert(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        tenant_id: str,
        location_id: str,
    ) -> float:
        return self.converter.convert(amount, from_currency, to_currency, tenant_id, location_id)

    def summarize(
        self,
        transactions: Iterable[Transaction],
        tenant_id: str,
        location_id: str,
        base_currency: str = PIVOT_CURRENCY,
    ) -> FinancialSummary:
        return self.reporter.summarize(transactions, base_currency, tenant_id, location_id)

    def reservation_financials(
        self,
        reservations: Sequence[Reservation],
        charges: Iterable[ReservationCharge],
        tenant_id: str,
    ) -> list[ReservationFinancial]:
        return self.reporter.reservations_financials(reservations, charges, tenant_id)

    def format(self, amount: float, currency_code: str | None = None) -> str:
        """Format with ``currency_code`` or the configured display currency."""

        return format_currency(amount, currency_code or self.settings.default_display_currency)

    def connection(self) -> tuple[bool, str | None]:
        """Attempt to reach the configured database and report the outcome."""

        if self.connection_info.backend is DatabaseBackend.MONGODB:
            return self._probe_mongodb()
        return self._probe_relational_db()

    def close(self) -> None:
        self._backend_strategy.close()

    def __enter__(self) -> "HotelFx":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _missing_driver_message(self, exc: ModuleNotFoundError) -> str:
        module_name = exc.name or str(exc)
        base = (
            f"Missing optional dependency '{module_name}' required for "
            f"{self.connection_info.backend.value} connections."
        )
        hint = self._DRIVER_HINTS.get(self.connection_info.backend)
        return f"{base} {hint}" if hint else base

    def _probe_relational_db(self) -> tuple[bool, str | None]:
        engine = None
        try:
            engine = create_engine(self.connection_info.url, future=True)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except ModuleNotFoundError as exc:
            return False, self._missing_driver_message(exc)
        except Exception as exc:  # pragma: no cover - SQLAlchemy provides error detail
            LOGGER.warning("Database probe failed: %s", exc)
            return False, str(exc)
        finally:
            if engine is not None:
                engine.dispose()
        return True, None

    def _probe_mongodb(self) -> tuple[bool, str | None]:
        client = None
        try:
            client = MongoClient(self.connection_info.url, serverSelectionTimeoutMS=5000)
            client.admin.command("ping")
        except Exception as exc:  # pragma: no cover - pymongo surfaces detail
            LOGGER.warning("MongoDB probe failed: %s", exc)
            return False, str(exc)
        finally:
            if client is not None:
                client.close()
        return True, None
