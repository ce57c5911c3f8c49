"""SQLAlchemy persistence for the local SQLite rate database."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence, cast

from sqlalchemy import Boolean, Column, DateTime, Float, String, create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from hotel_fx.db import DEFAULT_SQLITE_DB_PATH
from hotel_fx.ingestion.models import CurrencyRate
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class _CurrencyRateRow(Base):
    __tablename__ = "currency_rates"

    tenant_id = Column(String, primary_key=True)
    location_id = Column(String, primary_key=True)
    currency_code = Column(String(10), primary_key=True)
    usd_rate = Column(Float, nullable=True)
    is_custom = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, nullable=True)


@dataclass(slots=True)
class PersistenceResult:
    """Represents how many rows were inserted or updated in a batch."""

    inserted: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        """Return the total number of affected rows."""

        return self.inserted + self.updated


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SQLiteManager:
    """Owns the SQLite engine and the ORM session factory."""

    def __init__(self, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine: Engine = create_engine(
            f"sqlite:///{self.db_path}",
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
        )
        Base.metadata.create_all(self.engine)
        self._SessionFactory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, expire_on_commit=False, future=True
        )
        LOGGER.debug("SQLite rate database ready at %s", self.db_path)

    def upsert_rates(self, rows: Sequence[CurrencyRate]) -> PersistenceResult:
        result = PersistenceResult()
        if not rows:
            return result
        with self._SessionFactory() as session:
            for row in rows:
                pk = {
                    "tenant_id": row.tenant_id,
                    "location_id": row.location_id,
                    "currency_code": row.currency_code,
                }
                updated_at = row.updated_at or utc_now()
                existing = session.get(_CurrencyRateRow, pk)
                if existing is None:
                    session.add(
                        _CurrencyRateRow(
                            **pk,
                            usd_rate=row.usd_rate,
                            is_custom=row.is_custom,
                            updated_at=updated_at,
                        )
                    )
                    result.inserted += 1
                else:
                    setattr(existing, "usd_rate", row.usd_rate)
                    setattr(existing, "is_custom", row.is_custom)
                    setattr(existing, "updated_at", updated_at)
                    result.updated += 1
            session.commit()
        LOGGER.info(
            "Inserted %s rows, updated %s rows (total %s)",
            result.inserted,
            result.updated,
            result.total,
        )
        return result

    def fetch_rates(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        with self._SessionFactory() as session:
            stmt = (
                select(_CurrencyRateRow)
                .where(_CurrencyRateRow.tenant_id == tenant_id)
                .where(_CurrencyRateRow.location_id == location_id)
                .where(_CurrencyRateRow.currency_code.is_not(None))
                .where(_CurrencyRateRow.usd_rate.is_not(None))
                .order_by(_CurrencyRateRow.currency_code)
            )
            records: list[CurrencyRate] = []
            for model in session.execute(stmt).scalars():
                records.append(
                    CurrencyRate(
                        currency_code=cast(str, model.currency_code),
                        usd_rate=cast(float, model.usd_rate),
                        tenant_id=cast(str, model.tenant_id),
                        location_id=cast(str, model.location_id),
                        is_custom=bool(model.is_custom),
                        updated_at=cast("datetime | None", model.updated_at),
                    )
                )
            return records

    def fetch_currency_codes(self, tenant_id: str, location_id: str) -> list[str]:
        with self._SessionFactory() as session:
            stmt = (
                select(_CurrencyRateRow.currency_code)
                .where(_CurrencyRateRow.tenant_id == tenant_id)
                .where(_CurrencyRateRow.location_id == location_id)
                .where(_CurrencyRateRow.currency_code.is_not(None))
                .distinct()
                .order_by(_CurrencyRateRow.currency_code)
            )
            return [cast(str, code) for code in session.execute(stmt).scalars()]

    def close(self) -> None:  # pragma: no cover - trivial
        self.engine.dispose()

    def __enter__(self) -> "SQLiteManager":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()


__all__ = ["PersistenceResult", "SQLiteManager"]
