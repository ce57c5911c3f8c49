"""CLI + helpers for populating (seeding) tenant/location rate tables."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from hotel_fx import HotelFx
from hotel_fx.db.sqlite_manager import PersistenceResult
from hotel_fx.ingestion.models import CurrencyRate, default_currency_rates
from hotel_fx.ingestion.rates_csv import RatesCSVParser
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)

__all__ = ["load_seed_rows", "seed_rates", "parse_args", "main"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--tenant", dest="tenant_id", required=True, help="Tenant identifier")
    parser.add_argument("--location", dest="location_id", required=True, help="Location identifier")
    parser.add_argument(
        "--csv",
        dest="csv_path",
        help="CSV file with currency_code,usd_rate[,is_custom] columns (defaults to USD/LKR/EUR/GBP)",
    )
    parser.add_argument(
        "--db",
        dest="db_url",
        help="Database URL; falls back to HOTEL_FX_DB_URL or the local SQLite file",
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=False,
        help="Parse and report without writing",
    )
    return parser.parse_args(argv)


def load_seed_rows(
    tenant_id: str,
    location_id: str,
    *,
    csv_path: str | Path | None = None,
) -> list[CurrencyRate]:
    """Return rows from ``csv_path`` or the default currency set."""

    if csv_path is None:
        return default_currency_rates(tenant_id, location_id)
    return RatesCSVParser().parse(csv_path, tenant_id=tenant_id, location_id=location_id)


def seed_rates(
    tenant_id: str,
    location_id: str,
    *,
    csv_path: str | Path | None = None,
    db_url: str | None = None,
    dry_run: bool = False,
) -> PersistenceResult:
    """Load a rate table for one tenant/location into the configured backend."""

    rows = load_seed_rows(tenant_id, location_id, csv_path=csv_path)
    if not rows:
        LOGGER.warning("No valid rates found for tenant=%s location=%s", tenant_id, location_id)
        return PersistenceResult()
    if dry_run:
        LOGGER.info(
            "Dry-run enabled; %s rates parsed for tenant=%s location=%s",
            len(rows),
            tenant_id,
            location_id,
        )
        return PersistenceResult()
    with HotelFx(db_config=db_url) as fx:
        fx.ensure_schema()
        result = fx.upsert_rates(rows)
    LOGGER.info(
        "tenant=%s location=%s → inserted %s rows, updated %s rows (total %s)",
        tenant_id,
        location_id,
        result.inserted,
        result.updated,
        result.total,
    )
    return result


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    seed_rates(
        args.tenant_id,
        args.location_id,
        csv_path=args.csv_path,
        db_url=args.db_url,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
