"""CSV helpers for importing and exporting rate tables."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Sequence, cast

from hotel_fx.ingestion.models import CurrencyRate
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)

CSV_HEADER = ("currency_code", "usd_rate")
OPTIONAL_COLUMNS = ("is_custom",)
_TRUTHY = {"1", "true", "yes", "y"}


class RatesCSVExporter:
    """Write one scope's rate rows into a CSV file."""

    def write(
        self,
        records: Sequence[CurrencyRate],
        *,
        output_dir: Path | None = None,
    ) -> Path:
        if not records:
            raise ValueError("records collection is empty")
        scope = records[0].scope
        directory = Path(output_dir) if output_dir else Path.cwd()
        directory.mkdir(parents=True, exist_ok=True)
        csv_path = directory / f"currency_rates_{scope.tenant_id}_{scope.location_id}.csv"
        with csv_path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow((*CSV_HEADER, *OPTIONAL_COLUMNS))
            for record in sorted(records, key=lambda row: row.currency_code):
                rate = "" if record.usd_rate is None else f"{record.usd_rate}"
                writer.writerow((record.currency_code, rate, "true" if record.is_custom else "false"))
        return csv_path


class RatesCSVParser:
    """Parse ``currency_code,usd_rate[,is_custom]`` files into rate rows."""

    def parse(self, csv_path: str | Path, *, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(path)

        with path.open("r", newline="", encoding="utf-8") as handle:
            reader = csv.DictReader(handle)
            reader.fieldnames = self._validate_header(reader.fieldnames)
            rows: list[CurrencyRate] = []
            for line in reader:
                code = (line.get("currency_code") or "").strip().upper()
                if not code:
                    continue
                rate_raw = line.get("usd_rate")
                try:
                    rate = float(cast(str, rate_raw))
                except (TypeError, ValueError):
                    LOGGER.warning("Skipping %s: invalid usd_rate %r", code, rate_raw)
                    continue
                if rate <= 0:
                    LOGGER.warning("Skipping %s: usd_rate must be positive", code)
                    continue
                is_custom = (line.get("is_custom") or "").strip().lower() in _TRUTHY
                rows.append(
                    CurrencyRate(
                        currency_code=code,
                        usd_rate=rate,
                        tenant_id=tenant_id,
                        location_id=location_id,
                        is_custom=is_custom,
                    )
                )
        return rows

    @staticmethod
    def _validate_header(fieldnames: Iterable[str] | None) -> list[str]:
        if not fieldnames:
            raise ValueError("CSV file does not contain a header row")
        normalized = [field.strip().lower() for field in fieldnames]
        if normalized[: len(CSV_HEADER)] != list(CSV_HEADER):
            raise ValueError("Unexpected CSV header format")
        return normalized


__all__ = ["CSV_HEADER", "RatesCSVExporter", "RatesCSVParser"]
