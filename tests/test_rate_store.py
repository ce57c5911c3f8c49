from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

import pytest

from hotel_fx.db.base_backend import BackendStrategy
from hotel_fx.db.sqlite_manager import PersistenceResult
from hotel_fx.ingestion.models import DEFAULT_CURRENCY_TABLE, CurrencyRate
from hotel_fx.rates.store import RateStore


class _DummyBackend(BackendStrategy):
    def __init__(self, rows: list[CurrencyRate] | None = None, codes: list[str] | None = None) -> None:
        self.rows = rows or []
        self.codes = codes if codes is not None else sorted({row.currency_code for row in self.rows})

    def ensure_schema(self) -> None:
        return None

    def upsert_rates(self, rows: Sequence[CurrencyRate]) -> PersistenceResult:
        return PersistenceResult(inserted=len(rows))

    def fetch_rates(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        return list(self.rows)

    def fetch_currency_codes(self, tenant_id: str, location_id: str) -> list[str]:
        return list(self.codes)


class _FailingBackend(_DummyBackend):
    def fetch_rates(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        raise RuntimeError("connection refused")

    def fetch_currency_codes(self, tenant_id: str, location_id: str) -> list[str]:
        raise RuntimeError("connection refused")


def _row(code: str, rate: float | None, **kwargs) -> CurrencyRate:
    return CurrencyRate(code, rate, tenant_id="t", location_id="l", **kwargs)


def test_list_available_currencies_is_sorted_and_distinct() -> None:
    store = RateStore(_DummyBackend(codes=["USD", "LKR", "EUR", "LKR"]))

    assert store.list_available_currencies("t", "l") == ["EUR", "LKR", "USD"]


def test_list_available_currencies_falls_back_to_usd(caplog: pytest.LogCaptureFixture) -> None:
    store = RateStore(_FailingBackend())

    with caplog.at_level(logging.ERROR):
        assert store.list_available_currencies("t", "l") == ["USD"]
    assert "Failed to list currencies" in caplog.text


def test_list_available_currencies_empty_table_is_usd_only() -> None:
    store = RateStore(_DummyBackend(codes=[]))

    assert store.list_available_currencies("t", "l") == ["USD"]


def test_fetch_rates_builds_mapping_and_skips_null_rates() -> None:
    store = RateStore(_DummyBackend([_row("USD", 1.0), _row("LKR", 300.0), _row("EUR", None)]))

    assert store.fetch_rates("t", "l") == {"USD": 1.0, "LKR": 300.0}


def test_fetch_rates_defaults_on_failure(caplog: pytest.LogCaptureFixture) -> None:
    store = RateStore(_FailingBackend())

    with caplog.at_level(logging.WARNING):
        assert store.fetch_rates("t", "l") == {"USD": 1.0}
    assert "using defaults" in caplog.text


def test_fetch_rates_defaults_on_empty_result() -> None:
    store = RateStore(_DummyBackend([]))

    assert store.fetch_rates("t", "l") == {"USD": 1.0}


def test_rate_details_returns_sorted_rows() -> None:
    stamp = datetime(2024, 5, 1, 12, 0)
    rows = [_row("USD", 1.0), _row("AED", 3.67, is_custom=True, updated_at=stamp)]
    store = RateStore(_DummyBackend(rows))

    details = store.rate_details("t", "l")

    assert [row.currency_code for row in details] == ["AED", "USD"]
    assert details[0].is_custom is True
    assert details[0].updated_at == stamp


def test_rate_details_defaults_when_unavailable() -> None:
    failing = RateStore(_FailingBackend()).rate_details("t", "l")
    empty = RateStore(_DummyBackend([])).rate_details("t", "l")

    expected = [(code, rate) for code, rate in DEFAULT_CURRENCY_TABLE]
    assert [(row.currency_code, row.usd_rate) for row in failing] == expected
    assert [(row.currency_code, row.usd_rate) for row in empty] == expected
    assert all(row.tenant_id == "t" and row.location_id == "l" for row in failing)
