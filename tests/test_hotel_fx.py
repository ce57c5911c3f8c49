from __future__ import annotations

from pathlib import Path

import pytest

import hotel_fx
from hotel_fx import (
    CurrencyRate,
    DatabaseBackend,
    DatabaseConnectionInfo,
    HotelFx,
    HotelFxSettings,
    Transaction,
    TransactionKind,
)
from hotel_fx.db.mysql_backend import MySQLBackend
from hotel_fx.db.postgres_backend import PostgresBackend
from hotel_fx.db.sqlite_backend import SQLiteBackend


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def settings() -> HotelFxSettings:
    return HotelFxSettings(db_url=None, rate_cache_ttl_seconds=300, log_level="INFO")


@pytest.fixture()
def clock() -> _FakeClock:
    return _FakeClock()


@pytest.fixture()
def sqlite_fx(tmp_path: Path, settings: HotelFxSettings, clock: _FakeClock) -> HotelFx:
    fx = HotelFx(DatabaseConnectionInfo.sqlite(tmp_path / "rates.db"), settings=settings, clock=clock)
    fx.upsert_rates(
        [
            CurrencyRate("USD", 1.0, tenant_id="T", location_id="L"),
            CurrencyRate("LKR", 300.0, tenant_id="T", location_id="L"),
            CurrencyRate("EUR", 0.9, tenant_id="T", location_id="L"),
        ]
    )
    return fx


def test_version_is_exposed() -> None:
    assert HotelFx.__version__ == hotel_fx.__version__


def test_sqlite_is_used_by_default_config(sqlite_fx: HotelFx) -> None:
    assert sqlite_fx.uses_local_sqlite()
    assert sqlite_fx.backend == "sqlite"
    assert isinstance(sqlite_fx.backend_strategy, SQLiteBackend)
    assert sqlite_fx.sqlite_manager is not None


def test_end_to_end_conversion(sqlite_fx: HotelFx) -> None:
    assert sqlite_fx.list_available_currencies("T", "L") == ["EUR", "LKR", "USD"]
    assert sqlite_fx.convert(300, "LKR", "USD", "T", "L") == 1
    assert sqlite_fx.convert(1, "USD", "LKR", "T", "L") == 300
    assert sqlite_fx.convert(50, "XXX", "USD", "T", "L") == 50
    assert sqlite_fx.convert(50, "USD", "YYY", "T", "L") == 50


def test_empty_scope_degrades_to_single_currency(sqlite_fx: HotelFx) -> None:
    assert sqlite_fx.list_available_currencies("T", "nowhere") == ["USD"]
    assert sqlite_fx.get_rates("T", "nowhere") == {"USD": 1.0}
    assert sqlite_fx.convert(80, "EUR", "USD", "T", "nowhere") == 80
    assert sqlite_fx.convert(80, "USD", "EUR", "T", "nowhere") == 80


def test_cached_rates_survive_writes_until_ttl(sqlite_fx: HotelFx, clock: _FakeClock) -> None:
    assert sqlite_fx.convert(300, "LKR", "USD", "T", "L") == 1

    sqlite_fx.upsert_rates([CurrencyRate("LKR", 150.0, tenant_id="T", location_id="L")])
    assert sqlite_fx.convert(300, "LKR", "USD", "T", "L") == 1

    clock.now += 301
    assert sqlite_fx.convert(300, "LKR", "USD", "T", "L") == 2


def test_summary_and_formatting(sqlite_fx: HotelFx) -> None:
    summary = sqlite_fx.summarize(
        [
            Transaction(30000, "LKR", TransactionKind.PAYMENT),
            Transaction(45, "EUR", TransactionKind.EXPENSE),
        ],
        tenant_id="T",
        location_id="L",
    )

    assert summary.total_income == 100.0
    assert summary.total_expenses == 50.0
    assert sqlite_fx.format(summary.net_profit, "USD") == "$50.00"
    assert sqlite_fx.format(1500) == "LKR 1,500.00"


def test_rate_details_default_set_for_unknown_scope(sqlite_fx: HotelFx) -> None:
    details = sqlite_fx.rate_details("T", "nowhere")

    assert [row.currency_code for row in details] == ["USD", "LKR", "EUR", "GBP"]


def test_db_url_from_settings(tmp_path: Path) -> None:
    db_path = tmp_path / "from_settings.db"
    settings = HotelFxSettings(db_url=f"sqlite:///{db_path}")

    fx = HotelFx(settings=settings)

    assert fx.connection_info.name == str(db_path)
    assert db_path.exists()
    fx.close()


@pytest.mark.parametrize(
    "url, backend_type",
    [
        ("postgresql://localhost/hotel", PostgresBackend),
        ("postgres://localhost/hotel", PostgresBackend),
        ("mysql://root@localhost:3306/hotel", MySQLBackend),
    ],
)
def test_external_relational_backends_are_selected(
    url: str, backend_type: type, settings: HotelFxSettings
) -> None:
    fx = HotelFx(db_config=url, settings=settings)

    assert isinstance(fx.backend_strategy, backend_type)
    assert fx.sqlite_manager is None
    assert not fx.uses_local_sqlite()


def test_accepts_prebuilt_config(settings: HotelFxSettings) -> None:
    config = DatabaseConnectionInfo.from_url("postgresql://db/hotel")

    fx = HotelFx(db_config=config, settings=settings)

    assert fx.connection_info is config
    assert fx.connection_info.backend is DatabaseBackend.POSTGRES


def test_invalid_url_is_rejected(settings: HotelFxSettings) -> None:
    with pytest.raises(ValueError):
        HotelFx(db_config="localhost:3306/hotel", settings=settings)


def test_connection_reports_success_for_sqlite(sqlite_fx: HotelFx) -> None:
    assert sqlite_fx.connection() == (True, None)


def test_missing_driver_message_includes_hint(settings: HotelFxSettings) -> None:
    fx = HotelFx(db_config="postgresql://localhost/hotel", settings=settings)

    message = fx._missing_driver_message(ModuleNotFoundError("No module", name="psycopg2"))

    assert "psycopg2" in message
    assert "pip install psycopg2-binary" in message


def test_package_seed_wrapper_delegates(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple] = []

    def _fake(*args, **kwargs):
        calls.append((args, kwargs))
        return "seeded"

    monkeypatch.setattr("hotel_fx.seeds.populate_rates.seed_rates", _fake)

    assert hotel_fx.seed_rates("T", "L", dry_run=True) == "seeded"
    assert calls == [(("T", "L"), {"dry_run": True})]
