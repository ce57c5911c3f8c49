from __future__ import annotations

from pathlib import Path

import pytest

from hotel_fx import HotelFx
from hotel_fx.seeds import __getattr__ as seeds_getattr
from hotel_fx.seeds import populate_rates


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HOTEL_FX_DB_URL", raising=False)


def _db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'seed.db'}"


def test_seed_defaults_then_update_from_csv(tmp_path: Path) -> None:
    db_url = _db_url(tmp_path)

    first = populate_rates.seed_rates("T", "L", db_url=db_url)
    assert first.inserted == 4
    assert first.updated == 0

    csv_path = tmp_path / "rates.csv"
    csv_path.write_text("currency_code,usd_rate\nLKR,310\nINR,83\n", encoding="utf-8")
    second = populate_rates.seed_rates("T", "L", csv_path=csv_path, db_url=db_url)
    assert second.inserted == 1
    assert second.updated == 1

    with HotelFx(db_config=db_url) as fx:
        assert fx.list_available_currencies("T", "L") == ["EUR", "GBP", "INR", "LKR", "USD"]
        assert fx.get_rates("T", "L")["LKR"] == 310.0


def test_seed_dry_run_writes_nothing(tmp_path: Path) -> None:
    db_url = _db_url(tmp_path)

    result = populate_rates.seed_rates("T", "L", db_url=db_url, dry_run=True)

    assert result.total == 0
    assert not (tmp_path / "seed.db").exists()


def test_seed_with_only_invalid_rows_is_a_no_op(tmp_path: Path) -> None:
    csv_path = tmp_path / "rates.csv"
    csv_path.write_text("currency_code,usd_rate\nLKR,oops\n", encoding="utf-8")

    result = populate_rates.seed_rates("T", "L", csv_path=csv_path, db_url=_db_url(tmp_path))

    assert result.total == 0


def test_main_parses_cli_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def _fake_seed(tenant_id, location_id, **kwargs):
        captured.update(tenant_id=tenant_id, location_id=location_id, **kwargs)

    monkeypatch.setattr(populate_rates, "seed_rates", _fake_seed)

    populate_rates.main(["--tenant", "T", "--location", "L", "--csv", "r.csv", "--dry-run"])

    assert captured == {
        "tenant_id": "T",
        "location_id": "L",
        "csv_path": "r.csv",
        "db_url": None,
        "dry_run": True,
    }


def test_seeds_dunder_getattr_lazy_import() -> None:
    assert seeds_getattr("seed_rates") is populate_rates.seed_rates
    assert seeds_getattr("load_seed_rows") is populate_rates.load_seed_rows

    with pytest.raises(AttributeError):
        seeds_getattr("nonexistent")
