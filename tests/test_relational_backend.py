"""Relational backend integration tests using SQLite."""

from datetime import datetime
from pathlib import Path
from typing import Any

from hotel_fx.db.mysql_backend import MySQLBackend
from hotel_fx.db.postgres_backend import PostgresBackend
from hotel_fx.db.relational_backend import RelationalBackend, _normalise_timestamp
from hotel_fx.ingestion.models import CurrencyRate


def _row(code: str, rate: float | None, **kwargs: Any) -> CurrencyRate:
    return CurrencyRate(code, rate, tenant_id="t", location_id="l", **kwargs)


def test_relational_backend_roundtrip(tmp_path: Path) -> None:
    backend = RelationalBackend(f"sqlite:///{tmp_path / 'relational.db'}")
    backend.ensure_schema()

    result = backend.upsert_rates([_row("USD", 1.0), _row("LKR", 300.0), _row("XTS", None)])
    assert result.inserted == 3
    assert result.updated == 0

    update_result = backend.upsert_rates([_row("LKR", 310.0, is_custom=True)])
    assert update_result.inserted == 0
    assert update_result.updated == 1

    rows = backend.fetch_rates("t", "l")
    assert [row.currency_code for row in rows] == ["LKR", "USD"]
    assert rows[0].usd_rate == 310.0
    assert rows[0].is_custom is True
    assert isinstance(rows[0].updated_at, datetime)
    assert backend.fetch_currency_codes("t", "l") == ["LKR", "USD", "XTS"]
    assert backend.fetch_rates("other", "l") == []

    backend.close()


def test_normalise_timestamp_handles_multiple_input_types() -> None:
    stamp = datetime(2024, 5, 2, 15, 0)
    assert _normalise_timestamp(None) is None
    assert _normalise_timestamp(stamp) is stamp
    assert _normalise_timestamp("2024-05-02 15:00:00") == stamp


class _FakeResult:
    def __init__(self, *, scalar: Any = None, rowcount: int = 0) -> None:
        self._scalar = scalar
        self.rowcount = rowcount

    def scalar(self) -> Any:
        return self._scalar


class _FakeConnection:
    def __init__(self, result: _FakeResult) -> None:
        self.result = result
        self.statements: list[str] = []

    def execute(self, statement: Any, params: dict[str, Any]) -> _FakeResult:
        self.statements.append(str(statement))
        return self.result


def test_postgres_upsert_reads_insert_flag() -> None:
    backend = PostgresBackend("postgresql://localhost/hotel")
    inserted = _FakeConnection(_FakeResult(scalar=True))
    updated = _FakeConnection(_FakeResult(scalar=False))

    assert backend._upsert_row(inserted, {}) is True  # type: ignore[arg-type]
    assert backend._upsert_row(updated, {}) is False  # type: ignore[arg-type]
    assert "ON CONFLICT" in inserted.statements[0]


def test_mysql_upsert_reads_affected_rows() -> None:
    backend = MySQLBackend("mysql://localhost/hotel")

    assert backend._upsert_row(_FakeConnection(_FakeResult(rowcount=1)), {}) is True  # type: ignore[arg-type]
    assert backend._upsert_row(_FakeConnection(_FakeResult(rowcount=2)), {}) is False  # type: ignore[arg-type]
    assert backend._upsert_row(_FakeConnection(_FakeResult(rowcount=0)), {}) is False  # type: ignore[arg-type]
