"""Data models shared by the backends, the rate store and the seeders."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator, Mapping

from hotel_fx.currency import PIVOT_CURRENCY


@dataclass(frozen=True, slots=True)
class RateScope:
    """The (tenant, location) pair that selects one rate table."""

    tenant_id: str
    location_id: str


@dataclass(slots=True)
class CurrencyRate:
    """One row of a tenant/location rate table.

    ``usd_rate`` is the number of ``currency_code`` units that buy 1 USD, so
    ``LKR`` at ``300.0`` reads "1 USD = 300 LKR". A row may exist without a
    rate yet; such rows list the currency but never take part in conversion.
    """

    currency_code: str
    usd_rate: float | None
    tenant_id: str
    location_id: str
    is_custom: bool = False
    updated_at: datetime | None = None

    @property
    def scope(self) -> RateScope:
        return RateScope(self.tenant_id, self.location_id)


class CurrencyRates(Mapping[str, float]):
    """Read-only ``currency_code -> usd_rate`` mapping for a single scope."""

    __slots__ = ("_rates",)

    def __init__(self, rates: Mapping[str, float] | Iterable[tuple[str, float]] = ()) -> None:
        self._rates: dict[str, float] = {code: float(rate) for code, rate in dict(rates).items()}

    @classmethod
    def from_records(cls, records: Iterable[CurrencyRate]) -> "CurrencyRates":
        return cls(
            (record.currency_code, record.usd_rate)
            for record in records
            if record.currency_code and record.usd_rate is not None
        )

    @classmethod
    def default(cls) -> "CurrencyRates":
        """Single-currency table used whenever the store cannot supply rates."""

        return cls({PIVOT_CURRENCY: 1.0})

    def __getitem__(self, code: str) -> float:
        return self._rates[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"CurrencyRates({self._rates!r})"


# Currencies offered when a tenant/location has not configured its own table.
DEFAULT_CURRENCY_TABLE: tuple[tuple[str, float], ...] = (
    ("USD", 1.0),
    ("LKR", 300.0),
    ("EUR", 0.85),
    ("GBP", 0.75),
)


def default_currency_rates(tenant_id: str, location_id: str) -> list[CurrencyRate]:
    """Return :data:`DEFAULT_CURRENCY_TABLE` as rows for the given scope."""

    return [
        CurrencyRate(
            currency_code=code,
            usd_rate=rate,
            tenant_id=tenant_id,
            location_id=location_id,
        )
        for code, rate in DEFAULT_CURRENCY_TABLE
    ]


__all__ = [
    "CurrencyRate",
    "CurrencyRates",
    "DEFAULT_CURRENCY_TABLE",
    "RateScope",
    "default_currency_rates",
]
