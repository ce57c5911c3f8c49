"""USD-pivot currency conversion."""

from __future__ import annotations

from typing import Mapping

from hotel_fx.currency import PIVOT_CURRENCY
from hotel_fx.rates.cache import RateCache
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)


class Converter:
    """Convert amounts between currencies through USD.

    A missing source rate leaves the amount untouched, while a missing target
    rate yields the USD value. Both fallbacks log a warning and neither raises.
    Results are not rounded; aggregate first and round for display.
    """

    def __init__(self, cache: RateCache) -> None:
        self.cache = cache

    def convert(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        tenant_id: str,
        location_id: str,
    ) -> float:
        if from_currency == to_currency:
            return amount
        try:
            rates = self.cache.get_rates(tenant_id, location_id)
            return self._pivot(amount, from_currency, to_currency, rates)
        except Exception:
            LOGGER.exception(
                "Currency conversion %s -> %s failed, returning original amount",
                from_currency,
                to_currency,
            )
            return amount

    def convert_with_rates(
        self,
        amount: float,
        from_currency: str,
        to_currency: str,
        rates: Mapping[str, float],
    ) -> float:
        """Convert against an already fetched rate table."""

        if from_currency == to_currency:
            return amount
        try:
            return self._pivot(amount, from_currency, to_currency, rates)
        except Exception:
            LOGGER.exception(
                "Currency conversion %s -> %s failed, returning original amount",
                from_currency,
                to_currency,
            )
            return amount

    @staticmethod
    def _pivot(
        amount: float,
        from_currency: str,
        to_currency: str,
        rates: Mapping[str, float],
    ) -> float:
        if from_currency == PIVOT_CURRENCY:
            usd_amount = amount
        else:
            from_rate = rates.get(from_currency)
            if from_rate is None:
                LOGGER.warning("Exchange rate not found for %s", from_currency)
                return amount
            usd_amount = amount / from_rate

        if to_currency == PIVOT_CURRENCY:
            return usd_amount
        to_rate = rates.get(to_currency)
        if to_rate is None:
            LOGGER.warning("Exchange rate not found for %s, returning USD amount", to_currency)
            return usd_amount
        return usd_amount * to_rate


__all__ = ["Converter"]
