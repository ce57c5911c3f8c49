"""Read access to the per-tenant, per-location rate tables."""

from __future__ import annotations

from hotel_fx.currency import PIVOT_CURRENCY
from hotel_fx.db.base_backend import BackendStrategy
from hotel_fx.ingestion.models import CurrencyRate, CurrencyRates, default_currency_rates
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)


class RateStore:
    """Fetches currency codes and USD-pivot rates from a backend.

    Every public method swallows backend failures and returns a usable
    default, so callers rendering reports never see an exception from here.
    """

    def __init__(self, backend: BackendStrategy) -> None:
        self.backend = backend

    def list_available_currencies(self, tenant_id: str, location_id: str) -> list[str]:
        """Return the distinct currency codes of a scope in lexicographic order.

        A scope without any rows is treated as single-currency (``["USD"]``).
        """

        try:
            codes = self.backend.fetch_currency_codes(tenant_id, location_id)
        except Exception:
            LOGGER.exception(
                "Failed to list currencies for tenant=%s location=%s", tenant_id, location_id
            )
            return [PIVOT_CURRENCY]
        return sorted(set(codes)) or [PIVOT_CURRENCY]

    def fetch_rates(self, tenant_id: str, location_id: str) -> CurrencyRates:
        """Return the scope's ``currency_code -> usd_rate`` table."""

        try:
            records = self.backend.fetch_rates(tenant_id, location_id)
        except Exception as exc:
            LOGGER.warning(
                "Failed to fetch currency rates for tenant=%s location=%s, using defaults: %s",
                tenant_id,
                location_id,
                exc,
            )
            return CurrencyRates.default()
        rates = CurrencyRates.from_records(records)
        if not rates:
            LOGGER.warning(
                "No currency rates configured for tenant=%s location=%s, using defaults",
                tenant_id,
                location_id,
            )
            return CurrencyRates.default()
        return rates

    def rate_details(self, tenant_id: str, location_id: str) -> list[CurrencyRate]:
        """Return full rate rows for currency pickers, or the default currency set."""

        try:
            records = self.backend.fetch_rates(tenant_id, location_id)
        except Exception:
            LOGGER.exception(
                "Error loading currencies for tenant=%s location=%s", tenant_id, location_id
            )
            return default_currency_rates(tenant_id, location_id)
        if not records:
            return default_currency_rates(tenant_id, location_id)
        return sorted(records, key=lambda record: record.currency_code)


__all__ = ["RateStore"]
