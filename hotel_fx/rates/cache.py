"""Time-bounded in-memory cache of rate tables, keyed by rate scope."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from hotel_fx.config import DEFAULT_RATE_CACHE_TTL_SECONDS
from hotel_fx.ingestion.models import CurrencyRates, RateScope
from hotel_fx.rates.store import RateStore
from hotel_fx.utils.logger import get_logger

LOGGER = get_logger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    scope: RateScope
    rates: CurrencyRates
    fetched_at: float


class RateCache:
    """Serve rate tables from memory until they are ``ttl_seconds`` old.

    Entries are only replaced by expiry, never merged or invalidated by hand.
    A default table returned by a failing store is cached like any other, so a
    backend outage keeps conversions on defaults for up to one TTL window.

    The lock covers the entry map only; the store call runs unlocked, so two
    threads missing the same scope may both fetch and the later write wins.
    """

    def __init__(
        self,
        store: RateStore,
        *,
        ttl_seconds: float = DEFAULT_RATE_CACHE_TTL_SECONDS,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[RateScope, CacheEntry] = {}
        self._lock = threading.Lock()

    def get_rates(self, tenant_id: str, location_id: str) -> CurrencyRates:
        scope = RateScope(tenant_id, location_id)
        with self._lock:
            entry = self._entries.get(scope)
        if entry is not None and entry.rates and self._is_fresh(entry):
            return entry.rates

        LOGGER.debug("Refreshing currency rates for tenant=%s location=%s", tenant_id, location_id)
        rates = self.store.fetch_rates(tenant_id, location_id)
        with self._lock:
            self._entries[scope] = CacheEntry(scope=scope, rates=rates, fetched_at=self._clock())
        return rates

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self.ttl_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheEntry", "Clock", "RateCache"]
