"""Rate lookup and caching for :mod:`hotel_fx`."""

from __future__ import annotations

from hotel_fx.rates.cache import RateCache
from hotel_fx.rates.store import RateStore

__all__ = ["RateCache", "RateStore"]
