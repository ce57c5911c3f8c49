"""Rate-table seeding utilities for :mod:`hotel_fx`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__all__ = ["seed_rates", "load_seed_rows"]

if TYPE_CHECKING:  # pragma: no cover - import only for static analyzers
    from hotel_fx.seeds.populate_rates import load_seed_rows as load_seed_rows
    from hotel_fx.seeds.populate_rates import seed_rates as seed_rates


def __getattr__(name: str) -> Any:
    """Lazily expose seed helpers so importing the package stays cheap."""

    if name in {"seed_rates", "load_seed_rows"}:
        from hotel_fx.seeds import populate_rates

        return getattr(populate_rates, name)
    raise AttributeError(f"module 'hotel_fx.seeds' has no attribute {name}")
