"""CLI entry point for seeding currency rate tables."""

from __future__ import annotations

from hotel_fx.seeds.populate_rates import main

if __name__ == "__main__":  # pragma: no cover - thin wrapper
    main()
