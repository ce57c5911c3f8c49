"""Helpers for locating the default SQLite rate database."""

from __future__ import annotations

from pathlib import Path
from typing import Final

__all__ = ["DEFAULT_SQLITE_DB_PATH", "default_sqlite_path"]

# Resolved next to this module so the path does not depend on the working
# directory of the calling process.
DEFAULT_SQLITE_DB_PATH: Final[Path] = Path(__file__).resolve().with_name("currency_rates.db")


def default_sqlite_path() -> Path:
    """Return the absolute path of the default ``currency_rates.db`` file."""

    return DEFAULT_SQLITE_DB_PATH
