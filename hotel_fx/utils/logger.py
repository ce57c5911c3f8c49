"""Logging utilities for the hotel_fx package."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = "hotel_fx", level: str | int | None = None) -> logging.Logger:
    """Return a named logger, configuring the root handler on first use."""
    global _LOGGER
    if _LOGGER is None:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        _LOGGER = logging.getLogger("hotel_fx")
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


def configure_package_logging(level: str | int) -> None:
    """Apply ``level`` to every ``hotel_fx.*`` logger."""

    get_logger("hotel_fx", level)
