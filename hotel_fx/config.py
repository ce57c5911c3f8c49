"""Environment driven settings for hotel_fx."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RATE_CACHE_TTL_SECONDS = 300.0
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class HotelFxSettings(BaseSettings):
    """Runtime configuration read from ``HOTEL_FX_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="HOTEL_FX_", extra="ignore")

    db_url: str | None = None  # falls back to the local SQLite file
    rate_cache_ttl_seconds: float = Field(default=DEFAULT_RATE_CACHE_TTL_SECONDS, gt=0)
    log_level: str = "INFO"
    default_display_currency: str = "LKR"

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return level

    @field_validator("default_display_currency")
    @classmethod
    def _normalise_currency(cls, value: str) -> str:
        return value.strip().upper()


def load_settings() -> HotelFxSettings:
    """Build settings from the current process environment."""

    return HotelFxSettings()


__all__ = ["DEFAULT_RATE_CACHE_TTL_SECONDS", "HotelFxSettings", "load_settings"]
