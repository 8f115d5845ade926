"""Centralized application configuration using Pydantic settings."""
from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven configuration for the booking service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    data_file: Path = Field(default=Path("bookings.json"), description="JSON snapshot holding all bookings")
    storage_backend: Literal["json", "sql"] = Field(default="json", description="Where booking snapshots are kept")
    database_url: str = Field(
        default="sqlite:///./roomboard.db",
        description="SQLAlchemy database URL, used when storage_backend is 'sql'.",
    )

    start_hour: int = Field(default=7, ge=0, le=23, description="First bookable hour of the day")
    end_hour: int = Field(default=22, ge=1, le=23, description="Hour at which the bookable day ends")
    slot_minutes: int = Field(default=30, description="Height of one calendar row in minutes")
    slot_height_px: int = Field(default=28, description="Pixel height of one calendar row, shared with the stylesheet")
    snap_minutes: int = Field(default=15, description="Granularity of booking times and drag snapping")

    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    default_rate_limit: str = Field(default="120/minute", description="Global rate limiting rule")
    rate_limiting_enabled: bool = Field(default=True, description="Toggle to disable SlowAPI limits (useful in tests)")
    bookings_cache_ttl: int = Field(
        default=30,
        description="TTL (s) for cached booking list queries; 0 disables caching",
    )
    log_dir: Path = Field(default=Path("logs"), description="Directory for HTTP audit logs")

    bookings_service_port: int = 4000


@lru_cache
def get_settings() -> Settings:
    """Return a cached instance of the Settings object."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the cached Settings instance (useful for tests)."""

    get_settings.cache_clear()
