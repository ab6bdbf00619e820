"""Application settings.

Values come from environment variables prefixed ``PEST_CORRELATION_`` or a
local ``.env`` file, e.g.::

    PEST_CORRELATION_DATA_DIR=/var/lib/pest-correlation
    PEST_CORRELATION_OPENWEATHERMAP_API_KEY=...
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the CLI, API, and flows."""

    model_config = SettingsConfigDict(
        env_prefix="PEST_CORRELATION_",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "pest-correlation"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Root of the JSON document store (weather/, detections/, analyses/)
    data_dir: Path = Path("data")

    # Weather fetching
    default_location: str = "Singapore"
    openweathermap_api_key: str = ""
    fetch_interval_hours: int = 6

    # Analysis defaults
    default_window_days: int = 30
    default_list_limit: int = 10

    # HTTP API
    api_host: str = "127.0.0.1"
    api_port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
