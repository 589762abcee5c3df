"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class AppSettings(BaseSettings):
    """Application-wide configuration, mostly admission control."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on every route",
    )
    rate_limit_capacity: int = Field(
        3,
        description="Token bucket capacity (maximum burst) per client",
        ge=1,
    )
    rate_limit_refill_per_second: float = Field(
        1.0,
        description="Tokens added to each bucket per second (continuous refill)",
        gt=0,
    )
    rate_limit_max_keys: int | None = Field(
        10_000,
        description="Maximum tracked clients; least recently used are evicted",
        ge=1,
    )
    rate_limit_idle_ttl_seconds: float | None = Field(
        None,
        description="Idle time after which a bucket is swept (default: full refill time)",
        gt=0,
    )
    rate_limit_sweep_interval_seconds: float = Field(
        60.0,
        description="Minimum time between two idle-bucket sweeps",
        gt=0,
    )
    rate_limit_key_mode: Literal["address", "host"] = Field(
        "address",
        description=(
            "How the client identity is derived: 'address' keys on host:port "
            "as seen by the server, 'host' drops the port"
        ),
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class FeedSettings(BaseSettings):
    """External launch schedule feed."""

    url: str = Field(
        "https://api.spacexdata.com/v4/launches",
        description="URL returning the full list of scheduled launches as JSON",
    )
    timeout_seconds: float = Field(
        10.0,
        description="HTTP timeout for a single feed fetch",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="FEED_",
        case_sensitive=False,
    )


class DatabaseSettings(BaseSettings):
    """Relational storage for destinations and bookings."""

    url: str = Field(
        "sqlite:///./space_booking.db",
        description="SQLAlchemy database URL (e.g. postgresql+psycopg://user:pw@host/db)",
    )
    echo: bool = Field(
        False,
        description="Log every SQL statement (SQLAlchemy echo)",
    )
    seed_destinations: bool = Field(
        True,
        description="Insert the default destinations when the table is empty",
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field(
        "json",
        description="Log line format",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Where log records are written",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output=file (default logs/app.log)",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size; 0 disables rotation",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Rotated files to keep",
        ge=0,
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class ServerSettings(BaseSettings):
    """Bind address used by ``python -m space_booking``."""

    host: str = Field("0.0.0.0", description="Interface to listen on")
    port: int = Field(8080, description="TCP port to listen on", ge=1, le=65535)

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a setting is malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    feed: FeedSettings = Field(default_factory=FeedSettings)
    db: DatabaseSettings = Field(default_factory=DatabaseSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
