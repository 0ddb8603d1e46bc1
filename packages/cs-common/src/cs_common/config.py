"""
Environment-based configuration management for CallScript.

Uses pydantic-settings to load configuration values from environment
variables and .env files. The dialogue engine and its scripts import
their settings from this module to ensure consistent configuration
handling.

All environment variables are prefixed with ``CS_`` to avoid collisions.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from ``CS_``-prefixed environment variables.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Render log lines as JSON (``False`` = console renderer).
        catalog_path: Optional JSON catalog document overriding the
            built-in patterns and templates (empty = built-in only).
        catalog_poll_interval_s: Seconds between catalog-file change checks.
    """

    model_config = SettingsConfigDict(
        env_prefix="CS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")
    log_json: bool = Field(default=True, description="Emit JSON log lines.")

    # ── Catalog ──
    catalog_path: str = Field(
        default="",
        description="JSON catalog document path (empty = built-in catalog).",
    )
    catalog_poll_interval_s: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds between catalog-file change checks.",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
