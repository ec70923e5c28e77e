"""Centralized configuration for the movie client.

All configuration values are sourced from environment variables (.env file)
and fall back to safe defaults, except the TMDB API key which must be set
for any upstream call to succeed.

Usage:
    from movieapp.settings import settings

    settings.tmdb.api_key
    settings.search.debounce_seconds
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from movieapp.settings.app import CacheSettings, FavoritesSettings, SearchSettings
from movieapp.settings.base import LoggingSettings, PathsSettings
from movieapp.settings.tmdb import TMDBSettings

__all__ = [
    "Settings",
    "settings",
    "PathsSettings",
    "LoggingSettings",
    "TMDBSettings",
    "SearchSettings",
    "FavoritesSettings",
    "CacheSettings",
    "get_masked_settings",
]


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Global application settings.

    Aggregates all configuration sections into a single object.
    Access via the shared instance: `from movieapp.settings import settings`
    """

    environment: str = Field(default="development", alias="ENVIRONMENT")

    paths: PathsSettings = Field(default_factory=PathsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    favorites: FavoritesSettings = Field(default_factory=FavoritesSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        valid_envs = {"development", "production", "test"}
        v_lower = v.lower()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid ENVIRONMENT. Valid: {valid_envs}")
        return v_lower


# =============================================================================
# SHARED INSTANCE
# =============================================================================

settings = Settings()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_masked_settings() -> dict[str, Any]:
    """Return settings dict with sensitive values masked.

    Returns:
        Configuration dictionary safe for logging.
    """
    config = settings.model_dump()
    if config["tmdb"].get("api_key"):
        config["tmdb"]["api_key"] = "***MASKED***"
    return config
