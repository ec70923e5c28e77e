"""Client-side behaviour settings.

Search debounce, favorites persistence and runtime cache.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from movieapp.settings.base import get_project_root


class SearchSettings(BaseSettings):
    """Search-as-you-type configuration.

    Attributes:
        debounce_seconds: Quiet period before a query is sent upstream.
    """

    debounce_seconds: float = Field(default=0.5, alias="SEARCH_DEBOUNCE_SECONDS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("debounce_seconds")
    @classmethod
    def validate_debounce(cls, v: float) -> float:
        """Validate debounce delay is not negative."""
        if v < 0:
            raise ValueError("SEARCH_DEBOUNCE_SECONDS must be >= 0")
        return v


class FavoritesSettings(BaseSettings):
    """Favorites persistence configuration.

    Attributes:
        storage_file: JSON document holding persisted preferences.
        storage_key: Name of the value holding favorite movie ids.
    """

    storage_file: Path = Field(
        default_factory=lambda: get_project_root() / "data" / "preferences.json",
        alias="FAVORITES_FILE",
    )
    storage_key: str = Field(default="FavoriteMovies", alias="FAVORITES_KEY")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


class CacheSettings(BaseSettings):
    """Runtime backfill cache configuration."""

    runtime_ttl_seconds: float = Field(default=300.0, alias="RUNTIME_CACHE_TTL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
