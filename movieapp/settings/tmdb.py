"""TMDB API configuration settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEY = "YOUR_API_KEY_HERE"


class TMDBSettings(BaseSettings):
    """TMDB API configuration.

    Attributes:
        api_key: TMDB API key, sent as the ``api_key`` query parameter.
        base_url: TMDB API base URL.
        timeout: Per-request timeout in seconds.
        user_agent: HTTP User-Agent header.
    """

    api_key: str = Field(default="", alias="TMDB_API_KEY")
    base_url: str = Field(
        default="https://api.themoviedb.org/3",
        alias="TMDB_BASE_URL",
    )
    timeout: float = Field(default=30.0, alias="TMDB_TIMEOUT")
    user_agent: str = Field(
        default="movieapp/1.0 (+https://www.themoviedb.org)",
        alias="USER_AGENT",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_configured(self) -> bool:
        """Check if TMDB API key is configured."""
        return bool(self.api_key and self.api_key != PLACEHOLDER_API_KEY)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoints are appended with a leading slash."""
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("TMDB_TIMEOUT must be > 0")
        return v
