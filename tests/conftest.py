"""Fixtures pytest partagées: fake TMDB API and sample payloads."""

import json
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest

from movieapp.favorites import FavoritesStore, JSONPreferenceStore
from movieapp.settings import TMDBSettings
from movieapp.tmdb import TMDBClient
from tests.factories import FakeTMDB

# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Variables env pour tests reproductibles."""
    monkeypatch.setenv("TMDB_API_KEY", "test_api_key_12345678901234567890")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "INFO")

@pytest.fixture
def tmdb_settings() -> TMDBSettings:
    return TMDBSettings(api_key="test_key", base_url="https://api.themoviedb.org/3")

@pytest.fixture
def fake_api() -> FakeTMDB:
    return FakeTMDB()

@pytest.fixture
async def client(tmdb_settings: TMDBSettings, fake_api: FakeTMDB) -> AsyncIterator[TMDBClient]:
    """Client TMDB branché sur la fausse API."""
    async with TMDBClient(tmdb_settings, transport=fake_api.transport) as tmdb_client:
        yield tmdb_client

@pytest.fixture
def preferences_file(tmp_path: Path) -> Path:
    return tmp_path / "prefs" / "preferences.json"

@pytest.fixture
def preference_store(preferences_file: Path) -> JSONPreferenceStore:
    return JSONPreferenceStore(preferences_file)

@pytest.fixture
def favorites_store(preference_store: JSONPreferenceStore) -> FavoritesStore:
    return FavoritesStore(preference_store, key="FavoriteMovies")

@pytest.fixture
def read_json() -> Callable[[Path], Any]:
    def _read(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    return _read
