"""Tests for the command line entry point."""

from pathlib import Path

import pytest

import movieapp.__main__ as cli
from movieapp.settings import TMDBSettings, settings
from movieapp.tmdb import TMDBClient
from tests.factories import FakeTMDB, detail_payload, movie_payload, page_payload


@pytest.fixture
def cli_api(
    monkeypatch: pytest.MonkeyPatch,
    tmdb_settings: TMDBSettings,
    fake_api: FakeTMDB,
    tmp_path: Path,
) -> FakeTMDB:
    """Point the CLI at the fake API and a temporary favorites file."""
    monkeypatch.setattr(
        cli, "TMDBClient", lambda: TMDBClient(tmdb_settings, transport=fake_api.transport)
    )
    monkeypatch.setattr(settings.favorites, "storage_file", tmp_path / "preferences.json")
    return fake_api


class TestListings:
    @staticmethod
    def test_popular(cli_api: FakeTMDB, capsys: pytest.CaptureFixture[str]) -> None:
        cli_api.add(
            "/movie/popular",
            page_payload([movie_payload(694, "The Shining")], page=2, total_pages=4),
        )

        assert cli.main(["popular", "--page", "2"]) == 0

        out = capsys.readouterr().out
        assert "The Shining (1980)" in out
        assert "Page 2/4" in out
        assert cli_api.requests[0].url.params["page"] == "2"

    @staticmethod
    def test_search(cli_api: FakeTMDB, capsys: pytest.CaptureFixture[str]) -> None:
        cli_api.add("/search/movie", page_payload([movie_payload(348, "Alien")]))

        assert cli.main(["search", "alien"]) == 0

        assert "Alien" in capsys.readouterr().out
        assert cli_api.requests[0].url.params["query"] == "alien"


class TestErrors:
    @staticmethod
    def test_unauthorized_exit_code(cli_api: FakeTMDB, capsys: pytest.CaptureFixture[str]) -> None:
        cli_api.add("/movie/upcoming", {"status_message": "Invalid API key"}, status=401)

        assert cli.main(["upcoming"]) == 1

        assert "Invalid API key. Please check your TMDb API key." in capsys.readouterr().err

    @staticmethod
    def test_upstream_error_message(cli_api: FakeTMDB, capsys: pytest.CaptureFixture[str]) -> None:
        cli_api.add("/movie/top_rated", {}, status=503)

        assert cli.main(["top-rated"]) == 1

        assert "Network error: HTTP 503" in capsys.readouterr().err


class TestFavorites:
    @staticmethod
    def test_empty_list(cli_api: FakeTMDB, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["favorites", "list"]) == 0
        assert "No Favorites Yet" in capsys.readouterr().out
        assert cli_api.requests == []

    @staticmethod
    def test_toggle_then_list(cli_api: FakeTMDB, capsys: pytest.CaptureFixture[str]) -> None:
        cli_api.add("/movie/694", detail_payload(694, "The Shining"))
        cli_api.add("/movie/348", detail_payload(348, "Alien"))

        assert cli.main(["favorites", "toggle", "694"]) == 0
        assert cli.main(["favorites", "toggle", "348"]) == 0
        assert cli.main(["favorites", "list"]) == 0

        out = capsys.readouterr().out
        assert "Added 694" in out
        assert out.index("Alien") < out.index("The Shining")

    @staticmethod
    def test_toggle_twice_removes(cli_api: FakeTMDB, capsys: pytest.CaptureFixture[str]) -> None:
        cli.main(["favorites", "toggle", "694"])
        cli.main(["favorites", "toggle", "694"])

        assert "Removed 694" in capsys.readouterr().out

    @staticmethod
    def test_toggle_rejects_non_positive_id(cli_api: FakeTMDB) -> None:
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["favorites", "toggle", "0"])
        assert exc_info.value.code == 2
