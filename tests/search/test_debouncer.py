"""Unit tests for SearchDebouncer.

Timings are scaled down (50 ms debounce) to keep the suite fast; gaps are
chosen with generous margins around the delay.
"""

import asyncio
from collections.abc import Iterator

import pytest

from movieapp.search import SearchDebouncer, SearchState
from movieapp.tmdb import MoviesPage, TMDBClient, TMDBTransportError, TMDBUnauthorizedError
from tests.factories import FakeTMDB, movie_payload, page_payload

DELAY = 0.05
SETTLE = 0.15


class FakeSearch:
    """Search function double with controllable latency and failures."""

    def __init__(self, latency: float = 0.0) -> None:
        self.calls: list[str] = []
        self.latency = latency
        self.error: Exception | None = None
        self.completed: list[str] = []

    async def __call__(self, query: str) -> MoviesPage:
        self.calls.append(query)
        if self.latency:
            await asyncio.sleep(self.latency)
        if self.error is not None:
            raise self.error
        self.completed.append(query)
        return MoviesPage.model_validate(page_payload([movie_payload(1, f"{query} result")]))


@pytest.fixture
def search() -> FakeSearch:
    return FakeSearch()


@pytest.fixture
def debouncer(search: FakeSearch) -> Iterator[SearchDebouncer]:
    controller = SearchDebouncer(search, delay=DELAY)
    yield controller
    controller.close()


@pytest.mark.unit
class TestDebounce:
    @staticmethod
    async def test_rapid_edits_produce_single_call(
        debouncer: SearchDebouncer, search: FakeSearch
    ) -> None:
        for text in ("b", "ba", "bat"):
            debouncer.on_text_changed(text)
            await asyncio.sleep(DELAY / 5)

        await asyncio.sleep(SETTLE)

        assert search.calls == ["bat"]
        assert [m.title for m in debouncer.results] == ["bat result"]

    @staticmethod
    async def test_edit_after_quiet_period_produces_second_call(
        debouncer: SearchDebouncer, search: FakeSearch
    ) -> None:
        debouncer.on_text_changed("bat")
        await asyncio.sleep(SETTLE)
        debouncer.on_text_changed("batman")
        await asyncio.sleep(SETTLE)

        assert search.calls == ["bat", "batman"]

    @staticmethod
    async def test_superseded_query_never_sent(
        debouncer: SearchDebouncer, search: FakeSearch
    ) -> None:
        debouncer.on_text_changed("cat")
        await asyncio.sleep(DELAY / 2)
        debouncer.on_text_changed("dog")
        await asyncio.sleep(SETTLE)

        assert "cat" not in search.calls
        assert search.calls == ["dog"]

    @staticmethod
    async def test_query_is_trimmed(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        debouncer.on_text_changed("  alien  ")
        await asyncio.sleep(SETTLE)
        assert search.calls == ["alien"]

    @staticmethod
    async def test_pending_state_until_timer(debouncer: SearchDebouncer) -> None:
        debouncer.on_text_changed("it")
        assert debouncer.state is SearchState.PENDING
        assert debouncer.query == "it"
        await debouncer.wait_idle()
        assert debouncer.state is SearchState.IDLE
        assert debouncer.has_searched is True


@pytest.mark.unit
class TestBlankQuery:
    @staticmethod
    async def test_blank_resets_everything(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        debouncer.on_text_changed("alien")
        await asyncio.sleep(SETTLE)
        assert debouncer.results

        debouncer.on_text_changed("   ")

        assert debouncer.state is SearchState.IDLE
        assert debouncer.results == ()
        assert debouncer.error is None
        assert debouncer.has_searched is False

    @staticmethod
    async def test_blank_cancels_pending_timer(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        debouncer.on_text_changed("alien")
        debouncer.on_text_changed("")
        await asyncio.sleep(SETTLE)
        assert search.calls == []


@pytest.mark.unit
class TestSubmit:
    @staticmethod
    async def test_submit_bypasses_timer(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        debouncer.on_text_changed("jaws")
        task = debouncer.submit()

        assert task is not None
        assert debouncer.state is SearchState.IN_FLIGHT
        await task

        assert search.calls == ["jaws"]
        await asyncio.sleep(SETTLE)
        assert search.calls == ["jaws"]

    @staticmethod
    async def test_submit_blank_is_noop(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        debouncer.on_text_changed("  ")
        assert debouncer.submit() is None
        assert search.calls == []


@pytest.mark.unit
class TestStaleResults:
    @staticmethod
    async def test_in_flight_request_cancelled_by_new_edit() -> None:
        search = FakeSearch(latency=0.1)
        debouncer = SearchDebouncer(search, delay=DELAY)

        debouncer.on_text_changed("cat")
        await asyncio.sleep(DELAY + 0.02)
        assert debouncer.state is SearchState.IN_FLIGHT

        debouncer.on_text_changed("dog")
        await asyncio.sleep(DELAY + 0.2)

        assert search.calls == ["cat", "dog"]
        assert search.completed == ["dog"]
        assert [m.title for m in debouncer.results] == ["dog result"]
        debouncer.close()

    @staticmethod
    async def test_late_result_for_old_query_discarded() -> None:
        release = asyncio.Event()

        async def stubborn_search(query: str) -> MoviesPage:
            if query == "cat":
                # Ignores cancellation, so its result arrives late.
                try:
                    await release.wait()
                except asyncio.CancelledError:
                    pass
            return MoviesPage.model_validate(page_payload([movie_payload(1, query)]))

        debouncer = SearchDebouncer(stubborn_search, delay=DELAY)
        debouncer.on_text_changed("cat")
        old_task = debouncer.submit()
        await asyncio.sleep(0)
        debouncer.on_text_changed("dog")
        await debouncer.submit()

        release.set()
        await asyncio.gather(old_task, return_exceptions=True)

        assert [m.title for m in debouncer.results] == ["dog"]
        debouncer.close()


@pytest.mark.unit
class TestFailures:
    @staticmethod
    async def test_error_surfaced_and_idle(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        search.error = TMDBUnauthorizedError()
        debouncer.on_text_changed("alien")
        await debouncer.wait_idle()

        assert debouncer.state is SearchState.IDLE
        assert isinstance(debouncer.error, TMDBUnauthorizedError)
        assert debouncer.error_message == "Invalid API key. Please check your TMDb API key."
        assert debouncer.has_searched is True

    @staticmethod
    async def test_unexpected_error_returns_to_idle() -> None:
        async def broken_search(query: str) -> MoviesPage:
            raise RuntimeError("boom")

        debouncer = SearchDebouncer(broken_search, delay=0)
        debouncer.on_text_changed("alien")
        await asyncio.wait_for(debouncer.wait_idle(), timeout=0.5)

        assert debouncer.state is SearchState.IDLE
        assert debouncer.has_searched is True
        assert debouncer.is_searching is False
        debouncer.close()

    @staticmethod
    async def test_unexpected_error_reaches_submitter() -> None:
        async def broken_search(query: str) -> MoviesPage:
            raise RuntimeError("boom")

        debouncer = SearchDebouncer(broken_search, delay=DELAY)
        debouncer.on_text_changed("alien")
        task = debouncer.submit()

        with pytest.raises(RuntimeError, match="boom"):
            await task
        assert debouncer.state is SearchState.IDLE
        debouncer.close()

    @staticmethod
    async def test_no_automatic_retry(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        search.error = TMDBTransportError("offline")
        debouncer.on_text_changed("alien")
        await asyncio.sleep(SETTLE * 2)
        assert search.calls == ["alien"]

    @staticmethod
    async def test_manual_retry_clears_error(debouncer: SearchDebouncer, search: FakeSearch) -> None:
        search.error = TMDBTransportError("offline")
        debouncer.on_text_changed("alien")
        await debouncer.wait_idle()

        search.error = None
        await debouncer.retry()

        assert debouncer.error is None
        assert search.calls == ["alien", "alien"]
        assert debouncer.results


@pytest.mark.unit
class TestTeardown:
    @staticmethod
    async def test_close_cancels_pending(search: FakeSearch) -> None:
        debouncer = SearchDebouncer(search, delay=DELAY)
        debouncer.on_text_changed("alien")
        debouncer.close()
        await asyncio.sleep(SETTLE)
        assert search.calls == []

    @staticmethod
    async def test_no_updates_after_close() -> None:
        search = FakeSearch(latency=0.05)
        updates: list[SearchState] = []
        debouncer = SearchDebouncer(search, delay=0, on_update=lambda d: updates.append(d.state))

        debouncer.on_text_changed("alien")
        debouncer.submit()
        debouncer.close()
        count = len(updates)
        await asyncio.sleep(SETTLE)

        assert len(updates) == count
        assert debouncer.results == ()
        assert debouncer.on_text_changed("more") is None
        assert debouncer.submit() is None


@pytest.mark.unit
class TestWithClient:
    @staticmethod
    async def test_drives_client_search(client: TMDBClient, fake_api: FakeTMDB) -> None:
        fake_api.add("/search/movie", page_payload([movie_payload(694, "The Shining")]))
        debouncer = SearchDebouncer(client.search_movies, delay=DELAY)

        debouncer.on_text_changed("shin")
        debouncer.on_text_changed("shining")
        await asyncio.sleep(SETTLE)

        calls = fake_api.calls("/search/movie")
        assert len(calls) == 1
        assert calls[0].url.params["query"] == "shining"
        assert debouncer.results[0].id == 694
        debouncer.close()
