"""Debounced search-as-you-type controller.

Text edits arm a timer; only a query that survives the quiet period (or an
explicit submit) reaches the API. Each edit starts a new generation, and
work tagged with an older generation can never write state.

States:
    IDLE: nothing scheduled or running.
    PENDING: timer armed for the current query.
    IN_FLIGHT: search request running for the current query.
"""

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum

from movieapp.settings import settings
from movieapp.tmdb.errors import TMDBClientError
from movieapp.tmdb.schemas import MoviesPage, MovieSummary
from movieapp.utils.logger import setup_logger

logger = setup_logger("movieapp.search.debouncer")

SearchFunction = Callable[[str], Awaitable[MoviesPage]]


class SearchState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    IN_FLIGHT = "in_flight"


class SearchDebouncer:
    """Coalesce rapid query edits into a minimal set of search calls.

    Must be driven from within a running event loop.

    Attributes:
        delay: Quiet period in seconds before a query is dispatched.
    """

    def __init__(
        self,
        search: SearchFunction,
        delay: float | None = None,
        on_update: Callable[["SearchDebouncer"], None] | None = None,
    ) -> None:
        """Initialize search debouncer.

        Args:
            search: Coroutine function performing the upstream search.
            delay: Debounce delay. Defaults to SEARCH_DEBOUNCE_SECONDS.
            on_update: Called after every visible state change.
        """
        self.delay = settings.search.debounce_seconds if delay is None else delay
        self._search = search
        self._on_update = on_update

        self._state = SearchState.IDLE
        self._text = ""
        self._query: str | None = None
        self._results: tuple[MovieSummary, ...] = ()
        self._error: TMDBClientError | None = None
        self._has_searched = False

        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._closed = False

    # -------------------------------------------------------------------------
    # Observable state
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def text(self) -> str:
        return self._text

    @property
    def query(self) -> str | None:
        """Query currently pending or in flight."""
        return self._query

    @property
    def results(self) -> tuple[MovieSummary, ...]:
        return self._results

    @property
    def error(self) -> TMDBClientError | None:
        return self._error

    @property
    def error_message(self) -> str | None:
        return self._error.user_message if self._error else None

    @property
    def has_searched(self) -> bool:
        return self._has_searched

    @property
    def is_searching(self) -> bool:
        return self._state is SearchState.IN_FLIGHT

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on_text_changed(self, text: str) -> None:
        """Handle a text edit.

        Cancels any previous timer or request. A blank query resets the
        search; anything else arms the debounce timer.

        Args:
            text: Full current contents of the search field.
        """
        if self._closed:
            return

        self._text = text
        self._cancel_work()
        query = text.strip()

        if not query:
            self._query = None
            self._results = ()
            self._error = None
            self._has_searched = False
            self._set_state(SearchState.IDLE)
            return

        generation = self._generation
        loop = asyncio.get_running_loop()
        self._query = query
        self._timer = loop.call_later(self.delay, self._on_timer, generation, query)
        self._set_state(SearchState.PENDING)

    def submit(self) -> asyncio.Task[None] | None:
        """Search the current text now, skipping the debounce delay.

        Also serves as the manual retry after a failure.

        Returns:
            The dispatched task, or None for a blank query or after close.
        """
        if self._closed:
            return None

        query = self._text.strip()
        if not query:
            return None

        self._cancel_work()
        self._query = query
        return self._dispatch(query, self._generation)

    def retry(self) -> asyncio.Task[None] | None:
        return self.submit()

    def close(self) -> None:
        """Tear down: cancel pending and in-flight work, stop all updates."""
        if self._closed:
            return
        self._closed = True
        self._cancel_work()
        self._state = SearchState.IDLE
        self._idle.set()
        logger.debug("Search debouncer closed")

    async def wait_idle(self) -> None:
        """Wait until no timer is armed and no request is running."""
        await self._idle.wait()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _on_timer(self, generation: int, query: str) -> None:
        if self._closed or generation != self._generation:
            return
        self._timer = None
        self._dispatch(query, generation)

    def _dispatch(self, query: str, generation: int) -> asyncio.Task[None]:
        self._error = None
        self._task = asyncio.get_running_loop().create_task(self._run(query, generation))
        self._task.add_done_callback(self._consume_exception)
        self._set_state(SearchState.IN_FLIGHT)
        return self._task

    @staticmethod
    def _consume_exception(task: asyncio.Task[None]) -> None:
        # Failures are logged by _run.
        if not task.cancelled():
            task.exception()

    async def _run(self, query: str, generation: int) -> None:
        logger.debug(f"Searching: {query!r}")
        try:
            page = await self._search(query)
        except TMDBClientError as e:
            if not self._is_current(generation):
                return
            logger.warning(f"Search failed for {query!r}: {e}")
            self._error = e
            self._finish()
            return
        except Exception:
            if self._is_current(generation):
                logger.exception(f"Unexpected search failure for {query!r}")
                self._finish()
            raise

        if not self._is_current(generation):
            logger.debug(f"Discarding stale results for {query!r}")
            return

        self._results = page.results
        self._finish()

    def _finish(self) -> None:
        self._has_searched = True
        self._task = None
        self._set_state(SearchState.IDLE)

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def _cancel_work(self) -> None:
        """Invalidate the current generation and cancel its timer and task."""
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _set_state(self, state: SearchState) -> None:
        self._state = state
        if state is SearchState.IDLE:
            self._idle.set()
        else:
            self._idle.clear()
        if self._on_update is not None and not self._closed:
            self._on_update(self)
