"""Runtime backfill for listing entries.

Listing endpoints do not include ``runtime``; movie cards fetch the detail
record to show it. Results are cached per movie id for a short TTL and
concurrent lookups for the same id share one request.
"""

import asyncio
import time
from dataclasses import dataclass

from movieapp.settings import settings
from movieapp.tmdb.client import TMDBClient
from movieapp.tmdb.errors import TMDBClientError
from movieapp.tmdb.schemas import MovieSummary
from movieapp.utils.logger import setup_logger

logger = setup_logger("movieapp.services.runtime")


@dataclass
class _CacheEntry:
    runtime: int | None
    expires_at: float


class RuntimeResolver:
    """Resolve missing runtimes with a TTL cache keyed by movie id.

    Attributes:
        _entries: Movie id to cached runtime.
        _inflight: Movie id to the task currently fetching it.
        _ttl_seconds: Cache entry lifetime.
    """

    def __init__(self, client: TMDBClient, ttl_seconds: float | None = None) -> None:
        """Initialize runtime resolver.

        Args:
            client: TMDB API client.
            ttl_seconds: Entry lifetime. Defaults to RUNTIME_CACHE_TTL.
        """
        self._client = client
        self._ttl_seconds = (
            settings.cache.runtime_ttl_seconds if ttl_seconds is None else ttl_seconds
        )
        self._entries: dict[int, _CacheEntry] = {}
        self._inflight: dict[int, asyncio.Task[int | None]] = {}

    async def runtime_for(self, movie: MovieSummary) -> int | None:
        """Return the movie's runtime in minutes, fetching it if needed.

        Args:
            movie: Listing entry, possibly without runtime.

        Returns:
            Runtime in minutes, or None if unknown or the fetch failed.
        """
        if movie.runtime is not None:
            return movie.runtime

        now = time.monotonic()
        entry = self._entries.get(movie.id)
        if entry is not None:
            if entry.expires_at > now:
                return entry.runtime
            del self._entries[movie.id]

        task = self._inflight.get(movie.id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(movie.id))
            self._inflight[movie.id] = task
            task.add_done_callback(lambda _: self._inflight.pop(movie.id, None))

        return await asyncio.shield(task)

    def invalidate(self, movie_id: int | None = None) -> None:
        """Drop one cached entry, or all of them."""
        if movie_id is None:
            self._entries.clear()
        else:
            self._entries.pop(movie_id, None)

    async def _fetch(self, movie_id: int) -> int | None:
        try:
            detail = await self._client.fetch_movie_details(movie_id)
        except TMDBClientError as e:
            logger.debug(f"Runtime lookup failed for {movie_id}: {e}")
            return None

        self._entries[movie_id] = _CacheEntry(
            runtime=detail.runtime,
            expires_at=time.monotonic() + self._ttl_seconds,
        )
        return detail.runtime
