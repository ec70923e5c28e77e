"""Resolve favorite ids into display-ready movie summaries."""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field

from movieapp.tmdb.client import TMDBClient
from movieapp.tmdb.errors import TMDBClientError
from movieapp.tmdb.schemas import MovieDetail, MovieSummary
from movieapp.utils.concurrency import gather_or_cancel
from movieapp.utils.logger import setup_logger

logger = setup_logger("movieapp.favorites.aggregator")


@dataclass
class AggregationResult:
    """Outcome of a per-id tolerant aggregation.

    Attributes:
        movies: Successfully resolved movies, sorted by title.
        failures: Movie id to the error its fetch raised.
    """

    movies: list[MovieSummary] = field(default_factory=list)
    failures: dict[int, TMDBClientError] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return not self.failures


class FavoritesAggregator:
    """Fetch every favorite concurrently and merge into one ordered list."""

    def __init__(self, client: TMDBClient) -> None:
        self._client = client

    async def resolve(self, favorite_ids: Iterable[int]) -> list[MovieSummary]:
        """Resolve all ids, all-or-nothing.

        Args:
            favorite_ids: Snapshot of favorite ids (duplicates are ignored).

        Returns:
            Movie summaries sorted by title (codepoint order).

        Raises:
            TMDBClientError: The first failed fetch; outstanding fetches
                are cancelled and no partial list is returned.
        """
        ids = sorted(set(favorite_ids))
        if not ids:
            return []

        logger.debug(f"Resolving {len(ids)} favorite(s)")
        details: list[MovieDetail] = await gather_or_cancel(
            *(self._client.fetch_movie_details(movie_id) for movie_id in ids)
        )
        return self._merge(details)

    async def resolve_settled(self, favorite_ids: Iterable[int]) -> AggregationResult:
        """Resolve all ids, keeping whatever succeeded.

        Args:
            favorite_ids: Snapshot of favorite ids.

        Returns:
            Resolved movies plus the per-id failures.
        """
        ids = sorted(set(favorite_ids))
        if not ids:
            return AggregationResult()

        outcomes = await asyncio.gather(
            *(self._client.fetch_movie_details(movie_id) for movie_id in ids),
            return_exceptions=True,
        )

        details: list[MovieDetail] = []
        failures: dict[int, TMDBClientError] = {}
        for movie_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, TMDBClientError):
                failures[movie_id] = outcome
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                details.append(outcome)

        if failures:
            logger.warning(f"{len(failures)} favorite(s) failed to resolve: {sorted(failures)}")
        return AggregationResult(movies=self._merge(details), failures=failures)

    @staticmethod
    def _merge(details: Iterable[MovieDetail]) -> list[MovieSummary]:
        """Project, deduplicate by movie id and sort by title."""
        by_id: dict[int, MovieSummary] = {}
        for detail in details:
            by_id.setdefault(detail.id, detail.to_summary())
        return sorted(by_id.values(), key=lambda movie: (movie.title, movie.id))
