"""Movie detail screen data: detail, videos and credits fetched together."""

from dataclasses import dataclass

from movieapp.tmdb.client import TMDBClient
from movieapp.tmdb.schemas import (
    CastMember,
    CreditsResponse,
    CrewMember,
    MovieDetail,
    Video,
    VideosResponse,
)
from movieapp.utils.concurrency import gather_or_cancel
from movieapp.utils.logger import setup_logger

logger = setup_logger("movieapp.services.details")


@dataclass(frozen=True)
class MovieDetailBundle:
    """Everything the detail screen shows for one movie.

    Attributes:
        detail: Full movie record.
        videos: Trailers and teasers, in upstream order.
        cast: Cast members as returned by the credits endpoint.
        crew: Crew members.
    """

    detail: MovieDetail
    videos: tuple[Video, ...]
    cast: tuple[CastMember, ...]
    crew: tuple[CrewMember, ...]

    def top_videos(self, limit: int = 5) -> tuple[Video, ...]:
        return self.videos[:limit]

    def top_cast(self, limit: int = 10) -> tuple[CastMember, ...]:
        """Most prominent cast members by billing order."""
        return tuple(sorted(self.cast, key=lambda member: member.order)[:limit])


class MovieDetailService:
    """Load a movie's detail bundle with one concurrent fan-out."""

    def __init__(self, client: TMDBClient) -> None:
        self._client = client

    async def load(self, movie_id: int) -> MovieDetailBundle:
        """Fetch detail, videos and credits concurrently.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            Combined bundle.

        Raises:
            TMDBClientError: The first failed fetch; the others are cancelled.
        """
        detail, videos, credits = await gather_or_cancel(
            self._client.fetch_movie_details(movie_id),
            self._client.fetch_movie_videos(movie_id),
            self._client.fetch_movie_credits(movie_id),
        )
        return self._build_bundle(detail, videos, credits)

    @staticmethod
    def _build_bundle(
        detail: MovieDetail,
        videos: VideosResponse,
        credits: CreditsResponse,
    ) -> MovieDetailBundle:
        trailers = tuple(video for video in videos.results if video.is_trailer)
        logger.debug(
            f"Loaded movie {detail.id}: {len(trailers)} trailer(s), {len(credits.cast)} cast"
        )
        return MovieDetailBundle(
            detail=detail,
            videos=trailers,
            cast=credits.cast,
            crew=credits.crew,
        )
