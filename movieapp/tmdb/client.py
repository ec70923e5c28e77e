"""Async TMDB API client.

Handles HTTP communication with The Movie Database API: authentication,
URL composition, error classification and typed decoding. No retries are
performed; every failure reaches the caller as a ``TMDBClientError``.
"""

import re
from enum import Enum
from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from movieapp.settings import TMDBSettings, settings
from movieapp.tmdb.errors import (
    TMDBDecodingError,
    TMDBInvalidRequestError,
    TMDBTransportError,
    TMDBUnauthorizedError,
    TMDBUpstreamError,
)
from movieapp.tmdb.schemas import CreditsResponse, MovieDetail, MoviesPage, VideosResponse
from movieapp.utils.logger import setup_logger

logger = setup_logger("movieapp.tmdb.client")

ModelT = TypeVar("ModelT", bound=BaseModel)

_ENDPOINT_PATTERN = re.compile(r"^/[A-Za-z0-9_\-./]*$")
_DOT_SEGMENTS = frozenset({".", ".."})


class MovieCategory(str, Enum):
    """Listing endpoints exposed as browse categories."""

    POPULAR = "popular"
    TOP_RATED = "top_rated"
    NOW_PLAYING = "now_playing"
    UPCOMING = "upcoming"

    @property
    def endpoint(self) -> str:
        return f"/movie/{self.value}"


class TMDBClient:
    """Async HTTP client for the TMDB API.

    Stateless per call: only the base URL, API key and the pooled
    ``httpx.AsyncClient`` are held.

    Attributes:
        base_url: TMDB API base URL.
    """

    def __init__(
        self,
        config: TMDBSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize TMDB client.

        Args:
            config: TMDB settings. Defaults to the shared settings.
            transport: Optional httpx transport (used by tests).
        """
        config = config or settings.tmdb
        self.base_url = config.base_url
        self._api_key = config.api_key
        self._timeout = config.timeout
        self._user_agent = config.user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not config.is_configured:
            logger.warning("TMDB API key is not configured; requests will be rejected")

    # -------------------------------------------------------------------------
    # Context Manager
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "TMDBClient":
        """Enter context and create HTTP client."""
        self._ensure_client()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Exit context and close HTTP client."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent, "Accept": "application/json"},
                transport=self._transport,
            )
        return self._client

    # -------------------------------------------------------------------------
    # HTTP Methods
    # -------------------------------------------------------------------------

    def build_url(self, endpoint: str, params: dict[str, Any] | None = None) -> httpx.URL:
        """Compose the authenticated request URL.

        Query values are percent-encoded by httpx.

        Args:
            endpoint: Relative API path, e.g. "/movie/550".
            params: Optional query parameters.

        Returns:
            Absolute URL including the api_key parameter.

        Raises:
            TMDBInvalidRequestError: If the URL cannot be composed.
        """
        if not _ENDPOINT_PATTERN.match(endpoint) or "//" in endpoint:
            raise TMDBInvalidRequestError(f"Invalid endpoint: {endpoint!r}")
        if _DOT_SEGMENTS.intersection(endpoint.split("/")):
            raise TMDBInvalidRequestError(f"Dot segments not allowed: {endpoint!r}")

        request_params: dict[str, Any] = dict(params or {})
        request_params["api_key"] = self._api_key

        try:
            url = httpx.URL(f"{self.base_url}{endpoint}", params=request_params)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise TMDBInvalidRequestError(f"Invalid URL for {endpoint}: {e}") from e

        if url.scheme not in ("http", "https") or not url.host:
            raise TMDBInvalidRequestError(f"Invalid base URL: {self.base_url!r}")
        return url

    async def _get(
        self,
        endpoint: str,
        model: type[ModelT],
        params: dict[str, Any] | None = None,
    ) -> ModelT:
        """Execute GET request and decode the body into ``model``.

        Args:
            endpoint: API endpoint path.
            model: Pydantic model the body must match.
            params: Optional query parameters.

        Returns:
            Decoded response.

        Raises:
            TMDBInvalidRequestError: URL could not be composed.
            TMDBUnauthorizedError: HTTP 401.
            TMDBUpstreamError: Any other non-200 status.
            TMDBDecodingError: Body does not match ``model``.
            TMDBTransportError: No response was obtained.
        """
        url = self.build_url(endpoint, params)
        client = self._ensure_client()

        try:
            response = await client.get(url)
        except httpx.UnsupportedProtocol as e:
            raise TMDBInvalidRequestError(f"Invalid URL for {endpoint}: {e}") from e
        except httpx.TimeoutException as e:
            logger.warning(f"Request timeout: {endpoint}")
            raise TMDBTransportError(f"request timed out ({type(e).__name__})") from e
        except httpx.RequestError as e:
            logger.warning(f"Request error: {endpoint}: {type(e).__name__}")
            raise TMDBTransportError(str(e) or type(e).__name__) from e

        return self._handle_response(response, endpoint, model)

    @staticmethod
    def _handle_response(
        response: httpx.Response,
        endpoint: str,
        model: type[ModelT],
    ) -> ModelT:
        """Classify the HTTP status and decode the body.

        Args:
            response: HTTP response object.
            endpoint: API endpoint (for logging).
            model: Expected response schema.

        Returns:
            Decoded response.
        """
        if response.status_code == 401:
            logger.error(f"Unauthorized: {endpoint}")
            raise TMDBUnauthorizedError()

        if response.status_code != 200:
            logger.error(f"TMDB API error {response.status_code}: {endpoint}")
            raise TMDBUpstreamError(response.status_code, endpoint)

        try:
            decoded = model.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Decoding failed for {endpoint}: {e.error_count()} error(s)")
            raise TMDBDecodingError(f"Unexpected payload from {endpoint}") from e

        logger.debug(f"GET {endpoint} -> {response.status_code}")
        return decoded

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    @staticmethod
    def _page_params(page: int) -> dict[str, Any]:
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise TMDBInvalidRequestError(f"Page must be an integer >= 1, got {page!r}")
        return {"page": page}

    async def fetch_category(self, category: MovieCategory, page: int = 1) -> MoviesPage:
        """Fetch one page of a browse category.

        Args:
            category: Listing to fetch.
            page: 1-based page number.

        Returns:
            Page of movie summaries with total counts.
        """
        return await self._get(category.endpoint, MoviesPage, self._page_params(page))

    async def fetch_popular(self, page: int = 1) -> MoviesPage:
        return await self.fetch_category(MovieCategory.POPULAR, page)

    async def fetch_top_rated(self, page: int = 1) -> MoviesPage:
        return await self.fetch_category(MovieCategory.TOP_RATED, page)

    async def fetch_now_playing(self, page: int = 1) -> MoviesPage:
        return await self.fetch_category(MovieCategory.NOW_PLAYING, page)

    async def fetch_upcoming(self, page: int = 1) -> MoviesPage:
        return await self.fetch_category(MovieCategory.UPCOMING, page)

    async def search_movies(self, query: str, page: int = 1) -> MoviesPage:
        """Search movies by title.

        Args:
            query: Free-text query; percent-encoded on the wire.
            page: 1-based page number.

        Returns:
            Page of matching movie summaries.
        """
        params = self._page_params(page)
        params["query"] = query
        return await self._get("/search/movie", MoviesPage, params)

    async def fetch_movie_details(self, movie_id: int) -> MovieDetail:
        """Get detailed movie information.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            Movie detail record.
        """
        return await self._get(f"/movie/{self._movie_id(movie_id)}", MovieDetail)

    async def fetch_movie_videos(self, movie_id: int) -> VideosResponse:
        """Get trailers, teasers and other videos for a movie."""
        return await self._get(f"/movie/{self._movie_id(movie_id)}/videos", VideosResponse)

    async def fetch_movie_credits(self, movie_id: int) -> CreditsResponse:
        """Get movie cast and crew."""
        return await self._get(f"/movie/{self._movie_id(movie_id)}/credits", CreditsResponse)

    @staticmethod
    def _movie_id(movie_id: int) -> int:
        if isinstance(movie_id, bool) or not isinstance(movie_id, int) or movie_id < 1:
            raise TMDBInvalidRequestError(f"Invalid movie id: {movie_id!r}")
        return movie_id
