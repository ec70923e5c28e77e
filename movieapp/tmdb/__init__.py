"""TMDB API access: client, error taxonomy, schemas and image URLs."""

from movieapp.tmdb.client import MovieCategory, TMDBClient
from movieapp.tmdb.errors import (
    TMDBClientError,
    TMDBDecodingError,
    TMDBInvalidRequestError,
    TMDBTransportError,
    TMDBUnauthorizedError,
    TMDBUpstreamError,
)
from movieapp.tmdb.schemas import (
    CastMember,
    CreditsResponse,
    CrewMember,
    Genre,
    MovieDetail,
    MoviesPage,
    MovieSummary,
    ProductionCompany,
    SpokenLanguage,
    Video,
    VideosResponse,
)

__all__ = [
    "MovieCategory",
    "TMDBClient",
    "TMDBClientError",
    "TMDBDecodingError",
    "TMDBInvalidRequestError",
    "TMDBTransportError",
    "TMDBUnauthorizedError",
    "TMDBUpstreamError",
    "CastMember",
    "CreditsResponse",
    "CrewMember",
    "Genre",
    "MovieDetail",
    "MoviesPage",
    "MovieSummary",
    "ProductionCompany",
    "SpokenLanguage",
    "Video",
    "VideosResponse",
]
