"""Pydantic schemas for TMDB API responses.

Field names follow the snake_case keys of the API payloads, so responses
validate directly into these models. All models are immutable once built.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from movieapp.tmdb.images import backdrop_url, poster_url, profile_url

YOUTUBE_SITE = "youtube"
TRAILER_TYPES = frozenset({"Trailer", "Teaser"})

# =============================================================================
# HELPERS
# =============================================================================


def format_runtime(runtime: int) -> str:
    """Format minutes as "2h 5m", or "45m" under an hour."""
    hours, minutes = divmod(runtime, 60)
    return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"


def format_release_date(release_date: str) -> str:
    """Format an ISO date as "May 23, 1980"; unparsable input is returned as is."""
    try:
        parsed = datetime.strptime(release_date, "%Y-%m-%d")
    except ValueError:
        return release_date
    return parsed.strftime("%b %d, %Y")


class _Schema(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class _MovieBase(_Schema):
    """Fields shared by listing entries and detail records."""

    id: int
    title: str
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    release_date: str = ""
    vote_average: float = Field(default=0.0, ge=0.0, le=10.0)
    vote_count: int = Field(default=0, ge=0)
    runtime: int | None = None

    @property
    def poster_url(self) -> str | None:
        return poster_url(self.poster_path)

    @property
    def backdrop_url(self) -> str | None:
        return backdrop_url(self.backdrop_path)

    @property
    def formatted_release_date(self) -> str:
        return format_release_date(self.release_date)

    @property
    def release_year(self) -> str:
        return self.release_date[:4]

    @property
    def rating_text(self) -> str:
        return f"{self.vote_average:.1f}"


# =============================================================================
# MOVIES
# =============================================================================


class MovieSummary(_MovieBase):
    """Movie entry as returned by listing and search endpoints."""

    popularity: float = 0.0
    original_language: str = ""
    original_title: str = ""
    adult: bool = False
    video: bool = False
    genre_ids: tuple[int, ...] = ()

    @property
    def formatted_runtime(self) -> str | None:
        if self.runtime is None:
            return None
        return format_runtime(self.runtime)


class Genre(_Schema):
    id: int
    name: str


class ProductionCompany(_Schema):
    id: int
    name: str
    logo_path: str | None = None
    origin_country: str = ""


class SpokenLanguage(_Schema):
    iso_639_1: str
    name: str = ""
    english_name: str = ""


class MovieDetail(_MovieBase):
    """Full record from ``/movie/{id}``.

    Adult, popularity, original language and video flags are not relied
    upon here; ``to_summary`` fills them with fixed defaults.
    """

    genres: tuple[Genre, ...] = ()
    production_companies: tuple[ProductionCompany, ...] = ()
    spoken_languages: tuple[SpokenLanguage, ...] = ()
    status: str = ""
    tagline: str | None = None
    budget: int = 0
    revenue: int = 0

    @property
    def formatted_runtime(self) -> str:
        if self.runtime is None:
            return "N/A"
        return format_runtime(self.runtime)

    @property
    def genre_names(self) -> str:
        return ", ".join(genre.name for genre in self.genres)

    def to_summary(self) -> MovieSummary:
        """Project this detail record onto the listing shape."""
        return MovieSummary(
            id=self.id,
            title=self.title,
            overview=self.overview,
            poster_path=self.poster_path,
            backdrop_path=self.backdrop_path,
            release_date=self.release_date,
            vote_average=self.vote_average,
            vote_count=self.vote_count,
            runtime=self.runtime,
            adult=False,
            original_language="en",
            original_title=self.title,
            popularity=0.0,
            video=False,
            genre_ids=tuple(genre.id for genre in self.genres),
        )


class MoviesPage(_Schema):
    """Paged envelope of listing and search endpoints."""

    page: int = 1
    results: tuple[MovieSummary, ...]
    total_pages: int
    total_results: int


# =============================================================================
# VIDEOS
# =============================================================================


class Video(_Schema):
    id: str
    name: str
    key: str
    site: str
    type: str
    official: bool = False
    published_at: str = ""
    size: int = 0

    @property
    def is_youtube(self) -> bool:
        return self.site.lower() == YOUTUBE_SITE

    @property
    def is_trailer(self) -> bool:
        return self.type in TRAILER_TYPES

    @property
    def youtube_url(self) -> str | None:
        if not self.is_youtube:
            return None
        return f"https://www.youtube.com/watch?v={self.key}"

    @property
    def thumbnail_url(self) -> str | None:
        if not self.is_youtube:
            return None
        return f"https://img.youtube.com/vi/{self.key}/hqdefault.jpg"


class VideosResponse(_Schema):
    id: int
    results: tuple[Video, ...]


# =============================================================================
# CREDITS
# =============================================================================


class CastMember(_Schema):
    id: int
    name: str
    character: str = ""
    profile_path: str | None = None
    order: int = 0

    @property
    def profile_url(self) -> str | None:
        return profile_url(self.profile_path)


class CrewMember(_Schema):
    id: int
    name: str
    job: str = ""
    department: str = ""
    profile_path: str | None = None

    @property
    def profile_url(self) -> str | None:
        return profile_url(self.profile_path)


class CreditsResponse(_Schema):
    id: int
    cast: tuple[CastMember, ...] = ()
    crew: tuple[CrewMember, ...] = ()
