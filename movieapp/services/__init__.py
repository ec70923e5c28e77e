"""Screen-level services built on the TMDB client."""

from movieapp.services.details import MovieDetailBundle, MovieDetailService
from movieapp.services.runtime import RuntimeResolver

__all__ = ["MovieDetailBundle", "MovieDetailService", "RuntimeResolver"]
