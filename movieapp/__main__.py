"""Command line entry point. Allows python -m movieapp."""

import argparse
import asyncio
import sys

from movieapp.favorites import FavoritesAggregator, FavoritesStore, JSONPreferenceStore
from movieapp.services import MovieDetailService
from movieapp.settings import settings
from movieapp.tmdb import MovieCategory, MoviesPage, MovieSummary, TMDBClient, TMDBClientError

_CATEGORY_COMMANDS = {
    "popular": MovieCategory.POPULAR,
    "top-rated": MovieCategory.TOP_RATED,
    "now-playing": MovieCategory.NOW_PLAYING,
    "upcoming": MovieCategory.UPCOMING,
}


# =============================================================================
# ARGUMENT PARSING
# =============================================================================


def _movie_id(value: str) -> int:
    movie_id = int(value)
    if movie_id < 1:
        raise argparse.ArgumentTypeError(f"invalid movie id: {value}")
    return movie_id


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="movieapp",
        description="Browse TMDB movies and manage local favorites",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name in _CATEGORY_COMMANDS:
        category = commands.add_parser(name, help=f"List {name.replace('-', ' ')} movies")
        category.add_argument("--page", type=int, default=1, help="Page number (default: 1)")

    search = commands.add_parser("search", help="Search movies by title")
    search.add_argument("query", help="Title to search")
    search.add_argument("--page", type=int, default=1, help="Page number (default: 1)")

    movie = commands.add_parser("movie", help="Show details, trailers and cast")
    movie.add_argument("movie_id", type=_movie_id)

    favorites = commands.add_parser("favorites", help="List or toggle favorites")
    favorites_commands = favorites.add_subparsers(dest="action", required=True)
    favorites_commands.add_parser("list", help="Show favorite movies")
    toggle = favorites_commands.add_parser("toggle", help="Add or remove a favorite")
    toggle.add_argument("movie_id", type=_movie_id)

    return parser


# =============================================================================
# OUTPUT
# =============================================================================


def _print_movies(movies: tuple[MovieSummary, ...] | list[MovieSummary]) -> None:
    for movie in movies:
        year = movie.release_year or "----"
        print(f"  [{movie.id:>7}] {movie.title} ({year})  ★ {movie.rating_text}")


def _print_page(page: MoviesPage) -> None:
    _print_movies(page.results)
    print(f"\nPage {page.page}/{page.total_pages} · {page.total_results} results")


# =============================================================================
# COMMANDS
# =============================================================================


def _open_favorites() -> FavoritesStore:
    storage = JSONPreferenceStore(settings.favorites.storage_file)
    store = FavoritesStore(storage, settings.favorites.storage_key)
    store.load()
    return store


async def _run(args: argparse.Namespace) -> None:
    async with TMDBClient() as client:
        if args.command in _CATEGORY_COMMANDS:
            _print_page(await client.fetch_category(_CATEGORY_COMMANDS[args.command], args.page))

        elif args.command == "search":
            _print_page(await client.search_movies(args.query, args.page))

        elif args.command == "movie":
            bundle = await MovieDetailService(client).load(args.movie_id)
            detail = bundle.detail
            print(f"{detail.title} ({detail.release_year})")
            if detail.tagline:
                print(f"  {detail.tagline}")
            print(f"  {detail.formatted_release_date} · {detail.formatted_runtime}")
            print(f"  {detail.genre_names}")
            print(f"  ★ {detail.rating_text} ({detail.vote_count} votes)")
            print(f"\n{detail.overview}\n")
            for video in bundle.top_videos():
                print(f"  ▶ {video.name}: {video.youtube_url or video.site}")
            for member in bundle.top_cast():
                print(f"  • {member.name} as {member.character}")

        elif args.command == "favorites":
            store = _open_favorites()
            if args.action == "toggle":
                added = store.toggle_favorite(args.movie_id)
                print(f"{'Added' if added else 'Removed'} {args.movie_id}")
                return
            movies = await FavoritesAggregator(client).resolve(store.favorites)
            if not movies:
                print("No Favorites Yet")
                return
            _print_movies(movies)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        Process exit status.
    """
    args = _build_parser().parse_args(argv)

    try:
        asyncio.run(_run(args))
    except TMDBClientError as e:
        print(f"❌ {e.user_message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
