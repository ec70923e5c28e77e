"""TMDB image CDN URL helpers.

Image paths returned by the API are fragments such as
``/b6ko0IKC8MdYBBPkkA1aBPLe2yz.jpg``; they become loadable once joined
with the CDN host and a width.
"""

IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

POSTER_SIZE = "w500"
BACKDROP_SIZE = "w780"
PROFILE_SIZE = "w185"


def build_image_url(path: str | None, size: str) -> str | None:
    """Join an image path fragment with the CDN host.

    Args:
        path: Path fragment from the API, may be None.
        size: CDN width token (e.g. "w500").

    Returns:
        Full image URL, or None when there is no image.
    """
    if not path:
        return None
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{IMAGE_BASE_URL}/{size}{path}"


def poster_url(path: str | None) -> str | None:
    return build_image_url(path, POSTER_SIZE)


def backdrop_url(path: str | None) -> str | None:
    return build_image_url(path, BACKDROP_SIZE)


def profile_url(path: str | None) -> str | None:
    return build_image_url(path, PROFILE_SIZE)
