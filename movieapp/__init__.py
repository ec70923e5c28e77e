"""Movie browsing client for The Movie Database (TMDB) API.

Typed async API client, persisted favorites with live aggregation,
and a debounced search controller.
"""

__version__ = "1.0.0"
