"""Observable, persisted set of favorite movie ids.

The store only holds bare ids. Movie payloads are always fetched live
(see ``FavoritesAggregator``).
"""

import threading
from collections.abc import Callable

from movieapp.favorites.storage import PreferenceStore
from movieapp.settings import settings
from movieapp.utils.logger import setup_logger

logger = setup_logger("movieapp.favorites.store")

FavoritesListener = Callable[[frozenset[int]], None]


class FavoritesStore:
    """Process-wide favorites membership set.

    Mutations are serialized by a re-entrant lock: the new set is persisted
    first, then swapped in, then every subscriber is called synchronously
    with the new snapshot, all before ``toggle_favorite`` returns.

    Attributes:
        _ids: Current favorite ids.
        _subscribers: Change listeners in subscription order.
        _lock: Serializes load/toggle and notification.
    """

    def __init__(self, storage: PreferenceStore, key: str | None = None) -> None:
        """Initialize favorites store.

        Args:
            storage: Durable key-value facility.
            key: Name of the persisted value. Defaults to FAVORITES_KEY.
        """
        self._storage = storage
        self._key = key or settings.favorites.storage_key
        self._ids: frozenset[int] = frozenset()
        self._subscribers: list[FavoritesListener] = []
        self._lock = threading.RLock()

    @property
    def favorites(self) -> frozenset[int]:
        """Current snapshot of favorite ids."""
        return self._ids

    def is_favorite(self, movie_id: int) -> bool:
        return movie_id in self._ids

    def load(self) -> frozenset[int]:
        """Replace the in-memory set with the persisted one.

        Absent or malformed stored values load as the empty set; entries
        that are not positive integers are skipped.

        Returns:
            The loaded snapshot.
        """
        with self._lock:
            stored = self._storage.get(self._key)
            self._ids = self._parse_ids(stored)
            logger.info(f"Loaded {len(self._ids)} favorite(s)")
            self._notify()
            return self._ids

    def toggle_favorite(self, movie_id: int) -> bool:
        """Add the id if absent, remove it if present.

        Args:
            movie_id: TMDB movie ID.

        Returns:
            True if the movie is a favorite after the call.

        Raises:
            ValueError: If movie_id is not a positive integer.
        """
        if isinstance(movie_id, bool) or not isinstance(movie_id, int) or movie_id < 1:
            raise ValueError(f"Invalid movie id: {movie_id!r}")

        with self._lock:
            if movie_id in self._ids:
                updated = self._ids - {movie_id}
            else:
                updated = self._ids | {movie_id}

            self._storage.set(self._key, sorted(updated))
            self._ids = updated
            logger.debug(f"Favorite toggled: {movie_id} -> {movie_id in updated}")
            self._notify()
            return movie_id in updated

    def subscribe(self, listener: FavoritesListener) -> Callable[[], None]:
        """Register a change listener.

        Args:
            listener: Called with the new snapshot after every mutation.

        Returns:
            Callable that removes the listener.
        """
        with self._lock:
            self._subscribers.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._subscribers:
                    self._subscribers.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self._ids
        for listener in list(self._subscribers):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"Favorites listener {listener!r} failed")

    @staticmethod
    def _parse_ids(stored: object) -> frozenset[int]:
        if stored is None:
            return frozenset()
        if not isinstance(stored, list):
            logger.warning(f"Ignoring malformed favorites value of type {type(stored).__name__}")
            return frozenset()
        return frozenset(
            value
            for value in stored
            if isinstance(value, int) and not isinstance(value, bool) and value >= 1
        )
