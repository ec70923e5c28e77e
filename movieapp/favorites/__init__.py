"""Favorites: persisted id set and live aggregation."""

from movieapp.favorites.aggregator import AggregationResult, FavoritesAggregator
from movieapp.favorites.storage import JSONPreferenceStore, PreferenceStore
from movieapp.favorites.store import FavoritesStore

__all__ = [
    "AggregationResult",
    "FavoritesAggregator",
    "FavoritesStore",
    "JSONPreferenceStore",
    "PreferenceStore",
]
