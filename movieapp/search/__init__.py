"""Debounced movie search."""

from movieapp.search.debouncer import SearchDebouncer, SearchState

__all__ = ["SearchDebouncer", "SearchState"]
