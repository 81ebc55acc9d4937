"""Global filesystem search: backends, result filters, and the overlay."""

from __future__ import annotations

from .backends import LocateBackend, SearchBackend, SearchResult, WalkBackend, search_filter_for, select_backend
from .filters import SearchFilter, matches_query
from .overlay import GlobalSearchOverlay

__all__ = [
    "GlobalSearchOverlay",
    "LocateBackend",
    "SearchBackend",
    "SearchFilter",
    "SearchResult",
    "WalkBackend",
    "matches_query",
    "search_filter_for",
    "select_backend",
]
