"""TTL cache for booking list queries."""
from __future__ import annotations

import threading
from typing import List, Optional

from cachetools import TTLCache

from .schemas import Booking


class BookingQueryCache:
    """Results of ``list_bookings`` keyed by their filter.

    Entries are dropped wholesale whenever a command changes the bookings.
    A ``ttl`` of 0 or less turns caching off.
    """

    def __init__(self, ttl: int, maxsize: int = 128) -> None:
        self._enabled = ttl > 0
        self._cache: TTLCache[str, List[Booking]] = TTLCache(maxsize=maxsize, ttl=max(ttl, 1))
        self._lock = threading.Lock()
        self._generation = 0

    @staticmethod
    def key(date: Optional[str] = None, start_date: Optional[str] = None, end_date: Optional[str] = None) -> str:
        if start_date and end_date:
            return f"range:{start_date}:{end_date}"
        if date:
            return f"date:{date}"
        return "all"

    def get(self, key: str) -> Optional[List[Booking]]:
        with self._lock:
            return self._cache.get(key)

    @property
    def generation(self) -> int:
        return self._generation

    def set(self, key: str, bookings: List[Booking], generation: Optional[int] = None) -> None:
        """Store a result unless the cache was invalidated since ``generation``."""

        if not self._enabled:
            return
        with self._lock:
            if generation is not None and generation != self._generation:
                return
            self._cache[key] = bookings

    def invalidate(self) -> None:
        with self._lock:
            self._generation += 1
            self._cache.clear()
