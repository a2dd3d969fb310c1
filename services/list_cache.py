"""
List Cache - short-lived, tag-invalidated cache for list responses

Listings are cached under a tag (``news``) together with a key derived from
their parameters. Any successful mutation invalidates the whole tag, so the
next read goes back to the database. Expired entries are dropped on every
write and each tag holds at most ``max_entries`` keys.
"""

import threading
import time
from typing import Any, Callable, Dict, Hashable, Tuple

DEFAULT_MAX_ENTRIES = 256


class TaggedListCache:
    """In-process cache keyed by (tag, key) with a time-to-live."""

    def __init__(
        self,
        ttl_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.max_entries = max_entries
        self._entries: Dict[str, Dict[Hashable, Tuple[float, Any]]] = {}
        self._generations: Dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def entry_count(self, tag: str) -> int:
        with self._lock:
            return len(self._entries.get(tag, {}))

    def get_or_load(self, tag: str, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        Return the cached value for ``key`` or compute and store it.

        Loader exceptions propagate and nothing is cached. A value loaded
        while the tag was being invalidated is returned but not stored.
        """
        if not self.enabled:
            return loader()

        now = self.clock()
        with self._lock:
            entry = self._entries.get(tag, {}).get(key)
            if entry is not None and entry[0] > now:
                return entry[1]
            generation = self._generations.get(tag, 0)

        value = loader()

        with self._lock:
            if self._generations.get(tag, 0) == generation:
                entries = self._entries.setdefault(tag, {})
                self._prune(entries, now)
                entries[key] = (now + self.ttl_seconds, value)
                self._evict_oldest(entries)
        return value

    @staticmethod
    def _prune(entries: Dict[Hashable, Tuple[float, Any]], now: float) -> None:
        for key in [key for key, (expires_at, _) in entries.items() if expires_at <= now]:
            del entries[key]

    def _evict_oldest(self, entries: Dict[Hashable, Tuple[float, Any]]) -> None:
        # Every entry shares one TTL, so the earliest expiry is the oldest write
        while len(entries) > self.max_entries:
            oldest = min(entries, key=lambda key: entries[key][0])
            del entries[oldest]

    def invalidate(self, tag: str) -> None:
        """Mark every entry under ``tag`` stale."""
        with self._lock:
            self._entries.pop(tag, None)
            self._generations[tag] = self._generations.get(tag, 0) + 1

    def clear(self) -> None:
        with self._lock:
            for tag in list(self._entries):
                self._generations[tag] = self._generations.get(tag, 0) + 1
            self._entries.clear()
