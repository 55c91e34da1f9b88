"""Capacity-bounded recency store.

Maps canonical paths to :class:`CacheEntry` objects, ordered from least to
most recently used. Every successful ``get`` or ``put`` moves the key to
the most-recently-used end; when an insert pushes the store past
``max_size`` the entry at the other end is evicted.
"""

from __future__ import annotations

from collections import OrderedDict

from freshcache.errors import ConfigurationError
from freshcache.types import CacheEntry


class RecencyStore:
    """LRU map of path -> CacheEntry with a fixed capacity.

    Args:
        max_size: Maximum number of entries. Must be at least 1.
    """

    def __init__(self, max_size: int = 100) -> None:
        if max_size < 1:
            raise ConfigurationError(
                f"max_size must be >= 1, got {max_size}", field="max_size",
            )
        self._max_size = max_size
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: str) -> CacheEntry | None:
        """Return the entry for *key*, marking it as recently used."""
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
        return entry

    def peek(self, key: str) -> CacheEntry | None:
        """Return the entry for *key* without touching recency."""
        return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> str | None:
        """Insert or replace *entry* under *key* as most recently used.

        Returns:
            Key of the evicted entry if the insert exceeded capacity,
            None otherwise.
        """
        self._entries[key] = entry
        self._entries.move_to_end(key)

        # An insert grows the store by at most one, so one eviction suffices.
        if len(self._entries) > self._max_size:
            evicted_key, _ = self._entries.popitem(last=False)
            return evicted_key
        return None

    def remove(self, key: str) -> bool:
        """Drop *key* if present. Returns True if an entry was removed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        """Keys in LRU order (oldest first)."""
        return list(self._entries.keys())

    def items(self) -> list[tuple[str, CacheEntry]]:
        """(key, entry) pairs in LRU order (oldest first)."""
        return list(self._entries.items())

    def __contains__(self, key: object) -> bool:
        # Membership is a peek; it does not count as a use.
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
