"""Core data types for the file content cache."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(slots=True)
class CacheEntry:
    """Snapshot of one file's content.

    ``last_modified_time_at_read`` is whatever the filesystem reported as
    the modification timestamp when ``content`` was fetched. It is compared
    for equality only, so any comparable value works.
    """

    content: str
    last_read_time: float
    last_modified_time_at_read: Any


@dataclass(slots=True, frozen=True)
class EntryInfo:
    """Read-only view of a cached entry for monitoring."""

    path: str
    estimated_bytes: int
    last_read_time: float
    last_modified_time_at_read: Any


@dataclass(slots=True)
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    stale_refreshes: int = 0
    evictions: int = 0
    invalidations: int = 0
    failed_fills: int = 0
    entries: int = 0
    max_size: int = 0
    estimated_bytes: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["hit_rate"] = self.hit_rate
        return data
