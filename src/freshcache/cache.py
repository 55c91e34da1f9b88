"""Read-through file content cache with mtime validation.

Serves file content from memory while the file's modification timestamp
is unchanged, and re-reads it from the filesystem otherwise. Capacity is
bounded by a :class:`~freshcache.recency.RecencyStore`, which evicts the
least-recently-used file when a new one is added to a full cache.

Freshness is decided by timestamp equality alone. A write that leaves the
observable modification timestamp unchanged (several writes inside one
clock tick) is not detected.
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from freshcache.config import CacheConfig
from freshcache.errors import CacheError, FileReadError, NotFoundError
from freshcache.filesystem import FileSystem, LocalFileSystem
from freshcache.logger import get_logger
from freshcache.recency import RecencyStore
from freshcache.types import CacheEntry, CacheStats, EntryInfo


class FileContentCache:
    """Bounded LRU cache of file contents keyed by canonical path.

    All operations hold one re-entrant lock, so the stat, lookup, fill and
    store steps of :meth:`read_file` are atomic with respect to each other
    and to invalidation.

    Args:
        config: Cache settings (capacity, size heuristic, encoding).
        filesystem: Source of file state. Defaults to the local disk.
        clock: Wall-clock source for ``last_read_time``.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        filesystem: FileSystem | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = (config or CacheConfig()).validate()
        self._fs: FileSystem = filesystem or LocalFileSystem(encoding=self._config.encoding)
        self._clock = clock
        self._store = RecencyStore(self._config.max_size)
        self._stats = CacheStats(max_size=self._config.max_size)
        self._lock = threading.RLock()
        self._log = get_logger(__name__)

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def filesystem(self) -> FileSystem:
        return self._fs

    @property
    def max_size(self) -> int:
        return self._store.max_size

    def read_file(self, path: str) -> str:
        """Return the current content of *path*, from memory when fresh.

        Raises:
            NotFoundError: *path* does not exist.
            FileReadError: The file exists but could not be read. Any
                previously cached content for it is left in place.
        """
        with self._lock:
            if not self._fs.exists(path):
                self._log.debug("cache_not_found", path=str(path))
                raise NotFoundError(os.fspath(path))

            key = self._fs.canonical_path(path)
            try:
                current_mtime = self._fs.modification_time(key)
            except FileNotFoundError as exc:
                raise NotFoundError(os.fspath(path)) from exc
            except (FileReadError, OSError) as exc:
                self._record_failure(key, exc)
                if isinstance(exc, CacheError):
                    raise
                raise FileReadError(key, exc.strerror or str(exc)) from exc

            entry = self._store.peek(key)
            if entry is not None and entry.last_modified_time_at_read == current_mtime:
                entry.last_read_time = self._clock()
                self._store.put(key, entry)
                self._stats.hits += 1
                self._log.debug("cache_hit", key=key)
                return entry.content

            if entry is not None:
                self._stats.stale_refreshes += 1
                self._log.debug(
                    "cache_stale",
                    key=key,
                    cached_mtime=entry.last_modified_time_at_read,
                    current_mtime=current_mtime,
                )
            self._stats.misses += 1
            return self._fill(key, current_mtime)

    def invalidate(self, path: str) -> bool:
        """Drop the cached entry for *path*. Returns True if one existed."""
        key = self._key_for(path)
        if key is None:
            return False
        with self._lock:
            removed = self._store.remove(key)
            if removed:
                self._stats.invalidations += 1
                self._log.debug("cache_invalidate", key=key)
            return removed

    def invalidate_all(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._stats.invalidations += count
            self._log.debug("cache_invalidate_all", dropped=count)

    def is_cached(self, path: str) -> bool:
        """Whether *path* has an entry (fresh or not). Does not affect eviction order."""
        key = self._key_for(path)
        if key is None:
            return False
        with self._lock:
            return key in self._store

    def cached_count(self) -> int:
        with self._lock:
            return len(self._store)

    def memory_footprint_estimate(self) -> int:
        """Approximate bytes held by cached content.

        Counts ``bytes_per_char`` bytes per character of every cached
        string. This is a fixed-rate heuristic, not a measurement of the
        interpreter's actual memory use.
        """
        with self._lock:
            chars = sum(len(entry.content) for _, entry in self._store.items())
        return chars * self._config.bytes_per_char

    def entries(self) -> list[EntryInfo]:
        """Describe cached files, least recently used first."""
        bpc = self._config.bytes_per_char
        with self._lock:
            return [
                EntryInfo(
                    path=key,
                    estimated_bytes=len(entry.content) * bpc,
                    last_read_time=entry.last_read_time,
                    last_modified_time_at_read=entry.last_modified_time_at_read,
                )
                for key, entry in self._store.items()
            ]

    def stats(self) -> CacheStats:
        """Snapshot of counters plus current occupancy."""
        with self._lock:
            return replace(
                self._stats,
                entries=len(self._store),
                max_size=self._store.max_size,
                estimated_bytes=self.memory_footprint_estimate(),
            )

    def _fill(self, key: str, mtime: Any) -> str:
        try:
            content = self._fs.read_content(key)
        except (CacheError, OSError) as exc:
            self._record_failure(key, exc)
            if isinstance(exc, CacheError):
                raise
            raise FileReadError(key, exc.strerror or str(exc)) from exc

        evicted = self._store.put(
            key,
            CacheEntry(content=content, last_read_time=self._clock(), last_modified_time_at_read=mtime),
        )
        self._log.debug("cache_fill", key=key, chars=len(content))
        if evicted is not None:
            self._stats.evictions += 1
            self._log.debug("cache_evict", key=evicted)
        return content

    def _record_failure(self, key: str, exc: Exception) -> None:
        # Stat faults and read faults count alike: both abort the fill.
        self._stats.failed_fills += 1
        self._log.warning("cache_fill_failed", key=key, error=str(exc))

    def _key_for(self, path: str) -> str | None:
        try:
            return self._fs.canonical_path(path)
        except (OSError, ValueError) as exc:
            self._log.debug("cache_key_unresolvable", path=str(path), error=str(exc))
            return None

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, os.PathLike)) and self.is_cached(path)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self.cached_count()
