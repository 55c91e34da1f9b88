"""Freshcache - bounded in-process file content cache with mtime validation."""

from freshcache.cache import FileContentCache
from freshcache.config import CacheConfig, load_config
from freshcache.errors import (
    CacheError,
    ConfigurationError,
    ErrorCategory,
    FileReadError,
    NotFoundError,
)
from freshcache.filesystem import FileSystem, LocalFileSystem, MemoryFileSystem
from freshcache.logger import get_logger, setup_logging
from freshcache.recency import RecencyStore
from freshcache.types import CacheEntry, CacheStats, EntryInfo

__version__ = "0.1.0"

__all__ = [
    "CacheConfig",
    "CacheEntry",
    "CacheError",
    "CacheStats",
    "ConfigurationError",
    "EntryInfo",
    "ErrorCategory",
    "FileContentCache",
    "FileReadError",
    "FileSystem",
    "LocalFileSystem",
    "MemoryFileSystem",
    "NotFoundError",
    "RecencyStore",
    "get_logger",
    "load_config",
    "setup_logging",
]
