"""Global test fixtures for freshcache."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
import structlog

from freshcache import CacheConfig, FileContentCache, MemoryFileSystem


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def advance(self, seconds: float = 1.0) -> float:
        self.now += seconds
        return self.now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def tmp_workdir(tmp_path: Path) -> Path:
    """Provide a temporary working directory for file operation tests."""
    return tmp_path


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    return MemoryFileSystem(cwd="/work")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_cache(memory_fs: MemoryFileSystem, clock: FakeClock):
    """Factory for caches backed by the in-memory filesystem and fake clock."""

    def _make(max_size: int = 100, **kwargs) -> FileContentCache:
        config = CacheConfig(max_size=max_size, **kwargs)
        return FileContentCache(config, filesystem=memory_fs, clock=clock)

    return _make


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo any structlog/stdlib logging configuration a test installed."""
    yield
    structlog.reset_defaults()
    logger = logging.getLogger("freshcache")
    for handler in list(logger.handlers):
        if getattr(handler, "_freshcache", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
