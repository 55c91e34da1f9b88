"""Filesystem collaborators consumed by the cache.

The cache never touches ``os`` directly. It asks a :class:`FileSystem`
whether a path exists, what its modification timestamp is, what its
canonical key is, and for its full content. :class:`LocalFileSystem` backs
this with the real disk; :class:`MemoryFileSystem` is an in-memory fake
for tests and dry runs.
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from freshcache.errors import FileReadError, NotFoundError

# Same bound Linux applies before failing with ELOOP.
_MAX_LINK_HOPS = 40


@runtime_checkable
class FileSystem(Protocol):
    """Source of file state and content."""

    def exists(self, path: str) -> bool:
        ...

    def modification_time(self, path: str) -> Any:
        """Current modification timestamp, compared for equality only.

        Raises:
            NotFoundError: The path disappeared.
        """
        ...

    def canonical_path(self, path: str) -> str:
        """Canonical absolute form of *path*. Must not fail for missing files."""
        ...

    def read_content(self, path: str) -> str:
        """Full current content of *path*.

        Raises:
            FileReadError: On any read fault.
        """
        ...


class LocalFileSystem:
    """Real disk access.

    Modification times are ``st_mtime_ns`` integers so that equality checks
    are exact at the resolution the OS provides.

    Args:
        encoding: Text encoding used to decode file content.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def modification_time(self, path: str) -> int:
        try:
            return os.stat(path).st_mtime_ns
        except FileNotFoundError as exc:
            raise NotFoundError(path) from exc
        except OSError as exc:
            raise FileReadError(path, exc.strerror or str(exc)) from exc

    def canonical_path(self, path: str) -> str:
        return os.path.realpath(os.fspath(path))

    def read_content(self, path: str) -> str:
        try:
            # newline="" keeps line endings exactly as stored.
            with open(path, encoding=self.encoding, newline="") as fh:
                return fh.read()
        except UnicodeDecodeError as exc:
            raise FileReadError(path, f"cannot decode as {self.encoding}") from exc
        except OSError as exc:
            raise FileReadError(path, exc.strerror or str(exc)) from exc


@dataclass(slots=True)
class _MemoryFile:
    content: str
    mtime: int


@dataclass
class MemoryFileSystem:
    """In-memory filesystem for testing.

    Paths are POSIX-style and resolved against ``cwd``. Every ``write``
    advances a logical clock and stamps the file with it, unless an
    explicit ``mtime`` is given (useful to simulate writes that land within
    one timestamp tick). Reads are recorded in ``reads``.
    """

    cwd: str = "/"
    reads: list[str] = field(default_factory=list)
    _files: dict[str, _MemoryFile] = field(default_factory=dict, init=False)
    _links: dict[str, str] = field(default_factory=dict, init=False)
    _failures: dict[str, Exception] = field(default_factory=dict, init=False)
    _tick: int = field(default=0, init=False)

    @property
    def read_count(self) -> int:
        return len(self.reads)

    # -- mutation helpers ------------------------------------------------

    def write(self, path: str, content: str, *, mtime: int | None = None) -> MemoryFileSystem:
        key = self.canonical_path(path)
        self._files[key] = _MemoryFile(content=content, mtime=self._stamp(mtime))
        return self

    def touch(self, path: str, *, mtime: int | None = None) -> None:
        """Bump the modification time without changing content."""
        key = self.canonical_path(path)
        if key not in self._files:
            raise NotFoundError(path)
        self._files[key].mtime = self._stamp(mtime)

    def delete(self, path: str) -> None:
        self._files.pop(self.canonical_path(path), None)

    def symlink(self, link: str, target: str) -> None:
        """Create *link* pointing at *target*, stored verbatim as the OS would."""
        parent, name = posixpath.split(self._normalize(link))
        self._links[posixpath.join(self.canonical_path(parent), name)] = os.fspath(target)

    def fail_reads(self, path: str, exc: Exception | None = None) -> None:
        """Make subsequent reads of *path* raise *exc* (default: permission error)."""
        self._failures[self.canonical_path(path)] = exc or PermissionError(13, "Permission denied")

    def clear_failures(self) -> None:
        self._failures.clear()

    # -- FileSystem protocol ---------------------------------------------

    def exists(self, path: str) -> bool:
        return self.canonical_path(path) in self._files

    def modification_time(self, path: str) -> int:
        f = self._files.get(self.canonical_path(path))
        if f is None:
            raise NotFoundError(path)
        return f.mtime

    def canonical_path(self, path: str) -> str:
        """Resolve links component by component, like ``os.path.realpath``."""
        pending = self._normalize(path).split("/")
        resolved = "/"
        hops = 0
        while pending:
            part = pending.pop(0)
            if part in ("", "."):
                continue
            if part == "..":
                resolved = posixpath.dirname(resolved)
                continue
            candidate = posixpath.join(resolved, part)
            target = self._links.get(candidate)
            if target is None or hops >= _MAX_LINK_HOPS:
                resolved = candidate
                continue
            hops += 1
            if target.startswith("/"):
                resolved = "/"
            # A relative target is taken from the link's own directory.
            pending[:0] = target.split("/")
        return resolved

    def read_content(self, path: str) -> str:
        key = self.canonical_path(path)
        self.reads.append(key)
        failure = self._failures.get(key)
        if failure is not None:
            raise FileReadError(path, str(failure)) from failure
        f = self._files.get(key)
        if f is None:
            raise FileReadError(path, "file vanished before read")
        return f.content

    # -- internals -------------------------------------------------------

    def _normalize(self, path: str) -> str:
        return posixpath.normpath(posixpath.join(self.cwd, os.fspath(path)))

    def _stamp(self, mtime: int | None) -> int:
        if mtime is not None:
            self._tick = max(self._tick, mtime)
            return mtime
        self._tick += 1
        return self._tick
