"""Freshcache error hierarchy."""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCategory(StrEnum):
    """Category of error for classification and handling."""

    NOT_FOUND = "not_found"
    IO = "io"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class CacheError(Exception):
    """Base error for all cache exceptions."""

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.path = path
        self.details: dict[str, Any] = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r}, category={self.category!r})"


class NotFoundError(CacheError):
    """Requested path does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}", category=ErrorCategory.NOT_FOUND, path=path)


class FileReadError(CacheError):
    """File exists but its content could not be read.

    The underlying fault (permission, decode failure, vanished file) is
    chained as ``__cause__`` when the caller raises with ``from``.
    """

    def __init__(self, path: str, reason: str = "", **kwargs: Any) -> None:
        message = f"Failed to read {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, category=ErrorCategory.IO, path=path, **kwargs)
        self.reason = reason


class ConfigurationError(CacheError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message, category=ErrorCategory.CONFIGURATION)
        self.field = field


__all__ = [
    "CacheError",
    "ConfigurationError",
    "ErrorCategory",
    "FileReadError",
    "NotFoundError",
]
