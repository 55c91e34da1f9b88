"""Structured logging using structlog.

The cache emits events through :func:`get_logger`, which always wraps a
stdlib logger under ``freshcache``. That logger carries a ``NullHandler``,
so without any setup the events go nowhere; an application that already
configured stdlib logging receives them through propagation. To render
them directly on stderr, call :func:`setup_logging`, usually with the
values from a loaded :class:`~freshcache.config.CacheConfig`.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from freshcache.config import CacheConfig

LOGGER_NAME = "freshcache"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(
    config: CacheConfig | None = None,
    *,
    debug: bool | None = None,
    json_output: bool | None = None,
) -> None:
    """Route freshcache events through stdlib logging on stderr.

    Explicit keyword arguments win over the values carried by *config*.

    Args:
        config: Source of the ``debug`` and ``json_logs`` defaults.
        debug: Emit per-read hit/fill/evict events (DEBUG level).
        json_output: Render JSON lines instead of console output.
    """
    if debug is None:
        debug = config.debug if config is not None else False
    if json_output is None:
        json_output = config.json_logs if config is not None else False

    stdlib_logger = logging.getLogger(LOGGER_NAME)
    stdlib_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not any(getattr(h, "_freshcache", False) for h in stdlib_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._freshcache = True  # type: ignore[attr-defined]
        stdlib_logger.addHandler(handler)

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = LOGGER_NAME, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally pre-bound with *initial_values*.

    The wrapped logger is always the stdlib one, never structlog's default
    stdout printer, whether or not :func:`setup_logging` has run.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
        **initial_values,
    )
