"""Configuration loading and management."""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

from freshcache.errors import ConfigurationError

DEFAULT_MAX_SIZE = 100
# Heuristic cost of one cached character: two bytes, as in a UTF-16
# string representation. Not an exact measurement.
DEFAULT_BYTES_PER_CHAR = 2
DEFAULT_ENCODING = "utf-8"

ENV_PREFIX = "FRESHCACHE_"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


@dataclass(slots=True)
class CacheConfig:
    """Merged configuration from all sources.

    Priority: overrides > env vars > YAML file > defaults
    """

    max_size: int = DEFAULT_MAX_SIZE
    bytes_per_char: int = DEFAULT_BYTES_PER_CHAR
    encoding: str = DEFAULT_ENCODING

    # Logging
    debug: bool = False
    json_logs: bool = False

    def validate(self) -> CacheConfig:
        """Check value ranges. Returns self so calls can be chained."""
        if isinstance(self.max_size, bool) or not isinstance(self.max_size, int) or self.max_size < 1:
            raise ConfigurationError(
                f"max_size must be an integer >= 1, got {self.max_size!r}", field="max_size",
            )
        if (
            isinstance(self.bytes_per_char, bool)
            or not isinstance(self.bytes_per_char, int)
            or self.bytes_per_char < 1
        ):
            raise ConfigurationError(
                f"bytes_per_char must be an integer >= 1, got {self.bytes_per_char!r}",
                field="bytes_per_char",
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ConfigurationError(
                f"Unknown encoding: {self.encoding!r}", field="encoding",
            ) from exc
        return self


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML config file, returning empty dict if not found or malformed.

    Settings may sit at the top level or under a ``cache:`` section.
    """
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError):
        return {}
    if not isinstance(data, dict):
        return {}
    section = data.get("cache")
    return section if isinstance(section, dict) else data


def load_env_config(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect ``FRESHCACHE_*`` variables into config keys."""
    env = os.environ if environ is None else environ
    result: dict[str, Any] = {}
    for f in fields(CacheConfig):
        raw = env.get(ENV_PREFIX + f.name.upper())
        if raw is not None:
            result[f.name] = raw
    return result


def load_config(
    *,
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
    environ: dict[str, str] | None = None,
    dotenv: bool = True,
) -> CacheConfig:
    """Load configuration from all sources with proper priority.

    Priority: overrides > env vars > YAML file > defaults

    Args:
        path: Optional YAML file.
        overrides: Explicit values, typically from the embedding application.
        environ: Environment mapping to read instead of ``os.environ``.
        dotenv: Load the nearest ``.env`` file (searching upward from the
            working directory) into ``os.environ`` first, never overwriting
            variables that are already set. Ignored when *environ* is given.
    """
    config = CacheConfig()

    # 1. YAML file
    if path is not None:
        _apply_dict(config, load_yaml_config(Path(path)))

    # 2. Environment variables
    if dotenv and environ is None:
        dotenv_file = find_dotenv(usecwd=True)
        if dotenv_file:
            load_dotenv(dotenv_file, override=False)
    _apply_dict(config, load_env_config(environ))

    # 3. Explicit overrides (highest priority)
    _apply_dict(config, overrides or {})

    return config.validate()


def _apply_dict(config: CacheConfig, data: dict[str, Any]) -> None:
    """Apply dictionary values to config, only for known fields."""
    field_map = {
        "max_size": "max_size",
        "bytes_per_char": "bytes_per_char",
        "encoding": "encoding",
        "debug": "debug",
        "json_logs": "json_logs",
        # Aliases from YAML config
        "maxSize": "max_size",
        "bytesPerChar": "bytes_per_char",
        "jsonLogs": "json_logs",
    }
    for key, attr in field_map.items():
        if key in data and data[key] is not None:
            setattr(config, attr, _coerce(attr, data[key]))


def _coerce(attr: str, value: Any) -> Any:
    """Convert string values (env vars, quoted YAML) to the field's type."""
    if attr in ("max_size", "bytes_per_char"):
        if isinstance(value, bool):
            raise ConfigurationError(f"{attr} must be an integer, got {value!r}", field=attr)
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{attr} must be an integer, got {value!r}", field=attr) from exc
    if attr in ("debug", "json_logs"):
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ConfigurationError(f"{attr} must be a boolean, got {value!r}", field=attr)
    return str(value)
