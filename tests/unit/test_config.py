"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from freshcache.config import (
    DEFAULT_BYTES_PER_CHAR,
    DEFAULT_MAX_SIZE,
    CacheConfig,
    load_config,
    load_env_config,
    load_yaml_config,
)
from freshcache.errors import ConfigurationError


class TestCacheConfig:
    def test_defaults(self) -> None:
        cfg = CacheConfig()
        assert cfg.max_size == DEFAULT_MAX_SIZE == 100
        assert cfg.bytes_per_char == DEFAULT_BYTES_PER_CHAR == 2
        assert cfg.encoding == "utf-8"
        assert not cfg.debug
        assert not cfg.json_logs

    def test_validate_returns_self(self) -> None:
        cfg = CacheConfig(max_size=1)
        assert cfg.validate() is cfg

    @pytest.mark.parametrize("value", [0, -5, True, "10", 2.5])
    def test_invalid_max_size(self, value: object) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            CacheConfig(max_size=value).validate()  # type: ignore[arg-type]
        assert exc_info.value.field == "max_size"

    def test_invalid_bytes_per_char(self) -> None:
        with pytest.raises(ConfigurationError, match="bytes_per_char"):
            CacheConfig(bytes_per_char=0).validate()

    def test_unknown_encoding(self) -> None:
        with pytest.raises(ConfigurationError, match="encoding"):
            CacheConfig(encoding="no-such-codec").validate()


class TestLoadYamlConfig:
    def test_missing_file(self, tmp_workdir: Path) -> None:
        assert load_yaml_config(tmp_workdir / "absent.yaml") == {}

    def test_malformed_file(self, tmp_workdir: Path) -> None:
        p = tmp_workdir / "bad.yaml"
        p.write_text("max_size: [unclosed", encoding="utf-8")
        assert load_yaml_config(p) == {}

    def test_non_mapping(self, tmp_workdir: Path) -> None:
        p = tmp_workdir / "list.yaml"
        p.write_text("- 1\n- 2\n", encoding="utf-8")
        assert load_yaml_config(p) == {}

    def test_nested_section(self, tmp_workdir: Path) -> None:
        p = tmp_workdir / "app.yaml"
        p.write_text("cache:\n  max_size: 7\nother: true\n", encoding="utf-8")
        assert load_yaml_config(p) == {"max_size": 7}


class TestLoadEnvConfig:
    def test_collects_prefixed_vars(self) -> None:
        env = {"FRESHCACHE_MAX_SIZE": "12", "FRESHCACHE_DEBUG": "yes", "UNRELATED": "1"}
        assert load_env_config(env) == {"max_size": "12", "debug": "yes"}


class TestLoadConfig:
    def test_defaults_only(self) -> None:
        assert load_config(environ={}) == CacheConfig()

    def test_yaml_file(self, tmp_workdir: Path) -> None:
        p = tmp_workdir / "cache.yaml"
        p.write_text("max_size: 25\nencoding: latin-1\njson_logs: true\n", encoding="utf-8")
        cfg = load_config(path=p, environ={})
        assert cfg.max_size == 25
        assert cfg.encoding == "latin-1"
        assert cfg.json_logs is True

    def test_camel_case_aliases(self, tmp_workdir: Path) -> None:
        p = tmp_workdir / "cache.yaml"
        p.write_text("maxSize: 3\nbytesPerChar: 1\njsonLogs: on\n", encoding="utf-8")
        cfg = load_config(path=p, environ={})
        assert cfg.max_size == 3
        assert cfg.bytes_per_char == 1
        assert cfg.json_logs is True

    def test_env_overrides_yaml(self, tmp_workdir: Path) -> None:
        p = tmp_workdir / "cache.yaml"
        p.write_text("max_size: 25\n", encoding="utf-8")
        cfg = load_config(path=p, environ={"FRESHCACHE_MAX_SIZE": "40", "FRESHCACHE_DEBUG": "true"})
        assert cfg.max_size == 40
        assert cfg.debug is True

    def test_overrides_win(self, tmp_workdir: Path) -> None:
        p = tmp_workdir / "cache.yaml"
        p.write_text("max_size: 25\n", encoding="utf-8")
        cfg = load_config(path=p, environ={"FRESHCACHE_MAX_SIZE": "40"}, overrides={"max_size": 2})
        assert cfg.max_size == 2

    def test_none_override_ignored(self) -> None:
        cfg = load_config(environ={}, overrides={"max_size": None})
        assert cfg.max_size == DEFAULT_MAX_SIZE

    def test_bad_env_integer(self) -> None:
        with pytest.raises(ConfigurationError, match="max_size"):
            load_config(environ={"FRESHCACHE_MAX_SIZE": "lots"})

    def test_bad_env_boolean(self) -> None:
        with pytest.raises(ConfigurationError, match="debug"):
            load_config(environ={"FRESHCACHE_DEBUG": "maybe"})

    def test_out_of_range_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            load_config(environ={}, overrides={"max_size": 0})

    def test_dotenv_file(self, tmp_workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        # setenv first so monkeypatch restores the original (absent) state afterwards
        monkeypatch.setenv("FRESHCACHE_MAX_SIZE", "placeholder")
        monkeypatch.delenv("FRESHCACHE_MAX_SIZE")
        (tmp_workdir / ".env").write_text("FRESHCACHE_MAX_SIZE=9\n", encoding="utf-8")
        monkeypatch.chdir(tmp_workdir)
        assert load_config().max_size == 9

    def test_process_env_beats_dotenv(self, tmp_workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FRESHCACHE_MAX_SIZE", "11")
        (tmp_workdir / ".env").write_text("FRESHCACHE_MAX_SIZE=9\n", encoding="utf-8")
        monkeypatch.chdir(tmp_workdir)
        assert load_config().max_size == 11
