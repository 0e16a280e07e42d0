"""Tests for appwrite_cli.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from appwrite_cli.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    load_global_config,
    load_project_config,
    resolve_config,
    save_global_config,
    save_session_cookie,
)
from appwrite_cli.exceptions import ConfigError
from appwrite_cli.models import DEFAULT_ENDPOINT, GlobalConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# XDG path resolution
# ---------------------------------------------------------------------------


class TestXDGPathsLinux:
    """XDG paths on Linux (the default XDG platform)."""

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("appwrite_cli.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".config" / "appwrite-cli"

    def test_config_dir_xdg_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("appwrite_cli.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        path = get_config_dir()
        assert path == tmp_path / "xdg" / "appwrite-cli"
        assert path.is_dir()

    def test_data_dir_xdg_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("appwrite_cli.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        assert get_data_dir() == tmp_path / "data" / "appwrite-cli"


class TestFallbackPaths:
    """macOS / Windows layout under ``~/.appwrite-cli``."""

    def test_config_and_data_dirs(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("appwrite_cli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".appwrite-cli"
        assert get_data_dir() == tmp_path / ".appwrite-cli" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_content(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, "hello")
        assert target.read_text(encoding="utf-8") == "hello"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        target = tmp_path / "file.json"
        _atomic_write(target, "one")
        _atomic_write(target, "two")
        assert [p.name for p in tmp_path.iterdir()] == ["file.json"]
        assert target.read_text(encoding="utf-8") == "two"


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.endpoint == DEFAULT_ENDPOINT

    def test_save_and_load(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(project_id="demo", key="secret", self_signed=True))
        loaded = load_global_config()
        assert loaded.project_id == "demo"
        assert loaded.key == "secret"
        assert loaded.self_signed is True

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (get_config_dir() / "config.json").write_text("{broken", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()

    def test_invalid_value_raises(self, isolated_config: Path) -> None:
        _write_json(get_config_dir() / "config.json", {"request": {"timeout": "soon"}})
        with pytest.raises(ConfigError):
            load_global_config()


class TestSessionCookie:
    def test_cookie_saved(self, isolated_config: Path) -> None:
        save_session_cookie("a_session_demo=abc")
        assert load_global_config().cookie == "a_session_demo=abc"

    def test_unchanged_cookie_does_not_rewrite(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        save_session_cookie("a=1")
        calls: list[GlobalConfig] = []
        monkeypatch.setattr("appwrite_cli.config.save_global_config", calls.append)
        save_session_cookie("a=1")
        assert calls == []

    def test_other_settings_preserved(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(project_id="demo"))
        save_session_cookie("a=1")
        assert load_global_config().project_id == "demo"


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


class TestProjectConfig:
    def test_missing_returns_none(self, isolated_config: Path) -> None:
        assert load_project_config() is None

    def test_reads_aliases_and_keeps_extra(self, isolated_config: Path) -> None:
        _write_json(
            isolated_config / "appwrite.json",
            {"projectId": "p1", "projectName": "Demo", "functions": [{"$id": "f"}]},
        )
        project = load_project_config()
        assert project is not None
        assert project.project_id == "p1"
        assert project.project_name == "Demo"
        assert project.model_extra == {"functions": [{"$id": "f"}]}

    def test_invalid_json_raises(self, isolated_config: Path) -> None:
        (isolated_config / "appwrite.json").write_text("nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid project config"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.endpoint == DEFAULT_ENDPOINT
        assert config.project_id is None

    def test_project_file_overrides_global(self, isolated_config: Path) -> None:
        save_global_config(GlobalConfig(project_id="global", endpoint="http://global/v1"))
        _write_json(isolated_config / "appwrite.json", {"projectId": "local"})
        config = resolve_config()
        assert config.project_id == "local"
        assert config.endpoint == "http://global/v1"

    def test_env_overrides_project_file(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_json(
            isolated_config / "appwrite.json",
            {"projectId": "local", "endpoint": "http://local/v1"},
        )
        monkeypatch.setenv("APPWRITE_PROJECT_ID", "env")
        monkeypatch.setenv("APPWRITE_ENDPOINT", "http://env/v1")
        monkeypatch.setenv("APPWRITE_KEY", "env-key")
        config = resolve_config()
        assert config.project_id == "env"
        assert config.endpoint == "http://env/v1"
        assert config.key == "env-key"

    def test_cli_flags_win(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APPWRITE_PROJECT_ID", "env")
        config = resolve_config(cli_endpoint="http://cli/v1", cli_project="cli")
        assert config.project_id == "cli"
        assert config.endpoint == "http://cli/v1"

    def test_resolution_never_saved(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        save_global_config(GlobalConfig(project_id="global"))
        monkeypatch.setenv("APPWRITE_PROJECT_ID", "env")
        resolve_config()
        assert load_global_config().project_id == "global"
