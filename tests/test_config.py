"""Tests for plugspec.config -- XDG paths, config files, precedence."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from plugspec.config import (
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    load_project_config,
    resolve_config,
    resolve_workspace_root,
)
from plugspec.exceptions import ConfigError
from plugspec.models import GeneratorConfig


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


class TestXDGPaths:
    """Config and data directories."""

    def test_config_dir_xdg_custom(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("plugspec.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        assert get_config_dir() == tmp_path / "cfg" / "plugspec"
        assert not get_config_dir().exists()

    def test_config_dir_xdg_default(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("plugspec.config._is_xdg_platform", lambda: True)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".config" / "plugspec"

    def test_data_dir_created(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("plugspec.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        result = get_data_dir()
        assert result == tmp_path / "data" / "plugspec"
        assert result.is_dir()

    def test_fallback_paths(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("plugspec.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_dir() == tmp_path / ".plugspec"
        assert get_data_dir() == tmp_path / ".plugspec" / "logs"


# ---------------------------------------------------------------------------
# Config files
# ---------------------------------------------------------------------------


class TestConfigFiles:
    """Global and project config loading."""

    def test_missing_files_are_empty(self, isolated_config: Path) -> None:
        assert load_global_config() == {}
        assert load_project_config() == {}

    def test_global_config(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"run_toolchain": False})
        assert load_global_config() == {"run_toolchain": False}

    def test_project_config_in_directory(self, tmp_path: Path) -> None:
        _write_json(tmp_path / "plugspec.json", {"workspace_root": "/ws"})
        assert load_project_config(tmp_path) == {"workspace_root": "/ws"}

    def test_invalid_json(self, isolated_config: Path) -> None:
        (isolated_config / "plugspec.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid config"):
            load_project_config()

    def test_not_an_object(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "plugspec.json", ["a"])
        with pytest.raises(ConfigError, match="JSON object"):
            load_project_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    """CLI > env > project > global > defaults."""

    def test_defaults(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config == GeneratorConfig()
        assert config.run_toolchain is True
        assert config.formatter == ["goimports", "-w"]

    def test_global_then_project(self, isolated_config: Path) -> None:
        _write_json(global_config_path(), {"workspace_root": "/global", "toolchain_timeout": 60})
        _write_json(isolated_config / "plugspec.json", {"workspace_root": "/project"})
        config = resolve_config()
        assert config.workspace_root == Path("/project")
        assert config.toolchain_timeout == 60

    def test_env_over_project(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write_json(isolated_config / "plugspec.json", {"workspace_root": "/project"})
        monkeypatch.setenv("PLUGSPEC_WORKSPACE", "/env")
        monkeypatch.setenv("PLUGSPEC_SKIP_TOOLCHAIN", "true")
        config = resolve_config()
        assert config.workspace_root == Path("/env")
        assert config.run_toolchain is False

    def test_cli_over_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLUGSPEC_WORKSPACE", "/env")
        config = resolve_config(cli_workspace="/cli", cli_skip_toolchain=True)
        assert config.workspace_root == Path("/cli")
        assert config.run_toolchain is False

    def test_skip_env_falsey(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLUGSPEC_SKIP_TOOLCHAIN", "0")
        assert resolve_config().run_toolchain is True

    def test_invalid_value(self, isolated_config: Path) -> None:
        _write_json(isolated_config / "plugspec.json", {"toolchain_timeout": "soon"})
        with pytest.raises(ConfigError, match="Invalid configuration"):
            resolve_config()


class TestResolveWorkspaceRoot:
    """Workspace root fallbacks."""

    def test_explicit(self, isolated_config: Path) -> None:
        config = GeneratorConfig(workspace_root=Path("/ws"))
        assert resolve_workspace_root(config) == Path("/ws")

    def test_gopath(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOPATH", "/home/dev/go")
        assert resolve_workspace_root(GeneratorConfig()) == Path("/home/dev/go/src")

    def test_first_gopath_entry(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOPATH", "/first:/second")
        assert resolve_workspace_root(GeneratorConfig()) == Path("/first/src")

    def test_current_directory(self, isolated_config: Path) -> None:
        assert resolve_workspace_root(GeneratorConfig()) == Path.cwd()
