"""Configuration management with XDG paths and precedence resolution.

This module handles all persistent configuration for plugspec:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.plugspec/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~plugspec.models.GeneratorConfig`
  JSON file storing user-wide defaults.
* **Project config** -- An optional ``./plugspec.json`` next to the spec
  being compiled.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration, and :func:`resolve_workspace_root` turns
  it into the directory handed to the generator.

Nothing outside this module reads the environment: the generator receives
the resolved workspace root explicitly.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from plugspec.exceptions import ConfigError
from plugspec.models import GeneratorConfig

_APP_NAME = "plugspec"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "plugspec.json"

ENV_WORKSPACE = "PLUGSPEC_WORKSPACE"
ENV_SKIP_TOOLCHAIN = "PLUGSPEC_SKIP_TOOLCHAIN"

_TRUTHY = {"1", "true", "yes", "on"}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory.

    On Linux/BSD: ``$XDG_CONFIG_HOME/plugspec/`` (default ``~/.config/plugspec/``).
    On macOS/Windows: ``~/.plugspec/``.

    The directory is not created; plugspec only ever reads from it.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/plugspec/`` (default ``~/.local/share/plugspec/``).
    On macOS/Windows: ``~/.plugspec/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Config files ---


def _read_json(path: Path) -> Optional[dict[str, Any]]:
    """Read a JSON object from *path*, or ``None`` if the file does not exist."""
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> dict[str, Any]:
    """Load the global configuration as a dict (empty if the file is missing).

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    return _read_json(global_config_path()) or {}


def load_project_config(directory: Optional[Path] = None) -> dict[str, Any]:
    """Load project-local configuration from ``plugspec.json``.

    Args:
        directory: Where to look. Defaults to the current directory.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    base = directory if directory is not None else Path.cwd()
    return _read_json(base / _PROJECT_CONFIG_FILENAME) or {}


# --- Precedence resolution ---


def resolve_config(
    cli_workspace: Optional[str] = None,
    cli_skip_toolchain: bool = False,
) -> GeneratorConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_workspace``, ``cli_skip_toolchain``)
        2. Environment variables (``PLUGSPEC_WORKSPACE``,
           ``PLUGSPEC_SKIP_TOOLCHAIN``)
        3. Project config (``./plugspec.json``)
        4. User config (``~/.config/plugspec/config.json``)
        5. Defaults

    Raises:
        ConfigError: If a config file is invalid.
    """
    # 5 + 4. Defaults, then global config
    merged: dict[str, Any] = dict(load_global_config())

    # 3. Project-local config
    merged.update(load_project_config())

    # 2. Environment variables
    env_workspace = os.environ.get(ENV_WORKSPACE)
    if env_workspace:
        merged["workspace_root"] = env_workspace
    if os.environ.get(ENV_SKIP_TOOLCHAIN, "").lower() in _TRUTHY:
        merged["run_toolchain"] = False

    # 1. CLI flags
    if cli_workspace is not None:
        merged["workspace_root"] = cli_workspace
    if cli_skip_toolchain:
        merged["run_toolchain"] = False

    try:
        return GeneratorConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def resolve_workspace_root(config: GeneratorConfig) -> Path:
    """Return the directory plugin package roots are resolved against.

    Uses ``config.workspace_root`` when set, otherwise ``$GOPATH/src`` when
    ``GOPATH`` is set, otherwise the current directory.
    """
    if config.workspace_root is not None:
        return config.workspace_root.expanduser()
    gopath = os.environ.get("GOPATH", "")
    if gopath:
        # GOPATH may list several directories; the first one receives new code
        return Path(gopath.split(os.pathsep)[0]).expanduser() / "src"
    return Path.cwd()
