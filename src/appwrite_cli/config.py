"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for appwrite_cli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.appwrite-cli/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~appwrite_cli.models.GlobalConfig`
  JSON file storing the endpoint, project, API key and session cookie.
* **Project config** -- an optional ``./appwrite.json`` pinning the project
  (and endpoint) for a code repository.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project config, and global config into the final
  effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) so an interrupted save never truncates the session.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from appwrite_cli.exceptions import ConfigError
from appwrite_cli.models import GlobalConfig, ProjectConfig

_APP_NAME = "appwrite-cli"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "appwrite.json"

ENV_ENDPOINT = "APPWRITE_ENDPOINT"
ENV_PROJECT_ID = "APPWRITE_PROJECT_ID"
ENV_KEY = "APPWRITE_KEY"


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
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/appwrite-cli/`` (default
    ``~/.config/appwrite-cli/``). On macOS/Windows: ``~/.appwrite-cli/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/appwrite-cli/`` (default
    ``~/.local/share/appwrite-cli/``). On macOS/Windows:
    ``~/.appwrite-cli/data/``.
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "data"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~appwrite_cli.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


def save_session_cookie(cookie: str) -> None:
    """Store the session cookie returned by the server in the global config."""
    config = load_global_config()
    if config.cookie == cookie:
        return
    config.cookie = cookie
    save_global_config(config)


# --- Project-local config ---


def load_project_config() -> Optional[ProjectConfig]:
    """Load project-local configuration from ``./appwrite.json``.

    Returns:
        The parsed :class:`~appwrite_cli.models.ProjectConfig`, or ``None``
        if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
        return ProjectConfig.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(
    cli_endpoint: Optional[str] = None,
    cli_project: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration.

    Precedence (high to low):
        1. CLI flags (``--endpoint``, ``--project-id``)
        2. Environment variables (``APPWRITE_ENDPOINT``,
           ``APPWRITE_PROJECT_ID``, ``APPWRITE_KEY``)
        3. Project config (``./appwrite.json``)
        4. User config (``~/.config/appwrite-cli/config.json``)
        5. Defaults

    The returned object is a copy; it is never written back to disk.
    """
    config = load_global_config().model_copy(deep=True)

    project = load_project_config()
    if project is not None:
        if project.project_id:
            config.project_id = project.project_id
        if project.endpoint:
            config.endpoint = project.endpoint

    env_endpoint = os.environ.get(ENV_ENDPOINT)
    if env_endpoint:
        config.endpoint = env_endpoint
    env_project = os.environ.get(ENV_PROJECT_ID)
    if env_project:
        config.project_id = env_project
    env_key = os.environ.get(ENV_KEY)
    if env_key:
        config.key = env_key

    if cli_endpoint is not None:
        config.endpoint = cli_endpoint
    if cli_project is not None:
        config.project_id = cli_project

    return config
