"""Configuration management with XDG paths and precedence resolution.

This module handles the persistent settings for jsonreq:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.jsonreq/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Settings file** -- a single :class:`~jsonreq.models.ClientSettings`
  JSON file (``config.json``) loaded by :func:`load_settings` and written
  atomically by :func:`save_settings`.
* **Precedence resolution** -- :func:`resolve_settings` merges explicit
  overrides, ``JSONREQ_*`` environment variables, and the settings file.

The default persistence target (``data/data.json``) is deliberately not a
setting; see :data:`~jsonreq.models.DEFAULT_SAVE_PATH`.
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from jsonreq.exceptions import ConfigError
from jsonreq.models import ClientSettings
from jsonreq.storage import atomic_write

_APP_NAME = "jsonreq"
_CONFIG_FILENAME = "config.json"

ENV_TIMEOUT = "JSONREQ_TIMEOUT"
ENV_VERIFY_SSL = "JSONREQ_VERIFY_SSL"
ENV_FOLLOW_REDIRECTS = "JSONREQ_FOLLOW_REDIRECTS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory spec (Linux/BSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/jsonreq/`` (default ``~/.config/jsonreq/``).
    On macOS/Windows: ``~/.jsonreq/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs live in ``crashes/``), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/jsonreq/`` (default ``~/.local/share/jsonreq/``).
    On macOS/Windows: ``~/.jsonreq/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def settings_path() -> Path:
    """Path to the settings file."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Settings file ---


def load_settings() -> ClientSettings:
    """Load settings from the config directory.

    Returns:
        The stored :class:`~jsonreq.models.ClientSettings`, or defaults if
        the file does not exist.

    Raises:
        ConfigError: If the file exists but is not valid JSON or fails
            validation.
    """
    path = settings_path()
    if not path.is_file():
        return ClientSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientSettings.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid settings at {path}: {exc}") from exc


def save_settings(settings: ClientSettings) -> Path:
    """Persist *settings* atomically and return the file path."""
    path = settings_path()
    atomic_write(path, json.dumps(settings.model_dump(mode="json"), indent=2) + "\n")
    return path


# --- Environment ---


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false), got {raw!r}")


def _parse_timeout(raw: str) -> Optional[float]:
    value = raw.strip().lower()
    if value in ("", "none", "off"):
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"{ENV_TIMEOUT} must be a number of seconds, got {raw!r}") from exc


def env_overrides() -> dict[str, Any]:
    """Collect settings overrides from ``JSONREQ_*`` environment variables."""
    overrides: dict[str, Any] = {}
    if ENV_TIMEOUT in os.environ:
        overrides["timeout"] = _parse_timeout(os.environ[ENV_TIMEOUT])
    if ENV_VERIFY_SSL in os.environ:
        overrides["verify_ssl"] = _parse_bool(ENV_VERIFY_SSL, os.environ[ENV_VERIFY_SSL])
    if ENV_FOLLOW_REDIRECTS in os.environ:
        overrides["follow_redirects"] = _parse_bool(
            ENV_FOLLOW_REDIRECTS, os.environ[ENV_FOLLOW_REDIRECTS]
        )
    return overrides


# --- Precedence resolution ---


def resolve_settings(**overrides: Any) -> ClientSettings:
    """Resolve the effective settings.

    Precedence (high to low):
        1. Keyword *overrides* whose value is not ``None``
        2. Environment variables (``JSONREQ_TIMEOUT``, ``JSONREQ_VERIFY_SSL``,
           ``JSONREQ_FOLLOW_REDIRECTS``)
        3. Settings file (``~/.config/jsonreq/config.json``)
        4. Defaults

    Example::

        settings = resolve_settings(timeout=5.0)

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    data = load_settings().model_dump()
    data.update(env_overrides())
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return ClientSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
