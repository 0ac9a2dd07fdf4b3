"""Reader settings management.

Loads settings from ``~/.tmxreader/settings.json``, falling back to the
bundled defaults, and configures logging for the console entry point.
"""

from __future__ import annotations

import importlib.resources
import json
import logging
from pathlib import Path
from typing import Any

_USER_CONFIG_DIR = Path.home() / ".tmxreader"
_USER_SETTINGS_PATH = _USER_CONFIG_DIR / "settings.json"

_loaded: bool = False
_settings: dict[str, Any] = {}

# Used when the bundled defaults file cannot be found
_FALLBACK: dict[str, Any] = {
    "huge_tree": False,
    "log_level": "WARNING",
    "log_format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
}


def _load_defaults() -> dict[str, Any]:
    """Load the bundled default settings using importlib.resources.

    Works whether the package is run from source or installed as a wheel.
    """
    try:
        ref = importlib.resources.files("tmxreader").joinpath("default_settings.json")
        with importlib.resources.as_file(ref) as p:
            with open(p, encoding="utf-8") as f:
                return json.load(f)
    except (FileNotFoundError, TypeError):
        return dict(_FALLBACK)


def _load_user_settings() -> dict[str, Any]:
    if _USER_SETTINGS_PATH.exists():
        with open(_USER_SETTINGS_PATH, encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{_USER_SETTINGS_PATH} is not valid JSON ({exc})") from exc
    return {}


def _load() -> None:
    """Load and merge default + user settings."""
    global _settings, _loaded
    _settings = dict(_FALLBACK)
    _settings.update(_load_defaults())
    _settings.update(_load_user_settings())
    _loaded = True


def save_settings() -> None:
    """Persist the current settings to disk."""
    if not _loaded:
        _load()
    _USER_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    with open(_USER_SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(_settings, f, indent=2, ensure_ascii=False)


def get_settings() -> dict[str, Any]:
    """Return a copy of all settings (cached after first call)."""
    if not _loaded:
        _load()
    return dict(_settings)


def get_setting(key: str, default: Any = None) -> Any:
    """Return one setting value, or *default*."""
    if not _loaded:
        _load()
    return _settings.get(key, default)


def set_setting(key: str, value: Any) -> None:
    """Set a setting value in memory."""
    if not _loaded:
        _load()
    _settings[key] = value


def reload() -> None:
    """Force re-read of settings files."""
    _load()


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger from the ``log_level``/``log_format`` settings.

    Only the console entry point calls this; the library itself never
    touches logging configuration.
    """
    name = (level or get_setting("log_level", "WARNING")).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.WARNING),
        format=get_setting("log_format", _FALLBACK["log_format"]),
    )
