"""Platform-aware user directories.

The default download cache and config file live in the usual per-user
locations:
- config: ~/.config/jprov (Linux/macOS), %APPDATA%/jprov (Windows)
- cache:  ~/.cache/jprov  (Linux/macOS), %LOCALAPPDATA%/jprov/cache (Windows)
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from .detection import OS, detect_os

__all__ = [
    "home",
    "user_cache_dir",
    "user_config_dir",
]

APP_NAME = "jprov"


def _is_windows() -> bool:
    return detect_os() == OS.WINDOWS


@lru_cache(maxsize=1)
def home() -> Path:
    """Get user's home directory.

    Uses USERPROFILE on Windows, HOME on Unix, then Path.home().
    """
    if _is_windows():
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)

    return Path.home()


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Directory holding ``config.toml``."""
    if _is_windows():
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home() / "AppData" / "Roaming" / APP_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


@lru_cache(maxsize=1)
def user_cache_dir() -> Path:
    """Default root for the catalog snapshot, archives and extracted JDKs."""
    if _is_windows():
        local = os.environ.get("LOCALAPPDATA")
        if local:
            return Path(local) / APP_NAME / "cache"
        return home() / "AppData" / "Local" / APP_NAME / "cache"

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / APP_NAME
    return home() / ".cache" / APP_NAME


def clear_caches() -> None:
    """Clear cached paths (tests change environment variables)."""
    home.cache_clear()
    user_config_dir.cache_clear()
    user_cache_dir.cache_clear()
