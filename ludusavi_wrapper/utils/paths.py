"""Ludusavi wrapper file path constants and utilities."""

from pathlib import Path
from typing import Mapping, Optional


# Cache files (file names kept compatible with the shell wrapper)
TOOL_CACHE_FILE = "ludusavi_wrapper_path"
PING_CACHE_FILE = "ludusavi_wrapper_ping_cmd"

# Append-only invocation log
DEFAULT_DEBUG_LOG = "/tmp/ludusavi_wrapper_debug.log"


def get_home_dir(environ: Mapping[str, str]) -> Path:
    """Get the home directory named by HOME in environ, else the current user's."""
    home = environ.get("HOME", "")
    return Path(home) if home else Path.home()


def get_cache_dir(environ: Mapping[str, str], home: Optional[Path] = None) -> Path:
    """Get the per-user cache directory.

    Resolution order:
    - $XDG_CACHE_HOME itself (files are stored directly inside it)
    - ~/Library/Caches/ludusavi-wrapper when ~/Library/Caches exists (macOS)
    - ~/.cache

    Args:
        environ: Environment to read XDG_CACHE_HOME from
        home: Home directory override (defaults to get_home_dir(environ))

    Returns:
        Cache directory path (not created)
    """
    xdg_cache = environ.get("XDG_CACHE_HOME", "")
    if xdg_cache:
        return Path(xdg_cache)

    home = home or get_home_dir(environ)
    mac_caches = home / "Library" / "Caches"
    if mac_caches.is_dir():
        return mac_caches / "ludusavi-wrapper"

    return home / ".cache"


def get_tool_cache_path(cache_dir: Path) -> Path:
    """Get path to the cached ludusavi location."""
    return cache_dir / TOOL_CACHE_FILE


def get_ping_cache_path(cache_dir: Path) -> Path:
    """Get path to the cached ping command."""
    return cache_dir / PING_CACHE_FILE


def get_debug_log_path(environ: Mapping[str, str]) -> Path:
    """Get path to the append-only debug log."""
    return Path(environ.get("LUDUSAVI_WRAPPER_DEBUG_LOG") or DEFAULT_DEBUG_LOG)
