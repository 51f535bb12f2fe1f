"""
Launcher detection

Each supported launcher exports the game it starts through environment
variables:
  - Lutris: LUTRIS_GAME_NAME (title), LUTRIS_GAME_ID (slug)
  - Heroic: HEROIC_GAMES_LAUNCHER_GAME_TITLE (title), HEROIC_APP_NAME
    (often an opaque store id such as an Epic catalog hash)
  - Steam: SteamAppId (numeric), resolved to a title through the
    appmanifest_<id>.acf of whichever library holds the game
"""

import logging
import os
import re
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

import vdf

from ..utils.paths import get_home_dir

logger = logging.getLogger(__name__)

# Heroic exposes store ids like "Fortnite" for some games but hashes for most
OPAQUE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9]{20,}$")


class LauncherFamily(Enum):
    """Known launchers"""
    LUTRIS = "lutris"
    HEROIC = "heroic"
    STEAM = "steam"
    UNKNOWN = "unknown"


def detect_launcher(environ: Mapping[str, str]) -> LauncherFamily:
    """Detect the launcher family.

    LAUNCHER_TYPE forces a family unless it is unset or "auto";
    unrecognised values count as unknown.
    """
    forced = environ.get("LAUNCHER_TYPE", "auto").strip().lower()
    if forced and forced != "auto":
        try:
            return LauncherFamily(forced)
        except ValueError:
            logger.warning(f"[Identity] Unknown LAUNCHER_TYPE '{forced}', ignoring launcher variables")
            return LauncherFamily.UNKNOWN

    if environ.get("LUTRIS_GAME_NAME") or environ.get("LUTRIS_GAME_ID"):
        return LauncherFamily.LUTRIS
    if environ.get("HEROIC_APP_NAME") or environ.get("HEROIC_GAMES_LAUNCHER_GAME_TITLE"):
        return LauncherFamily.HEROIC
    if environ.get("SteamAppId", "0") not in ("", "0"):
        return LauncherFamily.STEAM
    return LauncherFamily.UNKNOWN


def looks_like_opaque_id(value: str) -> bool:
    """True for long alphanumeric strings that are ids, not titles."""
    return bool(OPAQUE_ID_PATTERN.match(value))


def launcher_variables(family: LauncherFamily) -> List[str]:
    """Environment variables worth showing for a launcher family."""
    return {
        LauncherFamily.LUTRIS: ["LUTRIS_GAME_NAME", "LUTRIS_GAME_ID"],
        LauncherFamily.HEROIC: ["HEROIC_APP_NAME", "HEROIC_GAMES_LAUNCHER_GAME_TITLE"],
        LauncherFamily.STEAM: ["SteamAppId", "SteamGameId"],
    }.get(family, [])


def launcher_game_name(family: LauncherFamily, environ: Mapping[str, str],
                       steam_roots: Optional[List[Path]] = None) -> str:
    """Extract the game name from launcher variables ("" if none usable)."""
    if family == LauncherFamily.LUTRIS:
        return environ.get("LUTRIS_GAME_NAME", "") or environ.get("LUTRIS_GAME_ID", "")

    if family == LauncherFamily.HEROIC:
        title = environ.get("HEROIC_GAMES_LAUNCHER_GAME_TITLE", "")
        if title:
            return title
        app_name = environ.get("HEROIC_APP_NAME", "")
        if app_name and looks_like_opaque_id(app_name):
            logger.info(f"[Identity] HEROIC_APP_NAME looks like an id, skipping: {app_name}")
            return ""
        return app_name

    if family == LauncherFamily.STEAM:
        for var in ("SteamAppId", "SteamGameId"):
            app_id = environ.get(var, "")
            if app_id.isdigit() and app_id != "0":
                name = find_steam_game_name(app_id, steam_roots, environ)
                if name:
                    return name
        return ""

    return ""


# ---------------------------------------------------------------------------
# Steam app manifests
# ---------------------------------------------------------------------------

def default_steam_roots(environ: Optional[Mapping[str, str]] = None) -> List[Path]:
    """Possible Steam installation directories (native, Flatpak, macOS)."""
    environ = environ if environ is not None else os.environ
    roots = []
    client_path = environ.get("STEAM_COMPAT_CLIENT_INSTALL_PATH")
    if client_path:
        roots.append(Path(client_path))
    home = get_home_dir(environ)
    roots.extend([
        home / ".steam" / "steam",
        home / ".local" / "share" / "Steam",
        home / ".var" / "app" / "com.valvesoftware.Steam" / ".local" / "share" / "Steam",
        home / "Library" / "Application Support" / "Steam",
    ])
    return roots


def _library_paths(steam_root: Path) -> List[Path]:
    """Library folders listed in libraryfolders.vdf, the root first."""
    libraries = [steam_root]
    folders_vdf = steam_root / "steamapps" / "libraryfolders.vdf"
    if not folders_vdf.is_file():
        return libraries

    try:
        with open(folders_vdf, "r", encoding="utf-8", errors="ignore") as f:
            data = vdf.load(f)
    except (OSError, SyntaxError) as e:
        logger.debug(f"[Identity] Could not parse {folders_vdf}: {e}")
        return libraries

    section = data.get("libraryfolders") or data.get("LibraryFolders") or {}
    for key, entry in section.items():
        if not key.isdigit():
            continue
        # Newer format nests {"path": ...}; older format maps index -> path
        path = entry.get("path") if isinstance(entry, dict) else entry
        if path and Path(path) not in libraries:
            libraries.append(Path(path))
    return libraries


def find_steam_game_name(app_id: str, steam_roots: Optional[List[Path]] = None,
                         environ: Optional[Mapping[str, str]] = None) -> str:
    """Look up a Steam game's title from its app manifest.

    Without explicit steam_roots, the default roots are derived from environ
    (HOME, STEAM_COMPAT_CLIENT_INSTALL_PATH).
    """
    seen = set()
    for root in steam_roots if steam_roots is not None else default_steam_roots(environ):
        if not (root / "steamapps").is_dir():
            continue
        for library in _library_paths(root):
            manifest = library / "steamapps" / f"appmanifest_{app_id}.acf"
            if manifest in seen or not manifest.is_file():
                continue
            seen.add(manifest)
            try:
                with open(manifest, "r", encoding="utf-8", errors="ignore") as f:
                    data = vdf.load(f)
            except (OSError, SyntaxError) as e:
                logger.debug(f"[Identity] Could not parse {manifest}: {e}")
                continue
            name = data.get("AppState", {}).get("name", "")
            if name:
                logger.debug(f"[Identity] Steam app {app_id} is '{name}' ({manifest})")
                return name
    return ""
