"""
Game name resolution.

The game name is ludusavi's lookup key. Sources, first non-empty wins:
  1. --game-name
  2. Launcher environment variables
  3. The game executable (wrapper mode): macOS .app bundle name, else the
     file name without extension
  4. The working directory, skipping generic build/arch folders
"""

import logging
import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, List, Mapping, Optional

from ..config import Mode
from .launchers import LauncherFamily, detect_launcher, launcher_game_name

logger = logging.getLogger(__name__)

APP_BUNDLE_PATTERN = re.compile(r"/([^/]+)\.app/Contents/")

# Generic folder names that never name a game (compared case-insensitively)
GENERIC_DIR_NAMES = frozenset({
    "bin", "x64", "x86", "x86_64", "i386", "i686", "amd64",
    "lib", "lib64", "lib32", "data", "game",
})
MAX_PARENT_LEVELS = 3


@dataclass
class ResolvedIdentity:
    """Outcome of game name resolution."""
    name: str
    source: str
    launcher: LauncherFamily


@dataclass
class _ResolveContext:
    override: Optional[str]
    mode: Mode
    executable: Optional[str]
    cwd: str
    environ: Mapping[str, str]
    launcher: LauncherFamily


def name_from_executable(executable: str) -> str:
    """Game name from an executable path."""
    match = APP_BUNDLE_PATTERN.search(executable)
    if match:
        return match.group(1)
    filename = PurePath(executable).name
    stem, dot, _ext = filename.rpartition(".")
    return stem if dot else filename


def name_from_directory(cwd: str) -> str:
    """Game name from a working directory, walking past generic folders."""
    path = PurePath(cwd)
    name = path.name
    for _ in range(MAX_PARENT_LEVELS):
        if name.lower() not in GENERIC_DIR_NAMES:
            break
        path = path.parent
        name = path.name
    return name


class IdentityResolver:
    """Resolves the game name from an ordered list of matchers."""

    def __init__(self, steam_roots=None):
        self.steam_roots = steam_roots
        self._matchers: List[Callable[[_ResolveContext], Optional[str]]] = [
            self._from_override,
            self._from_launcher,
            self._from_executable,
            self._from_directory,
        ]

    def resolve(self, explicit_override: Optional[str], mode: Mode,
                first_positional_arg: Optional[str], cwd: str,
                launcher_env: Mapping[str, str]) -> ResolvedIdentity:
        """
        Resolve the game name.

        Args:
            explicit_override: --game-name value
            mode: Wrapper mode (executable detection only applies to WRAPPER)
            first_positional_arg: Game executable path, if any
            cwd: Current working directory
            launcher_env: Environment to read launcher variables from

        Returns:
            ResolvedIdentity; name may be "" when nothing matched
        """
        context = _ResolveContext(
            override=explicit_override,
            mode=mode,
            executable=first_positional_arg,
            cwd=cwd,
            environ=launcher_env,
            launcher=detect_launcher(launcher_env),
        )

        for matcher in self._matchers:
            name = matcher(context)
            if name:
                source = matcher.__name__.replace("_from_", "")
                logger.info(f"[Identity] Detected game name from {source}: {name}")
                return ResolvedIdentity(name=name, source=source, launcher=context.launcher)

        return ResolvedIdentity(name="", source="none", launcher=context.launcher)

    def _from_override(self, context: _ResolveContext) -> Optional[str]:
        return context.override

    def _from_launcher(self, context: _ResolveContext) -> Optional[str]:
        return launcher_game_name(context.launcher, context.environ, self.steam_roots)

    def _from_executable(self, context: _ResolveContext) -> Optional[str]:
        if context.mode != Mode.WRAPPER or not context.executable:
            return None
        return name_from_executable(context.executable)

    def _from_directory(self, context: _ResolveContext) -> Optional[str]:
        return name_from_directory(context.cwd)
