"""
Tool Locator

Finds the external tools the wrapper drives:
  - ludusavi (required): bundled paths, PATH, or the Flatpak app
  - stc, the Syncthing CLI companion (optional)

A resolved ludusavi location can be cached across runs. The cached value is
re-validated every time, so a moved, uninstalled or de-permissioned binary
(or a Flatpak handle on a system that lost flatpak) falls back to a full
re-detection instead of failing the launch.
"""

import functools
import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from ..cache import load_cached_value, save_cached_value
from ..errors import ToolNotFoundError
from ..utils.paths import get_home_dir
from ..utils.process import run_captured

logger = logging.getLogger(__name__)

LUDUSAVI_FLATPAK_ID = "com.github.mtkennerly.ludusavi"
FLATPAK_BIN = "flatpak"


class ToolKind(Enum):
    """How a tool is invoked"""
    NATIVE = "native"
    SANDBOXED = "sandboxed"


@dataclass(frozen=True)
class ToolHandle:
    """Resolved, invocable reference to an external tool."""
    name: str
    kind: ToolKind
    argv: Tuple[str, ...]

    def command(self, *args: str) -> List[str]:
        """Build a full argument vector for this tool."""
        return [*self.argv, *args]

    @property
    def display(self) -> str:
        return " ".join(self.argv)

    def to_cache_value(self) -> str:
        """Single-line cache form: the path, or the flatpak run command."""
        return self.display

    @classmethod
    def from_cache_value(cls, name: str, value: str) -> "ToolHandle":
        if value.startswith(f"{FLATPAK_BIN} run "):
            return cls(name, ToolKind.SANDBOXED, tuple(value.split()))
        return cls(name, ToolKind.NATIVE, (value,))


def environ_which(environ: Mapping[str, str]) -> Callable[[str], Optional[str]]:
    """shutil.which searching the PATH of the given environment."""
    return functools.partial(shutil.which, path=environ.get("PATH") or None)


def is_executable_file(path: str) -> bool:
    """Check that a path is a regular file with the execute bit for us."""
    return bool(path) and os.path.isfile(path) and os.access(path, os.X_OK)


class FlatpakProbe:
    """Detects a tool installed as a Flatpak application."""

    def __init__(self, app_id: str, runner=run_captured,
                 which: Callable[[str], Optional[str]] = shutil.which):
        self.app_id = app_id
        self._runner = runner
        self._which = which

    @property
    def marker(self) -> str:
        """Label used when listing attempted locations."""
        return f"flatpak:{self.app_id}"

    async def find(self, name: str) -> Optional[ToolHandle]:
        """Return a sandboxed handle if the app is installed, else None."""
        if not self._which(FLATPAK_BIN):
            return None

        try:
            result = await self._runner([FLATPAK_BIN, "list", "--app"], timeout=15)
        except OSError as e:
            logger.debug(f"[Tools] flatpak list failed: {e}")
            return None

        if result.ok and self.app_id in result.stdout:
            return ToolHandle(name, ToolKind.SANDBOXED, (FLATPAK_BIN, "run", self.app_id))
        return None


class ToolLocator:
    """Resolves tool handles from caches, candidate paths and sandbox probes."""

    def __init__(self, which: Callable[[str], Optional[str]] = shutil.which):
        self._which = which

    def is_valid(self, handle: ToolHandle) -> bool:
        """Check that a handle still points at something we can run."""
        if handle.kind == ToolKind.NATIVE:
            return is_executable_file(handle.argv[0])
        return self._which(handle.argv[0]) is not None

    async def resolve(
        self,
        name: str,
        candidates: Sequence[str],
        sandbox_probe: Optional[FlatpakProbe] = None,
        cache_path: Optional[Path] = None,
    ) -> ToolHandle:
        """
        Resolve a tool.

        Args:
            name: Tool name (used in handles and error messages)
            candidates: Filesystem paths in priority order; empty entries skipped
            sandbox_probe: Optional probe tried after all candidates
            cache_path: Cache file to validate/persist; None disables caching

        Returns:
            ToolHandle for the first valid location

        Raises:
            ToolNotFoundError: With every location that was attempted
        """
        if cache_path is not None:
            cached = self._load_cached(name, cache_path)
            if cached is not None:
                return cached

        logger.info(f"[Tools] Auto-detecting {name} location...")
        attempted: List[str] = []

        for candidate in candidates:
            if not candidate:
                continue
            attempted.append(candidate)
            if is_executable_file(candidate):
                handle = ToolHandle(name, ToolKind.NATIVE, (candidate,))
                logger.info(f"[Tools] Found {name} at: {candidate}")
                self._store(handle, cache_path)
                return handle

        if sandbox_probe is not None:
            attempted.append(sandbox_probe.marker)
            handle = await sandbox_probe.find(name)
            if handle is not None:
                logger.info(f"[Tools] Found {name} as Flatpak ({sandbox_probe.app_id})")
                self._store(handle, cache_path)
                return handle

        raise ToolNotFoundError(name, attempted)

    def _load_cached(self, name: str, cache_path: Path) -> Optional[ToolHandle]:
        value = load_cached_value(cache_path)
        if not value:
            return None

        handle = ToolHandle.from_cache_value(name, value)
        if self.is_valid(handle):
            logger.info(f"[Tools] Loaded {name} path from cache: {handle.display}")
            return handle

        if handle.kind == ToolKind.SANDBOXED:
            logger.info(f"[Tools] Cached Flatpak command invalid ({FLATPAK_BIN} not found), re-detecting...")
        else:
            logger.info(f"[Tools] Cached {name} path no longer executable: {value}, re-detecting...")
        return None

    def _store(self, handle: ToolHandle, cache_path: Optional[Path]) -> None:
        if cache_path is None:
            return
        if save_cached_value(cache_path, handle.to_cache_value()):
            logger.info("[Tools] Cached path for future use")


def ludusavi_candidates(which: Callable[[str], Optional[str]] = shutil.which,
                        home: Optional[Path] = None) -> List[str]:
    """Common ludusavi install locations: Homebrew (Intel, Apple Silicon), Linux, user dirs, PATH."""
    home = home or Path.home()
    return [
        "/usr/local/bin/ludusavi",
        "/opt/homebrew/bin/ludusavi",
        "/usr/bin/ludusavi",
        str(home / ".local" / "bin" / "ludusavi"),
        str(home / ".cargo" / "bin" / "ludusavi"),
        which("ludusavi") or "",
    ]


def stc_candidates(which: Callable[[str], Optional[str]] = shutil.which,
                   home: Optional[Path] = None) -> List[str]:
    """stc locations: PATH first, then Go bin, user local, Homebrew, system."""
    home = home or Path.home()
    return [
        which("stc") or "",
        str(home / "go" / "bin" / "stc"),
        str(home / ".local" / "bin" / "stc"),
        "/usr/local/bin/stc",
        "/opt/homebrew/bin/stc",
        "/usr/bin/stc",
    ]


async def locate_ludusavi(
    locator: ToolLocator,
    environ: Mapping[str, str],
    cache_path: Optional[Path] = None,
    probe: Optional[FlatpakProbe] = None,
) -> ToolHandle:
    """Resolve ludusavi, honouring an executable LUDUSAVI_PATH override.

    Raises:
        ToolNotFoundError: If ludusavi is nowhere to be found
    """
    which = environ_which(environ)
    override = environ.get("LUDUSAVI_PATH", "")
    if is_executable_file(override):
        logger.info(f"[Tools] Using LUDUSAVI_PATH: {override}")
        return ToolHandle("ludusavi", ToolKind.NATIVE, (override,))
    if override:
        logger.warning(f"[Tools] LUDUSAVI_PATH is not executable, ignoring: {override}")

    return await locator.resolve(
        "ludusavi",
        ludusavi_candidates(which=which, home=get_home_dir(environ)),
        sandbox_probe=probe or FlatpakProbe(LUDUSAVI_FLATPAK_ID, which=which),
        cache_path=cache_path,
    )


async def locate_stc(locator: ToolLocator, environ: Mapping[str, str]) -> Optional[ToolHandle]:
    """Resolve the Syncthing CLI; None disables sync checks for this run."""
    candidates = stc_candidates(which=environ_which(environ), home=get_home_dir(environ))
    try:
        return await locator.resolve("stc", candidates)
    except ToolNotFoundError:
        logger.info("[Tools] stc (Syncthing CLI) not found")
        return None
