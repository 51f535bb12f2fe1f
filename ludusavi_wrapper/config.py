"""Run configuration, built once from arguments and environment."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Tuple

from .utils.paths import get_cache_dir, get_ping_cache_path, get_tool_cache_path

DEFAULT_SYNC_FOLDER = "ludusavi_server"


class Mode(Enum):
    """Which phases of the save cycle to run"""
    WRAPPER = "wrapper"  # restore -> play -> backup
    PRE = "pre"          # restore only
    POST = "post"        # backup only


@dataclass(frozen=True)
class WrapperConfig:
    """Everything a wrapper run needs, passed explicitly to the orchestrator."""
    mode: Mode = Mode.WRAPPER
    game_name: Optional[str] = None
    use_cache: bool = False
    command: Tuple[str, ...] = ()
    environ: Mapping[str, str] = field(default_factory=dict)
    cwd: str = "."
    cache_dir: Path = Path.home() / ".cache"
    sync_folder: str = DEFAULT_SYNC_FOLDER
    prog: str = "ludusavi-wrapper"

    @property
    def tool_cache_path(self) -> Optional[Path]:
        """ludusavi location cache, or None when caching is off."""
        return get_tool_cache_path(self.cache_dir) if self.use_cache else None

    @property
    def ping_cache_path(self) -> Optional[Path]:
        """Ping command cache, or None when caching is off."""
        return get_ping_cache_path(self.cache_dir) if self.use_cache else None

    @property
    def executable(self) -> Optional[str]:
        return self.command[0] if self.command else None


def build_config(mode: str, game_name: Optional[str], use_cache: bool,
                 command: List[str], environ: Mapping[str, str], cwd: str,
                 prog: str = "ludusavi-wrapper") -> WrapperConfig:
    """Build the run configuration.

    A leading "--" separator in the game command is dropped; everything
    after it is passed through untouched.
    """
    command = list(command)
    if command and command[0] == "--":
        command = command[1:]

    return WrapperConfig(
        mode=Mode(mode),
        game_name=game_name or None,
        use_cache=use_cache,
        command=tuple(command),
        environ=dict(environ),
        cwd=cwd,
        cache_dir=get_cache_dir(environ),
        sync_folder=environ.get("LUDUSAVI_SYNC_FOLDER") or DEFAULT_SYNC_FOLDER,
        prog=prog,
    )
