from __future__ import annotations

from pathlib import Path
import sys
from typing import Callable, Dict, List, Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from ludusavi_wrapper.utils.process import CommandResult  # noqa: E402


class FakeRunner:
    """Async stand-in for run_captured that records argument vectors.

    `respond` maps an argv to a CommandResult (or raises OSError);
    unknown commands fail with returncode 1.
    """

    def __init__(self, respond: Optional[Callable[[List[str]], CommandResult]] = None):
        self.calls: List[List[str]] = []
        self.timeouts: List[Optional[float]] = []
        self._respond = respond or (lambda argv: CommandResult(returncode=1))

    async def __call__(self, argv: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
        self.calls.append(list(argv))
        self.timeouts.append(timeout)
        return self._respond(list(argv))


@pytest.fixture
def fake_runner() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture
def make_executable(tmp_path: Path) -> Callable[[str], Path]:
    """Create an executable file under tmp_path."""

    def _make(relative: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(0o755)
        return path

    return _make


@pytest.fixture
def base_environ(tmp_path: Path) -> Dict[str, str]:
    """Minimal environment with caches and the debug log under tmp_path."""
    return {
        "HOME": str(tmp_path / "home"),
        "PATH": "/usr/bin:/bin",
        "XDG_CACHE_HOME": str(tmp_path / "cache"),
        "LUDUSAVI_WRAPPER_DEBUG_LOG": str(tmp_path / "debug.log"),
    }
