"""Subprocess helpers.

Every external tool is started with an explicit argument vector through
asyncio.create_subprocess_exec; nothing is passed through a shell.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a captured command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


async def run_captured(argv: Sequence[str], timeout: Optional[float] = None) -> CommandResult:
    """Run a command, capturing its output.

    Args:
        argv: Program and arguments
        timeout: Seconds to wait before killing the process (None = no limit)

    Returns:
        CommandResult; a timed-out process is killed and reported with
        returncode -1 and timed_out=True

    Raises:
        OSError: If the program cannot be started (e.g. not installed)
    """
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.debug(f"[Process] Timed out after {timeout}s: {' '.join(argv)}")
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()
        return CommandResult(returncode=-1, timed_out=True)

    return CommandResult(
        returncode=process.returncode if process.returncode is not None else 0,
        stdout=stdout.decode(errors="replace") if stdout else "",
        stderr=stderr.decode(errors="replace") if stderr else "",
    )


def shell_exit_status(returncode: Optional[int]) -> Optional[int]:
    """Map a signal death (-N from asyncio) to the shell convention 128 + N."""
    if returncode is not None and returncode < 0:
        return 128 - returncode
    return returncode


async def run_inherited(argv: Sequence[str]) -> Optional[int]:
    """Run a command attached to this process's stdin/stdout/stderr.

    Used for ludusavi itself so its GUI prompts and the wrapped game's
    output reach the launcher unchanged.

    Returns:
        The process return code; a process killed by signal N reports
        128 + N, as a shell would

    Raises:
        OSError: If the program cannot be started
    """
    process = await asyncio.create_subprocess_exec(*argv)
    return shell_exit_status(await process.wait())
