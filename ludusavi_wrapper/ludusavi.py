"""
Ludusavi CLI client.

Builds the argument vectors for ludusavi's restore, backup and wrap
commands and runs them attached to the launcher's terminal.
  - restore/backup: --force skips confirmation, --gui shows ludusavi's
    own dialogs for errors instead of waiting on a terminal prompt
  - wrap: restore, run the game, back up; ludusavi exits with the game's
    exit code
"""

import logging
from typing import List, Optional, Sequence

from .tools.locator import ToolHandle
from .utils.process import run_inherited, shell_exit_status

logger = logging.getLogger(__name__)


class LudusaviClient:
    """Runs ludusavi subcommands for one game."""

    def __init__(self, handle: ToolHandle, manifest_flag: str, runner=run_inherited):
        self.handle = handle
        self.manifest_flag = manifest_flag
        self._runner = runner

    def restore_command(self, game_name: str) -> List[str]:
        return self.handle.command(self.manifest_flag, "restore", "--force", "--gui", "--name", game_name)

    def backup_command(self, game_name: str) -> List[str]:
        return self.handle.command(self.manifest_flag, "backup", "--force", "--gui", "--name", game_name)

    def wrap_command(self, game_name: str, game_command: Sequence[str]) -> List[str]:
        return self.handle.command(
            self.manifest_flag, "wrap",
            "--name", game_name,
            "--force",
            "--gui",
            "--", *game_command,
        )

    async def _run(self, argv: List[str]) -> int:
        logger.debug(f"[Ludusavi] Running: {argv}")
        exit_code: Optional[int] = await self._runner(argv)
        # A missing return code counts as success
        if exit_code is None:
            return 0
        return shell_exit_status(exit_code)

    async def restore(self, game_name: str) -> int:
        """Restore saves. Returns ludusavi's exit code."""
        return await self._run(self.restore_command(game_name))

    async def backup(self, game_name: str) -> int:
        """Back up saves. Returns ludusavi's exit code."""
        return await self._run(self.backup_command(game_name))

    async def wrap(self, game_name: str, game_command: Sequence[str]) -> int:
        """Restore, run the game, back up. Returns the game's exit code."""
        return await self._run(self.wrap_command(game_name, game_command))
