"""
Syncthing status checks through stc.

Before launch: warn (never block) when the ludusavi backup folder is not
fully synced, so the restored saves may be stale.
After backup: ask Syncthing to rescan the folder so the new backup spreads
to other devices right away.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern

from ..tools.locator import ToolHandle
from ..utils.process import run_captured
from .notifications import notify_sync_warning

logger = logging.getLogger(__name__)

STC_TIMEOUT = 10
NOTIFICATION_DELAY = 1.0
PERCENT_PATTERN = re.compile(r'"syncPercentDone"\s*:\s*(\d+)')


@dataclass
class SyncStatus:
    """Sync state of one folder for this run."""
    available: bool
    known: bool = False
    percentage: int = 0

    @property
    def complete(self) -> bool:
        return self.known and self.percentage >= 100


def _folder_patterns(folder_name: str) -> List[Pattern]:
    """Ordered patterns locating the folder's entry in stc json_dump output."""
    name = re.escape(folder_name)
    return [
        # Whole flat object containing the folder name, any key order
        re.compile(r'\{[^{}]*"folderName"\s*:\s*"' + name + r'"[^{}]*\}'),
        # Keys following the folder name within the same object
        re.compile(r'"folderName"\s*:\s*"' + name + r'"[^}]*'),
    ]


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def parse_json_dump(output: str, folder_name: str) -> Optional[int]:
    """Extract a folder's sync percentage from stc json_dump output."""
    for pattern in _folder_patterns(folder_name):
        match = pattern.search(output)
        if not match:
            continue
        percent = PERCENT_PATTERN.search(match.group(0))
        if percent:
            return _clamp(int(percent.group(1)))
    return None


def parse_status_text(output: str, folder_name: str) -> Optional[int]:
    """Extract a folder's sync percentage from `stc status` text.

    The folder line carries the percentage in its third column, e.g.
    "ludusavi_server  idle  87%  ...".
    """
    for line in output.splitlines():
        if folder_name not in line:
            continue
        columns = line.split()
        if len(columns) < 3:
            continue
        value = columns[2].rstrip("%")
        if value.isdigit():
            return _clamp(int(value))
    return None


class SyncStatusChecker:
    """Queries stc for folder completion. Purely advisory."""

    def __init__(self, stc: Optional[ToolHandle], runner=run_captured,
                 notifier: Callable[[int, str], Optional[str]] = notify_sync_warning,
                 sleep=asyncio.sleep):
        self.stc = stc
        self._runner = runner
        self._notifier = notifier
        self._sleep = sleep

    @property
    def available(self) -> bool:
        return self.stc is not None

    async def _query(self, *args: str) -> Optional[str]:
        try:
            result = await self._runner(self.stc.command(*args), timeout=STC_TIMEOUT)
        except OSError as e:
            logger.debug(f"[Sync] stc {args[0]} failed: {e}")
            return None
        return result.stdout if result.ok else None

    async def check(self, folder_name: str, game_name: str = "") -> SyncStatus:
        """
        Check how far a Syncthing folder is synced.

        Args:
            folder_name: Syncthing folder label
            game_name: Game name shown in the warning

        Returns:
            SyncStatus (available=False when stc is missing)
        """
        if not self.available:
            logger.info("[Sync] Note: stc (Syncthing CLI) not found. Skipping sync status check.")
            return SyncStatus(available=False)

        logger.info(f"[Sync] Checking Syncthing sync status for {folder_name} folder...")

        # JSON dump first (more reliable), plain status as fallback
        percentage = None
        output = await self._query("json_dump")
        if output:
            percentage = parse_json_dump(output, folder_name)
        if percentage is None:
            output = await self._query("status", folder_name)
            if output:
                percentage = parse_status_text(output, folder_name)

        if percentage is None:
            logger.warning(f"[Sync] Could not determine sync status for {folder_name}")
            return SyncStatus(available=True)

        status = SyncStatus(available=True, known=True, percentage=percentage)
        logger.info(f"[Sync] Syncthing sync status: {percentage}%")

        if not status.complete:
            await self._warn(status, game_name)
        return status

    async def _warn(self, status: SyncStatus, game_name: str) -> None:
        logger.warning(f"[Sync] WARNING: Syncthing folder is not fully synced ({status.percentage}%)!")
        logger.warning("[Sync] Game will run anyway, but saves may not be up to date.")
        try:
            self._notifier(status.percentage, game_name)
        except Exception as e:
            logger.debug(f"[Sync] Notification failed: {e}")
        # Give the notification a moment to appear before the game grabs the screen
        await self._sleep(NOTIFICATION_DELAY)

    async def trigger_rescan(self, folder_name: str) -> bool:
        """Ask Syncthing to rescan a folder. Failures are only logged."""
        if not self.available:
            logger.info("[Sync] Note: stc (Syncthing CLI) not found. Skipping Syncthing rescan.")
            return False

        logger.info(f"[Sync] Triggering Syncthing rescan for {folder_name} folder...")
        try:
            result = await self._runner(self.stc.command("rescan", folder_name), timeout=STC_TIMEOUT)
        except OSError as e:
            logger.warning(f"[Sync] Warning: Failed to trigger Syncthing rescan: {e}")
            return False

        if result.ok:
            logger.info("[Sync] Syncthing rescan triggered successfully.")
            return True
        logger.warning("[Sync] Warning: Failed to trigger Syncthing rescan.")
        return False
