"""Best-effort desktop notifications for sync warnings.

The first available mechanism is launched and never waited on; the
notification may still be on screen while the game starts.
"""

import logging
import shutil
import subprocess
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

TITLE = "Ludusavi Sync Warning"

# Launched notifiers, kept referenced so a still-running dialog is not
# garbage collected (and reported as a ResourceWarning) while we run
_launched: List[subprocess.Popen] = []


def _applescript_string(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def build_notification_commands(percentage: int, game_name: str) -> List[Tuple[str, List[str]]]:
    """Notification commands in preference order: (program, argv)."""
    dialog_text = (
        "WARNING: Syncthing folder is not fully synced!\n\n"
        f"Current sync: {percentage}%\n"
        f"Game: {game_name}\n\n"
        "The game will run, but your saves may not be up to date."
    )
    short_text = (
        f"Syncthing not synced ({percentage}%)!\n"
        f"Game: {game_name}\n\n"
        "Saves may not be up to date."
    )
    return [
        # macOS: AppleScript dialog, closes itself after 10 seconds
        ("osascript", [
            "osascript", "-e",
            f'display dialog "{_applescript_string(dialog_text)}" '
            'buttons {"Continue Anyway"} default button 1 with icon caution '
            f'with title "{TITLE}" giving up after 10',
        ]),
        ("notify-send", ["notify-send", "-u", "critical", "-t", "10000", TITLE, short_text]),
        ("zenity", ["zenity", "--warning", f"--text={dialog_text}", f"--title={TITLE}", "--timeout=10"]),
        ("kdialog", ["kdialog", "--sorry", dialog_text, "--title", TITLE]),
    ]


def notify_sync_warning(percentage: int, game_name: str,
                        which: Callable[[str], Optional[str]] = shutil.which,
                        popen=subprocess.Popen) -> Optional[str]:
    """
    Show a sync warning through the first available notification tool.

    Args:
        percentage: Current folder sync percentage
        game_name: Game being launched
        which: Program lookup (shutil.which)
        popen: Process launcher (subprocess.Popen)

    Returns:
        Name of the mechanism that was launched, or None
    """
    for program, argv in build_notification_commands(percentage, game_name):
        if not which(program):
            continue
        try:
            process = popen(argv,
                            stdin=subprocess.DEVNULL,
                            stdout=subprocess.DEVNULL,
                            stderr=subprocess.DEVNULL,
                            start_new_session=True)
            _launched.append(process)
            logger.debug(f"[Notify] Sync warning shown via {program}")
            return program
        except OSError as e:
            logger.debug(f"[Notify] {program} failed: {e}")

    logger.debug("[Notify] No notification mechanism available")
    return None
