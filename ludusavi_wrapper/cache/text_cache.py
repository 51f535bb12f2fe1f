"""Single-line text cache files.

Used for the resolved ludusavi location and the detected ping command.
A missing or unreadable file is a cache miss; a failed write is skipped.

NOTE: Files are read and rewritten without locking. Two wrapper runs
racing on a fresh cache simply both write the same detected value.
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def load_cached_value(cache_path: Path) -> Optional[str]:
    """Load the first line of a cache file. Returns None on a miss."""
    try:
        if cache_path.is_file():
            with open(cache_path, "r", encoding="utf-8") as f:
                value = f.readline().strip()
            if value:
                return value
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"[Cache] Could not read {cache_path}: {e}")
    return None


def save_cached_value(cache_path: Path, value: str) -> bool:
    """Write a single-line value to a cache file, creating parent dirs."""
    try:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        with open(cache_path, "w", encoding="utf-8") as f:
            f.write(value + "\n")
        logger.debug(f"[Cache] Saved {cache_path}")
        return True
    except OSError as e:
        logger.debug(f"[Cache] Could not write {cache_path}: {e}")
        return False
