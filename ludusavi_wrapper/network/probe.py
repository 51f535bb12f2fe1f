"""
Network Probe

Decides whether ludusavi may try to update its manifest.

Ping timeout flags differ between platforms:
  - macOS/BSD: -W is milliseconds
  - Linux iputils: -W is seconds
  - BusyBox: -w is milliseconds
The working form is detected once against the loopback address (a local
capability check, not a connectivity check) and optionally cached. The
connectivity check then pings a few anycast DNS resolvers in order.

Every ping is also bounded from our side with asyncio.wait_for, so a
flag that the local ping interprets in the wrong unit cannot stall a launch.
"""

import logging
import shlex
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from ..cache import load_cached_value, save_cached_value
from ..utils.process import run_captured

logger = logging.getLogger(__name__)

LOOPBACK = "127.0.0.1"

# Cloudflare, Google, Quad9
PROBE_HOSTS = ("1.1.1.1", "8.8.8.8", "9.9.9.9")

# (flags tested against loopback, flags used for real probes)
TIMEOUT_CONVENTIONS: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (("-c", "1", "-W", "100"), ("-c", "1", "-W", "300")),
    (("-c", "1", "-W", "1"), ("-c", "1", "-W", "1")),
    (("-c", "1", "-w", "300"), ("-c", "1", "-w", "300")),
)
DEFAULT_PING_FLAGS = ("-c", "1")

TRY_MANIFEST_UPDATE = "--try-manifest-update"
NO_MANIFEST_UPDATE = "--no-manifest-update"

DEFAULT_TIMEOUT_BUDGET = 3.0
MAX_ATTEMPT_SECONDS = 1.5
LOCAL_PROBE_TIMEOUT = 2.0


def manifest_flag(online: bool) -> str:
    """Map reachability to the ludusavi manifest-update flag."""
    return TRY_MANIFEST_UPDATE if online else NO_MANIFEST_UPDATE


def parse_ping_command(value: Optional[str]) -> Optional[List[str]]:
    """Parse a cached ping command. Returns None if it is not usable."""
    if not value or "\x00" in value:
        return None
    try:
        argv = shlex.split(value)
    except ValueError:
        return None
    if not argv or argv[0] != "ping":
        return None
    return argv


class NetworkProbe:
    """Selects a ping strategy and checks outbound connectivity."""

    def __init__(self, cache_path: Optional[Path] = None, runner=run_captured,
                 hosts: Sequence[str] = PROBE_HOSTS):
        self.cache_path = cache_path
        self.hosts = tuple(hosts)
        self._runner = runner
        self._ping_cmd: Optional[List[str]] = None

    async def _succeeds(self, argv: Sequence[str], timeout: float) -> bool:
        try:
            result = await self._runner(list(argv), timeout=timeout)
        except (OSError, ValueError) as e:
            logger.debug(f"[Network] Could not run {argv[0]}: {e}")
            return False
        return result.ok

    async def select_strategy(self) -> List[str]:
        """Get the ping command prefix to use, detecting and caching it once."""
        if self._ping_cmd is not None:
            return self._ping_cmd

        if self.cache_path is not None:
            cached = parse_ping_command(load_cached_value(self.cache_path))
            if cached and not await self._succeeds([*cached, LOOPBACK], LOCAL_PROBE_TIMEOUT):
                logger.info(f"[Network] Cached ping command failed locally, re-detecting: {shlex.join(cached)}")
                cached = None
            if cached:
                logger.info(f"[Network] Loaded ping command from cache: {shlex.join(cached)}")
                self._ping_cmd = cached
                return cached

        flags = DEFAULT_PING_FLAGS
        for test_flags, use_flags in TIMEOUT_CONVENTIONS:
            if await self._succeeds(["ping", *test_flags, LOOPBACK], LOCAL_PROBE_TIMEOUT):
                flags = use_flags
                break

        ping_cmd = ["ping", *flags]
        # Prefer IPv4 to avoid IPv6/AAAA lookup delays
        if await self._succeeds(["ping", "-c", "1", "-4", LOOPBACK], LOCAL_PROBE_TIMEOUT):
            ping_cmd = ["ping", "-4", *flags]

        logger.debug(f"[Network] Selected ping command: {shlex.join(ping_cmd)}")
        if self.cache_path is not None and save_cached_value(self.cache_path, shlex.join(ping_cmd)):
            logger.info("[Network] Cached ping command for future use")

        self._ping_cmd = ping_cmd
        return ping_cmd

    async def is_online(self, timeout_budget: float = DEFAULT_TIMEOUT_BUDGET) -> bool:
        """
        Check connectivity within a total time budget.

        Hosts are tried in order; the first successful reply wins.
        Never raises: any failure means offline.
        """
        ping_cmd = await self.select_strategy()
        deadline = time.monotonic() + timeout_budget

        for host in self.hosts:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug("[Network] Time budget exhausted")
                break
            attempt_timeout = min(MAX_ATTEMPT_SECONDS, remaining)
            if await self._succeeds([*ping_cmd, host], attempt_timeout):
                logger.debug(f"[Network] {host} reachable")
                return True
            logger.debug(f"[Network] {host} unreachable")
        return False

    async def manifest_flag(self, timeout_budget: float = DEFAULT_TIMEOUT_BUDGET) -> str:
        """Probe the network and return the matching ludusavi flag."""
        online = await self.is_online(timeout_budget)
        if online:
            logger.info("[Network] Network detected, will try to update manifest...")
        else:
            logger.info("[Network] No network detected, skipping manifest update...")
        return manifest_flag(online)
