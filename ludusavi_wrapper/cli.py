#!/usr/bin/env python3
"""
Command-line entry point.

Usage: ludusavi-wrapper [--cache] [--mode=wrapper|pre|post] [--game-name=NAME] [game_command ...]

Exit codes:
  0: Success
  1: ludusavi not found
  2: Wrapper mode without a game command (or invalid arguments)
  3: Game name could not be detected in pre/post mode
  127: ludusavi could not be started
  other: ludusavi's exit code (the game's exit code in wrapper mode)
"""

import argparse
import asyncio
import getpass
import logging
import os
import sys
from datetime import datetime
from typing import List, Mapping, Optional

from . import __version__
from .config import Mode, build_config
from .errors import WrapperError
from .orchestrator import Orchestrator
from .utils.paths import get_debug_log_path

logger = logging.getLogger(__name__)

DEBUG_LOGGER_NAME = "ludusavi_wrapper.debug"

EPILOG = """\
WHAT IT DOES:
    - Restores your latest saves when you launch a game
    - Backs up your saves when you quit
    - Works with Heroic, Lutris, Steam and any launcher that supports wrappers

LAUNCHER SETUP:
    In the Heroic/Lutris wrapper field, or Steam launch options, add:
        /path/to/ludusavi-wrapper --cache            (Steam: ... --cache %command%)

QUICK EXAMPLES:
    # Wrap any game (auto-detects game name)
    ludusavi-wrapper /path/to/game.exe

    # Recommended: enable caching for faster launches
    ludusavi-wrapper --cache /path/to/game.exe

    # Override game name if detection is wrong
    ludusavi-wrapper --game-name="The Witcher 3" /path/to/witcher3.exe

MODES:
    --mode=wrapper       Full cycle: restore -> play -> backup (default)
    --mode=pre           Only restore saves before launch
    --mode=post          Only backup saves after exit

GAME NAME DETECTION:
    1. --game-name argument
    2. Launcher environment variables (Lutris/Heroic/Steam)
    3. macOS .app bundle name
    4. Executable filename
    5. Current directory name

ENVIRONMENT:
    LUDUSAVI_PATH               ludusavi executable to use
    LAUNCHER_TYPE               lutris, heroic, steam or auto (default)
    LUDUSAVI_SYNC_FOLDER        Syncthing folder holding ludusavi backups
                                (default: ludusavi_server)
    LUDUSAVI_WRAPPER_DEBUG_LOG  Invocation log (default: /tmp/ludusavi_wrapper_debug.log)
"""


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Automatically back up and restore your game saves with ludusavi. "
                    "Like Steam Cloud, but works with ANY game.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--mode", choices=[m.value for m in Mode], default=Mode.WRAPPER.value,
                        help="Execution mode (default: wrapper)")
    parser.add_argument("--game-name", default="",
                        help="Override game name (auto-detected if not set)")
    parser.add_argument("--cache", action="store_true",
                        help="Enable caching of tool paths for faster startup")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("command", nargs=argparse.REMAINDER,
                        help="Game executable and its arguments (required in wrapper mode)")
    return parser


def setup_logging(verbose: bool = False) -> None:
    """Log to stderr so launcher consoles capture it next to the game output."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def write_debug_log(argv: List[str], environ: Mapping[str, str], cwd: str) -> None:
    """Append this invocation's arguments and environment to the debug log.

    The log is write-only; failures to open it are ignored.
    """
    debug_logger = logging.getLogger(DEBUG_LOGGER_NAME)
    debug_logger.propagate = False
    debug_logger.setLevel(logging.DEBUG)

    path = get_debug_log_path(environ)
    try:
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as e:
        logger.debug(f"[Wrapper] Debug log unavailable ({path}): {e}")
        return

    handler.setFormatter(logging.Formatter("%(message)s"))
    debug_logger.addHandler(handler)
    try:
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = "<unknown>"
        debug_logger.debug(f"[{datetime.now():%a %b %d %H:%M:%S %Y}] Running {argv[0] if argv else 'ludusavi-wrapper'} "
                           f"as {user} in {cwd} with args: {' '.join(argv[1:])}")
        for key, value in environ.items():
            debug_logger.debug(f"{key}={value}")
    finally:
        debug_logger.removeHandler(handler)
        handler.close()


def run(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None) -> int:
    """
    Run the wrapper and return the exit code.

    Args:
        argv: Full argument vector including the program name (sys.argv)
        environ: Environment (os.environ)
        cwd: Working directory (os.getcwd())
    """
    argv = list(sys.argv if argv is None else argv)
    environ = dict(os.environ if environ is None else environ)
    cwd = cwd or os.getcwd()

    write_debug_log(argv, environ, cwd)

    prog = os.path.basename(argv[0]) if argv else "ludusavi-wrapper"
    args = build_parser(prog).parse_args(argv[1:])
    setup_logging(args.verbose)

    config = build_config(
        mode=args.mode,
        game_name=args.game_name,
        use_cache=args.cache,
        command=args.command,
        environ=environ,
        cwd=cwd,
        prog=prog,
    )

    try:
        result = asyncio.run(Orchestrator(config).run())
    except WrapperError as e:
        print(f"\n{e.message}\n", file=sys.stderr)
        return e.exit_code
    return result.exit_code


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
