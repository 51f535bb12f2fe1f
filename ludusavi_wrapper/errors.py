"""Fatal errors that end a wrapper run before ludusavi is invoked.

Each error carries the process exit code the launcher should see.
"""

from typing import List


class WrapperError(Exception):
    """Base class for fatal wrapper errors."""

    exit_code = 1

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ToolNotFoundError(WrapperError):
    """A required external tool could not be located."""

    exit_code = 1

    def __init__(self, name: str, attempted: List[str]):
        self.name = name
        self.attempted = list(attempted)
        tried = ", ".join(self.attempted) if self.attempted else "<none>"
        super().__init__(
            f"Error: {name} not found!\n"
            f"Please install {name} or set LUDUSAVI_PATH environment variable\n"
            f"Tried locations: {tried}"
        )


class MissingCommandError(WrapperError):
    """Wrapper mode was invoked without a game command."""

    exit_code = 2

    def __init__(self, prog: str = "ludusavi-wrapper"):
        super().__init__(
            "Error: No game executable specified\n"
            "\n"
            "USAGE:\n"
            f"  {prog} [--cache] [--game-name=NAME] <game_executable> [args...]\n"
            "\n"
            f"For full help, run: {prog} --help"
        )


class EmptyGameNameError(WrapperError):
    """No game name could be resolved for pre/post mode."""

    exit_code = 3

    def __init__(self, mode: str, prog: str = "ludusavi-wrapper"):
        self.mode = mode
        super().__init__(
            f"Error: Could not detect game name for --mode={mode}\n"
            "\n"
            "Game name detection failed. This can happen when:\n"
            "  - Running outside a launcher (no env vars set)\n"
            "  - Running from a directory that doesn't contain the game name\n"
            "\n"
            "SOLUTIONS:\n"
            "  1. Specify game name explicitly:\n"
            f"     {prog} --mode={mode} --game-name=\"Game Name\"\n"
            "  2. Run from the game's directory:\n"
            f"     cd /path/to/Game && {prog} --mode={mode}\n"
            "  3. Use from within a launcher (Lutris/Heroic/Steam) that sets env vars"
        )
