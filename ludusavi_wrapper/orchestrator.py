"""
Launch orchestration.

Sequences one wrapper run:

  INIT -> TOOLS_RESOLVED -> IDENTITY_RESOLVED -> SYNC_CHECKED
       -> NETWORK_CHECKED -> EXECUTING -> FINALIZING -> DONE

Only three things stop a run before ludusavi is invoked: wrapper mode
without a game command, ludusavi missing, and an empty game name in
pre/post mode. Once EXECUTING starts, FINALIZING (Syncthing rescan and the
summary banner) always runs, and ludusavi's exit code (the game's exit code
in wrapper mode) is returned unchanged.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from .config import Mode, WrapperConfig
from .errors import EmptyGameNameError, MissingCommandError
from .identity.launchers import launcher_variables
from .identity.resolver import IdentityResolver, ResolvedIdentity
from .ludusavi import LudusaviClient
from .network.probe import NetworkProbe
from .sync.syncthing import SyncStatus, SyncStatusChecker
from .tools.locator import ToolHandle, ToolLocator, environ_which, locate_ludusavi, locate_stc
from .utils.process import run_inherited

logger = logging.getLogger(__name__)

BANNER_RULE = "=" * 40

# Exit code when ludusavi cannot be started at all (shell convention)
EXIT_LAUNCH_FAILED = 127


class OrchestratorState(Enum):
    """Phases of a wrapper run"""
    INIT = "init"
    TOOLS_RESOLVED = "tools_resolved"
    IDENTITY_RESOLVED = "identity_resolved"
    SYNC_CHECKED = "sync_checked"
    NETWORK_CHECKED = "network_checked"
    EXECUTING = "executing"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass
class ExecutionResult:
    """Final outcome of a run; exit_code becomes the process exit code."""
    exit_code: int


class Orchestrator:
    """Runs restore -> game -> backup around a launcher's game command."""

    def __init__(
        self,
        config: WrapperConfig,
        locator: Optional[ToolLocator] = None,
        identity_resolver: Optional[IdentityResolver] = None,
        network_probe: Optional[NetworkProbe] = None,
        runner=run_inherited,
        locate_primary: Optional[Callable[[], Awaitable[ToolHandle]]] = None,
        locate_secondary: Optional[Callable[[], Awaitable[Optional[ToolHandle]]]] = None,
        checker_factory: Callable[[Optional[ToolHandle]], SyncStatusChecker] = SyncStatusChecker,
    ):
        self.config = config
        self.locator = locator or ToolLocator(which=environ_which(config.environ))
        self.identity_resolver = identity_resolver or IdentityResolver()
        self.network_probe = network_probe or NetworkProbe(cache_path=config.ping_cache_path)
        self._runner = runner
        self._locate_primary = locate_primary or (
            lambda: locate_ludusavi(self.locator, config.environ, cache_path=config.tool_cache_path)
        )
        self._locate_secondary = locate_secondary or (lambda: locate_stc(self.locator, config.environ))
        self._checker_factory = checker_factory

        self.state = OrchestratorState.INIT
        self.ludusavi: Optional[ToolHandle] = None
        self.sync_checker: Optional[SyncStatusChecker] = None
        self.identity: Optional[ResolvedIdentity] = None
        self.sync_status: Optional[SyncStatus] = None
        self.manifest_flag: Optional[str] = None

    def _enter(self, state: OrchestratorState) -> None:
        logger.debug(f"[Wrapper] {self.state.value} -> {state.value}")
        self.state = state

    @staticmethod
    def _echo(text: str = "") -> None:
        print(text, file=sys.stdout, flush=True)

    async def run(self) -> ExecutionResult:
        """
        Run the full state machine.

        Returns:
            ExecutionResult with ludusavi's (or the game's) exit code

        Raises:
            MissingCommandError: Wrapper mode without a game command
            ToolNotFoundError: ludusavi could not be located
            EmptyGameNameError: No game name in pre/post mode
        """
        config = self.config
        if config.mode == Mode.WRAPPER and not config.command:
            raise MissingCommandError(config.prog)

        await self._resolve_tools()
        self._enter(OrchestratorState.TOOLS_RESOLVED)

        game_name = self._resolve_identity()
        self._enter(OrchestratorState.IDENTITY_RESOLVED)
        self._print_session_banner(game_name)

        self.sync_status = await self.sync_checker.check(config.sync_folder, game_name)
        self._echo()
        self._enter(OrchestratorState.SYNC_CHECKED)

        self.manifest_flag = await self.network_probe.manifest_flag()
        self._enter(OrchestratorState.NETWORK_CHECKED)

        client = LudusaviClient(self.ludusavi, self.manifest_flag, runner=self._runner)

        self._enter(OrchestratorState.EXECUTING)
        exit_code: Optional[int] = None
        try:
            exit_code = await self._execute(client, game_name)
        finally:
            self._enter(OrchestratorState.FINALIZING)
            await self._finalize(exit_code)

        self._enter(OrchestratorState.DONE)
        return ExecutionResult(exit_code=exit_code)

    async def _resolve_tools(self) -> None:
        # ToolNotFoundError for ludusavi propagates; stc is optional
        self.ludusavi = await self._locate_primary()
        stc = await self._locate_secondary()
        self.sync_checker = self._checker_factory(stc)

    def _resolve_identity(self) -> str:
        config = self.config
        self.identity = self.identity_resolver.resolve(
            config.game_name,
            config.mode,
            config.executable,
            config.cwd,
            config.environ,
        )
        game_name = self.identity.name

        if not game_name:
            if config.mode in (Mode.PRE, Mode.POST):
                raise EmptyGameNameError(config.mode.value, config.prog)
            logger.warning("[Wrapper] Could not detect a game name; ludusavi will be asked with an empty name")
        return game_name

    async def _execute(self, client: LudusaviClient, game_name: str) -> int:
        mode = self.config.mode
        try:
            if mode == Mode.PRE:
                logger.info("[Wrapper] Running in PRE-LAUNCH mode: restoring saves only...")
                return await client.restore(game_name)
            if mode == Mode.POST:
                logger.info("[Wrapper] Running in POST-LAUNCH mode: backing up saves only...")
                return await client.backup(game_name)
            return await client.wrap(game_name, self.config.command)
        except OSError as e:
            logger.error(f"[Wrapper] Could not start ludusavi ({self.ludusavi.display}): {e}")
            return EXIT_LAUNCH_FAILED

    async def _finalize(self, exit_code: Optional[int]) -> None:
        if exit_code is not None:
            self._print_summary(exit_code)
        try:
            await self.sync_checker.trigger_rescan(self.config.sync_folder)
        except Exception as e:
            logger.warning(f"[Wrapper] Syncthing rescan failed: {e}")

    def _print_session_banner(self, game_name: str) -> None:
        config = self.config
        launcher = self.identity.launcher
        self._echo(BANNER_RULE)
        self._echo(f"Ludusavi Wrapper for {game_name}")
        self._echo(BANNER_RULE)
        self._echo(f"Launcher: {launcher.value}")
        self._echo(f"Ludusavi: {self.ludusavi.display}")
        self._echo(f"Command: {' '.join(config.command)}")
        self._echo()
        self._echo("Environment variables:")
        variables = launcher_variables(launcher)
        if variables:
            for var in variables:
                self._echo(f"  {var}: {config.environ.get(var) or '<not set>'}")
        else:
            self._echo("  (Launcher-specific variables not detected)")
        self._echo(BANNER_RULE)
        self._echo()

    def _print_summary(self, exit_code: int) -> None:
        mode = self.config.mode
        if mode == Mode.PRE:
            self._echo(BANNER_RULE)
            self._echo(f"Ludusavi restore completed with code: {exit_code}")
            self._echo(BANNER_RULE)
        elif mode == Mode.POST:
            self._echo(BANNER_RULE)
            self._echo(f"Ludusavi backup completed with code: {exit_code}")
            self._echo(BANNER_RULE)
        else:
            self._echo()
            self._echo(BANNER_RULE)
            self._echo(f"Game exited with code: {exit_code}")
            self._echo("Backup completed!")
            self._echo(BANNER_RULE)
