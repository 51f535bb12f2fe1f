"""
Tests for Syncthing status parsing, warnings and rescans.
"""
from __future__ import annotations

import json
from unittest.mock import AsyncMock, Mock

import pytest

from ludusavi_wrapper.sync import syncthing
from ludusavi_wrapper.sync.syncthing import (
    SyncStatus,
    SyncStatusChecker,
    parse_json_dump,
    parse_status_text,
)
from ludusavi_wrapper.tools import ToolHandle, ToolKind
from ludusavi_wrapper.utils.process import CommandResult

STC = ToolHandle("stc", ToolKind.NATIVE, ("/usr/bin/stc",))
FOLDER = "ludusavi_server"


def json_dump(*folders):
    return json.dumps({"folders": list(folders)}, indent=2)


def make_checker(runner, stc=STC):
    notifier = Mock(return_value="notify-send")
    sleep = AsyncMock()
    return SyncStatusChecker(stc, runner=runner, notifier=notifier, sleep=sleep), notifier, sleep


class TestParsers:

    def test_json_dump_finds_named_folder(self):
        output = json_dump(
            {"folderName": "music", "syncPercentDone": 12},
            {"folderName": FOLDER, "syncPercentDone": 87},
        )
        assert parse_json_dump(output, FOLDER) == 87

    def test_json_dump_percentage_before_name(self):
        output = json_dump({"syncPercentDone": 55, "folderName": FOLDER})
        assert parse_json_dump(output, FOLDER) == 55

    def test_json_dump_missing_folder(self):
        assert parse_json_dump(json_dump({"folderName": "music", "syncPercentDone": 12}), FOLDER) is None
        assert parse_json_dump("not json at all", FOLDER) is None

    def test_status_text_third_column(self):
        output = "music  idle  100%\nludusavi_server  syncing  42%  3 files\n"
        assert parse_status_text(output, FOLDER) == 42
        assert parse_status_text("ludusavi_server  idle  n/a\n", FOLDER) is None
        assert parse_status_text("", FOLDER) is None

    def test_values_are_clamped(self):
        assert parse_status_text("ludusavi_server idle 250%", FOLDER) == 100

    def test_complete_property(self):
        assert SyncStatus(available=True, known=True, percentage=100).complete
        assert not SyncStatus(available=True, known=True, percentage=99).complete
        assert not SyncStatus(available=True, known=False, percentage=100).complete


class TestCheck:

    @pytest.mark.asyncio
    async def test_unavailable_never_notifies(self, fake_runner):
        runner = fake_runner()
        checker, notifier, sleep = make_checker(runner, stc=None)

        status = await checker.check(FOLDER, "Celeste")

        assert status == SyncStatus(available=False)
        assert runner.calls == []
        notifier.assert_not_called()
        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_fully_synced(self, fake_runner):
        output = json_dump({"folderName": FOLDER, "syncPercentDone": 100})
        checker, notifier, sleep = make_checker(fake_runner(lambda argv: CommandResult(0, stdout=output)))

        status = await checker.check(FOLDER, "Celeste")

        assert status.complete
        notifier.assert_not_called()
        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_partial_sync_warns_and_waits(self, fake_runner):
        output = json_dump({"folderName": FOLDER, "syncPercentDone": 87})
        runner = fake_runner(lambda argv: CommandResult(0, stdout=output))
        checker, notifier, sleep = make_checker(runner)

        status = await checker.check(FOLDER, "Celeste")

        assert (status.known, status.percentage) == (True, 87)
        notifier.assert_called_once_with(87, "Celeste")
        sleep.assert_awaited_once_with(syncthing.NOTIFICATION_DELAY)
        assert runner.calls == [["/usr/bin/stc", "json_dump"]]
        assert runner.timeouts == [syncthing.STC_TIMEOUT]

    @pytest.mark.asyncio
    async def test_zero_percent_is_known(self, fake_runner):
        output = json_dump({"folderName": FOLDER, "syncPercentDone": 0})
        checker, notifier, _sleep = make_checker(fake_runner(lambda argv: CommandResult(0, stdout=output)))

        status = await checker.check(FOLDER, "Celeste")

        assert status.known and status.percentage == 0
        notifier.assert_called_once_with(0, "Celeste")

    @pytest.mark.asyncio
    async def test_falls_back_to_status_text(self, fake_runner):
        def respond(argv):
            if argv[1] == "status":
                return CommandResult(0, stdout=f"{FOLDER}  syncing  64%\n")
            return CommandResult(1)

        runner = fake_runner(respond)
        checker, notifier, _sleep = make_checker(runner)

        status = await checker.check(FOLDER, "Celeste")

        assert status.percentage == 64
        assert runner.calls == [["/usr/bin/stc", "json_dump"], ["/usr/bin/stc", "status", FOLDER]]
        notifier.assert_called_once()

    @pytest.mark.asyncio
    async def test_unknown_status_never_warns(self, fake_runner):
        checker, notifier, sleep = make_checker(fake_runner())

        status = await checker.check(FOLDER, "Celeste")

        assert status == SyncStatus(available=True, known=False)
        notifier.assert_not_called()
        sleep.assert_not_called()

    @pytest.mark.asyncio
    async def test_notifier_failure_does_not_propagate(self, fake_runner):
        output = json_dump({"folderName": FOLDER, "syncPercentDone": 10})
        checker, notifier, sleep = make_checker(fake_runner(lambda argv: CommandResult(0, stdout=output)))
        notifier.side_effect = RuntimeError("display gone")

        status = await checker.check(FOLDER, "Celeste")

        assert status.percentage == 10
        sleep.assert_awaited_once()


class TestRescan:

    @pytest.mark.asyncio
    async def test_rescan_success(self, fake_runner):
        runner = fake_runner(lambda argv: CommandResult(0))
        checker, _notifier, _sleep = make_checker(runner)

        assert await checker.trigger_rescan(FOLDER) is True
        assert runner.calls == [["/usr/bin/stc", "rescan", FOLDER]]

    @pytest.mark.asyncio
    async def test_rescan_failure_is_reported(self, fake_runner):
        checker, _notifier, _sleep = make_checker(fake_runner())
        assert await checker.trigger_rescan(FOLDER) is False

    @pytest.mark.asyncio
    async def test_rescan_without_stc(self, fake_runner):
        runner = fake_runner()
        checker, _notifier, _sleep = make_checker(runner, stc=None)

        assert await checker.trigger_rescan(FOLDER) is False
        assert runner.calls == []
