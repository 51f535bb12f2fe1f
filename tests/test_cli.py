"""
End-to-end tests for the command-line entry point (no real ludusavi).
"""
from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from ludusavi_wrapper import cli
from ludusavi_wrapper.config import build_config
from ludusavi_wrapper.network import probe as probe_module
from ludusavi_wrapper.tools import locator as locator_module


def test_no_command_exits_2(base_environ, tmp_path, capsys):
    code = cli.run(["ludusavi-wrapper", "--cache"], environ=base_environ, cwd=str(tmp_path))

    assert code == 2
    assert "No game executable specified" in capsys.readouterr().err


def test_invalid_mode_is_usage_error(base_environ, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.run(["ludusavi-wrapper", "--mode=sideways", "game"], environ=base_environ, cwd=str(tmp_path))
    assert excinfo.value.code == 2


def test_pre_mode_without_name_exits_3(base_environ, make_executable, capsys):
    environ = dict(base_environ, LUDUSAVI_PATH=str(make_executable("bin/ludusavi")))

    code = cli.run(["ludusavi-wrapper", "--mode=pre"], environ=environ, cwd="/")

    assert code == 3
    assert "--mode=pre" in capsys.readouterr().err


def test_missing_ludusavi_exits_1(base_environ, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(locator_module, "ludusavi_candidates", lambda **kwargs: [str(tmp_path / "nowhere")])
    monkeypatch.setattr(locator_module.FlatpakProbe, "find", AsyncMock(return_value=None))

    code = cli.run(["ludusavi-wrapper", "/games/game.exe"], environ=base_environ, cwd=str(tmp_path))

    assert code == 1
    err = capsys.readouterr().err
    assert "ludusavi not found" in err
    assert str(tmp_path / "nowhere") in err


def test_debug_log_records_invocation(base_environ, tmp_path):
    cli.run(["ludusavi-wrapper", "--cache"], environ=base_environ, cwd=str(tmp_path))
    cli.run(["ludusavi-wrapper"], environ=base_environ, cwd=str(tmp_path))

    log = (tmp_path / "debug.log").read_text()
    assert log.count("Running ludusavi-wrapper") == 2
    assert "with args: --cache" in log
    assert f"XDG_CACHE_HOME={tmp_path / 'cache'}" in log


def test_unwritable_debug_log_is_ignored(base_environ, tmp_path):
    environ = dict(base_environ, LUDUSAVI_WRAPPER_DEBUG_LOG=str(tmp_path / "missing" / "dir" / "log"))
    assert cli.run(["ludusavi-wrapper"], environ=environ, cwd=str(tmp_path)) == 2


def test_game_arguments_pass_through_parser():
    args = cli.build_parser("ludusavi-wrapper").parse_args(
        ["--cache", "--game-name=Celeste", "--", "/games/Celeste.exe", "--help", "-v"])

    assert args.cache is True
    assert args.game_name == "Celeste"
    assert args.command[-3:] == ["/games/Celeste.exe", "--help", "-v"]

    config = build_config(args.mode, args.game_name, args.cache, args.command, {}, "/")
    assert config.command == ("/games/Celeste.exe", "--help", "-v")


def test_cache_paths_follow_xdg(base_environ, tmp_path):
    config = build_config("wrapper", None, True, ["game"], base_environ, "/")
    assert config.tool_cache_path == tmp_path / "cache" / "ludusavi_wrapper_path"
    assert config.ping_cache_path == tmp_path / "cache" / "ludusavi_wrapper_ping_cmd"

    uncached = build_config("wrapper", None, False, ["game"], base_environ, "/")
    assert uncached.tool_cache_path is None


def test_signal_killed_ludusavi_exit_status(base_environ, make_executable, monkeypatch):
    ludusavi = make_executable("bin/ludusavi")
    ludusavi.write_text("#!/bin/sh\nkill -TERM $$\n")
    environ = dict(base_environ, LUDUSAVI_PATH=str(ludusavi))
    monkeypatch.setattr(locator_module, "stc_candidates", lambda **kwargs: [])
    monkeypatch.setattr(probe_module.NetworkProbe, "manifest_flag",
                        AsyncMock(return_value=probe_module.NO_MANIFEST_UPDATE))

    code = cli.run(["ludusavi-wrapper", "--mode=pre", "--game-name=Game"], environ=environ, cwd="/")

    assert code == 143
