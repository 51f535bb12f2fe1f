from __future__ import annotations

from pathlib import Path

from ludusavi_wrapper.cache import load_cached_value, save_cached_value


def test_load_missing_file_is_miss(tmp_path: Path) -> None:
    assert load_cached_value(tmp_path / "does_not_exist") is None


def test_load_empty_file_is_miss(tmp_path: Path) -> None:
    path = tmp_path / "empty"
    path.write_text("\n")
    assert load_cached_value(path) is None


def test_save_creates_parent_and_load_reads_first_line(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "ludusavi_wrapper_path"
    assert save_cached_value(path, "/usr/bin/ludusavi") is True
    assert path.read_text() == "/usr/bin/ludusavi\n"
    assert load_cached_value(path) == "/usr/bin/ludusavi"


def test_load_directory_is_miss(tmp_path: Path) -> None:
    assert load_cached_value(tmp_path) is None


def test_save_failure_returns_false(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    assert save_cached_value(blocker / "cache", "value") is False
