import sys

import pytest

from core import paths


@pytest.fixture()
def no_bundled_bin(tmp_path, monkeypatch):
    monkeypatch.setattr(paths, "BIN_DIR", tmp_path / "bin")


def _make_executable(path):
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def test_override_wins(tmp_path, no_bundled_bin):
    ffmpeg = _make_executable(tmp_path / "my-ffmpeg")
    assert paths.resolve_binary("ffmpeg", str(ffmpeg)) == ffmpeg


def test_missing_override_is_not_silently_replaced(tmp_path, no_bundled_bin, monkeypatch):
    monkeypatch.setattr(paths.shutil, "which", lambda name: "/usr/bin/" + name)
    assert paths.resolve_binary("ffmpeg", str(tmp_path / "gone")) is None


def test_bundled_copy_before_path(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    suffix = ".exe" if sys.platform == "win32" else ""
    bundled = _make_executable(bin_dir / ("ffprobe" + suffix))
    monkeypatch.setattr(paths, "BIN_DIR", bin_dir)
    monkeypatch.setattr(paths.shutil, "which", lambda name: "/usr/bin/" + name)

    assert paths.resolve_binary("ffprobe") == bundled


def test_falls_back_to_path_lookup(no_bundled_bin, monkeypatch):
    monkeypatch.setattr(paths.shutil, "which", lambda name: None)
    assert paths.resolve_binary("ffmpeg") is None
    assert len(paths.validate_binaries()) == 2

    monkeypatch.setattr(paths.shutil, "which", lambda name: "/usr/bin/" + name)
    assert str(paths.resolve_binary("ffmpeg")).endswith("ffmpeg")
    assert paths.validate_binaries() == []
