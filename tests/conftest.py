from __future__ import annotations

from pathlib import Path

import pytest


class FakeStdout:
    """Stands in for Popen.stdout; *before_line(i)* runs right before line i is handed out."""

    def __init__(self, lines: list[bytes], before_line=None):
        self._lines = lines
        self._before_line = before_line
        self.closed = False

    def __iter__(self):
        for index, line in enumerate(self._lines):
            if self._before_line is not None:
                self._before_line(index)
            yield line

    def close(self):
        self.closed = True


class FakeProcess:
    """Enough of subprocess.Popen for TranscodeSession."""

    def __init__(self, stdout: FakeStdout, on_exit=None, exit_code: int = 0):
        self.stdout = stdout
        self.pid = 4242
        self.returncode: int | None = None
        self.killed = False
        self.exited_naturally = False
        self._on_exit = on_exit
        self._exit_code = exit_code

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if self.returncode is None:
            if self._on_exit is not None:
                self._on_exit()
            self.exited_naturally = True
            self.returncode = self._exit_code
        return self.returncode

    def kill(self):
        self.killed = True
        self.returncode = -9


class FakeSpawner:
    def __init__(self, process: FakeProcess | None = None, error: Exception | None = None):
        self.process = process
        self.error = error
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.error is not None:
            raise self.error
        return self.process


class FakeProbe:
    def __init__(self, duration: float = 10.0, description: str = "Input #0, matroska,webm\n",
                 on_describe=None, on_duration=None):
        self._duration = duration
        self._description = description
        self._on_describe = on_describe
        self._on_duration = on_duration

    def duration(self, file: Path) -> float:
        if self._on_duration is not None:
            self._on_duration()
        return self._duration

    def describe(self, file: Path) -> str:
        if self._on_describe is not None:
            self._on_describe()
        return self._description


@pytest.fixture()
def source(tmp_path: Path) -> Path:
    clip = tmp_path / "clip.mkv"
    clip.write_bytes(b"\x1a\x45\xdf\xa3")
    return clip


@pytest.fixture()
def engine_on_path(monkeypatch: pytest.MonkeyPatch):
    """Pretend ffmpeg and ffprobe are installed."""
    monkeypatch.setattr(
        "core.session.resolve_binary",
        lambda name, override=None: Path(override or name),
    )
