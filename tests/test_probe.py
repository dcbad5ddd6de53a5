import subprocess
from pathlib import Path

import pytest

from core.errors import EngineNotFoundError
from core.probe import MediaProbe

CLIP = Path("/media/clip.mkv")


class FakeRun:
    """Records subprocess.run calls and answers with a canned result or error."""

    def __init__(self, returncode=0, stdout=b"", stderr=b"", error=None):
        self.result = (returncode, stdout, stderr)
        self.error = error
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.error is not None:
            raise self.error
        returncode, stdout, stderr = self.result
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)


def test_duration_parses_stdout():
    run = FakeRun(stdout=b"12.480000\n")
    probe = MediaProbe("ffprobe", run=run)

    assert probe.duration(CLIP) == pytest.approx(12.48)
    [(cmd, kwargs)] = run.calls
    assert cmd[-1] == str(CLIP)
    assert "format=duration" in cmd
    assert kwargs["timeout"] is None


@pytest.mark.parametrize(
    "run",
    [
        FakeRun(stdout=b"N/A\n"),
        FakeRun(stdout=b""),
        FakeRun(stdout=b"nan\n"),
        FakeRun(stdout=b"inf\n"),
        FakeRun(stdout=b"-3.0\n"),
        FakeRun(returncode=1, stdout=b"12.0\n"),
        FakeRun(error=FileNotFoundError(2, "No such file or directory")),
        FakeRun(error=subprocess.TimeoutExpired(["ffprobe"], 3)),
    ],
    ids=["not-a-number", "empty", "nan", "inf", "negative", "non-zero-exit", "not-installed", "timeout"],
)
def test_duration_degrades_to_zero(run):
    assert MediaProbe(run=run).duration(CLIP) == 0.0


def test_describe_returns_stderr_verbatim():
    text = "Input #0, matroska,webm, from 'clip.mkv':\n  Duration: 00:00:10.00\n"
    run = FakeRun(returncode=1, stdout=b"", stderr=text.encode())

    assert MediaProbe(run=run).describe(CLIP) == text
    [(cmd, _)] = run.calls
    assert cmd == ["ffprobe", "-i", str(CLIP), "-hide_banner"]


def test_describe_raises_when_ffprobe_cannot_start():
    run = FakeRun(error=FileNotFoundError(2, "No such file or directory"))

    with pytest.raises(EngineNotFoundError) as excinfo:
        MediaProbe("/opt/ffprobe", run=run).describe(CLIP)
    assert excinfo.value.binary == "/opt/ffprobe"


def test_timeout_is_passed_through_and_reported():
    run = FakeRun(error=subprocess.TimeoutExpired(["ffprobe"], 2.5))
    probe = MediaProbe(timeout=2.5, run=run)

    assert "timed out" in probe.describe(CLIP)
    assert run.calls[0][1]["timeout"] == 2.5
