"""
core.probe
~~~~~~~~~~
Thin wrapper around the ffprobe CLI.
Both calls block the calling thread; run them from the session's worker
thread, never from the UI.
"""

from __future__ import annotations

import math
import subprocess
import sys
from pathlib import Path
from typing import Callable

from core.command_builder import build_describe_command, build_duration_command
from core.errors import EngineNotFoundError

# Keep Windows from flashing a console window for every child process.
NO_WINDOW_FLAGS = 0x08000000 if sys.platform == "win32" else 0


class MediaProbe:
    """
    Asks ffprobe about a source file.

    *run* is ``subprocess.run`` unless a test swaps it out.
    *timeout* is in seconds; None waits for ffprobe as long as it takes.
    """

    def __init__(
        self,
        ffprobe: str | Path = "ffprobe",
        timeout: float | None = None,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.ffprobe = ffprobe
        self.timeout = timeout
        self._run = run

    # ── Public API ────────────────────────────────────────────────────────────

    def duration(self, file: Path) -> float:
        """
        Duration of *file* in seconds.
        Returns 0.0 if the duration cannot be determined.
        """
        cmd = build_duration_command(file, self.ffprobe)
        try:
            result = self._execute(cmd)
        except (OSError, subprocess.TimeoutExpired) as exc:
            print(f"[PROBE] Duration probe failed for '{file}': {exc}")
            return 0.0

        if result.returncode != 0:
            print(f"[PROBE] ffprobe exited with code {result.returncode} for '{file}'")
            return 0.0

        text = _decode(result.stdout).strip()
        try:
            seconds = float(text)
        except ValueError:
            print(f"[PROBE] Warning: could not parse duration '{text}'")
            return 0.0

        if not math.isfinite(seconds) or seconds < 0:
            print(f"[PROBE] Warning: ignoring duration '{text}'")
            return 0.0
        return seconds

    def describe(self, file: Path) -> str:
        """
        ffprobe's own summary of *file* (container, streams, metadata),
        returned verbatim for display.

        Raises:
            EngineNotFoundError – if ffprobe cannot be launched at all
        """
        cmd = build_describe_command(file, self.ffprobe)
        try:
            result = self._execute(cmd)
        except OSError as exc:
            raise EngineNotFoundError(str(self.ffprobe), str(exc)) from exc
        except subprocess.TimeoutExpired:
            print(f"[PROBE] Metadata probe timed out after {self.timeout}s")
            return f"(probe timed out after {self.timeout}s)\n"

        return _decode(result.stderr)

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _execute(self, cmd: list[str]) -> subprocess.CompletedProcess:
        return self._run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=self.timeout,
            creationflags=NO_WINDOW_FLAGS,
        )


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")
