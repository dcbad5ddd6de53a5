"""
core.session
~~~~~~~~~~~~
TranscodeSession runs one ffmpeg conversion on a background thread and
publishes what happens through a SessionState the UI can poll.

Lifecycle
---------
    start()  → probe duration + metadata → spawn ffmpeg → read progress
             → Completed | Failed | Cancelled

The outcome is decided by looking at the output file, not at ffmpeg's exit
code: a missing or zero-byte file is a failure, anything else a success.

Cancellation is checked once per progress line. A cancelled ffmpeg is
killed outright, there is no graceful quit.
"""

from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from typing import Callable

from core.command_builder import build_transcode_command, command_as_string, plan_encode
from core.config import Settings
from core.errors import EngineNotFoundError
from core.models import SessionOutcome, SessionSnapshot, TranscodeRequest
from core.paths import resolve_binary
from core.probe import NO_WINDOW_FLAGS, MediaProbe
from core.progress import ProgressParser
from core.state import SessionState

CANCELLED_MARKER = "Cancelled"
FAILED_MARKER    = "Conversion failed: output file is empty"
COMPLETED_MARKER = "Conversion complete"


class TranscodeSession:

    def __init__(
        self,
        settings: Settings | None = None,
        probe: MediaProbe | None = None,
        spawn: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        self._settings = settings or Settings()
        self._probe = probe
        self._spawn = spawn
        self._state = SessionState()
        self._thread: threading.Thread | None = None
        self._process: subprocess.Popen | None = None

    # ── Polled surface ────────────────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._state.running

    def snapshot(self) -> SessionSnapshot:
        return self._state.snapshot()

    def start(self, request: TranscodeRequest) -> bool:
        """
        Begin converting *request* on a background thread.

        Returns False without touching the current state if a conversion
        is already running.

        Raises:
            EngineNotFoundError – ffmpeg or ffprobe cannot be found; nothing
                                  has been started and the state is unchanged
        """
        if self._state.running:
            print("[SESSION] start() ignored: already running")
            return False

        ffmpeg = self._require("ffmpeg", self._settings.ffmpeg_path)
        ffprobe = self._require("ffprobe", self._settings.ffprobe_path)

        if not self._state.try_begin():
            print("[SESSION] start() ignored: already running")
            return False

        probe = self._probe or MediaProbe(ffprobe, timeout=self._settings.probe_timeout)
        print(f"[SESSION] Starting '{request.source_path}' → {request.target_format.value} "
              f"on {request.device.value}")

        self._thread = threading.Thread(
            target=self._run,
            args=(request, ffmpeg, probe),
            name="transcode-session",
            daemon=True,
        )
        self._thread.start()
        return True

    def cancel(self) -> None:
        """Ask the running conversion to stop. Safe from any thread, any time."""
        if not self._state.running:
            print("[SESSION] cancel(): nothing running")
            return
        print("[SESSION] cancel() requested")
        self._state.request_cancel()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the worker thread is done. True if it finished."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    # ── Worker thread ─────────────────────────────────────────────────────────

    def _run(self, request: TranscodeRequest, ffmpeg: Path, probe: MediaProbe) -> None:
        try:
            outcome, marker = self._transcode(request, ffmpeg, probe)
        except EngineNotFoundError as exc:
            print(f"[SESSION] ❌ {exc}")
            outcome, marker = SessionOutcome.FAILED, f"Conversion failed: {exc}"
        except OSError as exc:
            print(f"[SESSION] ❌ Could not launch ffmpeg: {exc}")
            outcome, marker = SessionOutcome.FAILED, f"Conversion failed: could not start ffmpeg ({exc})"
        except Exception as exc:
            print(f"[SESSION] ❌ Exception in worker: {exc}")
            outcome, marker = SessionOutcome.FAILED, f"Conversion failed: {exc}"
        finally:
            self._release_process()

        print(f"[SESSION] Finished: {outcome.name}")
        self._state.finish(outcome, marker)

    def _transcode(
        self,
        request: TranscodeRequest,
        ffmpeg: Path,
        probe: MediaProbe,
    ) -> tuple[SessionOutcome, str]:
        source = request.source_path

        print(f"[SESSION] Probing '{source}'")
        duration = probe.duration(source)
        print(f"[SESSION] Duration = {duration:.2f}s")
        self._state.append_log(probe.describe(source))

        if self._state.cancel_requested:
            print("[SESSION] Cancelled before ffmpeg was started")
            return SessionOutcome.CANCELLED, CANCELLED_MARKER

        plan = plan_encode(request)
        cmd = build_transcode_command(plan, source, ffmpeg)
        print(f"[SESSION] Command:\n  {command_as_string(cmd)}")

        self._process = self._spawn(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            creationflags=NO_WINDOW_FLAGS,
        )
        print(f"[SESSION] PID = {self._process.pid}")

        if self._read_progress(self._process, ProgressParser(duration)):
            self._kill()
            return SessionOutcome.CANCELLED, CANCELLED_MARKER

        returncode = self._process.wait()
        print(f"[SESSION] ffmpeg exited with code {returncode}")
        return _classify(plan.output_path)

    def _read_progress(self, process: subprocess.Popen, parser: ProgressParser) -> bool:
        """
        Pump ffmpeg's stdout into *parser* until EOF or cancel.
        Returns True if the user cancelled.
        """
        for raw in process.stdout:
            if self._state.cancel_requested:
                return True
            line = raw.decode("ascii", errors="replace")
            pct = parser.feed(line)
            if pct is not None:
                self._state.set_progress(pct)

        if parser.finished:
            print("[SESSION] ffmpeg reported progress=end")
        return self._state.cancel_requested

    def _kill(self) -> None:
        process = self._process
        if process is not None and process.poll() is None:
            process.kill()
            print("[SESSION] ffmpeg killed")

    def _release_process(self) -> None:
        process, self._process = self._process, None
        if process is None:
            return
        if process.poll() is None:
            process.kill()
        process.wait()
        if process.stdout is not None:
            process.stdout.close()

    # ── Helpers ───────────────────────────────────────────────────────────────

    @staticmethod
    def _require(name: str, override: str | None) -> Path:
        path = resolve_binary(name, override)
        if path is None:
            raise EngineNotFoundError(override or name, "not found")
        return path


def _classify(output_path: Path) -> tuple[SessionOutcome, str]:
    if not output_path.exists() or output_path.stat().st_size == 0:
        print(f"[SESSION] Output missing or empty: '{output_path}'")
        return SessionOutcome.FAILED, FAILED_MARKER
    return SessionOutcome.COMPLETED, COMPLETED_MARKER
