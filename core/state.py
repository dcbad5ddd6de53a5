"""
core.state
~~~~~~~~~~
SessionState is the hand-off point between the session's worker thread
and whatever polls it (the window's QTimer, or a test).

All fields live behind one lock. Readers never touch the fields directly;
they call snapshot() and get a frozen SessionSnapshot, so a poll can never
see a half-applied update (e.g. completed=True with progress still at 40).

The cancel flag is a threading.Event so the UI can raise it without
waiting for the worker to release the lock.
"""

from __future__ import annotations

import threading

from core.models import SessionOutcome, SessionSnapshot


class SessionState:

    def __init__(self):
        self._lock = threading.Lock()
        self._cancel = threading.Event()
        self._progress = 0.0
        self._running = False
        self._completed = False
        self._log: list[str] = []
        self._outcome: SessionOutcome | None = None

    # ── Reads ─────────────────────────────────────────────────────────────────

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                progress_percent=self._progress,
                running=self._running,
                completed=self._completed,
                log_text="".join(self._log),
                cancel_requested=self._cancel.is_set(),
                outcome=self._outcome,
            )

    @property
    def running(self) -> bool:
        return self._running

    @property
    def cancel_requested(self) -> bool:
        return self._cancel.is_set()

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def try_begin(self) -> bool:
        """
        Atomically check that no session is running and reset everything
        for a new one. Returns False (and changes nothing) if busy.
        """
        with self._lock:
            if self._running:
                return False
            self._progress = 0.0
            self._running = True
            self._completed = False
            self._log = []
            self._outcome = None
            self._cancel.clear()
            return True

    def request_cancel(self) -> None:
        # Lock-free: callable while the worker holds the lock.
        if self._running:
            self._cancel.set()

    def finish(self, outcome: SessionOutcome, marker: str) -> None:
        """Move to a terminal state. Called once per session, from the worker."""
        with self._lock:
            self._log.append(f"\n=== {marker} ===\n")
            self._outcome = outcome
            self._completed = outcome is SessionOutcome.COMPLETED
            self._progress = 100.0 if self._completed else 0.0
            self._running = False

    # ── Updates from the worker ───────────────────────────────────────────────

    def set_progress(self, percent: float) -> None:
        with self._lock:
            self._progress = percent

    def append_log(self, text: str) -> None:
        with self._lock:
            self._log.append(text)
