"""
core.progress
~~~~~~~~~~~~~
Parser for ffmpeg's ``-progress pipe:1`` stream.

ffmpeg writes one ``key=value`` pair per line and repeats a block of them
every half second or so:

    frame=240
    fps=59.8
    out_time_ms=10000000
    out_time=00:00:10.000000
    progress=continue

Only ``out_time_ms`` is used. Despite the name it is in microseconds.
No Qt, no subprocess: easy to unit-test in isolation.
"""

from __future__ import annotations

import math

ELAPSED_KEY = "out_time_ms"
END_KEY     = "progress"

_US_PER_SECOND = 1_000_000


def completion_fraction(elapsed_us: float, total_seconds: float) -> float:
    """
    Fraction of the file encoded so far, clamped to 0.0 – 1.0.

        completion_fraction(25_000_000, 100) → 0.25
        completion_fraction(50_000_000, 50)  → 1.0
    """
    if not math.isfinite(total_seconds) or total_seconds <= 0:
        return 0.0
    fraction = elapsed_us / (total_seconds * _US_PER_SECOND)
    return min(max(fraction, 0.0), 1.0)


class ProgressParser:
    """Feed it lines, get percentages back."""

    def __init__(self, total_seconds: float):
        # NaN or inf means "unknown", same as 0
        self.total_seconds = total_seconds if math.isfinite(total_seconds) else 0.0
        self.percent: float | None = None
        self.finished = False

    def feed(self, line: str) -> float | None:
        """
        Return the new percentage (0 – 100) if *line* moved the progress,
        otherwise None. Unknown keys and junk lines are ignored.
        """
        key, sep, value = line.strip().partition("=")
        if not sep:
            return None

        if key == END_KEY:
            self.finished = value.strip() == "end"
            return None

        if key != ELAPSED_KEY or self.total_seconds <= 0:
            return None

        try:
            elapsed_us = float(value)
        except ValueError:
            # ffmpeg prints "N/A" before the first frame is muxed
            return None
        if not math.isfinite(elapsed_us):
            return None

        self.percent = completion_fraction(elapsed_us, self.total_seconds) * 100.0
        return self.percent
