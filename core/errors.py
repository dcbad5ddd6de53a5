"""
core.errors
~~~~~~~~~~~
Exceptions that are allowed to cross the session boundary.
"""

from __future__ import annotations


class EngineNotFoundError(RuntimeError):
    """ffmpeg or ffprobe is missing or cannot be launched."""

    def __init__(self, binary: str, reason: str = ""):
        self.binary = binary
        message = f"Cannot run '{binary}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
