"""
core.models
~~~~~~~~~~~
Pure dataclasses. No Qt, no I/O.
These travel freely between core and ui.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path


# ── Enums ─────────────────────────────────────────────────────────────────────

class TargetFormat(str, Enum):
    """Output container; the value doubles as the file extension (no dot)."""
    MP4 = "mp4"
    AVI = "avi"
    MKV = "mkv"
    MOV = "mov"
    FLV = "flv"
    WMV = "wmv"
    MP3 = "mp3"
    AAC = "aac"
    WAV = "wav"
    OGG = "ogg"

    @classmethod
    def parse(cls, text: str | None) -> "TargetFormat":
        try:
            return cls(str(text).lower().lstrip("."))
        except ValueError:
            return cls.MP4


class Device(str, Enum):
    """Where the video stream gets encoded."""
    CPU    = "CPU"
    NVIDIA = "NVIDIA"
    INTEL  = "Intel"
    AMD    = "AMD"

    @classmethod
    def parse(cls, text: str | None) -> "Device":
        """Unknown names fall back to CPU, never an error."""
        for device in cls:
            if device.value == text:
                return device
        return cls.CPU


class SessionOutcome(Enum):
    COMPLETED = auto()   # output file exists and is non-empty
    FAILED    = auto()   # engine could not run, or produced nothing
    CANCELLED = auto()   # user pressed Cancel


# ── Request / plan ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TranscodeRequest:
    """
    One user request: convert *source_path* to *target_format* on *device*.
    The caller is responsible for checking that the source file exists.
    """
    source_path: Path
    target_format: TargetFormat = TargetFormat.MP4
    device: Device = Device.CPU

    @property
    def output_path(self) -> Path:
        # The source extension is kept on purpose: clip.mkv → clip.mkv.mp4
        return Path(f"{self.source_path}.{self.target_format.value}")


@dataclass(frozen=True)
class EncodePlan:
    """Everything device-specific the engine command needs."""
    video_codec: str
    output_path: Path
    hwaccel: str | None = None


# ── Session snapshot (returned by core.state) ─────────────────────────────────

@dataclass(frozen=True)
class SessionSnapshot:
    """A consistent copy of the shared session state, safe to read anywhere."""
    progress_percent: float = 0.0   # 0.0 – 100.0
    running: bool = False
    completed: bool = False
    log_text: str = ""
    cancel_requested: bool = False
    outcome: SessionOutcome | None = None
