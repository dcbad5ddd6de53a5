"""
core.command_builder
~~~~~~~~~~~~~~~~~~~~
Picks the encoder for a device and builds ffmpeg / ffprobe CLI commands
as plain list[str].

Keeping command construction separate means you can:
  - log / print the exact command before running it
  - paste it straight into a terminal for debugging
  - unit-test flag generation without running any process
"""

from __future__ import annotations

from pathlib import Path

from core.models import Device, EncodePlan, TranscodeRequest

# device → (video codec, -hwaccel value)
_DEVICE_CODECS: dict[Device, tuple[str, str | None]] = {
    Device.NVIDIA: ("h264_nvenc", "cuda"),
    Device.INTEL:  ("h264_qsv",   "qsv"),
    Device.AMD:    ("h264_amf",   "dxva2"),
    Device.CPU:    ("libx264",    None),
}


def select_codec(device: Device | str | None) -> tuple[str, str | None]:
    """
    Return ``(video_codec, hwaccel)`` for *device*.

    Anything that is not a known GPU vendor gets the software encoder:
        select_codec("NVIDIA") → ("h264_nvenc", "cuda")
        select_codec("Matrox") → ("libx264", None)
    """
    if not isinstance(device, Device):
        device = Device.parse(device)
    return _DEVICE_CODECS.get(device, _DEVICE_CODECS[Device.CPU])


def plan_encode(request: TranscodeRequest) -> EncodePlan:
    codec, hwaccel = select_codec(request.device)
    return EncodePlan(
        video_codec=codec,
        output_path=request.output_path,
        hwaccel=hwaccel,
    )


def build_transcode_command(
    plan: EncodePlan,
    input_file: Path,
    ffmpeg: str | Path = "ffmpeg",
) -> list[str]:
    """
    Build the full ffmpeg command for transcoding one file.

    The command structure is:
        ffmpeg
          -y                     ← overwrite output without prompting
          [-hwaccel <api>]       ← only for GPU devices
          -i <input>
          -c:v <codec>
          <output>
          -progress pipe:1       ← machine-readable key=value progress on stdout
          -nostats               ← suppress human-readable stats on stderr

    Example output:
        ['ffmpeg', '-y', '-hwaccel', 'cuda', '-i', '/rushes/clip.mkv',
         '-c:v', 'h264_nvenc', '/rushes/clip.mkv.mp4',
         '-progress', 'pipe:1', '-nostats']
    """
    cmd = [str(ffmpeg), "-y"]
    if plan.hwaccel:
        cmd += ["-hwaccel", plan.hwaccel]
    cmd += [
        "-i", str(input_file),
        "-c:v", plan.video_codec,
        str(plan.output_path),
        "-progress", "pipe:1",
        "-nostats",
    ]
    return cmd


def build_duration_command(input_file: Path, ffprobe: str | Path = "ffprobe") -> list[str]:
    """ffprobe call that prints nothing but the duration in seconds."""
    return [
        str(ffprobe),
        "-v", "error",
        "-show_entries", "format=duration",
        "-of", "default=noprint_wrappers=1:nokey=1",
        str(input_file),
    ]


def build_describe_command(input_file: Path, ffprobe: str | Path = "ffprobe") -> list[str]:
    """ffprobe call whose stderr is the usual human-readable stream summary."""
    return [str(ffprobe), "-i", str(input_file), "-hide_banner"]


def command_as_string(cmd: list[str]) -> str:
    """Human-readable version of the command for logging."""
    return " ".join(cmd)
