"""
core.config
~~~~~~~~~~~
Persists the user's Settings to a JSON file in the platform's standard
config directory.

Config location
---------------
  Windows  : %APPDATA%\\FFUI\\settings.json
  macOS    : ~/Library/Application Support/FFUI/settings.json
  Linux    : ~/.config/FFUI/settings.json
"""

from __future__ import annotations

import json
import math
import sys
from dataclasses import dataclass
from pathlib import Path

from core.models import Device, TargetFormat


# ── Config directory ──────────────────────────────────────────────────────────

def _config_dir() -> Path:
    if sys.platform == "win32":
        base = Path.home() / "AppData" / "Roaming"
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path.home() / ".config"

    return base / "FFUI"


CONFIG_DIR    = _config_dir()
SETTINGS_FILE = CONFIG_DIR / "settings.json"


# ── Settings ──────────────────────────────────────────────────────────────────

@dataclass
class Settings:
    """
    Everything the app remembers between runs.

    ffmpeg_path / ffprobe_path override the bundled-or-PATH lookup in
    core.paths. probe_timeout (seconds) bounds each ffprobe call; None
    means wait forever.
    """
    target_format: TargetFormat = TargetFormat.MP4
    device: Device = Device.CPU
    ffmpeg_path: str | None = None
    ffprobe_path: str | None = None
    probe_timeout: float | None = None


# ── Public API ────────────────────────────────────────────────────────────────

def save_settings(settings: Settings, path: Path | None = None) -> None:
    """
    Serialise *settings*, overwriting any previous data.
    Silently ignores I/O errors so a config issue never crashes the app.
    """
    path = path or SETTINGS_FILE
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(_settings_to_dict(settings), indent=2), encoding="utf-8")
    except OSError as exc:
        print(f"[CONFIG] Could not write {path}: {exc}")


def load_settings(path: Path | None = None) -> Settings:
    """
    Read the settings file and return a Settings instance.
    Returns defaults if the file is missing, empty, or malformed.
    """
    path = path or SETTINGS_FILE
    if not path.exists():
        return Settings()
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            return Settings()
        return _dict_to_settings(payload)
    except (OSError, ValueError, TypeError) as exc:
        print(f"[CONFIG] Ignoring unreadable {path}: {exc}")
        return Settings()


# ── Serialisation helpers ─────────────────────────────────────────────────────

def _settings_to_dict(settings: Settings) -> dict:
    return {
        "target_format": settings.target_format.value,
        "device":        settings.device.value,
        "ffmpeg_path":   settings.ffmpeg_path,
        "ffprobe_path":  settings.ffprobe_path,
        "probe_timeout": settings.probe_timeout,
    }


def _dict_to_settings(d: dict) -> Settings:
    return Settings(
        target_format = TargetFormat.parse(d.get("target_format")),
        device        = Device.parse(d.get("device")),
        ffmpeg_path   = _optional_str(d.get("ffmpeg_path")),
        ffprobe_path  = _optional_str(d.get("ffprobe_path")),
        probe_timeout = _optional_timeout(d.get("probe_timeout")),
    )


def _optional_str(value) -> str | None:
    return value if isinstance(value, str) and value else None


def _optional_timeout(value) -> float | None:
    # bool is an int subclass; "true" is not a timeout
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    timeout = float(value)
    return timeout if math.isfinite(timeout) and timeout > 0 else None
