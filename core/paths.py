"""
core.paths
~~~~~~~~~~
Single source of truth for filesystem paths used across the app.
Import these instead of hard-coding strings anywhere else.
"""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

# Project root = the directory that contains main.py
PROJECT_ROOT = Path(__file__).resolve().parent.parent

BIN_DIR = PROJECT_ROOT / "bin"

_EXE_SUFFIX = ".exe" if sys.platform == "win32" else ""


def resolve_binary(name: str, override: str | Path | None = None) -> Path | None:
    """
    Find an engine binary.

    Lookup order:
        1. explicit *override* from the settings file
        2. bundled copy in BIN_DIR
        3. the user's PATH

    Returns None when nothing usable was found. Nothing is executed.
    """
    if override:
        candidate = Path(override)
        return candidate if _is_executable(candidate) else None

    bundled = BIN_DIR / (name + _EXE_SUFFIX)
    if _is_executable(bundled):
        return bundled

    found = shutil.which(name)
    return Path(found) if found else None


def validate_binaries(
    ffmpeg: str | Path | None = None,
    ffprobe: str | Path | None = None,
) -> list[str]:
    """
    Return a list of error strings for any missing/non-executable binaries.
    Empty list means all good.

    Call this at startup and show a dialog if errors is non-empty.
    """
    errors: list[str] = []
    for name, override in (("ffmpeg", ffmpeg), ("ffprobe", ffprobe)):
        if resolve_binary(name, override) is None:
            where = str(override) if override else f"{BIN_DIR} or PATH"
            errors.append(f"Binary not found: {name} (looked in {where})")
    return errors


def _is_executable(path: Path) -> bool:
    if not path.is_file():
        return False
    if sys.platform == "win32":
        return True
    return bool(path.stat().st_mode & 0o111)
