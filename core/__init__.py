from .models import (
    TargetFormat, Device, SessionOutcome,
    TranscodeRequest, EncodePlan, SessionSnapshot,
)
from .errors import EngineNotFoundError
from .command_builder import select_codec, plan_encode, build_transcode_command
from .probe import MediaProbe
from .progress import ProgressParser, completion_fraction
from .state import SessionState
from .session import TranscodeSession
from .config import Settings, load_settings, save_settings

__all__ = [
    "TargetFormat", "Device", "SessionOutcome",
    "TranscodeRequest", "EncodePlan", "SessionSnapshot",
    "EngineNotFoundError",
    "select_codec", "plan_encode", "build_transcode_command",
    "MediaProbe",
    "ProgressParser", "completion_fraction",
    "SessionState",
    "TranscodeSession",
    "Settings", "load_settings", "save_settings",
]
