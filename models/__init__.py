from .track import Track, Album, Library, format_time
from .playback import (
    Command,
    CommandKind,
    PlaybackState,
    Speed,
    StatusEvent,
    StatusKind,
    TransportStatus,
)
from .navigation import FocusState, Pane
from .session import Session

__all__ = [
    "Track",
    "Album",
    "Library",
    "format_time",
    "Command",
    "CommandKind",
    "PlaybackState",
    "Speed",
    "StatusEvent",
    "StatusKind",
    "TransportStatus",
    "FocusState",
    "Pane",
    "Session",
]
