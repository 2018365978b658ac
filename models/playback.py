from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

DEFAULT_VOLUME = 0.25
BASE_RPM = 33


class TransportStatus(Enum):
    """Where the turntable is in its cycle."""
    IDLE = "idle"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"


class Speed(Enum):
    """Turntable speed presets, in revolutions per minute."""
    RPM33 = 33
    RPM45 = 45
    RPM78 = 78

    @property
    def multiplier(self) -> float:
        return self.value / BASE_RPM

    @property
    def label(self) -> str:
        return f"{self.value} RPM"

    def faster(self) -> "Speed":
        presets = list(Speed)
        index = presets.index(self)
        return presets[min(index + 1, len(presets) - 1)]

    def slower(self) -> "Speed":
        presets = list(Speed)
        index = presets.index(self)
        return presets[max(index - 1, 0)]


@dataclass
class PlaybackState:
    """Transport state of the session. Only PlaybackController writes it."""
    album_index: Optional[int] = None
    track_index: int = 0
    status: TransportStatus = TransportStatus.IDLE
    speed: Speed = Speed.RPM33
    volume: float = DEFAULT_VOLUME
    elapsed: float = 0.0
    load_token: int = 0

    @property
    def is_loaded(self) -> bool:
        return self.album_index is not None


class CommandKind(Enum):
    LOAD = "load"
    PLAY = "play"
    PAUSE = "pause"
    SEEK = "seek"
    SET_RATE = "set_rate"
    SET_VOLUME = "set_volume"
    STOP = "stop"


@dataclass(frozen=True)
class Command:
    """A message on the command channel, from the controller to the backend."""
    kind: CommandKind
    path: Optional[Path] = None
    value: float = 0.0
    token: int = 0


class StatusKind(Enum):
    POSITION = "position"
    TRACK_FINISHED = "track_finished"
    BACKEND_ERROR = "backend_error"


@dataclass(frozen=True)
class StatusEvent:
    """A message on the status channel, from the backend to the event loop.

    `token` is the load token of the track the event refers to.
    """
    kind: StatusKind
    token: int
    elapsed: float = 0.0
    error_kind: str = ""
    message: str = ""
