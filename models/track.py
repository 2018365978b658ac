from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class Track:
    """A single song on an album side."""
    file_path: Path
    title: str
    position: int
    duration: Optional[float] = None

    @property
    def duration_seconds(self) -> float:
        """Duration in seconds, 0.0 when unknown."""
        return self.duration or 0.0


@dataclass
class Album:
    """A record on the shelf: one directory of tracks."""
    title: str
    artist: str
    path: Path
    tracks: Tuple[Track, ...] = ()
    cover: Optional[Path] = None
    bookmarked: bool = False

    def __len__(self) -> int:
        return len(self.tracks)

    @property
    def total_duration(self) -> float:
        return sum(track.duration_seconds for track in self.tracks)

    def offset_of(self, track_index: int) -> float:
        """Return the start time of a track measured from the top of the side."""
        return sum(track.duration_seconds for track in self.tracks[:track_index])


@dataclass
class Library:
    """All albums found under the library root plus the session's shelf order.

    `play_order` is a permutation of album indices; position ``i`` on the
    shelf shows ``albums[play_order[i]]``.
    """
    albums: list
    play_order: Tuple[int, ...] = ()
    warnings: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.albums)

    @property
    def track_count(self) -> int:
        return sum(len(album) for album in self.albums)

    def album_at(self, position: int) -> Album:
        """Return the album shown at a shelf position."""
        return self.albums[self.play_order[position]]

    def position_of(self, album_index: int) -> int:
        """Return the shelf position of an album index."""
        return self.play_order.index(album_index)


def format_time(seconds: Optional[float]) -> str:
    """Format seconds as M:SS (or H:MM:SS for long sides)."""
    if not seconds or seconds < 0:
        seconds = 0
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
