from dataclasses import dataclass
from enum import Enum


class Pane(Enum):
    """Navigable sections of the main screen."""
    ALBUM_LIST = "album_list"
    SONG_LIST = "song_list"


@dataclass
class FocusState:
    """Cursor and focus state. Only NavigationModel writes it.

    `album_cursor` is a shelf (play order) position, not an album index.
    """
    pane: Pane = Pane.ALBUM_LIST
    album_cursor: int = 0
    song_cursor: int = 0
    pending_g: bool = False
