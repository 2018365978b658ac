from dataclasses import dataclass, field

from models.navigation import FocusState
from models.playback import PlaybackState
from models.track import Library


@dataclass
class Session:
    """All mutable state of one run, owned by the event loop thread.

    The library and its play order are read-only after startup. `bookmarks`
    mirrors the `bookmarked` flags of the albums and is maintained by
    BookmarkManager.
    """
    library: Library
    playback: PlaybackState = field(default_factory=PlaybackState)
    focus: FocusState = field(default_factory=FocusState)
    bookmarks: set = field(default_factory=set)
