from .music_library import MusicLibrary, discover_audio_files
from .shuffle import ShuffleEngine
from .bookmarks import BookmarkManager
from .navigation import NavigationModel
from .playback_controller import PlaybackController
from .event_loop import EventLoop, Notice
from .audio_player import AudioPlayer

__all__ = [
    'MusicLibrary',
    'discover_audio_files',
    'ShuffleEngine',
    'BookmarkManager',
    'NavigationModel',
    'PlaybackController',
    'EventLoop',
    'Notice',
    'AudioPlayer',
]
