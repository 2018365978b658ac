import logging
import queue
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from models.errors import PlayerNotice
from models.navigation import Pane
from models.playback import StatusEvent, StatusKind, TransportStatus
from models.session import Session
from services.bookmarks import BookmarkManager
from services.navigation import NavigationModel
from services.playback_controller import PlaybackController

logger = logging.getLogger(__name__)

DEFAULT_VOLUME_STEP = 0.05


@dataclass(frozen=True)
class Notice:
    """Transient status text for the UI. Severity follows Textual's notify()."""
    message: str
    severity: str = "information"


class EventLoop:
    """Routes key presses and backend status events to the session components.

    Pending status events are always drained before a key is handled, so a
    track-finished report is applied before any key pressed after it. The
    caller re-renders after every call that returns.
    """

    def __init__(self, session: Session, controller: PlaybackController,
                 navigation: NavigationModel, bookmarks: BookmarkManager,
                 status: queue.Queue, volume_step: float = DEFAULT_VOLUME_STEP):
        self.session = session
        self.controller = controller
        self.navigation = navigation
        self.bookmarks = bookmarks
        self.status = status
        self.volume_step = volume_step

        self._keymap: Dict[str, Callable[[], Optional[Notice]]] = {
            "space": self._primary_action,
            "enter": self._insert_or_eject,
            "h": self.navigation.move_left,
            "j": self.navigation.move_down,
            "k": self.navigation.move_up,
            "l": self.navigation.move_right,
            "H": lambda: self.navigation.focus_pane(Pane.ALBUM_LIST),
            "K": lambda: self.navigation.focus_pane(Pane.ALBUM_LIST),
            "J": lambda: self.navigation.focus_pane(Pane.SONG_LIST),
            "L": lambda: self.navigation.focus_pane(Pane.SONG_LIST),
            "g": self.navigation.press_g,
            "G": self.navigation.jump_to_bottom,
            "ctrl+d": self.navigation.half_page_down,
            "ctrl+u": self.navigation.half_page_up,
            "m": self._toggle_bookmark,
            "n": self._next_bookmark,
            "N": self._prev_bookmark,
            "p": self._locate_playing,
            "+": self._volume_up,
            "=": self._volume_up,
            "-": self._volume_down,
            ">": self._speed_up,
            "<": self._speed_down,
        }

    def handles(self, key: str) -> bool:
        return key in self._keymap

    def handle_key(self, key: str) -> List[Notice]:
        """Apply pending status events, then one key press.

        Returns:
            Notices to show, in the order they were produced.
        """
        notices = self.pump_status()

        if key != "g":
            self.navigation.clear_pending()

        action = self._keymap.get(key)
        if action is None:
            return notices

        try:
            notice = action()
        except PlayerNotice as e:
            logger.debug(f"Key {key!r}: {e}")
            notice = Notice(str(e), "warning")

        if notice is not None:
            notices.append(notice)
        return notices

    def pump_status(self) -> List[Notice]:
        """Drain the status channel without blocking."""
        notices = []
        while True:
            try:
                event = self.status.get_nowait()
            except queue.Empty:
                break
            notice = self.handle_status(event)
            if notice is not None:
                notices.append(notice)
        return notices

    def handle_status(self, event: StatusEvent) -> Optional[Notice]:
        if event.kind is StatusKind.POSITION:
            self.controller.on_track_position(event.elapsed, event.token)
            return None

        if event.kind is StatusKind.TRACK_FINISHED:
            album = self.controller.current_album()
            applied = self.controller.on_track_finished(event.token)
            if applied and self.controller.status is TransportStatus.IDLE:
                return Notice(f"Album '{album.title}' finished.")
            return None

        if event.kind is StatusKind.BACKEND_ERROR:
            track = self.controller.on_backend_error(event.error_kind, event.message, event.token)
            if track is not None:
                return Notice(f"Skipped unplayable track '{track.title}'", "warning")
            return None

        logger.warning(f"Unknown status event: {event}")
        return None

    def shutdown(self) -> None:
        self.controller.shutdown()

    def _primary_action(self) -> Optional[Notice]:
        album_index = self.navigation.selected_album_index
        playback = self.session.playback

        if self.navigation.pane is Pane.SONG_LIST:
            track_index = self.navigation.selected_track_index
            if album_index == playback.album_index and track_index == playback.track_index:
                return self._toggle()
            self.controller.select_and_commit(album_index, track_index)
            track = self.controller.current_track()
            return Notice(f"Skipped to: '{track.title}'")

        if album_index == playback.album_index:
            return self._toggle()
        self.controller.select_and_commit(album_index)
        return Notice(f"Album '{self.controller.current_album().title}' inserted and playing.")

    def _insert_or_eject(self) -> Optional[Notice]:
        album_index = self.navigation.selected_album_index

        if self.navigation.pane is Pane.SONG_LIST:
            self.controller.select_and_commit(album_index, self.navigation.selected_track_index)
            return Notice(f"Skipped to: '{self.controller.current_track().title}'")

        if album_index == self.session.playback.album_index:
            album = self.controller.eject()
            return Notice(f"Album '{album.title}' ejected.")
        self.controller.select_and_commit(album_index)
        return Notice(f"Album '{self.controller.current_album().title}' inserted and playing.")

    def _toggle(self) -> Notice:
        status = self.controller.toggle_play_pause()
        return Notice("Paused." if status is TransportStatus.PAUSED else "Playing...")

    def _toggle_bookmark(self) -> Notice:
        album_index = self.navigation.selected_album_index
        title = self.session.library.albums[album_index].title
        if self.bookmarks.toggle_bookmark(album_index):
            return Notice(f"Bookmarked '{title}'")
        return Notice(f"Removed bookmark '{title}'")

    def _next_bookmark(self) -> Notice:
        return self._jump(self.bookmarks.jump_next(self.navigation.selected_album_index),
                          "Jumped to bookmarked album")

    def _prev_bookmark(self) -> Notice:
        return self._jump(self.bookmarks.jump_prev(self.navigation.selected_album_index),
                          "Jumped to bookmarked album")

    def _locate_playing(self) -> Notice:
        return self._jump(self.bookmarks.locate_currently_playing(), "Jumped to playing album")

    def _jump(self, position: int, label: str) -> Notice:
        self.navigation.jump_to_position(position)
        title = self.session.library.album_at(position).title
        return Notice(f"{label} '{title}'")

    def _volume_up(self) -> Notice:
        return self._volume_notice(self.controller.adjust_volume(self.volume_step))

    def _volume_down(self) -> Notice:
        return self._volume_notice(self.controller.adjust_volume(-self.volume_step))

    @staticmethod
    def _volume_notice(volume: float) -> Notice:
        return Notice(f"Volume: {round(volume * 100)}%")

    def _speed_up(self) -> Notice:
        return Notice(f"Speed: {self.controller.speed_up().label}")

    def _speed_down(self) -> Notice:
        return Notice(f"Speed: {self.controller.speed_down().label}")
