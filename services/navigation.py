import logging

from models.navigation import FocusState, Pane
from models.session import Session

logger = logging.getLogger(__name__)


class NavigationModel:
    """Cursor and focus handling for the shelf and song panes.

    Cursors saturate at both ends of their pane; moving past a bound does
    nothing. The album cursor is a shelf position; `selected_album_index`
    translates it through the play order.
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    def focus(self) -> FocusState:
        return self.session.focus

    @property
    def pane(self) -> Pane:
        return self.focus.pane

    @property
    def album_count(self) -> int:
        return len(self.session.library.play_order)

    @property
    def song_count(self) -> int:
        if not self.album_count:
            return 0
        return len(self.session.library.album_at(self.focus.album_cursor))

    @property
    def selected_album_index(self) -> int:
        """Album index under the shelf cursor."""
        return self.session.library.play_order[self.focus.album_cursor]

    @property
    def selected_track_index(self) -> int:
        """Track index under the song cursor, within the selected album."""
        return self.focus.song_cursor

    def move_down(self) -> None:
        """Move the focused pane's cursor down (j key)."""
        if self.pane is Pane.ALBUM_LIST:
            self._set_album_cursor(self.focus.album_cursor + 1)
        else:
            self._set_song_cursor(self.focus.song_cursor + 1)

    def move_up(self) -> None:
        """Move the focused pane's cursor up (k key)."""
        if self.pane is Pane.ALBUM_LIST:
            self._set_album_cursor(self.focus.album_cursor - 1)
        else:
            self._set_song_cursor(self.focus.song_cursor - 1)

    def move_right(self) -> None:
        """Step from the shelf into the selected album's song list (l key).

        The song cursor lands on the playing track when the selected album is
        the loaded one, otherwise on the first track.
        """
        if self.pane is Pane.SONG_LIST:
            return
        playback = self.session.playback
        if playback.album_index == self.selected_album_index:
            song = playback.track_index
        else:
            song = 0
        self.focus.pane = Pane.SONG_LIST
        self._set_song_cursor(song)

    def move_left(self) -> None:
        """Step from the song list back to the shelf (h key)."""
        if self.pane is Pane.ALBUM_LIST:
            return
        self.focus.pane = Pane.ALBUM_LIST

    def focus_pane(self, pane: Pane) -> None:
        """Give input focus to a pane without moving any cursor."""
        if self.focus.pane is not pane:
            logger.debug(f"Focus moved to {pane.value}")
        self.focus.pane = pane

    def jump_to_top(self) -> None:
        if self.pane is Pane.ALBUM_LIST:
            self._set_album_cursor(0)
        else:
            self._set_song_cursor(0)

    def jump_to_bottom(self) -> None:
        if self.pane is Pane.ALBUM_LIST:
            self._set_album_cursor(self.album_count - 1)
        else:
            self._set_song_cursor(self.song_count - 1)

    def half_page_down(self) -> None:
        """Move the shelf cursor down by half the shelf (ctrl+d)."""
        if self.pane is Pane.ALBUM_LIST:
            self._set_album_cursor(self.focus.album_cursor + self._half_shelf())

    def half_page_up(self) -> None:
        """Move the shelf cursor up by half the shelf (ctrl+u)."""
        if self.pane is Pane.ALBUM_LIST:
            self._set_album_cursor(self.focus.album_cursor - self._half_shelf())

    def jump_to_position(self, position: int) -> None:
        """Put the shelf cursor on a shelf position and focus the shelf."""
        self.focus.pane = Pane.ALBUM_LIST
        self._set_album_cursor(position)

    def press_g(self) -> None:
        """Handle 'g'; a second consecutive 'g' jumps to the top."""
        if self.focus.pending_g:
            self.focus.pending_g = False
            self.jump_to_top()
        else:
            self.focus.pending_g = True

    def clear_pending(self) -> None:
        self.focus.pending_g = False

    def _half_shelf(self) -> int:
        return max(self.album_count // 2, 1)

    def _set_album_cursor(self, position: int) -> None:
        if not self.album_count:
            return
        position = max(0, min(position, self.album_count - 1))
        if position != self.focus.album_cursor:
            self.focus.album_cursor = position
            self.focus.song_cursor = 0

    def _set_song_cursor(self, position: int) -> None:
        if not self.song_count:
            return
        self.focus.song_cursor = max(0, min(position, self.song_count - 1))
