from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Label, Static
from rich.text import Text

from models.navigation import Pane
from models.session import Session
from models.track import format_time
from styles import COLOR_FOCUS, COLOR_HIGHLIGHT, COLOR_MUTED, COLOR_PRIMARY
from views.shelf import scroll_window


class BacksideView(Container):
    """Song list of the album under the shelf cursor, with start times."""

    DEFAULT_CSS = """
    BacksideView {
        background: #1a1a1a;
        border: solid #ff8c00;
        padding: 0 1;
    }

    BacksideView.focused {
        border: solid #d65fd6;
    }

    BacksideView > Label {
        color: #ff8c00;
        text-style: bold;
    }

    BacksideView > #backside-list {
        height: 1fr;
    }
    """

    def __init__(self, session: Session, **kwargs):
        super().__init__(**kwargs)
        self.session = session
        self._top = 0

    def compose(self) -> ComposeResult:
        yield Label("🎵 Backside", id="backside-label")
        yield Static(id="backside-list")

    def on_mount(self) -> None:
        self.refresh_view()

    def on_resize(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw the song list from the session."""
        focus = self.session.focus
        library = self.session.library
        playback = self.session.playback
        songs_focused = focus.pane is Pane.SONG_LIST
        self.set_class(songs_focused, "focused")

        album_index = library.play_order[focus.album_cursor]
        album = library.albums[album_index]
        self.query_one("#backside-label", Label).update(f"🎵 Backside: {album.title}")

        listing = self.query_one("#backside-list", Static)
        count = len(album)
        height = listing.size.height or count
        self._top = scroll_window(focus.song_cursor, count, height, self._top)

        result = Text()
        for index in range(self._top, min(count, self._top + height)):
            track = album.tracks[index]
            start = format_time(album.offset_of(index))
            is_current = album_index == playback.album_index and index == playback.track_index
            selected = songs_focused and index == focus.song_cursor

            marker = "♪ " if is_current else "  "
            prefix = "> " if selected else "  "
            line = f"{prefix}{marker}{track.title} [{start}]"

            if selected:
                style = f"{COLOR_FOCUS} bold"
            elif is_current:
                style = COLOR_HIGHLIGHT
            else:
                style = COLOR_MUTED if not songs_focused else COLOR_PRIMARY
            result.append(line + "\n", style=style)

        listing.update(result)
