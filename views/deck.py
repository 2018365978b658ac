from textual.app import ComposeResult
from textual.containers import Container, Vertical
from textual.widgets import Static

from models.playback import TransportStatus
from models.track import format_time
from services.playback_controller import PlaybackController

RECORD_FRAMES = ["◐", "◓", "◑", "◒"]


class DeckView(Container):
    """The turntable: what is inserted and how it is spinning."""

    DEFAULT_CSS = """
    DeckView {
        height: 9;
        background: #1a1a1a;
        border: solid #ff8c00;
        padding: 0 1;
    }

    DeckView .deck-title {
        color: #ffb347;
        text-style: bold;
    }

    DeckView .deck-metadata {
        color: #888888;
    }

    DeckView .deck-state {
        color: #ff8c00;
    }
    """

    def __init__(self, controller: PlaybackController, **kwargs):
        """Initialize DeckView with the playback controller it reports on."""
        super().__init__(**kwargs)
        self.controller = controller
        self._frame = 0
        self._title_widget: Static | None = None
        self._artist_widget: Static | None = None
        self._path_widget: Static | None = None
        self._time_widget: Static | None = None
        self._state_widget: Static | None = None

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("No album playing", id="deck-title", classes="deck-title")
            yield Static("", id="deck-artist", classes="deck-metadata")
            yield Static("", id="deck-path", classes="deck-metadata")
            yield Static("", id="deck-time", classes="deck-metadata")
            yield Static("", id="deck-state", classes="deck-state")

    def on_mount(self) -> None:
        self._title_widget = self.query_one("#deck-title", Static)
        self._artist_widget = self.query_one("#deck-artist", Static)
        self._path_widget = self.query_one("#deck-path", Static)
        self._time_widget = self.query_one("#deck-time", Static)
        self._state_widget = self.query_one("#deck-state", Static)
        self.refresh_view()

    def refresh_view(self) -> None:
        """Update all deck widgets from the playback state."""
        if self._title_widget is None:
            return

        state = self.controller.state
        album = self.controller.current_album()
        track = self.controller.current_track()

        if state.status is TransportStatus.PLAYING:
            self._frame = (self._frame + 1) % len(RECORD_FRAMES)

        if album is None:
            self._title_widget.update("○ No album playing")
            self._artist_widget.update("Pick a record from the shelf and press Space.")
            self._path_widget.update("")
            self._time_widget.update("")
        else:
            self._title_widget.update(f"{RECORD_FRAMES[self._frame]} {album.title}")
            self._artist_widget.update(
                f"Artist: {album.artist}   Track {state.track_index + 1}/{len(album)}: {track.title}"
            )
            self._path_widget.update(f"Path: {album.path}")
            elapsed = format_time(self.controller.album_elapsed())
            total = format_time(album.total_duration)
            self._time_widget.update(f"Elapsed: {elapsed} / {total}")

        self._state_widget.update(
            f"Status: {state.status.value.capitalize()}   "
            f"Volume: {round(state.volume * 100)}%   "
            f"Speed: {state.speed.label}"
        )
