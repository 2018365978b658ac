from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Label, Static
from rich.text import Text

from models.navigation import Pane
from models.session import Session
from styles import COLOR_FOCUS, COLOR_MUTED, COLOR_PRIMARY


def scroll_window(cursor: int, count: int, height: int, top: int) -> int:
    """Return the first visible row so that `cursor` stays on screen."""
    if height <= 0 or count <= height:
        return 0
    if cursor < top:
        top = cursor
    elif cursor >= top + height:
        top = cursor - height + 1
    return max(0, min(top, count - height))


class ShelfView(Container):
    """The shuffled shelf of albums."""

    DEFAULT_CSS = """
    ShelfView {
        background: #1a1a1a;
        border: solid #ff8c00;
        padding: 0 1;
    }

    ShelfView.focused {
        border: solid #d65fd6;
    }

    ShelfView > Label {
        color: #ff8c00;
        text-style: bold;
    }

    ShelfView > #shelf-list {
        height: 1fr;
    }
    """

    def __init__(self, session: Session, **kwargs):
        super().__init__(**kwargs)
        self.session = session
        self._top = 0

    def compose(self) -> ComposeResult:
        library = self.session.library
        yield Label(f"💿 Shelf ({len(library)} albums)")
        yield Static(id="shelf-list")

    def on_mount(self) -> None:
        self.refresh_view()

    def on_resize(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw the visible part of the shelf from the session."""
        focus = self.session.focus
        library = self.session.library
        playing = self.session.playback.album_index
        shelf_focused = focus.pane is Pane.ALBUM_LIST
        self.set_class(shelf_focused, "focused")

        listing = self.query_one("#shelf-list", Static)
        count = len(library.play_order)
        height = listing.size.height or count
        self._top = scroll_window(focus.album_cursor, count, height, self._top)

        result = Text()
        for position in range(self._top, min(count, self._top + height)):
            album_index = library.play_order[position]
            album = library.albums[album_index]
            selected = position == focus.album_cursor

            prefix = ">> " if selected else "   "
            line = f"{prefix}{album.artist} - {album.title}"
            if album.bookmarked:
                line += " [*]"
            if album_index == playing:
                line += " [INSERTED]"

            if selected and shelf_focused:
                style = f"{COLOR_FOCUS} bold"
            elif selected or album_index == playing:
                style = COLOR_PRIMARY
            else:
                style = COLOR_MUTED
            result.append(line + "\n", style=style)

        listing.update(result)
