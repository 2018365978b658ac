from textual.app import App, ComposeResult
from textual.widgets import Footer
from textual.containers import Horizontal, Vertical
from textual.binding import Binding
from textual.screen import ModalScreen
from textual import events
import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from config import Settings
from models.errors import ConfigurationError, LibraryError
from models.playback import PlaybackState
from models.session import Session
from models.track import Library
from services import (
    AudioPlayer,
    BookmarkManager,
    EventLoop,
    MusicLibrary,
    NavigationModel,
    Notice,
    PlaybackController,
    ShuffleEngine,
)
from views import BacksideView, DeckView, ShelfView
from widgets import Header, HelpScreen

__version__ = "0.3.0"

logger = logging.getLogger(__name__)

# Keys dispatched through BINDINGS; on_key must not handle them a second time.
BOUND_KEYS = {"space", " ", "enter", "m", "n", "p", "+", "-", ">", "<"}


class LevariApp(App):
    """A terminal record player with a shuffled shelf."""

    CSS_PATH = "styles/app.tcss"
    TITLE = "Levari"

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("space", "press('space')", "Play/Pause"),
        Binding("enter", "press('enter')", "Insert/Eject"),
        Binding("m", "press('m')", "Bookmark", priority=True),
        Binding("n", "press('n')", "Next ★", priority=True),
        Binding("p", "press('p')", "Playing", priority=True),
        Binding("plus", "press('+')", "Vol+", priority=True),
        Binding("minus", "press('-')", "Vol-", priority=True),
        Binding("greater_than_sign", "press('>')", "Faster", priority=True),
        Binding("less_than_sign", "press('<')", "Slower", priority=True),
        Binding("question_mark", "show_help", "Help", priority=True),
    ]

    def __init__(self, library: Library, settings: Optional[Settings] = None,
                 audio_player: Optional[AudioPlayer] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.settings = settings or Settings()

        logger.info("Starting Levari application")

        self.audio_player = audio_player or AudioPlayer()
        try:
            self.audio_player.start()
        except RuntimeError as e:
            logger.critical(f"Failed to initialize audio player: {e}")
            raise

        self.session = Session(
            library=library,
            playback=PlaybackState(volume=self.settings.initial_volume),
        )
        self.controller = PlaybackController(self.session, self.audio_player.commands)
        self.navigation = NavigationModel(self.session)
        self.bookmarks = BookmarkManager(self.session)
        self.event_loop = EventLoop(
            self.session,
            self.controller,
            self.navigation,
            self.bookmarks,
            self.audio_player.status,
            volume_step=self.settings.volume_step,
        )
        logger.info("Services initialized successfully")

    def compose(self) -> ComposeResult:
        """Compose the main application layout."""
        yield Header()

        with Vertical(id="main-view"):
            yield DeckView(self.controller, id="deck")
            with Horizontal(id="bottom-container"):
                yield ShelfView(self.session, id="shelf")
                yield BacksideView(self.session, id="backside")

        yield Footer()

    def on_mount(self) -> None:
        """Start polling the audio backend."""
        self.set_interval(self.settings.status_interval, self._poll_status)
        self._update_views()

        library = self.session.library
        self.notify(
            f"✓ Shelved {len(library)} albums ({library.track_count} tracks)",
            severity="information",
            timeout=self.settings.notice_timeout,
        )
        if library.warnings:
            self.notify(
                f"Skipped {len(library.warnings)} unreadable files, see the log for details",
                severity="warning",
                timeout=self.settings.notice_timeout * 2,
            )

    def _poll_status(self) -> None:
        self._show(self.event_loop.pump_status())
        self._update_views()

    def on_key(self, event: events.Key) -> None:
        """Route navigation keys that have no binding to the event loop."""
        if isinstance(self.screen, ModalScreen):
            return
        key = event.character if event.character and event.is_printable else event.key
        if key in BOUND_KEYS or not self.event_loop.handles(key):
            return
        self._dispatch(key)
        event.prevent_default()
        event.stop()

    def action_press(self, key: str) -> None:
        """Dispatch a bound key to the event loop."""
        if isinstance(self.screen, ModalScreen):
            return
        self._dispatch(key)

    def _dispatch(self, key: str) -> None:
        try:
            self._show(self.event_loop.handle_key(key))
        except Exception as e:
            logger.error(f"Error handling key {key!r}: {type(e).__name__}: {e}", exc_info=True)
            self.notify(f"❌ {type(e).__name__}: {e}", severity="error", timeout=self.settings.notice_timeout)
        self._update_views()

    def _show(self, notices: Iterable[Notice]) -> None:
        for notice in notices:
            self.notify(notice.message, severity=notice.severity, timeout=self.settings.notice_timeout)

    def _update_views(self) -> None:
        if not self.is_mounted:
            return
        playback = self.session.playback
        header = self.query_one(Header)
        header.volume_level = round(playback.volume * 100)
        header.rpm = playback.speed.value

        self.query_one("#deck", DeckView).refresh_view()
        self.query_one("#shelf", ShelfView).refresh_view()
        self.query_one("#backside", BacksideView).refresh_view()

    def action_show_help(self) -> None:
        if isinstance(self.screen, HelpScreen):
            self.screen.dismiss()
        elif not isinstance(self.screen, ModalScreen):
            self.push_screen(HelpScreen())

    async def action_quit(self) -> None:
        """Stop the turntable and shut down."""
        self.event_loop.shutdown()
        self.audio_player.close(grace=self.settings.shutdown_grace)
        self.exit()


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="levari",
        description="A terminal record player. Your music library is shuffled onto "
                    "a shelf of albums every time it starts.",
    )
    parser.add_argument(
        "-d", "--directory",
        type=Path,
        required=True,
        help="music library root, scanned recursively for albums",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="log file verbosity (default: INFO)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def configure_logging(settings: Settings, level: str = "INFO") -> None:
    """Send logs to a file; the terminal belongs to the UI."""
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(settings.log_file)
        ],
        force=True,
    )


def load_library(directory: Path) -> Library:
    """Scan the library root and shuffle it onto the shelf.

    Raises:
        LibraryError: If the directory is unusable or holds no playable tracks.
    """
    library = MusicLibrary(directory).scan()
    return ShuffleEngine().shuffle(library)


def main(argv: Optional[list] = None) -> None:
    """Entry point for the levari application.

    Handles startup errors with user-friendly messages and a non-zero exit.
    """
    args = parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(f"\n❌ Invalid configuration: {e}\n", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings, args.log_level)
    log_file = settings.log_file

    try:
        logger.info("=" * 60)
        logger.info(f"Levari starting up (library: {args.directory})")
        logger.info("=" * 60)

        library = load_library(args.directory)

        app = LevariApp(library, settings)
        app.run()

        logger.info("Levari shut down cleanly")

    except LibraryError as e:
        logger.critical(f"Cannot load music library: {e}")
        print("\n❌ Levari cannot start\n", file=sys.stderr)
        print(f"{e}\n", file=sys.stderr)
        sys.exit(1)
    except RuntimeError as e:
        logger.critical(f"Fatal error during startup: {e}")
        print("\n❌ Levari cannot start\n", file=sys.stderr)
        print(f"{e}\n", file=sys.stderr)
        print(f"Check {log_file} for more details.\n", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Levari interrupted by user")
        print("\n\nGoodbye! 👋\n")
    except Exception as e:
        logger.critical(f"Unexpected fatal error: {type(e).__name__}: {e}", exc_info=True)
        print("\n❌ Levari encountered an unexpected error\n", file=sys.stderr)
        print(f"{type(e).__name__}: {e}\n", file=sys.stderr)
        print(f"Check {log_file} for more details.\n", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
