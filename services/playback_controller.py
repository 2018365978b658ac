import logging
import queue
from typing import Optional

from models.errors import InvalidTransition
from models.playback import (
    Command,
    CommandKind,
    PlaybackState,
    Speed,
    TransportStatus,
)
from models.session import Session
from models.track import Album, Track

logger = logging.getLogger(__name__)


class PlaybackController:
    """The turntable: owns the transport state machine of the session.

    IDLE -> LOADED -> PLAYING <-> PAUSED. Selecting a different album always
    reloads from scratch; finishing the last track of an album returns to
    IDLE, the player never moves on to another album by itself.

    Every request to the audio backend goes out on the command channel in
    issue order. Backend status comes back through the on_* methods; events
    carrying an old load token describe a track that has since been replaced
    and are ignored.
    """

    def __init__(self, session: Session, commands: queue.Queue):
        """Initialize the controller.

        Args:
            session: Session whose playback state this controller owns.
            commands: Command channel read by the audio backend.
        """
        self.session = session
        self.commands = commands
        self._send(CommandKind.SET_VOLUME, value=self.state.volume)
        self._send(CommandKind.SET_RATE, value=self.state.speed.multiplier)

    @property
    def state(self) -> PlaybackState:
        return self.session.playback

    @property
    def status(self) -> TransportStatus:
        return self.state.status

    def current_album(self) -> Optional[Album]:
        """Return the loaded album or None."""
        if not self.state.is_loaded:
            return None
        return self.session.library.albums[self.state.album_index]

    def current_track(self) -> Optional[Track]:
        """Return the loaded track or None."""
        album = self.current_album()
        if album is None:
            return None
        return album.tracks[self.state.track_index]

    def album_elapsed(self) -> float:
        """Return the time played from the top of the loaded album."""
        album = self.current_album()
        if album is None:
            return 0.0
        return album.offset_of(self.state.track_index) + self.state.elapsed

    def select_and_commit(self, album_index: int, track_index: Optional[int] = None) -> None:
        """Insert an album, or pick a song on the album already inserted.

        A different album is loaded from scratch and starts playing at
        `track_index` (first track by default). Within the loaded album, a
        different `track_index` skips to that song keeping the transport
        status; otherwise a paused album resumes where it stopped.

        Args:
            album_index: Album to play.
            track_index: Optional track within that album.

        Raises:
            IndexError: If the album or track does not exist.
        """
        albums = self.session.library.albums
        if not 0 <= album_index < len(albums):
            raise IndexError(f"No album at index {album_index}")
        album = albums[album_index]
        if track_index is not None and not 0 <= track_index < len(album):
            raise IndexError(f"Album '{album.title}' has no track {track_index}")

        if album_index != self.state.album_index:
            self._insert(album_index, track_index or 0)
            return

        if track_index is not None and track_index != self.state.track_index:
            self._load_track(track_index)
            if self.status is TransportStatus.PLAYING:
                self._send(CommandKind.PLAY)
            logger.info(f"Skipped to '{album.tracks[track_index].title}' ({self.status.value})")
            return

        if self.status in (TransportStatus.PAUSED, TransportStatus.LOADED):
            self._start()

    def _insert(self, album_index: int, track_index: int) -> None:
        album = self.session.library.albums[album_index]
        if self.state.is_loaded:
            logger.info(f"Replacing '{self.current_album().title}' with '{album.title}'")

        self.state.album_index = album_index
        self._load_track(track_index)
        self._set_status(TransportStatus.LOADED)
        self._start()
        logger.info(f"Album '{album.title}' inserted at track {track_index + 1}")

    def _load_track(self, track_index: int) -> None:
        self.state.load_token += 1
        self.state.track_index = track_index
        self.state.elapsed = 0.0
        track = self.current_track()
        self._send(CommandKind.LOAD, path=track.file_path)

    def _start(self) -> None:
        self._send(CommandKind.PLAY)
        self._set_status(TransportStatus.PLAYING)

    def toggle_play_pause(self) -> TransportStatus:
        """Pause a playing album or resume a paused one.

        Returns:
            The new transport status.

        Raises:
            InvalidTransition: If nothing is loaded.
        """
        if self.status is TransportStatus.IDLE:
            raise InvalidTransition("No album is inserted yet. Press Enter to insert.")

        if self.status is TransportStatus.PLAYING:
            self._send(CommandKind.PAUSE)
            self._set_status(TransportStatus.PAUSED)
        else:
            self._start()
        return self.status

    def eject(self) -> Album:
        """Stop and remove the loaded album.

        Raises:
            InvalidTransition: If nothing is loaded.
        """
        album = self.current_album()
        if album is None:
            raise InvalidTransition("There is no album to eject.")
        self._send(CommandKind.STOP)
        self._clear()
        logger.info(f"Album '{album.title}' ejected")
        return album

    def set_speed(self, speed: Speed) -> Speed:
        """Set the turntable speed and pass the new rate to the backend.

        Legal in every status; the rate applies to whatever plays next.
        """
        if not isinstance(speed, Speed):
            raise ValueError(f"Unsupported speed: {speed!r}")
        self.state.speed = speed
        self._send(CommandKind.SET_RATE, value=speed.multiplier)
        logger.debug(f"Speed set to {speed.label}")
        return speed

    def speed_up(self) -> Speed:
        return self.set_speed(self.state.speed.faster())

    def speed_down(self) -> Speed:
        return self.set_speed(self.state.speed.slower())

    def adjust_volume(self, delta: float) -> float:
        """Change the volume by delta, clamped to [0.0, 1.0].

        Returns:
            The new volume.
        """
        self.state.volume = max(0.0, min(1.0, self.state.volume + delta))
        self._send(CommandKind.SET_VOLUME, value=self.state.volume)
        return self.state.volume

    def shutdown(self) -> None:
        """Ask the backend to stop; does not wait for it."""
        self._send(CommandKind.STOP)
        logger.info("Stop requested for shutdown")

    def on_track_position(self, elapsed: float, token: int) -> None:
        if token != self.state.load_token or not self.state.is_loaded:
            return
        self.state.elapsed = max(0.0, elapsed)

    def on_track_finished(self, token: int) -> bool:
        """Advance to the next track of the album, or go idle after the last.

        Returns:
            True if the event applied to the loaded track.
        """
        if token != self.state.load_token or not self.state.is_loaded:
            logger.debug(f"Ignoring stale track-finished event (token {token})")
            return False
        self._advance()
        return True

    def on_backend_error(self, kind: str, message: str, token: int) -> Optional[Track]:
        """Skip a track the backend could not play.

        Returns:
            The skipped track, or None if the event was stale.
        """
        if token != self.state.load_token or not self.state.is_loaded:
            logger.debug(f"Ignoring stale backend error (token {token}): {kind}")
            return None
        track = self.current_track()
        logger.warning(f"Backend error ({kind}) on {track.file_path}: {message}")
        self._advance()
        return track

    def _advance(self) -> None:
        album = self.current_album()
        next_index = self.state.track_index + 1
        if next_index < len(album):
            self._load_track(next_index)
            if self.status is TransportStatus.PAUSED:
                return
            self._start()
            logger.info(f"Now playing track {next_index + 1} of '{album.title}'")
            return

        logger.info(f"Reached the end of '{album.title}'")
        self._send(CommandKind.STOP)
        self._clear()

    def _clear(self) -> None:
        self.state.album_index = None
        self.state.track_index = 0
        self.state.elapsed = 0.0
        self.state.load_token += 1
        self._set_status(TransportStatus.IDLE)

    def _set_status(self, status: TransportStatus) -> None:
        if status is not self.state.status:
            logger.debug(f"Transport {self.state.status.value} -> {status.value}")
        self.state.status = status

    def _send(self, kind: CommandKind, path=None, value: float = 0.0) -> None:
        self.commands.put(Command(kind=kind, path=path, value=value, token=self.state.load_token))
