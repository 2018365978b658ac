import queue
import wave
from pathlib import Path

import pytest

from models.playback import PlaybackState
from models.session import Session
from models.track import Album, Library, Track
from services.bookmarks import BookmarkManager
from services.event_loop import EventLoop
from services.navigation import NavigationModel
from services.playback_controller import PlaybackController

A, B, C = 0, 1, 2


def write_wav(path: Path, seconds: float = 0.1, rate: int = 8000) -> Path:
    """Write a silent mono WAV file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(rate)
        wav.writeframes(b"\x00\x00" * int(seconds * rate))
    return path


def make_album(title: str, track_count: int, duration: float = 60.0) -> Album:
    path = Path("/music") / title
    tracks = tuple(
        Track(file_path=path / f"{i + 1:02d}.mp3", title=f"{title} {i + 1}", position=i, duration=duration)
        for i in range(track_count)
    )
    return Album(title=title, artist="Test Artist", path=path, tracks=tracks)


def drain(channel: queue.Queue) -> list:
    """Return everything currently on a channel."""
    items = []
    while True:
        try:
            items.append(channel.get_nowait())
        except queue.Empty:
            return items


@pytest.fixture
def music_dir(tmp_path):
    """A library root with two album directories, a stray text file and a broken mp3."""
    root = tmp_path / "music"
    write_wav(root / "Artist One" / "First Album" / "Track 10.wav")
    write_wav(root / "Artist One" / "First Album" / "Track 2.wav")
    write_wav(root / "Artist One" / "First Album" / "Track 1.wav")
    (root / "Artist One" / "First Album" / "cover.jpg").write_bytes(b"\xff\xd8")
    write_wav(root / "Second Album" / "a.wav")
    (root / "Second Album" / "notes.txt").write_text("liner notes")
    (root / "Second Album" / "broken.mp3").write_bytes(b"not really an mp3")
    return root


@pytest.fixture
def library():
    """Albums A (2 tracks), B (1 track), C (3 tracks) shelved as [B, A, C]."""
    albums = [make_album("A", 2), make_album("B", 1), make_album("C", 3)]
    return Library(albums=albums, play_order=(B, A, C))


@pytest.fixture
def session(library):
    return Session(library=library, playback=PlaybackState())


@pytest.fixture
def commands():
    return queue.Queue()


@pytest.fixture
def status():
    return queue.Queue()


@pytest.fixture
def controller(session, commands):
    controller = PlaybackController(session, commands)
    drain(commands)
    return controller


@pytest.fixture
def navigation(session):
    return NavigationModel(session)


@pytest.fixture
def bookmarks(session):
    return BookmarkManager(session)


@pytest.fixture
def dispatcher(session, controller, navigation, bookmarks, status):
    return EventLoop(session, controller, navigation, bookmarks, status, volume_step=0.1)
