import logging
import os
import re
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from mutagen import File as MutagenFile
from mutagen import MutagenError

from models.errors import EmptyLibraryError, LibraryRootError
from models.track import Album, Library, Track

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {'.mp3', '.flac', '.wav', '.ogg', '.m4a'}
UNKNOWN_ARTIST = "Unknown Artist"

_NATURAL_SPLIT = re.compile(r'(\d+)')


def discover_audio_files(root: Path) -> List[Path]:
    """Recursively list supported audio files under a library root.

    Unreadable subdirectories are skipped with a warning.

    Args:
        root: Library root directory.

    Returns:
        Audio file paths in on-disk (sorted) order.

    Raises:
        LibraryRootError: If root is missing, not a directory, or unreadable.
    """
    root = Path(root).expanduser()
    if not root.exists():
        raise LibraryRootError(f"Music directory not found: {root}")
    if not root.is_dir():
        raise LibraryRootError(f"Not a directory: {root}")
    try:
        os.listdir(root)
    except OSError as e:
        raise LibraryRootError(f"Cannot read music directory {root}: {e.strerror or e}") from e

    def _on_error(error: OSError) -> None:
        logger.warning(f"Skipping unreadable directory {error.filename}: {error.strerror}")

    found = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        for name in sorted(filenames):
            if Path(name).suffix.lower() in SUPPORTED_EXTENSIONS:
                found.append(Path(dirpath) / name)

    logger.info(f"Discovered {len(found)} audio files under {root}")
    return found


def natural_key(text: str) -> list:
    """Sort key that orders 'Track 2' before 'Track 10'."""
    return [int(part) if part.isdigit() else part.lower() for part in _NATURAL_SPLIT.split(text)]


class MusicLibrary:
    """Builds the album shelf from the files found under a music directory."""

    def __init__(self, music_dir: Path):
        """Initialize MusicLibrary for a library root.

        Args:
            music_dir: Path to the music directory.
        """
        self.music_dir = Path(music_dir).expanduser()
        self._library: Optional[Library] = None

    def scan(self) -> Library:
        """Scan the music directory and build the library.

        Returns:
            Library with albums in on-disk order and no play order yet.

        Raises:
            LibraryRootError: If the music directory cannot be used.
            EmptyLibraryError: If no playable tracks were found.
        """
        paths = discover_audio_files(self.music_dir)
        self._library = self.build(paths)
        return self._library

    def get_library(self) -> Optional[Library]:
        """Return the library from the last scan."""
        return self._library

    def build(self, paths: Iterable[Path]) -> Library:
        """Group audio files into albums by directory.

        Files that cannot be read are skipped and recorded as warnings.

        Args:
            paths: Audio file paths, as produced by discover_audio_files().

        Returns:
            Library with albums ordered by directory.

        Raises:
            EmptyLibraryError: If none of the files is playable.
        """
        warnings: List[str] = []
        by_directory: Dict[Path, List[tuple]] = {}

        for file_path in paths:
            file_path = Path(file_path)
            try:
                metadata = self._extract_metadata(file_path)
            except (MutagenError, OSError, ValueError) as e:
                message = f"Skipped unreadable file {file_path}: {e}"
                logger.warning(message)
                warnings.append(message)
                continue
            by_directory.setdefault(file_path.parent, []).append((file_path, metadata))

        albums = [
            self._build_album(directory, entries)
            for directory, entries in sorted(by_directory.items(), key=lambda item: natural_key(str(item[0])))
        ]

        library = Library(albums=albums, warnings=warnings)
        if library.track_count == 0:
            raise EmptyLibraryError(f"No playable tracks found in {self.music_dir}")

        logger.info(f"Built library: {len(albums)} albums, {library.track_count} tracks, "
                    f"{len(warnings)} files skipped")
        return library

    def _build_album(self, directory: Path, entries: List[tuple]) -> Album:
        entries = sorted(entries, key=self._track_sort_key)
        tracks = tuple(
            Track(
                file_path=file_path,
                title=metadata['title'],
                position=position,
                duration=metadata['duration'],
            )
            for position, (file_path, metadata) in enumerate(entries)
        )

        album_titles = Counter(m['album'] for _, m in entries if m['album'])
        title = album_titles.most_common(1)[0][0] if album_titles else directory.name or str(directory)

        artist = next((m['artist'] for _, m in entries if m['artist']), UNKNOWN_ARTIST)

        return Album(
            title=title,
            artist=artist,
            path=directory,
            tracks=tracks,
            cover=self._find_cover(directory),
        )

    @staticmethod
    def _track_sort_key(entry: tuple) -> tuple:
        file_path, metadata = entry
        tracknumber = metadata['tracknumber']
        if tracknumber is None:
            return (1, 0, 0, natural_key(file_path.name))
        return (0, metadata['discnumber'] or 1, tracknumber, natural_key(file_path.name))

    @staticmethod
    def _find_cover(directory: Path) -> Optional[Path]:
        try:
            for entry in sorted(directory.iterdir()):
                if entry.is_file() and entry.name.lower().startswith('cover.'):
                    return entry
        except OSError as e:
            logger.debug(f"Could not look for cover art in {directory}: {e}")
        return None

    @staticmethod
    def _extract_metadata(file_path: Path) -> Dict[str, Any]:
        """Extract metadata from audio file using mutagen.

        Args:
            file_path: Path to audio file.

        Returns:
            Dictionary containing title, artist, album, tracknumber,
            discnumber and duration. Missing tags are None, except title
            which falls back to the file name.

        Raises:
            ValueError: If the file is not a recognized audio file.
            MutagenError: If the file is corrupted.
            OSError: If the file cannot be opened.
        """
        audio = MutagenFile(file_path, easy=True)

        if audio is None:
            raise ValueError(f"Could not read audio file: {file_path}")

        tags = audio.tags or {}

        title = _first_tag(tags, 'title') or file_path.stem
        artist = _first_tag(tags, 'albumartist') or _first_tag(tags, 'artist')
        album = _first_tag(tags, 'album')

        duration = None
        if audio.info is not None and getattr(audio.info, 'length', None):
            duration = float(audio.info.length)

        return {
            'title': title,
            'artist': artist,
            'album': album,
            'tracknumber': _parse_number(_first_tag(tags, 'tracknumber')),
            'discnumber': _parse_number(_first_tag(tags, 'discnumber')),
            'duration': duration,
        }


def _first_tag(tags: Any, key: str) -> Optional[str]:
    try:
        value = tags[key]
    except (KeyError, ValueError, TypeError):
        return None
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_number(value: Optional[str]) -> Optional[int]:
    """Parse '3' or '3/12' style track and disc numbers."""
    if not value:
        return None
    head = value.split('/', 1)[0].strip()
    return int(head) if head.isdigit() else None
