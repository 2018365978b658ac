import logging
from typing import List

from models.errors import NoBookmarks, NothingPlaying
from models.session import Session

logger = logging.getLogger(__name__)


class BookmarkManager:
    """Bookmarks on albums and cyclic jumps between them.

    The `bookmarked` flag on each Album is authoritative; `session.bookmarks`
    is a cached set of bookmarked album indices kept in step with the flags.
    Jumps walk the shelf (play order), not the on-disk album order.
    """

    def __init__(self, session: Session):
        self.session = session
        self._resync()

    @property
    def library(self):
        return self.session.library

    def _resync(self) -> None:
        self.session.bookmarks.clear()
        self.session.bookmarks.update(
            index for index, album in enumerate(self.library.albums) if album.bookmarked
        )

    def is_bookmarked(self, album_index: int) -> bool:
        return self.library.albums[album_index].bookmarked

    def toggle_bookmark(self, album_index: int) -> bool:
        """Flip the bookmark on an album.

        Returns:
            The album's new bookmarked flag.
        """
        album = self.library.albums[album_index]
        album.bookmarked = not album.bookmarked
        if album.bookmarked:
            self.session.bookmarks.add(album_index)
        else:
            self.session.bookmarks.discard(album_index)
        logger.debug(f"Bookmark on '{album.title}' is now {album.bookmarked}")
        return album.bookmarked

    def bookmarked_albums(self) -> List[int]:
        """Return bookmarked album indices in shelf order."""
        return [index for index in self.library.play_order if index in self.session.bookmarks]

    def jump_next(self, from_album_index: int) -> int:
        """Return the shelf position of the next bookmarked album.

        Raises:
            NoBookmarks: If no album is bookmarked.
        """
        return self._scan(from_album_index, 1)

    def jump_prev(self, from_album_index: int) -> int:
        """Return the shelf position of the previous bookmarked album.

        Raises:
            NoBookmarks: If no album is bookmarked.
        """
        return self._scan(from_album_index, -1)

    def _scan(self, from_album_index: int, step: int) -> int:
        if not self.session.bookmarks:
            raise NoBookmarks("No bookmarked albums. Press m to bookmark one.")

        play_order = self.library.play_order
        count = len(play_order)
        start = self.library.position_of(from_album_index)

        # offset == count lands back on the starting album
        for offset in range(1, count + 1):
            position = (start + step * offset) % count
            if play_order[position] in self.session.bookmarks:
                return position

        raise NoBookmarks("No bookmarked albums. Press m to bookmark one.")

    def locate_currently_playing(self) -> int:
        """Return the shelf position of the loaded album.

        Raises:
            NothingPlaying: If no album is loaded.
        """
        album_index = self.session.playback.album_index
        if album_index is None:
            raise NothingPlaying("No album is playing!")
        return self.library.position_of(album_index)
