"""Exceptions raised by the player.

Library errors are fatal and end the process at startup. PlayerNotice
subclasses are reported to the user as status text and never stop the loop.
"""


class LevariError(Exception):
    """Base exception for levari."""


class ConfigurationError(LevariError):
    """Invalid configuration value."""


class LibraryError(LevariError):
    """The music library cannot be used."""


class LibraryRootError(LibraryError):
    """The library root is missing, not a directory, or unreadable."""


class EmptyLibraryError(LibraryError):
    """No playable tracks were found under the library root."""


class PlayerNotice(LevariError):
    """A non-fatal condition surfaced to the user."""


class InvalidTransition(PlayerNotice):
    """The requested transport action is not valid in the current state."""


class NoBookmarks(PlayerNotice):
    """A bookmark jump was requested but nothing is bookmarked."""


class NothingPlaying(PlayerNotice):
    """No album is loaded."""
