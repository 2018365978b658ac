from .shelf import ShelfView
from .backside import BacksideView
from .deck import DeckView

__all__ = ["ShelfView", "BacksideView", "DeckView"]
