import dataclasses
import logging
import random
from typing import Optional, Tuple

from models.track import Library

logger = logging.getLogger(__name__)


class ShuffleEngine:
    """Computes the one album ordering used for the whole session.

    The seed is taken from OS entropy once, when the engine is created, and
    logged so a session's shelf can be reproduced while debugging.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed if seed is not None else random.SystemRandom().getrandbits(64)
        self._rng = random.Random(self.seed)
        logger.debug(f"Shuffle seed: {self.seed}")

    def permute(self, count: int) -> Tuple[int, ...]:
        """Return a Fisher-Yates permutation of range(count).

        With two or more albums the on-disk (identity) order is never
        returned.
        """
        if count < 0:
            raise ValueError(f"Album count cannot be negative: {count}")

        identity = list(range(count))
        while True:
            order = list(identity)
            for i in range(count - 1, 0, -1):
                j = self._rng.randint(0, i)
                order[i], order[j] = order[j], order[i]
            if count < 2 or order != identity:
                return tuple(order)

    def shuffle(self, library: Library) -> Library:
        """Return the library with its shelf order attached."""
        play_order = self.permute(len(library.albums))
        logger.info(f"Shuffled {len(play_order)} albums onto the shelf")
        return dataclasses.replace(library, play_order=play_order)
