"""Two-valued cell state for the Game of Life."""

from enum import IntEnum
from typing import Any


class Cell(IntEnum):
    """State of a single cell.

    The integer values double as the on-disk/in-buffer representation,
    so ``int(Cell.ALIVE) == 1`` and ``int(Cell.DEAD) == 0``.
    """

    DEAD = 0
    ALIVE = 1

    @classmethod
    def from_bool(cls, alive: bool) -> "Cell":
        """Convert a boolean to a cell state."""
        return cls.ALIVE if alive else cls.DEAD

    @classmethod
    def from_int(cls, value: Any) -> "Cell":
        """Convert a small integer to a cell state.

        Only ``1`` maps to ``ALIVE``; every other value is ``DEAD``.
        """
        return cls.ALIVE if int(value) == 1 else cls.DEAD

    def to_bool(self) -> bool:
        return self is Cell.ALIVE

    def __bool__(self) -> bool:
        return self is Cell.ALIVE
