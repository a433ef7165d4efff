"""Cell storage strategies for a universe.

Both strategies keep one cell state per index and behave identically; they
only differ in how densely the states are packed in memory.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Union
import numpy as np

from .cell import Cell

CellLike = Union[Cell, bool, int]

WORD_BITS = 32


class CellStorage(ABC):
    """Flat, index-addressable storage of cell states."""

    #: Short name used by configuration and the CLI.
    name = ""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"Storage size must be non-negative, got {size}")
        self._size = size

    @classmethod
    def dead(cls, size: int) -> "CellStorage":
        """Create storage holding ``size`` dead cells."""
        return cls(size)

    @classmethod
    def from_array(cls, bits) -> "CellStorage":
        """Create storage from a 1-D array-like of 0/1 values.

        Args:
            bits: Cell values in index order; only 1 (or True) is alive

        Returns:
            New storage of the same length
        """
        arr = np.asarray(bits).reshape(-1) == 1
        storage = cls(arr.size)
        storage._load(arr.astype(np.uint8))
        return storage

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Cell]:
        for value in self.to_array():
            yield Cell(int(value))

    def __getitem__(self, index: int) -> Cell:
        return Cell(self._get(self._check_index(index)))

    def __setitem__(self, index: int, value: CellLike) -> None:
        # Plain integers follow Cell.from_int: only 1 is alive
        if not isinstance(value, (bool, Cell)):
            value = Cell.from_int(value)
        self._set(self._check_index(index), bool(value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellStorage):
            return NotImplemented
        return len(self) == len(other) and np.array_equal(self.to_array(), other.to_array())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size}, population={self.population})"

    def _check_index(self, index: int) -> int:
        if not 0 <= index < self._size:
            raise IndexError(f"Cell index {index} out of range for storage of size {self._size}")
        return index

    @property
    def population(self) -> int:
        """Number of alive cells."""
        return int(self.to_array().sum())

    @abstractmethod
    def _get(self, index: int) -> int:
        """Return 0 or 1 for an in-range index."""

    @abstractmethod
    def _set(self, index: int, alive: bool) -> None:
        """Store a state at an in-range index."""

    @abstractmethod
    def _load(self, bits: np.ndarray) -> None:
        """Replace all cells from a uint8 0/1 array of matching length."""

    @abstractmethod
    def to_array(self) -> np.ndarray:
        """Copy of the cell states as a uint8 array of 0/1 values."""

    @abstractmethod
    def as_buffer(self) -> np.ndarray:
        """Read-only, zero-copy view of the raw backing buffer."""

    @abstractmethod
    def copy(self) -> "CellStorage":
        """Independent storage with the same contents."""


class DenseStorage(CellStorage):
    """One byte per cell, holding the ``Cell`` enum value."""

    name = "dense"

    def __init__(self, size: int) -> None:
        super().__init__(size)
        self._cells = np.zeros(size, dtype=np.uint8)

    def _get(self, index: int) -> int:
        return int(self._cells[index])

    def _set(self, index: int, alive: bool) -> None:
        self._cells[index] = Cell.from_bool(alive)

    def _load(self, bits: np.ndarray) -> None:
        self._cells[:] = bits

    def to_array(self) -> np.ndarray:
        return self._cells.copy()

    def as_buffer(self) -> np.ndarray:
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def copy(self) -> "DenseStorage":
        clone = DenseStorage(self._size)
        clone._cells[:] = self._cells
        return clone

    @property
    def population(self) -> int:
        return int(np.count_nonzero(self._cells))


class BitStorage(CellStorage):
    """One bit per cell, packed into 32-bit words.

    Cell ``i`` lives at bit ``i % 32`` of word ``i // 32``. Bits past the
    last cell are always zero.
    """

    name = "bitpacked"

    def __init__(self, size: int) -> None:
        super().__init__(size)
        self._words = np.zeros(-(-size // WORD_BITS), dtype=np.uint32)

    @property
    def words(self) -> int:
        """Number of 32-bit words in the backing buffer."""
        return len(self._words)

    def _get(self, index: int) -> int:
        word, bit = divmod(index, WORD_BITS)
        return int(self._words[word] >> np.uint32(bit)) & 1

    def _set(self, index: int, alive: bool) -> None:
        word, bit = divmod(index, WORD_BITS)
        mask = np.uint32(1 << bit)
        if alive:
            self._words[word] |= mask
        else:
            self._words[word] &= ~mask

    def _load(self, bits: np.ndarray) -> None:
        packed = np.packbits(bits, bitorder="little")
        padded = np.zeros(self.words * 4, dtype=np.uint8)
        padded[: packed.size] = packed
        self._words[:] = padded.view("<u4")

    def to_array(self) -> np.ndarray:
        raw = self._words.astype("<u4").view(np.uint8)
        return np.unpackbits(raw, bitorder="little")[: self._size]

    def as_buffer(self) -> np.ndarray:
        view = self._words.view()
        view.flags.writeable = False
        return view

    def copy(self) -> "BitStorage":
        clone = BitStorage(self._size)
        clone._words[:] = self._words
        return clone

    @property
    def population(self) -> int:
        return int(np.unpackbits(self._words.view(np.uint8)).sum())


STORAGE_TYPES = {cls.name: cls for cls in (BitStorage, DenseStorage)}


def get_storage_type(name: str) -> type:
    """Look up a storage strategy by its short name.

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return STORAGE_TYPES[name]
    except KeyError:
        raise ValueError(
            f"Unknown storage '{name}' (choose from: {', '.join(sorted(STORAGE_TYPES))})"
        ) from None
