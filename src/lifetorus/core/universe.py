"""Toroidal universe for Conway's Game of Life."""

from typing import Iterable, List, Optional, Tuple
import logging
import numpy as np
import torch

from .cell import Cell
from .seeding import RandomSeeder, Seeder, alternating_seed
from .storage import BitStorage, CellStorage, DenseStorage

logger = logging.getLogger(__name__)

ALIVE_GLYPH = "◼"
DEAD_GLYPH = "◻"


class Universe:
    """A fixed-size grid whose edges wrap around on both axes.

    Cells are stored row-major in a flat ``CellStorage`` (index
    ``row * width + col``). The storage strategy is chosen at construction;
    the bit-packed strategy is the default.

    ``tick`` and the resizers swap in a complete new storage object, so the
    cell count always equals ``width * height`` and readers never see a
    partially updated generation. ``set_cells`` writes into the current
    storage in place.
    """

    def __init__(
        self,
        width: int = 128,
        height: int = 128,
        seeder: Optional[Seeder] = None,
        storage: type = BitStorage,
    ) -> None:
        """Initialize a new universe.

        Args:
            width: Number of columns
            height: Number of rows
            seeder: Callable producing the initial cell pattern
                (defaults to independent draws with probability 0.5)
            storage: ``CellStorage`` subclass used to hold the cells

        Raises:
            ValueError: If a dimension is negative
        """
        self._check_dimension("width", width)
        self._check_dimension("height", height)

        # Single-threaded, the engine is driven by one caller
        torch.set_num_threads(1)

        if seeder is None:
            seeder = RandomSeeder(0.5)

        self._width = width
        self._height = height
        self._storage_type = storage
        self._storage: CellStorage = storage.from_array(seeder(width * height))

        logger.debug(
            "Created %dx%d universe (%s storage, population %d)",
            width,
            height,
            storage.name,
            self.population,
        )

    @classmethod
    def dense_default(cls) -> "Universe":
        """64x64 universe, one byte per cell, alternating seed."""
        return cls(64, 64, seeder=alternating_seed, storage=DenseStorage)

    @classmethod
    def bitpacked_default(cls, rng: Optional[np.random.Generator] = None) -> "Universe":
        """128x128 bit-packed universe seeded with fair coin flips.

        Args:
            rng: Random generator to draw from (a fresh one if omitted)
        """
        return cls(128, 128, seeder=RandomSeeder(0.5, rng=rng), storage=BitStorage)

    @staticmethod
    def _check_dimension(name: str, value: int) -> None:
        if value < 0:
            raise ValueError(f"{name.capitalize()} must be non-negative, got {value}")

    @property
    def width(self) -> int:
        """Number of columns."""
        return self._width

    @property
    def height(self) -> int:
        """Number of rows."""
        return self._height

    @property
    def size(self) -> int:
        """Total number of cells."""
        return len(self._storage)

    @property
    def shape(self) -> Tuple[int, int]:
        """Grid dimensions as (height, width)."""
        return (self._height, self._width)

    @property
    def storage(self) -> CellStorage:
        """Current cell storage."""
        return self._storage

    @property
    def population(self) -> int:
        """Number of living cells."""
        return self._storage.population

    def index(self, row: int, col: int) -> int:
        """Flat storage index of a cell.

        Args:
            row: Row coordinate
            col: Column coordinate

        Returns:
            ``row * width + col``

        Raises:
            IndexError: If the coordinates are outside the grid
        """
        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(
                f"Coordinates ({row}, {col}) out of bounds for {self._height}x{self._width} universe"
            )
        return row * self._width + col

    def get_cell(self, row: int, col: int) -> Cell:
        """Get the state of a cell.

        Raises:
            IndexError: If the coordinates are outside the grid
        """
        return self._storage[self.index(row, col)]

    def get_cells(self) -> List[Cell]:
        """All cell states in row-major order."""
        return list(self._storage)

    def live_neighbor_count(self, row: int, col: int) -> int:
        """Count living neighbors of a cell on the torus.

        The "-1" offset is expressed as ``height - 1`` / ``width - 1`` so
        every neighbor is found with a modulo. On a grid one cell wide or
        high the same cell can be counted more than once.

        Args:
            row: Row coordinate
            col: Column coordinate

        Returns:
            Number of living neighbors (0-8)

        Raises:
            IndexError: If the coordinates are outside the grid
        """
        self.index(row, col)

        count = 0
        for drow in (self._height - 1, 0, 1):
            for dcol in (self._width - 1, 0, 1):
                if drow == 0 and dcol == 0:
                    continue

                nrow = (row + drow) % self._height
                ncol = (col + dcol) % self._width
                count += int(self._storage[nrow * self._width + ncol])

        return count

    def count_all_neighbors(self) -> np.ndarray:
        """Count neighbors for all cells with PyTorch rolls.

        Uses the same eight offsets as ``live_neighbor_count`` and agrees
        with it for every cell.

        Returns:
            int8 array of shape (height, width) with neighbor counts
        """
        if self.size == 0:
            return np.zeros(self.shape, dtype=np.int8)

        cells = torch.from_numpy(self._storage.to_array().reshape(self.shape).astype(np.int16))
        counts = torch.zeros_like(cells)

        for drow in (self._height - 1, 0, 1):
            for dcol in (self._width - 1, 0, 1):
                if drow == 0 and dcol == 0:
                    continue
                counts += torch.roll(cells, shifts=(-drow, -dcol), dims=(0, 1))

        return counts.numpy().astype(np.int8)

    def tick(self) -> None:
        """Advance the universe by one generation.

        Neighbor counts are taken from the current generation before any
        cell changes; the next generation replaces the storage in one step.
        """
        if self.size == 0:
            return

        alive = self._storage.to_array().reshape(self.shape) == 1
        neighbors = self.count_all_neighbors()

        survives = alive & ((neighbors == 2) | (neighbors == 3))
        born = ~alive & (neighbors == 3)

        self._storage = self._storage_type.from_array(survives | born)

    def set_width(self, width: int) -> None:
        """Change the width, discarding all cells.

        Every cell of the resized universe is dead.

        Raises:
            ValueError: If width is negative
        """
        self._check_dimension("width", width)
        storage = self._storage_type.dead(width * self._height)
        self._width, self._storage = width, storage
        logger.debug("Resized universe to %dx%d", self._width, self._height)

    def set_height(self, height: int) -> None:
        """Change the height, discarding all cells.

        Every cell of the resized universe is dead.

        Raises:
            ValueError: If height is negative
        """
        self._check_dimension("height", height)
        storage = self._storage_type.dead(self._width * height)
        self._height, self._storage = height, storage
        logger.debug("Resized universe to %dx%d", self._width, self._height)

    def set_cells(self, cells: Iterable[Tuple[int, int]]) -> None:
        """Set the given cells alive, leaving all others untouched.

        Args:
            cells: (row, col) coordinates

        Raises:
            IndexError: If any coordinate is outside the grid; no cell is
                changed in that case
        """
        indices = [self.index(row, col) for row, col in cells]
        for idx in indices:
            self._storage[idx] = Cell.ALIVE

    def cells(self) -> np.ndarray:
        """Zero-copy, read-only view of the raw cell buffer.

        ``uint32`` words for bit-packed storage, one ``uint8`` per cell for
        dense storage. The view belongs to the current generation: ``tick``
        and the resizers install new storage, so fetch it again afterwards.
        """
        return self._storage.as_buffer()

    def to_array(self) -> np.ndarray:
        """Copy of the cells as a (height, width) uint8 array."""
        return self._storage.to_array().reshape(self.shape)

    def render(self) -> str:
        """Text rendering, one line per row."""
        return str(self)

    def __eq__(self, other: object) -> bool:
        """Check if two universes hold the same cells."""
        if not isinstance(other, Universe):
            return False
        return self.shape == other.shape and self._storage == other._storage

    def __repr__(self) -> str:
        return (
            f"Universe(width={self._width}, height={self._height}, "
            f"storage={self._storage_type.name}, population={self.population})"
        )

    def __str__(self) -> str:
        """Rows of '◼' (alive) and '◻' (dead), each ending in a newline."""
        result = []
        for line in self.to_array():
            result.append("".join(ALIVE_GLYPH if cell else DEAD_GLYPH for cell in line))
            result.append("\n")
        return "".join(result)
