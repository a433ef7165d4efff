"""Tests for the Universe class."""

import numpy as np
import pytest

from lifetorus.core.cell import Cell
from lifetorus.core.seeding import RandomSeeder, alternating_seed, dead_seed
from lifetorus.core.storage import BitStorage, DenseStorage
from lifetorus.core.universe import Universe


@pytest.fixture(params=[BitStorage, DenseStorage], ids=["bitpacked", "dense"])
def storage_type(request):
    return request.param


def make_universe(width, height, cells=(), storage=BitStorage):
    universe = Universe(width, height, seeder=dead_seed, storage=storage)
    universe.set_cells(cells)
    return universe


def alive_cells(universe):
    return {
        (row, col)
        for row in range(universe.height)
        for col in range(universe.width)
        if universe.get_cell(row, col)
    }


class TestConstruction:
    """Test cases for building universes."""

    def test_initialization(self, storage_type):
        universe = Universe(10, 20, seeder=dead_seed, storage=storage_type)
        assert universe.width == 10
        assert universe.height == 20
        assert universe.shape == (20, 10)
        assert universe.size == 200
        assert universe.population == 0

    def test_default_is_bitpacked_random(self):
        universe = Universe()
        assert universe.shape == (128, 128)
        assert isinstance(universe.storage, BitStorage)

    def test_dense_default(self):
        universe = Universe.dense_default()
        assert universe.shape == (64, 64)
        assert isinstance(universe.storage, DenseStorage)
        assert universe.get_cell(0, 0) is Cell.ALIVE
        assert universe.get_cell(0, 1) is Cell.DEAD
        assert universe.get_cell(0, 7) is Cell.ALIVE
        assert universe.get_cell(0, 9) is Cell.DEAD
        assert universe.get_cell(1, 0) is Cell.ALIVE  # index 64

    def test_bitpacked_default(self):
        first = Universe.bitpacked_default(rng=np.random.default_rng(5))
        second = Universe.bitpacked_default(rng=np.random.default_rng(5))
        assert first.shape == (128, 128)
        assert isinstance(first.storage, BitStorage)
        assert first == second
        assert 0 < first.population < first.size

    def test_alternating_seed_layout(self, storage_type):
        universe = Universe(5, 3, seeder=alternating_seed, storage=storage_type)
        np.testing.assert_array_equal(universe.to_array().reshape(-1), alternating_seed(15))

    def test_empty_universe(self, storage_type):
        universe = Universe(0, 0, storage=storage_type)
        assert universe.size == 0
        assert universe.population == 0
        universe.tick()
        assert universe.size == 0
        assert universe.count_all_neighbors().shape == (0, 0)
        assert universe.render() == ""

    def test_zero_width(self):
        universe = Universe(0, 4)
        universe.tick()
        assert universe.size == 0

    def test_negative_dimensions(self):
        with pytest.raises(ValueError):
            Universe(-1, 5)

        with pytest.raises(ValueError):
            Universe(5, -1)


class TestIndexing:
    def test_index_is_row_major(self):
        universe = make_universe(7, 3)
        assert universe.index(0, 0) == 0
        assert universe.index(0, 6) == 6
        assert universe.index(1, 0) == 7
        assert universe.index(2, 4) == 18

    def test_out_of_range(self):
        """Out-of-range coordinates raise IndexError everywhere."""
        universe = make_universe(4, 3)

        with pytest.raises(IndexError):
            universe.index(3, 0)

        with pytest.raises(IndexError):
            universe.index(0, 4)

        with pytest.raises(IndexError):
            universe.index(-1, 0)

        with pytest.raises(IndexError):
            universe.get_cell(0, 4)

        with pytest.raises(IndexError):
            universe.live_neighbor_count(3, 3)

    def test_get_cells(self):
        universe = make_universe(3, 2, [(1, 2)])
        assert universe.get_cells() == [Cell.DEAD] * 5 + [Cell.ALIVE]


class TestNeighborCount:
    """Test cases for toroidal neighbor counting."""

    def test_interior(self):
        universe = make_universe(5, 5, [(1, 1), (1, 2), (2, 3), (3, 3)])
        assert universe.live_neighbor_count(2, 2) == 4
        assert universe.live_neighbor_count(1, 1) == 1
        assert universe.live_neighbor_count(0, 0) == 1

    def test_corner_wraps_diagonally(self):
        """(n-1, n-1) is a diagonal neighbor of (0, 0)."""
        universe = make_universe(5, 5, [(4, 4)])
        assert universe.live_neighbor_count(0, 0) == 1
        assert universe.live_neighbor_count(4, 4) == 0

    def test_edges_wrap(self):
        universe = make_universe(5, 5, [(0, 4), (4, 0)])
        assert universe.live_neighbor_count(0, 0) == 2
        assert universe.live_neighbor_count(4, 4) == 2

        universe = make_universe(5, 5, [(2, 0)])
        assert universe.live_neighbor_count(2, 4) == 1
        assert universe.live_neighbor_count(1, 4) == 1

    def test_fully_alive(self, storage_type):
        universe = Universe(6, 4, seeder=RandomSeeder(1.0), storage=storage_type)
        counts = universe.count_all_neighbors()
        assert (counts == 8).all()
        assert universe.live_neighbor_count(0, 0) == 8

    def test_bounds(self):
        universe = Universe(9, 7, seeder=RandomSeeder(0.5, seed=11))
        for row in range(universe.height):
            for col in range(universe.width):
                assert 0 <= universe.live_neighbor_count(row, col) <= 8

    def test_single_column_counts_duplicates(self):
        """On a one-wide torus the same cell can be counted several times."""
        universe = make_universe(1, 3, [(1, 0)])
        assert universe.live_neighbor_count(1, 0) == 1
        assert universe.live_neighbor_count(0, 0) == 3
        assert universe.live_neighbor_count(2, 0) == 3

    def test_single_cell_torus(self):
        universe = Universe(1, 1, seeder=alternating_seed)
        assert universe.live_neighbor_count(0, 0) == 5
        universe.tick()
        assert universe.population == 0

    @pytest.mark.parametrize("width,height", [(1, 1), (1, 4), (4, 1), (2, 3), (8, 5)])
    def test_vectorized_matches_scalar(self, width, height):
        universe = Universe(width, height, seeder=RandomSeeder(0.5, seed=width * 31 + height))
        counts = universe.count_all_neighbors()
        assert counts.shape == (height, width)
        for row in range(height):
            for col in range(width):
                assert counts[row, col] == universe.live_neighbor_count(row, col)


class TestTick:
    """Test cases for the generation transition."""

    def test_block_is_still_life(self, storage_type):
        """A 2x2 block on a 4x4 torus never changes."""
        cells = [(1, 1), (1, 2), (2, 1), (2, 2)]
        universe = make_universe(4, 4, cells, storage=storage_type)

        for _ in range(10):
            universe.tick()
            assert alive_cells(universe) == set(cells)

    def test_blinker_oscillates(self, storage_type):
        horizontal = {(2, 1), (2, 2), (2, 3)}
        vertical = {(1, 2), (2, 2), (3, 2)}
        universe = make_universe(5, 5, horizontal, storage=storage_type)

        universe.tick()
        assert alive_cells(universe) == vertical

        universe.tick()
        assert alive_cells(universe) == horizontal

    def test_snapshot_isolation(self, storage_type):
        """Survivors and births use counts from before the tick.

        The centre cell keeps its three neighbors' pre-tick support even
        though all three of them die in the same generation.
        """
        universe = make_universe(5, 5, [(1, 1), (1, 3), (2, 2), (3, 2)], storage=storage_type)
        assert universe.live_neighbor_count(2, 2) == 3

        universe.tick()
        assert alive_cells(universe) == {(1, 2), (2, 1), (2, 2), (2, 3)}

    def test_underpopulation_and_overpopulation(self):
        universe = make_universe(6, 6, [(0, 0)])
        universe.tick()
        assert universe.population == 0

        # Plus sign: the centre has 4 neighbors and dies
        universe = make_universe(7, 7, [(2, 3), (3, 2), (3, 3), (3, 4), (4, 3)])
        universe.tick()
        assert universe.get_cell(3, 3) is Cell.DEAD

    def test_glider_wraps_around(self):
        """A glider returns to its start after 4 * n generations on an n x n torus."""
        glider = {(0, 1), (1, 2), (2, 0), (2, 1), (2, 2)}
        universe = make_universe(6, 6, glider)
        for _ in range(24):
            universe.tick()
        assert alive_cells(universe) == glider

    def test_deterministic(self, storage_type):
        first = Universe(16, 12, seeder=RandomSeeder(0.5, seed=42), storage=storage_type)
        second = Universe(16, 12, seeder=RandomSeeder(0.5, seed=42), storage=storage_type)
        assert first == second

        for _ in range(5):
            first.tick()
            second.tick()
            assert first == second

    def test_storage_types_agree(self):
        dense = Universe(10, 10, seeder=RandomSeeder(0.4, seed=3), storage=DenseStorage)
        packed = Universe(10, 10, seeder=RandomSeeder(0.4, seed=3), storage=BitStorage)

        for _ in range(8):
            dense.tick()
            packed.tick()
            np.testing.assert_array_equal(dense.to_array(), packed.to_array())

    def test_size_invariant(self, storage_type):
        universe = Universe(7, 3, storage=storage_type)
        for _ in range(3):
            universe.tick()
            assert universe.size == 21
            assert len(universe.get_cells()) == 21


class TestMutation:
    """Test cases for resizing and explicit activation."""

    def test_set_width_resets(self, storage_type):
        universe = Universe(5, 4, seeder=RandomSeeder(1.0), storage=storage_type)
        universe.set_width(9)
        assert universe.width == 9
        assert universe.height == 4
        assert universe.size == 36
        assert universe.population == 0
        assert isinstance(universe.storage, storage_type)

    def test_set_height_resets(self, storage_type):
        universe = Universe(5, 4, seeder=RandomSeeder(1.0), storage=storage_type)
        universe.set_height(2)
        assert universe.shape == (2, 5)
        assert universe.size == 10
        assert universe.population == 0

    def test_resize_to_zero(self):
        universe = Universe(5, 5)
        universe.set_width(0)
        assert universe.size == 0
        assert universe.population == 0
        universe.tick()

    def test_resize_negative(self):
        universe = make_universe(3, 3)
        with pytest.raises(ValueError):
            universe.set_width(-2)
        assert universe.width == 3

        with pytest.raises(ValueError):
            universe.set_height(-2)
        assert universe.height == 3

    def test_set_cells_single(self, storage_type):
        universe = make_universe(4, 4, storage=storage_type)
        universe.set_cells([(1, 1)])
        assert alive_cells(universe) == {(1, 1)}
        assert universe.population == 1

    def test_set_cells_leaves_others(self):
        universe = make_universe(4, 4, [(0, 0), (3, 3)])
        universe.set_cells([(0, 0), (2, 1)])
        assert alive_cells(universe) == {(0, 0), (2, 1), (3, 3)}

    def test_set_cells_writes_in_place(self):
        """set_cells keeps the storage object; tick and resizing replace it."""
        universe = make_universe(5, 5)
        storage = universe.storage

        universe.set_cells([(2, 1), (2, 2), (2, 3)])
        assert universe.storage is storage

        universe.tick()
        assert universe.storage is not storage

        storage = universe.storage
        universe.set_height(6)
        assert universe.storage is not storage

    def test_set_cells_out_of_range_changes_nothing(self):
        universe = make_universe(4, 4)
        with pytest.raises(IndexError):
            universe.set_cells([(1, 1), (4, 0)])
        assert universe.population == 0


class TestExport:
    """Test cases for rendering and raw export."""

    def test_render(self):
        universe = make_universe(3, 2, [(0, 1), (1, 2)])
        assert universe.render() == "◻◼◻\n◻◻◼\n"
        assert str(universe) == universe.render()

    def test_bitpacked_cells_buffer(self):
        universe = make_universe(8, 8, [(0, 0), (4, 1)])
        buffer = universe.cells()
        assert buffer.dtype == np.uint32
        assert len(buffer) == 2
        assert int(buffer[0]) == 1
        assert int(buffer[1]) == 2

    def test_dense_cells_buffer(self):
        universe = make_universe(3, 3, [(1, 1)], storage=DenseStorage)
        buffer = universe.cells()
        assert buffer.dtype == np.uint8
        assert len(buffer) == 9
        assert buffer[4] == Cell.ALIVE

    def test_cells_buffer_is_read_only(self):
        universe = make_universe(4, 4)
        with pytest.raises(ValueError):
            universe.cells()[0] = 1

    def test_cells_view_belongs_to_generation(self):
        """A view taken before a tick keeps showing that generation."""
        universe = make_universe(5, 5, [(2, 1), (2, 2), (2, 3)])
        before = universe.cells()
        snapshot = before.copy()

        universe.tick()

        np.testing.assert_array_equal(before, snapshot)
        assert not np.array_equal(universe.cells(), snapshot)

    def test_equality(self):
        assert make_universe(3, 3, [(1, 1)]) == make_universe(3, 3, [(1, 1)])
        assert make_universe(3, 3, [(1, 1)]) != make_universe(3, 3, [(1, 2)])
        assert make_universe(3, 3) != make_universe(9, 1)
        assert make_universe(3, 3, [(0, 0)], storage=DenseStorage) == make_universe(3, 3, [(0, 0)])
