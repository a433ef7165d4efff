"""Core simulation engine."""

from .cell import Cell
from .storage import CellStorage, DenseStorage, BitStorage
from .seeding import RandomSeeder, alternating_seed, dead_seed, get_seeder
from .universe import Universe
from .simulation import Simulation
from .patterns import Pattern, PatternLibrary
from .config import SimulationConfig

__all__ = [
    "Cell",
    "CellStorage",
    "DenseStorage",
    "BitStorage",
    "RandomSeeder",
    "alternating_seed",
    "dead_seed",
    "get_seeder",
    "Universe",
    "Simulation",
    "Pattern",
    "PatternLibrary",
    "SimulationConfig",
]
