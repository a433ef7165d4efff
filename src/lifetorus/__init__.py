"""Conway's Game of Life on a fixed-size toroidal universe."""

__version__ = "0.1.0"

from .core.cell import Cell
from .core.universe import Universe
from .core.simulation import Simulation
from .core.patterns import Pattern, PatternLibrary

__all__ = ["Cell", "Universe", "Simulation", "Pattern", "PatternLibrary"]
