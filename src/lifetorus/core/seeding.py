"""Seeding policies for new universes.

A seeder is any callable taking a cell count and returning a 1-D array of
0/1 values of that length. Randomness always comes from an injected
``numpy.random.Generator`` so simulations stay reproducible under test.
"""

from typing import Callable, Optional
import numpy as np

Seeder = Callable[[int], np.ndarray]


def alternating_seed(size: int) -> np.ndarray:
    """Deterministic pattern: cell ``i`` is alive iff ``i % 2 == 0 or i % 7 == 0``."""
    index = np.arange(size)
    return ((index % 2 == 0) | (index % 7 == 0)).astype(np.uint8)


def dead_seed(size: int) -> np.ndarray:
    """All cells dead."""
    return np.zeros(size, dtype=np.uint8)


class RandomSeeder:
    """Independent Bernoulli draws per cell."""

    def __init__(
        self,
        probability: float = 0.5,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Initialize the seeder.

        Args:
            probability: Chance each cell will be alive (0.0 to 1.0)
            seed: Seed for a fresh generator (ignored when ``rng`` is given)
            rng: Generator to draw from

        Raises:
            ValueError: If probability is outside [0, 1]
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"Probability must be between 0.0 and 1.0, got {probability}")
        self.probability = probability
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def __call__(self, size: int) -> np.ndarray:
        return (self.rng.random(size) < self.probability).astype(np.uint8)

    def __repr__(self) -> str:
        return f"RandomSeeder(probability={self.probability})"


SEEDING_POLICIES = ("alternating", "random", "dead")


def get_seeder(name: str, probability: float = 0.5, seed: Optional[int] = None) -> Seeder:
    """Resolve a seeding policy by name.

    Args:
        name: One of ``alternating``, ``random`` or ``dead``
        probability: Alive probability for the random policy
        seed: Random seed for the random policy

    Returns:
        Seeder callable

    Raises:
        ValueError: If the name is unknown
    """
    if name == "alternating":
        return alternating_seed
    if name == "random":
        return RandomSeeder(probability, seed=seed)
    if name == "dead":
        return dead_seed
    raise ValueError(f"Unknown seeding policy '{name}' (choose from: {', '.join(SEEDING_POLICIES)})")
