"""Simulation driver that advances a universe generation by generation."""

from typing import Deque, Dict, Tuple
from collections import deque
import logging

from .universe import Universe

logger = logging.getLogger(__name__)

# Older states are forgotten once this many are remembered
MAX_TRACKED_STATES = 900


class Simulation:
    """Drives a ``Universe`` and keeps track of its history.

    Tracks the generation number, recent population counts, and detects
    when the universe returns to a state it has already been in.
    """

    def __init__(self, universe: Universe) -> None:
        """Initialize the simulation.

        Args:
            universe: The universe to advance
        """
        self.universe = universe
        self._generation = 0
        self._population_history: Deque[int] = deque(maxlen=100)
        self._state_history: Deque[bytes] = deque()
        self._seen_states: Dict[bytes, int] = {}
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._population_history.append(self.population)

    @property
    def generation(self) -> int:
        """Current generation number."""
        return self._generation

    @property
    def population(self) -> int:
        """Current number of living cells."""
        return self.universe.population

    @property
    def population_history(self) -> list:
        """History of population counts."""
        return list(self._population_history)

    @property
    def cycle_detected(self) -> bool:
        return self._cycle_detected

    @property
    def cycle_length(self) -> int:
        """Length of detected cycle (0 if no cycle)."""
        return self._cycle_length

    @property
    def cycle_start_generation(self) -> int:
        return self._cycle_start_generation

    def step(self) -> None:
        """Advance the simulation by one generation."""
        self._check_for_cycles()
        self.universe.tick()
        self._generation += 1
        self._population_history.append(self.population)

    def run(self, generations: int) -> None:
        """Advance a fixed number of generations."""
        for _ in range(generations):
            self.step()

    def _check_for_cycles(self) -> None:
        """Record the current state and flag a cycle if it was seen before."""
        if self._cycle_detected:
            return

        # Dimensions are part of the state: a resize can leave identical bytes
        state = f"{self.universe.width}x{self.universe.height}:".encode() + self.universe.cells().tobytes()

        if state in self._seen_states:
            first_occurrence = self._seen_states[state]
            self._cycle_detected = True
            self._cycle_length = self._generation - first_occurrence
            self._cycle_start_generation = first_occurrence
            logger.debug(
                "Cycle of length %d detected at generation %d", self._cycle_length, self._generation
            )
            return

        self._seen_states[state] = self._generation
        self._state_history.append(state)

        if len(self._state_history) > MAX_TRACKED_STATES:
            old_state = self._state_history.popleft()
            if self._seen_states.get(old_state) == self._generation - MAX_TRACKED_STATES:
                del self._seen_states[old_state]

    def run_until_stable(self, max_generations: int = 10000) -> Tuple[int, str]:
        """Run simulation until it becomes stable or cycles.

        Args:
            max_generations: Maximum generations to run

        Returns:
            Tuple of (final_generation, reason) where reason is one of:
            'cycle', 'extinction', 'max_generations'
        """
        for _ in range(max_generations):
            self.step()

            if self._cycle_detected:
                return self._generation, "cycle"

            if self.population == 0:
                return self._generation, "extinction"

        return self._generation, "max_generations"

    def reset(self) -> None:
        """Forget all bookkeeping; the universe itself is left alone.

        Call this after modifying the universe by hand, since earlier
        states no longer describe where the simulation came from.
        """
        self._generation = 0
        self._population_history.clear()
        self._state_history.clear()
        self._seen_states.clear()
        self._cycle_detected = False
        self._cycle_length = 0
        self._cycle_start_generation = 0

        self._population_history.append(self.population)

    def get_statistics(self) -> Dict:
        """Get simulation statistics.

        Returns:
            Dictionary with various statistics
        """
        size = self.universe.size
        return {
            "generation": self._generation,
            "population": self.population,
            "population_history": list(self._population_history),
            "cycle_detected": self._cycle_detected,
            "cycle_length": self._cycle_length,
            "cycle_start_generation": self._cycle_start_generation,
            "grid_size": (self.universe.width, self.universe.height),
            "population_density": self.population / size if size else 0.0,
        }
