#!/usr/bin/env python3
"""
Example usage of the lifetorus package.
"""

from lifetorus import PatternLibrary, Simulation, Universe
from lifetorus.core.seeding import dead_seed


def main():
    """Demonstrate programmatic usage of the lifetorus package."""
    # A small dead torus with a glider in the corner
    universe = Universe(12, 12, seeder=dead_seed)
    PatternLibrary().get_pattern("Glider").apply_to_universe(universe, 1, 1)
    simulation = Simulation(universe)

    print("Initial state:")
    print(universe.render())

    for _ in range(8):
        simulation.step()

    print(f"Generation {simulation.generation}:")
    print(universe.render())

    # Raw word buffer, as handed to an external renderer
    print(f"Packed buffer: {universe.cells().tolist()}")

    generation, reason = simulation.run_until_stable(1000)
    print(f"Stopped at generation {generation} ({reason}), cycle length {simulation.cycle_length}")


if __name__ == "__main__":
    main()
