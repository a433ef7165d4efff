"""Command-line interface for the toroidal Game of Life."""

import argparse
import logging
import sys
import time
from typing import List, Optional

from ..core.config import SimulationConfig
from ..core.patterns import PatternLibrary
from ..core.seeding import SEEDING_POLICIES
from ..core.simulation import Simulation
from ..core.storage import STORAGE_TYPES
from ..core.universe import Universe

logger = logging.getLogger(__name__)


class CLIGameOfLife:
    """Command-line interface for running simulations."""

    def __init__(self):
        self.pattern_library = PatternLibrary()

    def run_simulation(self, config: SimulationConfig, show_grid: bool = False) -> dict:
        """Run a simulation for a fixed number of generations.

        Args:
            config: Simulation configuration
            show_grid: Print the initial and final universe

        Returns:
            Statistics dictionary, with timing and initial population added
        """
        universe = config.build_universe(self.pattern_library)
        simulation = Simulation(universe)
        initial_population = simulation.population

        logger.info(
            "Running %d generations on %dx%d universe (initial population %d)",
            config.generations,
            universe.width,
            universe.height,
            initial_population,
        )

        if show_grid:
            print("Initial universe:")
            print(self._format_universe(universe))

        start_time = time.time()
        simulation.run(config.generations)
        duration = time.time() - start_time

        if show_grid:
            print(f"Final universe (generation {simulation.generation}):")
            print(self._format_universe(universe))

        stats = simulation.get_statistics()
        stats["duration_seconds"] = duration
        stats["generations_per_second"] = simulation.generation / duration if duration > 0 else 0
        stats["initial_population"] = initial_population
        return stats

    def _format_universe(self, universe: Universe, max_size: int = 80) -> str:
        """Format a universe for display, refusing ones that are too large.

        Args:
            universe: Universe to format
            max_size: Maximum dimension to display

        Returns:
            Rendered universe or a short notice
        """
        if universe.width > max_size or universe.height > max_size:
            return f"Universe too large to display ({universe.width}x{universe.height})\n"

        return universe.render()

    def list_patterns(self) -> None:
        """Print the available patterns."""
        print("Available patterns:")
        for name in self.pattern_library.list_patterns():
            pattern = self.pattern_library.get_pattern(name)
            rows, cols = pattern.get_size()
            print(f"  {name:<12} {rows}x{cols}  {pattern.description}")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="lifetorus",
        description="Run Conway's Game of Life on a toroidal universe",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 64x64 universe seeded with fair coin flips, 100 generations
  lifetorus -n 100

  # Glider on a 16x16 torus, showing the grid
  lifetorus -W 16 -H 16 --pattern Glider -n 8 --show-grid

  # Deterministic alternating seed in one byte per cell
  lifetorus --seeding alternating --storage dense
        """,
    )

    parser.add_argument("-W", "--width", type=int, default=64, help="Universe width (default: 64)")

    parser.add_argument("-H", "--height", type=int, default=64, help="Universe height (default: 64)")

    parser.add_argument(
        "-s",
        "--seeding",
        choices=SEEDING_POLICIES,
        default="random",
        help="Initial cell pattern (default: random)",
    )

    parser.add_argument(
        "-p",
        "--probability",
        type=float,
        default=0.5,
        help="Alive probability for random seeding 0.0-1.0 (default: 0.5)",
    )

    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")

    parser.add_argument(
        "--storage",
        choices=sorted(STORAGE_TYPES),
        default="bitpacked",
        help="Cell storage strategy (default: bitpacked)",
    )

    parser.add_argument(
        "-n",
        "--generations",
        type=int,
        default=10,
        help="Generations to simulate (default: 10)",
    )

    parser.add_argument("--pattern", type=str, help="Place a named pattern on a dead universe")

    parser.add_argument("--pattern-row", type=int, default=0, help="Row offset for the pattern (default: 0)")

    parser.add_argument("--pattern-col", type=int, default=0, help="Column offset for the pattern (default: 0)")

    parser.add_argument(
        "-g",
        "--show-grid",
        action="store_true",
        help="Display the initial and final universe",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print detailed progress information",
    )

    parser.add_argument(
        "--list-patterns",
        action="store_true",
        help="List all available patterns and exit",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Build a simulation config from parsed arguments."""
    return SimulationConfig(
        width=args.width,
        height=args.height,
        seeding=args.seeding,
        probability=args.probability,
        seed=args.seed,
        storage=args.storage,
        generations=args.generations,
        pattern=args.pattern,
        pattern_row=args.pattern_row,
        pattern_col=args.pattern_col,
    )


def print_results(stats: dict, verbose: bool) -> None:
    """Print simulation results.

    Args:
        stats: Statistics from ``CLIGameOfLife.run_simulation``
        verbose: Print every statistic rather than a one-line summary
    """
    if verbose:
        print("Simulation results:")
        print(f"  Generations: {stats['generation']}")
        print(f"  Population: {stats['initial_population']} -> {stats['population']}")
        print(f"  Density: {stats['population_density']:.2%}")
        if stats["cycle_detected"]:
            print(
                f"  Cycle: length {stats['cycle_length']} "
                f"from generation {stats['cycle_start_generation']}"
            )
        print(f"  Duration: {stats['duration_seconds']:.3f}s")
        print(f"  Speed: {stats['generations_per_second']:.0f} gen/s")
    else:
        print(
            "Generation {}: population {} -> {}".format(
                stats["generation"], stats["initial_population"], stats["population"]
            )
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI interface.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cli = CLIGameOfLife()

    if args.list_patterns:
        cli.list_patterns()
        return 0

    config = config_from_args(args)
    errors = config.validate()
    if errors:
        print("Error: Invalid arguments:")
        for error in errors:
            print(f"  - {error}")
        return 1

    try:
        stats = cli.run_simulation(config, show_grid=args.show_grid)
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")
        return 1
    except (ValueError, IndexError) as e:
        print(f"Error: {e}")
        logger.debug("Simulation failed", exc_info=True)
        return 1

    print_results(stats, args.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())
