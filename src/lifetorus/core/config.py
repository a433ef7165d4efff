"""Configuration for a simulation run."""

from dataclasses import dataclass
from typing import List, Optional

from .patterns import PatternLibrary
from .seeding import SEEDING_POLICIES, get_seeder
from .storage import STORAGE_TYPES, get_storage_type
from .universe import Universe


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""

    width: int = 64
    height: int = 64
    seeding: str = "random"
    probability: float = 0.5
    seed: Optional[int] = None
    storage: str = "bitpacked"
    generations: int = 10
    pattern: Optional[str] = None
    pattern_row: int = 0
    pattern_col: int = 0

    def validate(self) -> List[str]:
        """Check the configuration.

        Returns:
            Human-readable error messages, empty when the config is valid
        """
        errors = []

        if self.width < 0:
            errors.append("Width must be non-negative")

        if self.height < 0:
            errors.append("Height must be non-negative")

        if not 0.0 <= self.probability <= 1.0:
            errors.append("Population probability must be between 0.0 and 1.0")

        if self.generations <= 0:
            errors.append("Generations must be positive")

        if self.seeding not in SEEDING_POLICIES:
            errors.append(f"Seeding must be one of: {', '.join(SEEDING_POLICIES)}")

        if self.storage not in STORAGE_TYPES:
            errors.append(f"Storage must be one of: {', '.join(sorted(STORAGE_TYPES))}")

        if self.pattern_row < 0 or self.pattern_col < 0:
            errors.append("Pattern offsets must be non-negative")

        return errors

    def build_universe(self, library: Optional[PatternLibrary] = None) -> Universe:
        """Create the universe this configuration describes.

        A pattern, when given, is placed on an otherwise dead universe and
        the seeding policy is ignored.

        Args:
            library: Pattern library to resolve ``pattern`` from

        Returns:
            New universe

        Raises:
            ValueError: If the configuration is invalid or the pattern is unknown
        """
        errors = self.validate()
        if errors:
            raise ValueError("; ".join(errors))

        storage = get_storage_type(self.storage)

        if self.pattern is None:
            seeder = get_seeder(self.seeding, self.probability, self.seed)
            return Universe(self.width, self.height, seeder=seeder, storage=storage)

        library = library or PatternLibrary()
        pattern = library.get_pattern(self.pattern)
        if pattern is None:
            raise ValueError(f"Pattern '{self.pattern}' not found")

        universe = Universe(self.width, self.height, seeder=get_seeder("dead"), storage=storage)
        pattern.apply_to_universe(universe, self.pattern_row, self.pattern_col)
        return universe
