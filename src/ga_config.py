"""
Configuration Management for the kQBF Genetic Algorithm

Validates and organizes user-provided CLI parameters into a clean structure.
The configuration is read-only for the duration of a run.
"""

import math
from dataclasses import dataclass, asdict
from typing import Optional

from ga_constants import GAConstants
from ga_exceptions import ConfigurationError


@dataclass
class GAConfig:
    """
    Configuration container that validates and organizes run parameters.

    A run is bounded by ``generations``, by ``max_time_seconds`` or by both;
    whichever bound is reached first stops the search.
    """

    # Core GA parameters (user-provided via CLI)
    population_size: int = GAConstants.DEFAULT_POPULATION_SIZE
    generations: Optional[int] = GAConstants.DEFAULT_GENERATIONS
    mutation_rate: float = GAConstants.DEFAULT_MUTATION_RATE
    max_time_seconds: Optional[float] = None

    # Variation strategies
    use_uniform_crossover: bool = False
    adaptive_mutation: bool = False
    elite_carryover: bool = False

    # Reproducibility and output
    seed: Optional[int] = None
    output_dir: Optional[str] = None
    verbose: bool = True
    show_progress: bool = False

    def __post_init__(self):
        """Validate user parameters after initialization."""
        self._validate()

    def _validate(self):
        """Validate critical user parameters to catch errors early."""
        errors = []

        if not _is_int(self.population_size) or self.population_size < GAConstants.MIN_POPULATION_SIZE:
            errors.append(f"Population size ({self.population_size}) must be an integer of at least "
                          f"{GAConstants.MIN_POPULATION_SIZE}")

        if self.generations is None and self.max_time_seconds is None:
            errors.append("At least one termination bound (generations or max_time_seconds) must be set")
        if self.generations is not None and (not _is_int(self.generations) or self.generations < 1):
            errors.append(f"Generations ({self.generations}) must be a positive integer")
        if self.max_time_seconds is not None and (
                not _is_number(self.max_time_seconds) or self.max_time_seconds <= 0):
            errors.append(f"Max time ({self.max_time_seconds}) must be a positive number of seconds")

        if not _is_number(self.mutation_rate) or not (
                GAConstants.MUTATION_RATE_MIN <= self.mutation_rate <= GAConstants.MUTATION_RATE_MAX):
            errors.append(f"Mutation rate ({self.mutation_rate}) must be between "
                          f"{GAConstants.MUTATION_RATE_MIN} and {GAConstants.MUTATION_RATE_MAX}")

        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            errors.append(f"Seed ({self.seed}) must be a non-negative integer")

        if self.output_dir is not None and not str(self.output_dir).strip():
            errors.append("Output directory cannot be empty")

        if errors:
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors),
                errors=errors)

    @classmethod
    def from_args(cls, args) -> 'GAConfig':
        """
        Create configuration from parsed CLI arguments.

        Args:
            args: argparse.Namespace from CLI parsing

        Returns:
            Validated GAConfig instance
        """
        config_params = {
            'population_size': args.population_size,
            'generations': args.generations,
            'mutation_rate': args.mutation_rate,
            'max_time_seconds': args.max_time,
            'use_uniform_crossover': getattr(args, 'uniform_crossover', False),
            'adaptive_mutation': getattr(args, 'adaptive_mutation', False),
            'elite_carryover': getattr(args, 'elite_carryover', False),
            'seed': getattr(args, 'seed', None),
            'output_dir': getattr(args, 'output_dir', None),
            'verbose': not getattr(args, 'quiet', False),
            'show_progress': not getattr(args, 'no_progress', False),
        }

        return cls(**config_params)

    @property
    def crossover_strategy(self) -> str:
        """Name of the configured crossover strategy."""
        return "uniform" if self.use_uniform_crossover else "two_point"

    @property
    def mutation_strategy(self) -> str:
        """Name of the configured mutation strategy."""
        return "adaptive" if self.adaptive_mutation else "uniform"

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        bounds = []
        if self.generations is not None:
            bounds.append(f"{self.generations} generations")
        if self.max_time_seconds is not None:
            bounds.append(f"{self.max_time_seconds:g}s")

        summary = f"""GA Configuration:
  Population: {self.population_size}
  Termination: {' or '.join(bounds)}
  Mutation: {self.mutation_strategy} (base rate={self.mutation_rate:.4f})
  Crossover: {self.crossover_strategy}
  Elite carry-over: {'enabled' if self.elite_carryover else 'disabled'}
  Seed: {self.seed if self.seed is not None else 'random'}"""

        if self.output_dir:
            summary += f"\n  Output: {self.output_dir}"

        return summary

    def __str__(self) -> str:
        return (f"GAConfig(pop={self.population_size}, gen={self.generations}, "
                f"time={self.max_time_seconds}, mutation={self.mutation_strategy}, "
                f"crossover={self.crossover_strategy})")

    def to_dict(self) -> dict:
        """Convert config to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'GAConfig':
        """Create config from dictionary."""
        return cls(**config_dict)

    def update(self, **kwargs) -> 'GAConfig':
        """Create a new config with updated values."""
        current_config = self.to_dict()
        current_config.update(kwargs)
        return self.from_dict(current_config)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and not math.isnan(value))
