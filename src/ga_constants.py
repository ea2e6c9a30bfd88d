"""
Configuration Constants for the kQBF Genetic Algorithm

Centralizes all magic numbers and default values for better maintainability.
All constants are organized by category with clear documentation.
"""


class GAConstants:
    """Configuration constants for genetic algorithm components."""

    # Run defaults
    DEFAULT_GENERATIONS = 5000           # Maximum number of generations
    DEFAULT_POPULATION_SIZE = 100        # Chromosomes per generation
    DEFAULT_MUTATION_RATE = 1.0 / 100.0  # Per-gene flip probability
    DEFAULT_MAX_TIME_SECONDS = 30 * 60   # Wall-clock budget (30 minutes)

    # Population limits
    MIN_POPULATION_SIZE = 1              # Tournament draws with replacement

    # Mutation rate limits
    MUTATION_RATE_MIN = 0.0
    MUTATION_RATE_MAX = 1.0

    # Adaptive mutation
    ADAPTIVE_LOW_RATE_FACTOR = 0.5       # sigma = factor * base rate for above-average chromosomes
    ADAPTIVE_HIGH_RATE_DIVISOR = 4.0     # avg / (divisor * cost) for the remaining chromosomes

    # Crossover
    UNIFORM_CROSSOVER_PROBABILITY = 0.5  # Fair coin per locus


class LoggingConstants:
    """Logging and reporting constants."""

    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_LOG_DIR = "logs"
    PROGRESS_LOG_INTERVAL = 100          # Generations between periodic progress lines


class MemoryConstants:
    """Memory-related configuration constants."""

    BYTES_PER_MB = 1024 * 1024


def bytes_to_mb(bytes_value: int) -> float:
    """Convert bytes to megabytes."""
    return bytes_value / MemoryConstants.BYTES_PER_MB
