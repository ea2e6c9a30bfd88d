"""
Custom Exception Classes for the kQBF Genetic Algorithm

Provides specific, meaningful exceptions for the different failure modes
of the search engine and its collaborators.
"""

import math


class GAException(Exception):
    """Base exception for all genetic algorithm related errors."""
    pass


class ConfigurationError(GAException):
    """Raised when GA configuration is invalid or inconsistent."""

    def __init__(self, message: str, errors: list = None):
        super().__init__(message)
        self.errors = errors or []


class InstanceError(GAException):
    """Raised when a problem instance is malformed or inconsistent."""

    def __init__(self, message: str, source: str = None, token_index: int = None):
        if source:
            message = f"{message} (source: {source})"
        if token_index is not None:
            message = f"{message} [token {token_index}]"
        super().__init__(message)
        self.source = source
        self.token_index = token_index


class PopulationError(GAException):
    """Raised when population operations fail."""

    def __init__(self, message: str, population_size: int = None,
                 expected_size: int = None):
        super().__init__(message)
        self.population_size = population_size
        self.expected_size = expected_size


class CrossoverError(GAException):
    """Raised when crossover operations fail."""

    def __init__(self, message: str, parent1_length: int = None,
                 parent2_length: int = None):
        super().__init__(message)
        self.parent1_length = parent1_length
        self.parent2_length = parent2_length


class MutationError(GAException):
    """Raised when mutation operations fail."""

    def __init__(self, message: str, mutation_rate: float = None):
        super().__init__(message)
        self.mutation_rate = mutation_rate


def validate_rate(rate: float, name: str = "mutation_rate") -> float:
    """
    Validate a probability passed directly to a genetic operator.

    Args:
        rate: Probability to validate
        name: Name used in the error message

    Returns:
        The rate as a float

    Raises:
        MutationError: If the rate is not a number in [0, 1]
    """
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise MutationError(f"{name} must be numeric, got {type(rate).__name__}",
                            mutation_rate=rate)
    if math.isnan(rate) or rate < 0.0 or rate > 1.0:
        raise MutationError(f"{name} ({rate}) must be between 0.0 and 1.0",
                            mutation_rate=rate)
    return float(rate)
