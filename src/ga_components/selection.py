"""
Selection Methods Module

Parent selection for reproduction.

Features:
- Binary tournament selection under a minimizing cost
- Mating pool construction of arbitrary size
"""

from typing import List, Sequence

import numpy as np

from ga_components.problem import ProblemAdapter
from ga_components.solution import Solution
from ga_exceptions import PopulationError


class SelectionMethods:
    """
    Tournament-based parent selection.

    Contestants are drawn uniformly with replacement and decoded through the
    problem adapter; the lower cost wins.
    """

    def __init__(self, problem: ProblemAdapter):
        self.problem = problem

        # Statistics tracking
        self.selection_stats = {
            'tournaments_held': 0
        }

    def binary_tournament(self, population: Sequence[np.ndarray],
                          rng: np.random.Generator) -> np.ndarray:
        """
        Select one parent with a binary tournament.

        Args:
            population: Current chromosomes
            rng: Random source of the run

        Returns:
            The winning chromosome (not a copy)
        """
        if not population:
            raise PopulationError("Cannot hold a tournament on an empty population")

        size = len(population)
        first = population[rng.integers(0, size)]
        second = population[rng.integers(0, size)]

        self.selection_stats['tournaments_held'] += 1
        if self._cost(first) < self._cost(second):
            return first
        return second

    def _cost(self, chromosome: np.ndarray) -> float:
        solution: Solution = self.problem.decode(chromosome)
        return solution.cost

    def select_parents(self, population: Sequence[np.ndarray], pool_size: int,
                       rng: np.random.Generator) -> List[np.ndarray]:
        """
        Build a mating pool by repeated binary tournaments.

        Args:
            population: Current chromosomes
            pool_size: Number of parents to select
            rng: Random source of the run

        Returns:
            List of selected parents in selection order
        """
        return [self.binary_tournament(population, rng) for _ in range(pool_size)]

    def get_statistics(self) -> dict:
        """Get selection statistics."""
        return self.selection_stats.copy()

    def reset_statistics(self):
        """Reset selection statistics."""
        self.selection_stats = {
            'tournaments_held': 0
        }
