"""
Population Management Module

Handles population initialization, validation and the population-level
queries the engine needs for elitism.

Features:
- Random population initialization (no feasibility filtering)
- Best feasible / worst member queries
- Population validation
- Population diversity measurement
"""

from typing import List, Optional, Tuple

import numpy as np

from ga_components.problem import ProblemAdapter
from ga_components.solution import Solution
from ga_exceptions import PopulationError

Chromosome = np.ndarray
Population = List[Chromosome]


class PopulationManager:
    """
    Manages population-level operations for the genetic algorithm.

    Every population it creates or accepts holds exactly ``population_size``
    chromosomes of the adapter's chromosome size.
    """

    def __init__(self, problem: ProblemAdapter, population_size: int):
        """
        Initialize population manager.

        Args:
            problem: Problem adapter used to create and decode chromosomes
            population_size: Target population size
        """
        if population_size < 1:
            raise PopulationError(f"Population size ({population_size}) must be positive",
                                  population_size=population_size)
        if problem.chromosome_size < 1:
            raise PopulationError(f"Chromosome length ({problem.chromosome_size}) must be positive")

        self.problem = problem
        self.population_size = population_size

        self.stats = {
            'populations_initialized': 0,
            'best_of_queries': 0,
            'infeasible_populations': 0
        }

    def initialize_population(self, rng: np.random.Generator) -> Population:
        """
        Create ``population_size`` independent random chromosomes.

        Args:
            rng: Random source of the run

        Returns:
            List of chromosomes
        """
        population = [self.problem.generate_random(rng) for _ in range(self.population_size)]
        self.stats['populations_initialized'] += 1
        return population

    def validate_population(self, population: Population) -> None:
        """Raise PopulationError if the population size or any chromosome length is wrong."""
        if len(population) != self.population_size:
            raise PopulationError(
                f"Population has {len(population)} chromosomes, expected {self.population_size}",
                population_size=len(population), expected_size=self.population_size)

        expected_length = self.problem.chromosome_size
        for index, chromosome in enumerate(population):
            if len(chromosome) != expected_length:
                raise PopulationError(
                    f"Chromosome {index} has length {len(chromosome)}, expected {expected_length}")

    def evaluate_population(self, population: Population) -> List[Solution]:
        """Decode every chromosome of the population."""
        return [self.problem.decode(chromosome) for chromosome in population]

    def best_of(self, population: Population,
                solutions: List[Solution] = None) -> Optional[Tuple[Chromosome, Solution]]:
        """
        Best feasible chromosome of the population.

        Args:
            population: Chromosomes to scan
            solutions: Already decoded solutions in population order (decoded here if None)

        Returns:
            (chromosome, solution) of the best feasible member, or None when
            no member satisfies the capacity constraint
        """
        if solutions is None:
            solutions = self.evaluate_population(population)

        self.stats['best_of_queries'] += 1
        best = None
        for chromosome, solution in zip(population, solutions):
            if not self.problem.is_feasible(solution):
                continue
            if best is None or solution.is_better_than(best[1]):
                best = (chromosome, solution)

        if best is None:
            self.stats['infeasible_populations'] += 1
        return best

    def worst_index(self, solutions: List[Solution]) -> int:
        """Index of the member with the highest cost (first one on ties)."""
        if not solutions:
            raise PopulationError("Cannot pick the worst member of an empty population")
        worst = 0
        for index, solution in enumerate(solutions):
            if solution.cost > solutions[worst].cost:
                worst = index
        return worst

    def get_population_diversity(self, population: Population) -> float:
        """
        Mean per-locus diversity of the population.

        0.0 means every chromosome is identical, 1.0 means every locus is
        split evenly between zeros and ones.
        """
        if len(population) < 2:
            return 0.0
        ones_ratio = np.mean(np.vstack(population), axis=0)
        return float(np.mean(1.0 - np.abs(2.0 * ones_ratio - 1.0)))

    def get_statistics(self) -> dict:
        """Get population management statistics."""
        return self.stats.copy()
