"""
Genetic Operations Module

Core genetic algorithm operations including crossover and mutation.
These are the fundamental building blocks that drive evolutionary search.

Features:
- Two-point crossover (default) and uniform crossover
- Uniform bit-flip mutation with a fixed per-gene rate
- Adaptive mutation with a per-chromosome rate relative to the offspring
  average cost
"""

from typing import List, Sequence, Tuple

import numpy as np

from ga_components.problem import ProblemAdapter
from ga_constants import GAConstants
from ga_exceptions import CrossoverError, validate_rate


class GeneticOperations:
    """
    Crossover and mutation operators for binary chromosomes.

    All randomness comes from the generator passed to each call, so a run
    is reproducible from its seed.
    """

    def __init__(self, problem: ProblemAdapter, mutation_rate: float,
                 use_uniform_crossover: bool = False, adaptive_mutation: bool = False):
        """
        Initialize genetic operations.

        Args:
            problem: Problem adapter (gene flips and decoding)
            mutation_rate: Probability of each bit being flipped by uniform mutation
            use_uniform_crossover: Use uniform instead of two-point crossover
            adaptive_mutation: Use the fitness-relative adaptive mutation
        """
        self.problem = problem
        self.mutation_rate = validate_rate(mutation_rate)
        self.use_uniform_crossover = use_uniform_crossover
        self.adaptive_mutation = adaptive_mutation

        # Statistics tracking
        self.crossover_count = 0
        self.mutation_count = 0

    # Crossover

    @staticmethod
    def _check_parents(parent1: np.ndarray, parent2: np.ndarray) -> int:
        if len(parent1) != len(parent2):
            raise CrossoverError(
                f"Parents must have the same length ({len(parent1)} != {len(parent2)})",
                parent1_length=len(parent1), parent2_length=len(parent2))
        return len(parent1)

    def two_point_crossover(self, parent1: np.ndarray, parent2: np.ndarray,
                            rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
        """
        Exchange the segment between two random cut points.

        Cut points satisfy 0 <= p1 <= p2 <= n; child 1 takes parent 2's
        segment [p1, p2) and parent 1's genes elsewhere, child 2 the reverse.
        """
        size = self._check_parents(parent1, parent2)
        point1 = int(rng.integers(0, size + 1))
        point2 = point1 + int(rng.integers(0, size + 1 - point1))

        child1 = np.concatenate((parent1[:point1], parent2[point1:point2], parent1[point2:]))
        child2 = np.concatenate((parent2[:point1], parent1[point1:point2], parent2[point2:]))

        self.crossover_count += 1
        return child1, child2

    def uniform_crossover(self, parent1: np.ndarray, parent2: np.ndarray,
                          rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
        """
        Flip a fair coin per locus to choose which parent each child inherits from.

        The second child receives the complementary genes.
        """
        size = self._check_parents(parent1, parent2)
        coins = rng.random(size) < GAConstants.UNIFORM_CROSSOVER_PROBABILITY

        child1 = np.where(coins, parent1, parent2)
        child2 = np.where(coins, parent2, parent1)

        self.crossover_count += 1
        return child1, child2

    def crossover(self, parent1: np.ndarray, parent2: np.ndarray,
                  rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
        """Apply the configured crossover strategy to one parent pair."""
        if self.use_uniform_crossover:
            return self.uniform_crossover(parent1, parent2, rng)
        return self.two_point_crossover(parent1, parent2, rng)

    def recombine(self, parents: Sequence[np.ndarray],
                  rng: np.random.Generator) -> List[np.ndarray]:
        """
        Recombine consecutive parent pairs into an offspring pool of the same size.

        With an odd number of parents the last one is paired with the first
        and only the first child of that pair is kept.
        """
        offspring = []
        count = len(parents)
        for index in range(0, count, 2):
            parent1 = parents[index]
            parent2 = parents[index + 1] if index + 1 < count else parents[0]
            child1, child2 = self.crossover(parent1, parent2, rng)
            offspring.append(child1)
            if len(offspring) < count:
                offspring.append(child2)
        return offspring

    # Mutation

    def mutate_chromosome(self, chromosome: np.ndarray, rate: float,
                          rng: np.random.Generator) -> int:
        """
        Flip each gene independently with probability ``rate``, in place.

        Returns:
            Number of genes flipped
        """
        draws = rng.random(len(chromosome))
        loci = np.flatnonzero(draws < rate)
        for locus in loci:
            self.problem.mutate_gene(chromosome, int(locus))
        if loci.size:
            self.mutation_count += 1
        return int(loci.size)

    def uniform_mutation(self, offspring: Sequence[np.ndarray],
                         rng: np.random.Generator) -> Sequence[np.ndarray]:
        """Mutate every offspring with the configured per-gene rate."""
        for chromosome in offspring:
            self.mutate_chromosome(chromosome, self.mutation_rate, rng)
        return offspring

    @staticmethod
    def adaptive_rate(cost: float, avg_cost: float, chromosome_size: int) -> float:
        """
        Mutation rate of one chromosome under adaptive mutation.

        With r = 1/n:
          - cost <= 0:       r
          - avg_cost < cost: max(r, (avg_cost / cost) * (r / 2))
          - otherwise:       max(r, avg_cost / (4 * cost))

        The result is clipped to [0, 1].
        """
        base_rate = 1.0 / chromosome_size
        if cost <= 0:
            return base_rate

        if avg_cost < cost:
            # Low rate that keeps the chromosome's schema mostly intact
            sigma = GAConstants.ADAPTIVE_LOW_RATE_FACTOR * base_rate
            rate = max(base_rate, (avg_cost / cost) * sigma)
        else:
            # Constant density over all bits, as in a conventional GA
            rate = max(base_rate, avg_cost / (GAConstants.ADAPTIVE_HIGH_RATE_DIVISOR * cost))

        return min(1.0, max(0.0, rate))

    def adaptive_mutation_rates(self, offspring: Sequence[np.ndarray]) -> List[float]:
        """Per-chromosome adaptive rates for an offspring pool."""
        if not offspring:
            return []
        costs = [self.problem.decode(chromosome).cost for chromosome in offspring]
        avg_cost = sum(costs) / len(costs)
        size = self.problem.chromosome_size
        return [self.adaptive_rate(cost, avg_cost, size) for cost in costs]

    def adaptive_mutation_pass(self, offspring: Sequence[np.ndarray],
                               rng: np.random.Generator) -> Sequence[np.ndarray]:
        """Mutate every offspring with its own adaptive rate."""
        rates = self.adaptive_mutation_rates(offspring)
        for chromosome, rate in zip(offspring, rates):
            self.mutate_chromosome(chromosome, rate, rng)
        return offspring

    def mutate(self, offspring: Sequence[np.ndarray],
               rng: np.random.Generator) -> Sequence[np.ndarray]:
        """Apply the configured mutation strategy to the offspring pool in place."""
        if self.adaptive_mutation:
            return self.adaptive_mutation_pass(offspring, rng)
        return self.uniform_mutation(offspring, rng)

    def get_statistics(self) -> dict:
        """Get statistics about genetic operations performed."""
        return {
            'crossover_count': self.crossover_count,
            'mutation_count': self.mutation_count
        }

    def reset_statistics(self):
        """Reset operation counters."""
        self.crossover_count = 0
        self.mutation_count = 0
