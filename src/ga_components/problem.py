"""
Problem Adapter Module

Defines the capability interface the evolutionary engine is parameterized
over, and its implementation for the knapsack-constrained QBF.

The engine never looks inside a chromosome: it asks the adapter to create
random chromosomes, flip a gene, decode a chromosome into a solution and
judge feasibility.
"""

from abc import ABC, abstractmethod

import numpy as np

from ga_components.objective_function import KnapsackQBF
from ga_components.solution import Solution


class ProblemAdapter(ABC):
    """Problem-specific operations required by the genetic algorithm."""

    @property
    @abstractmethod
    def chromosome_size(self) -> int:
        """Number of genes in every chromosome."""

    @abstractmethod
    def decode(self, chromosome: np.ndarray) -> Solution:
        """Map a chromosome to its evaluated solution."""

    @abstractmethod
    def generate_random(self, rng: np.random.Generator) -> np.ndarray:
        """Create a random chromosome."""

    @abstractmethod
    def mutate_gene(self, chromosome: np.ndarray, locus: int) -> None:
        """Mutate one gene of the chromosome in place."""

    @abstractmethod
    def create_empty_solution(self) -> Solution:
        """Solution with no selected elements."""

    @abstractmethod
    def is_feasible(self, solution: Solution) -> bool:
        """Whether the solution satisfies the problem constraints."""

    @property
    def cost_sign(self) -> float:
        """Factor turning an engine cost into the value reported to the caller."""
        return 1.0

    def to_original_sign(self, solution: Solution) -> Solution:
        """Solution as reported to the caller."""
        return solution.with_sign(self.cost_sign)


class KQBFProblem(ProblemAdapter):
    """
    Binary encoding of the knapsack QBF.

    Locus i holds 1 when variable i is selected. The adapter evaluates
    through whatever objective it is given; the engine hands it the negated
    objective so that lower costs are better.
    """

    def __init__(self, objective: KnapsackQBF):
        self.objective = objective
        self.stats = {
            'decode_operations': 0,
            'chromosomes_created': 0
        }

    @property
    def chromosome_size(self) -> int:
        return self.objective.size

    def create_empty_solution(self) -> Solution:
        # A QBF solution with every variable at zero has zero cost
        return Solution(selected=(), cost=0.0, used_capacity=0.0)

    def decode(self, chromosome: np.ndarray) -> Solution:
        """
        Decode a chromosome into a solution.

        Args:
            chromosome: Bit vector of length ``chromosome_size``

        Returns:
            Solution selecting the loci set to one, in increasing order
        """
        if len(chromosome) != self.chromosome_size:
            raise ValueError(f"Chromosome length {len(chromosome)} != problem size {self.chromosome_size}")

        self.stats['decode_operations'] += 1
        selected = tuple(int(i) for i in np.flatnonzero(chromosome))
        if not selected:
            return self.create_empty_solution()

        return Solution(
            selected=selected,
            cost=self.objective.evaluate(selected),
            used_capacity=self.objective.used_capacity(selected)
        )

    def generate_random(self, rng: np.random.Generator) -> np.ndarray:
        self.stats['chromosomes_created'] += 1
        return rng.integers(0, 2, size=self.chromosome_size, dtype=np.uint8)

    def mutate_gene(self, chromosome: np.ndarray, locus: int) -> None:
        chromosome[locus] = 1 - chromosome[locus]

    def is_feasible(self, solution: Solution) -> bool:
        return solution.is_feasible(self.objective.capacity)

    @property
    def cost_sign(self) -> float:
        # Undo the objective's sign so the caller sees the QBF value
        return self.objective.sign

    def get_statistics(self) -> dict:
        return self.stats.copy()
