import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from ga_config import GAConfig
from ga_constants import LoggingConstants
from ga_exceptions import ConfigurationError
from ga_logging import get_logger
from ga_components.genetic_operations import GeneticOperations
from ga_components.objective_function import KnapsackQBF
from ga_components.population_management import PopulationManager
from ga_components.problem import KQBFProblem, ProblemAdapter
from ga_components.reporting import GAReporter
from ga_components.selection import SelectionMethods
from ga_components.solution import Solution


TERMINATION_GENERATIONS = "Max generations reached"
TERMINATION_TIME = "Time limit reached"


@dataclass
class RunResult:
    """
    Outcome of a genetic algorithm run.

    ``best_solution`` carries the cost in the problem's original sign and is
    None when no feasible chromosome was ever observed.
    """
    best_solution: Optional[Solution]
    generations_completed: int
    elapsed_seconds: float
    termination_reason: str
    history: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.best_solution is not None

    def to_dict(self) -> dict:
        return {
            'found': self.found,
            'best_solution': self.best_solution.to_dict() if self.found else None,
            'generations_completed': self.generations_completed,
            'elapsed_seconds': self.elapsed_seconds,
            'termination_reason': self.termination_reason
        }


class GeneticAlgorithm:
    """
    Generational genetic algorithm minimizing the cost reported by a problem adapter.

    Each generation builds a mating pool by binary tournament, recombines
    consecutive parents, mutates the offspring and replaces the population
    with them. The best feasible solution ever observed (the incumbent) is
    tracked separately and returned at the end.
    """

    def __init__(self, problem: ProblemAdapter, config: GAConfig,
                 rng: Optional[np.random.Generator] = None) -> None:

        if problem.chromosome_size < 1:
            raise ConfigurationError(f"Chromosome length ({problem.chromosome_size}) must be positive")

        self.problem = problem
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)
        self.logger = get_logger("GeneticAlgorithm")

        # Initialize modular components using config values
        self.population_manager = PopulationManager(problem, config.population_size)
        self.selection_methods = SelectionMethods(problem)
        self.genetic_operations = GeneticOperations(
            problem,
            mutation_rate=config.mutation_rate,
            use_uniform_crossover=config.use_uniform_crossover,
            adaptive_mutation=config.adaptive_mutation
        )
        self.reporter = GAReporter(
            output_dir=config.output_dir,
            experiment_name=f"ga_run_{int(time.time())}",
            cost_sign=problem.cost_sign
        )

        self.population: List[np.ndarray] = []
        self.incumbent: Optional[Solution] = None
        self.incumbent_chromosome: Optional[np.ndarray] = None
        self._population_best: Optional[Tuple[np.ndarray, Solution]] = None

    @classmethod
    def for_kqbf(cls, objective: KnapsackQBF, config: GAConfig,
                 rng: Optional[np.random.Generator] = None) -> 'GeneticAlgorithm':
        """Engine maximizing a knapsack QBF by minimizing its negation."""
        return cls(KQBFProblem(objective.negated()), config, rng=rng)

    def _termination_reason(self, generation: int, start_time: float) -> Optional[str]:
        if self.config.generations is not None and generation >= self.config.generations:
            return TERMINATION_GENERATIONS
        if (self.config.max_time_seconds is not None
                and time.time() - start_time >= self.config.max_time_seconds):
            return TERMINATION_TIME
        return None

    def _evaluate(self, population: List[np.ndarray], generation: int) -> List[Solution]:
        """Decode the population, refresh the population best and update the incumbent."""
        solutions = self.population_manager.evaluate_population(population)
        self._population_best = self.population_manager.best_of(population, solutions)

        if self._population_best is not None:
            chromosome, solution = self._population_best
            if solution.is_better_than(self.incumbent):
                self.incumbent = solution
                self.incumbent_chromosome = chromosome.copy()
                if self.config.verbose:
                    self.logger.log_incumbent_update(generation, self.problem.to_original_sign(solution))
        return solutions

    def _carry_over_elite(self, offspring: List[np.ndarray], previous_best) -> None:
        """Replace the worst offspring with the previous population's best feasible chromosome."""
        if previous_best is None:
            return
        elite_chromosome, elite_solution = previous_best
        decoded = [self.problem.decode(chromosome) for chromosome in offspring]
        worst = self.population_manager.worst_index(decoded)
        if elite_solution.cost < decoded[worst].cost:
            offspring[worst] = elite_chromosome.copy()

    def run(self) -> RunResult:
        """Runs the genetic algorithm until a termination bound is reached."""
        # Each run searches from scratch
        self.incumbent = None
        self.incumbent_chromosome = None
        self._population_best = None

        self.reporter.start_run(self.config.to_dict())
        start_time = time.time()

        # Initial population
        self.population = self.population_manager.initialize_population(self.rng)
        solutions = self._evaluate(self.population, generation=0)
        self._record(0, solutions)

        generation = 0
        progress = tqdm(total=self.config.generations, desc="Generations", unit="gen",
                        disable=not self.config.show_progress, leave=False)
        try:
            while True:
                reason = self._termination_reason(generation, start_time)
                if reason is not None:
                    break

                generation_start = time.time()
                generation += 1

                previous_best = self._population_best
                parents = self.selection_methods.select_parents(
                    self.population, self.config.population_size, self.rng)
                offspring = self.genetic_operations.recombine(parents, self.rng)
                offspring = list(self.genetic_operations.mutate(offspring, self.rng))

                if self.config.elite_carryover:
                    self._carry_over_elite(offspring, previous_best)

                self.population_manager.validate_population(offspring)
                self.population = offspring
                solutions = self._evaluate(self.population, generation)

                self._record(generation, solutions)
                self.logger.log_generation_complete(
                    generation,
                    self.problem.to_original_sign(self._population_best[1]).cost
                    if self._population_best else None,
                    time.time() - generation_start)

                if generation % LoggingConstants.PROGRESS_LOG_INTERVAL == 0:
                    self.logger.debug(f"Population diversity: "
                                      f"{self.population_manager.get_population_diversity(self.population):.3f}")
                progress.update(1)
        finally:
            progress.close()

        elapsed = time.time() - start_time
        self.logger.log_termination(generation, reason, elapsed)

        best_solution = None
        if self.incumbent is not None:
            best_solution = self.problem.to_original_sign(self.incumbent)
        else:
            self.logger.log_no_feasible_solution(generation)

        result = RunResult(
            best_solution=best_solution,
            generations_completed=generation,
            elapsed_seconds=elapsed,
            termination_reason=reason,
            history=list(self.reporter.generation_data)
        )

        self.logger.debug("Component statistics", **self.get_statistics())
        self.reporter.export_history()
        self.reporter.save_run_summary(result)
        return result

    def _record(self, generation: int, solutions: List[Solution]) -> None:
        feasible_count = sum(1 for solution in solutions if self.problem.is_feasible(solution))
        self.reporter.record_generation(generation, solutions, feasible_count, self.incumbent)

    def get_statistics(self) -> Dict[str, Any]:
        """Statistics of every component of the engine."""
        return {
            'population_manager': self.population_manager.get_statistics(),
            'selection_methods': self.selection_methods.get_statistics(),
            'genetic_operations': self.genetic_operations.get_statistics()
        }


def solve_kqbf(objective: KnapsackQBF, config: GAConfig,
               rng: Optional[np.random.Generator] = None) -> RunResult:
    """Maximize a knapsack QBF with the genetic algorithm."""
    return GeneticAlgorithm.for_kqbf(objective, config, rng=rng).run()
