"""
GA Components Module

Modular components for the kQBF Genetic Algorithm implementation.
Each component handles a specific aspect of the GA process:

- KnapsackQBF: Quadratic binary objective with a knapsack constraint
- Solution: Decoded candidate (selected variables, cost, used capacity)
- ProblemAdapter / KQBFProblem: Decoding, random chromosomes and gene flips
- PopulationManager: Population initialization, validation and best/worst queries
- SelectionMethods: Binary tournament parent selection
- GeneticOperations: Crossover and mutation operations
- GAReporter: Per-generation statistics and result export
- load_instance / parse_instance: Instance file reading

Usage:
    from ga_components import KnapsackQBF, KQBFProblem
    from ga_components.instance_loader import load_instance
"""

# Problem model
from .objective_function import KnapsackQBF
from .solution import Solution
from .problem import ProblemAdapter, KQBFProblem
from .instance_loader import load_instance, parse_instance

# Core GA components
from .population_management import PopulationManager
from .selection import SelectionMethods
from .genetic_operations import GeneticOperations
from .reporting import GAReporter

__all__ = [
    # Problem model
    'KnapsackQBF',
    'Solution',
    'ProblemAdapter',
    'KQBFProblem',
    'load_instance',
    'parse_instance',

    # Core components
    'PopulationManager',
    'SelectionMethods',
    'GeneticOperations',
    'GAReporter',
]

# Version information
__version__ = '1.0.0'
__description__ = 'Genetic Algorithm for the knapsack-constrained Quadratic Binary Function'
