"""
Genetic Algorithm for the Quadratic Binary Function with a Knapsack Constraint

This module provides a command-line interface for running the genetic
algorithm on a kQBF instance file and reporting the best feasible solution.

Features:
- Generation and wall-clock termination bounds
- Two-point or uniform crossover, uniform or adaptive mutation
- Reproducible runs through an explicit seed
- Optional CSV/JSON run reports

Usage:
    python main.py --instance instances/kqbf/kqbf020 --generations 5000 --max-time 1800
"""

import argparse
import sys
import time
from typing import List, Optional

from genetic_algorithm import GeneticAlgorithm
from ga_config import GAConfig
from ga_constants import GAConstants, LoggingConstants
from ga_exceptions import GAException
from ga_logging import setup_logging
from ga_components.instance_loader import load_instance


def build_parser() -> argparse.ArgumentParser:
    """Command-line parser of the run driver."""
    parser = argparse.ArgumentParser(description='Run a genetic algorithm on a kQBF instance.')

    parser.add_argument('--instance', '-i', type=str, required=True,
                        help="kQBF instance file")

    # Termination
    parser.add_argument('--generations', '-g', type=int, default=GAConstants.DEFAULT_GENERATIONS,
                        help=f"Maximum number of generations (default: {GAConstants.DEFAULT_GENERATIONS})")
    parser.add_argument('--max-time', '-t', type=float, default=GAConstants.DEFAULT_MAX_TIME_SECONDS,
                        help=f"Wall-clock budget in seconds (default: {GAConstants.DEFAULT_MAX_TIME_SECONDS})")

    # GA parameters
    parser.add_argument('--population-size', '-ps', type=int, default=GAConstants.DEFAULT_POPULATION_SIZE,
                        help=f"Population size (default: {GAConstants.DEFAULT_POPULATION_SIZE})")
    parser.add_argument('--mutation-rate', '-mr', type=float, default=GAConstants.DEFAULT_MUTATION_RATE,
                        help=f"Per-gene mutation rate (default: {GAConstants.DEFAULT_MUTATION_RATE})")
    parser.add_argument('--uniform-crossover', action='store_true',
                        help="Use uniform crossover instead of two-point crossover")
    parser.add_argument('--adaptive-mutation', action='store_true',
                        help="Use fitness-relative adaptive mutation")
    parser.add_argument('--elite-carryover', action='store_true',
                        help="Carry the best feasible chromosome into the next generation")
    parser.add_argument('--seed', '-s', type=int, default=None,
                        help="Random seed (default: random)")

    # Output
    parser.add_argument('--output-dir', '-o', type=str, default=None,
                        help="Folder for log files and CSV/JSON reports (default: none)")
    parser.add_argument('--log-level', type=str, default=LoggingConstants.DEFAULT_LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help="Console log level")
    parser.add_argument('--quiet', '-q', action='store_true',
                        help="Do not log every incumbent improvement")
    parser.add_argument('--no-progress', action='store_true',
                        help="Hide the generation progress bar")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point of the kQBF genetic algorithm.

    Parses command-line arguments, loads the instance, runs the genetic
    algorithm and reports the best feasible solution with the run time.

    Returns:
        0 when a feasible solution was found, 1 otherwise
    """
    args = build_parser().parse_args(argv)

    logger = setup_logging(
        level=args.log_level,
        log_to_file=args.output_dir is not None,
        output_dir=args.output_dir or LoggingConstants.DEFAULT_LOG_DIR,
        console_colors=True
    )

    try:
        config = GAConfig.from_args(args)
        logger.log_config_summary(config)

        objective = load_instance(args.instance)
        logger.info("Instance loaded", file=args.instance, size=objective.size,
                    capacity=objective.capacity)

        start_time = time.time()
        result = GeneticAlgorithm.for_kqbf(objective, config).run()
        total_time = time.time() - start_time
    except (GAException, OSError) as e:
        logger.critical("GA execution failed", exception=e)
        raise

    if not result.found:
        logger.info("maxVal = no feasible solution")
        logger.info(f"Time = {total_time:.3f} seg")
        return 1

    logger.info(f"maxVal = {result.best_solution}")
    logger.info(f"Time = {total_time:.3f} seg")
    return 0


if __name__ == "__main__":
    sys.exit(main())
