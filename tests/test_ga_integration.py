"""
Integration Tests for the Complete Genetic Algorithm Pipeline

Tests the full end-to-end GA workflow including:
- Complete runs on small instances with known optima
- Incumbent tracking and termination bounds
- Reproducibility from the seed
- Variation strategies and elite carry-over
- The command-line driver
"""

import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import patch

import numpy as np

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tests.test_fixtures import SMALL_INSTANCE_TEXT, TestFixtures
from genetic_algorithm import (GeneticAlgorithm, RunResult, TERMINATION_GENERATIONS,
                               TERMINATION_TIME, solve_kqbf)
from ga_logging import setup_logging
from main import main


class TestGAIntegration(unittest.TestCase):
    """Integration tests for complete GA runs."""

    def setUp(self):
        # Suppress logging during tests
        setup_logging(level="ERROR", log_to_file=False)

    def test_single_profitable_variable(self):
        objective = TestFixtures.single_diagonal_objective(size=4, value=10.0, capacity=2.0)
        config = TestFixtures.get_test_config(population_size=100, generations=20)

        result = solve_kqbf(objective, config)

        self.assertIsInstance(result, RunResult)
        self.assertTrue(result.found)
        self.assertEqual(result.best_solution.selected, (0,))
        self.assertAlmostEqual(result.best_solution.cost, 10.0)
        self.assertAlmostEqual(result.best_solution.used_capacity, 1.0)
        self.assertEqual(result.termination_reason, TERMINATION_GENERATIONS)
        self.assertEqual(result.generations_completed, 20)

    def test_zero_capacity_returns_empty_solution(self):
        objective = TestFixtures.single_diagonal_objective(size=4, value=10.0, capacity=0.0)
        config = TestFixtures.get_test_config(population_size=100, generations=10)

        result = solve_kqbf(objective, config)

        self.assertTrue(result.found)
        self.assertEqual(result.best_solution.selected, ())
        self.assertEqual(result.best_solution.cost, 0.0)
        self.assertEqual(result.best_solution.used_capacity, 0.0)

    def test_no_feasible_solution(self):
        objective = TestFixtures.single_diagonal_objective(size=4, capacity=-1.0)
        config = TestFixtures.get_test_config(population_size=10, generations=5)

        result = solve_kqbf(objective, config)

        self.assertFalse(result.found)
        self.assertIsNone(result.best_solution)
        self.assertTrue(all(entry['incumbent_cost'] is None for entry in result.history))
        self.assertTrue(all(entry['feasible_count'] == 0 for entry in result.history))

    def test_history_covers_every_generation(self):
        config = TestFixtures.get_test_config(population_size=10, generations=7)
        result = solve_kqbf(TestFixtures.random_objective(), config)

        self.assertEqual(len(result.history), 8)
        self.assertEqual([entry['generation'] for entry in result.history], list(range(8)))

    def test_incumbent_never_worsens(self):
        config = TestFixtures.get_test_config(population_size=20, generations=40)
        result = solve_kqbf(TestFixtures.random_objective(size=12), config)

        costs = [entry['incumbent_cost'] for entry in result.history if entry['incumbent_cost'] is not None]
        self.assertTrue(costs)
        for previous, current in zip(costs, costs[1:]):
            self.assertGreaterEqual(current, previous)
        # History reports QBF values, like the returned solution
        self.assertAlmostEqual(result.best_solution.cost, costs[-1])

    def test_infeasible_generation_keeps_incumbent(self):
        objective = TestFixtures.single_diagonal_objective(size=4, value=10.0, capacity=2.0)
        ga = GeneticAlgorithm.for_kqbf(objective, TestFixtures.get_test_config(population_size=20,
                                                                              generations=5))
        initial = [TestFixtures.bits([1, 0, 0, 0])] + [self._all_ones() for _ in range(19)]

        # Every offspring uses 4 units of a capacity of 2
        with patch.object(ga.population_manager, 'initialize_population', return_value=initial), \
                patch.object(ga.genetic_operations, 'mutate', side_effect=self._overfill):
            result = ga.run()

        self.assertAlmostEqual(result.history[0]['incumbent_cost'], 10.0)
        for entry in result.history[1:]:
            self.assertEqual(entry['feasible_count'], 0)
            self.assertAlmostEqual(entry['incumbent_cost'], 10.0)
        self.assertEqual(result.best_solution.selected, (0,))
        self.assertAlmostEqual(result.best_solution.cost, 10.0)

    def test_rerun_starts_without_previous_incumbent(self):
        objective = TestFixtures.single_diagonal_objective(size=4, value=10.0, capacity=2.0)
        ga = GeneticAlgorithm.for_kqbf(objective, TestFixtures.get_test_config(population_size=20,
                                                                              generations=5))
        first = ga.run()
        self.assertTrue(first.found)

        initial = [self._all_ones() for _ in range(20)]
        with patch.object(ga.population_manager, 'initialize_population', return_value=initial), \
                patch.object(ga.genetic_operations, 'mutate', side_effect=self._overfill):
            second = ga.run()

        self.assertFalse(second.found)
        self.assertIsNone(second.best_solution)
        self.assertIsNone(ga.incumbent)
        self.assertIsNone(ga.incumbent_chromosome)
        self.assertTrue(all(entry['incumbent_cost'] is None for entry in second.history))

    @staticmethod
    def _all_ones():
        return TestFixtures.bits([1, 1, 1, 1])

    def _overfill(self, offspring, rng):
        return [self._all_ones() for _ in offspring]

    def test_result_is_feasible_and_bounded_by_optimum(self):
        objective = TestFixtures.random_objective(size=8)
        optimum = TestFixtures.brute_force_best(objective)
        config = TestFixtures.get_test_config(population_size=40, generations=60)

        result = solve_kqbf(objective, config)

        solution = result.best_solution
        self.assertTrue(result.found)
        self.assertTrue(objective.is_feasible(solution.selected))
        self.assertAlmostEqual(objective.evaluate(solution.selected), solution.cost)
        self.assertAlmostEqual(objective.used_capacity(solution.selected), solution.used_capacity)
        self.assertLessEqual(solution.cost, optimum + 1e-9)

    def test_same_seed_same_run(self):
        objective = TestFixtures.random_objective(size=10)
        config = TestFixtures.get_test_config(population_size=16, generations=15, seed=99)

        first = solve_kqbf(objective, config)
        second = solve_kqbf(objective, config)

        self.assertEqual(first.best_solution, second.best_solution)
        self.assertEqual([entry['best_cost'] for entry in first.history],
                         [entry['best_cost'] for entry in second.history])

    def test_explicit_generator(self):
        objective = TestFixtures.random_objective(size=10)
        config = TestFixtures.get_test_config(population_size=16, generations=15, seed=None)

        first = solve_kqbf(objective, config, rng=np.random.default_rng(3))
        second = solve_kqbf(objective, config, rng=np.random.default_rng(3))

        self.assertEqual(first.best_solution, second.best_solution)

    def test_time_only_budget(self):
        config = TestFixtures.get_test_config(population_size=10, generations=None,
                                              max_time_seconds=0.2)
        result = solve_kqbf(TestFixtures.random_objective(), config)

        self.assertEqual(result.termination_reason, TERMINATION_TIME)
        self.assertGreaterEqual(result.elapsed_seconds, 0.2)
        self.assertGreater(result.generations_completed, 0)

    def test_generation_bound_wins_over_long_time_budget(self):
        config = TestFixtures.get_test_config(population_size=10, generations=3,
                                              max_time_seconds=60.0)
        result = solve_kqbf(TestFixtures.random_objective(), config)

        self.assertEqual(result.termination_reason, TERMINATION_GENERATIONS)
        self.assertEqual(result.generations_completed, 3)

    def test_variation_strategies(self):
        objective = TestFixtures.random_objective(size=8)
        optimum = TestFixtures.brute_force_best(objective)
        strategies = [
            {'use_uniform_crossover': True},
            {'adaptive_mutation': True},
            {'elite_carryover': True},
            {'use_uniform_crossover': True, 'adaptive_mutation': True, 'elite_carryover': True},
        ]
        for params in strategies:
            with self.subTest(params=params):
                config = TestFixtures.get_test_config(population_size=30, generations=30, **params)
                result = solve_kqbf(objective, config)
                self.assertTrue(result.found)
                self.assertTrue(objective.is_feasible(result.best_solution.selected))
                self.assertLessEqual(result.best_solution.cost, optimum + 1e-9)

    def test_elite_replaces_worst_offspring(self):
        objective = TestFixtures.single_diagonal_objective()
        ga = GeneticAlgorithm.for_kqbf(objective, TestFixtures.get_test_config(population_size=3,
                                                                              elite_carryover=True))
        elite = TestFixtures.bits([1, 0, 0, 0])
        offspring = [TestFixtures.bits([0, 1, 0, 0]), TestFixtures.bits([1, 1, 0, 0]),
                     TestFixtures.bits([0, 0, 1, 1])]
        ga._carry_over_elite(offspring, (elite, ga.problem.decode(elite)))

        # The first zero-cost member is the worst one
        np.testing.assert_array_equal(offspring[0], elite)
        self.assertIsNot(offspring[0], elite)

        # An elite that is not better than the worst offspring changes nothing
        unchanged = [chromosome.copy() for chromosome in offspring]
        poor = TestFixtures.bits([0, 0, 0, 1])
        ga._carry_over_elite(offspring, (poor, ga.problem.decode(poor)))
        for before, after in zip(unchanged, offspring):
            np.testing.assert_array_equal(before, after)

    def test_incumbent_updates_are_logged(self):
        objective = TestFixtures.single_diagonal_objective()
        config = TestFixtures.get_test_config(population_size=20, generations=3, verbose=True)
        with self.assertLogs('GA', level='INFO') as captured:
            solve_kqbf(objective, config)
        updates = [line for line in captured.output if 'BestSol' in line]
        self.assertTrue(updates)
        self.assertIn('(Gen. 0)', updates[0])

    def test_component_statistics(self):
        config = TestFixtures.get_test_config(population_size=10, generations=4)
        ga = GeneticAlgorithm.for_kqbf(TestFixtures.random_objective(), config)
        ga.run()

        stats = ga.get_statistics()
        self.assertEqual(stats['selection_methods']['tournaments_held'], 40)
        self.assertEqual(stats['genetic_operations']['crossover_count'], 20)
        self.assertEqual(stats['population_manager']['populations_initialized'], 1)


class TestCommandLine(unittest.TestCase):
    """Test the command-line driver."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.instance_path = os.path.join(self.temp_dir, "kqbf003")
        with open(self.instance_path, 'w') as f:
            f.write(SMALL_INSTANCE_TEXT)

    def tearDown(self):
        setup_logging(level="ERROR", log_to_file=False)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _args(self, *extra):
        return ['--instance', self.instance_path, '--generations', '10', '--population-size', '20',
                '--seed', '1', '--quiet', '--no-progress', '--log-level', 'ERROR', *extra]

    def test_run_from_instance_file(self):
        self.assertEqual(main(self._args()), 0)

    def test_run_writes_reports(self):
        output_dir = os.path.join(self.temp_dir, "results")
        self.assertEqual(main(self._args('--output-dir', output_dir, '--uniform-crossover')), 0)

        files = os.listdir(output_dir)
        self.assertTrue(any(name.endswith('_history.csv') for name in files))
        self.assertTrue(any(name.endswith('_summary.json') for name in files))
        self.assertTrue(any(name.endswith('.log') for name in files))

    def test_missing_instance_file(self):
        with self.assertRaises(FileNotFoundError):
            main(['--instance', os.path.join(self.temp_dir, "missing"), '--log-level', 'ERROR'])


if __name__ == '__main__':
    unittest.main()
