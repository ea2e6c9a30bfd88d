"""
Reporting Tests

Tests in-memory generation statistics and CSV/JSON export.
"""

import csv
import json
import os
import shutil
import sys
import tempfile
import unittest

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tests.test_fixtures import TestFixtures
from ga_components.reporting import GAReporter
from ga_components.solution import Solution
from genetic_algorithm import RunResult, TERMINATION_GENERATIONS


class TestGAReporter(unittest.TestCase):
    """Test GAReporter."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.solutions = [Solution((0,), -10.0, 1.0), Solution((1,), 0.0, 1.0),
                          Solution((0, 1, 2), -10.0, 3.0)]

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_record_generation(self):
        reporter = GAReporter()
        reporter.start_run({'population_size': 3})
        entry = reporter.record_generation(0, self.solutions, 2, self.solutions[0])

        self.assertEqual(entry['generation'], 0)
        self.assertAlmostEqual(entry['best_cost'], -10.0)
        self.assertAlmostEqual(entry['worst_cost'], 0.0)
        self.assertAlmostEqual(entry['avg_cost'], -20.0 / 3)
        self.assertEqual(entry['feasible_count'], 2)
        self.assertAlmostEqual(entry['incumbent_cost'], -10.0)
        self.assertEqual(reporter.incumbent_history, [-10.0])

    def test_record_generation_in_reported_sign(self):
        reporter = GAReporter(cost_sign=-1.0)
        reporter.start_run({})
        entry = reporter.record_generation(0, self.solutions, 2, self.solutions[0])

        # Best and worst keep the minimizing order, values are flipped
        self.assertAlmostEqual(entry['best_cost'], 10.0)
        self.assertEqual(entry['worst_cost'], 0.0)
        self.assertAlmostEqual(entry['avg_cost'], 20.0 / 3)
        self.assertAlmostEqual(entry['incumbent_cost'], 10.0)
        self.assertEqual(reporter.incumbent_history, [10.0])

    def test_record_without_incumbent(self):
        reporter = GAReporter()
        reporter.start_run({})
        entry = reporter.record_generation(0, self.solutions, 0, None)
        self.assertIsNone(entry['incumbent_cost'])

        report = reporter.generate_progress_report()
        self.assertEqual(report['current_generation'], 0)
        self.assertEqual(report['generations_recorded'], 1)

    def test_empty_progress_report(self):
        self.assertEqual(GAReporter().generate_progress_report(), {'status': 'No data available'})

    def test_no_output_dir_writes_nothing(self):
        reporter = GAReporter()
        reporter.start_run({})
        reporter.record_generation(0, self.solutions, 2, None)
        self.assertIsNone(reporter.export_history())
        result = RunResult(None, 0, 0.0, TERMINATION_GENERATIONS)
        self.assertIsNone(reporter.save_run_summary(result))

    def test_export_history_csv(self):
        reporter = GAReporter(output_dir=self.temp_dir, experiment_name="unit")
        reporter.start_run({})
        for generation in range(3):
            reporter.record_generation(generation, self.solutions, 2, self.solutions[0])

        path = reporter.export_history()
        self.assertEqual(path, os.path.join(self.temp_dir, "unit_history.csv"))
        with open(path, newline='') as f:
            rows = list(csv.DictReader(f))
        self.assertEqual(len(rows), 3)
        self.assertEqual(rows[2]['generation'], '2')
        self.assertEqual(float(rows[0]['incumbent_cost']), -10.0)

    def test_save_run_summary_json(self):
        config = TestFixtures.get_test_config()
        reporter = GAReporter(output_dir=self.temp_dir, experiment_name="unit")
        reporter.start_run(config.to_dict())
        reporter.record_generation(0, self.solutions, 2, self.solutions[0])

        result = RunResult(Solution((0,), 10.0, 1.0), 5, 0.25, TERMINATION_GENERATIONS)
        path = reporter.save_run_summary(result)
        with open(path) as f:
            data = json.load(f)

        self.assertEqual(data['experiment_name'], "unit")
        self.assertEqual(data['configuration']['population_size'], 20)
        self.assertTrue(data['result']['found'])
        self.assertEqual(data['result']['best_solution']['selected'], [0])
        self.assertEqual(data['result']['termination_reason'], TERMINATION_GENERATIONS)
        self.assertEqual(data['incumbent_history'], [-10.0])


if __name__ == '__main__':
    unittest.main()
