"""
Reporting and I/O Module

Handles per-generation statistics and result export for genetic algorithm
runs.

Features:
- Per-generation cost statistics and feasibility counts
- Incumbent history tracking
- CSV history export and JSON run summary
"""

import csv
import json
import os
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from ga_components.solution import Solution
from ga_logging import get_logger


class GAReporter:
    """
    Reporting and I/O manager for genetic algorithm runs.

    Statistics are always kept in memory; files are only written when an
    output directory is configured.
    """

    def __init__(self, output_dir: Optional[str] = None, experiment_name: str = None,
                 cost_sign: float = 1.0):
        """
        Initialize GA reporter.

        Args:
            output_dir: Directory for output files (None keeps everything in memory)
            experiment_name: Name of the experiment (auto-generated if None)
            cost_sign: Factor turning engine costs into reported values
        """
        self.output_dir = output_dir
        self.cost_sign = cost_sign
        self.experiment_name = experiment_name or f"ga_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.logger = get_logger("Reporter")

        if self.output_dir:
            os.makedirs(self.output_dir, exist_ok=True)

        self.start_time = None
        self.run_config: Dict[str, Any] = {}
        self.generation_data: List[Dict[str, Any]] = []
        self.incumbent_history: List[Optional[float]] = []

    def start_run(self, run_config: Dict[str, Any]):
        """Start a new run and remember its configuration."""
        self.start_time = time.time()
        self.run_config = dict(run_config)
        self.generation_data = []
        self.incumbent_history = []

    def record_generation(self, generation: int, solutions: List[Solution],
                          feasible_count: int, incumbent: Optional[Solution]) -> Dict[str, Any]:
        """
        Record statistics of one generation.

        Args:
            generation: Generation number (0 is the initial population)
            solutions: Decoded population
            feasible_count: Number of members satisfying the capacity constraint
            incumbent: Best feasible solution so far (engine sign), or None

        Returns:
            The recorded entry, with every cost in the reported sign. Best
            and worst follow the engine's minimizing order.
        """
        costs = [solution.cost for solution in solutions]
        incumbent_cost = self._reported(incumbent.cost) if incumbent is not None else None

        generation_info = {
            'generation': generation,
            'best_cost': self._reported(min(costs)) if costs else None,
            'avg_cost': self._reported(sum(costs) / len(costs)) if costs else None,
            'worst_cost': self._reported(max(costs)) if costs else None,
            'feasible_count': feasible_count,
            'incumbent_cost': incumbent_cost,
            'elapsed': time.time() - self.start_time if self.start_time else 0.0
        }

        self.generation_data.append(generation_info)
        self.incumbent_history.append(incumbent_cost)
        return generation_info

    def _reported(self, cost: float) -> float:
        # Adding 0.0 normalizes -0.0
        return self.cost_sign * cost + 0.0

    def export_history(self, filename: str = None) -> Optional[str]:
        """
        Export generation statistics to CSV.

        Args:
            filename: Output filename (auto-generated inside output_dir if None)

        Returns:
            Path to exported file, or None when there is nowhere to write
        """
        if filename is None:
            if not self.output_dir:
                return None
            filename = os.path.join(self.output_dir, f"{self.experiment_name}_history.csv")

        fieldnames = ['generation', 'best_cost', 'avg_cost', 'worst_cost',
                      'feasible_count', 'incumbent_cost', 'elapsed']
        with open(filename, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames)
            writer.writeheader()
            for gen_data in self.generation_data:
                writer.writerow(gen_data)

        return filename

    def save_run_summary(self, result: Any, filename: str = None) -> Optional[str]:
        """
        Save a JSON summary of a finished run.

        Args:
            result: RunResult returned by the engine
            filename: Output filename (auto-generated inside output_dir if None)

        Returns:
            Path to the summary, or None when there is nowhere to write
        """
        if filename is None:
            if not self.output_dir:
                return None
            filename = os.path.join(self.output_dir, f"{self.experiment_name}_summary.json")

        summary_data = {
            'experiment_name': self.experiment_name,
            'end_time': datetime.now().isoformat(),
            'configuration': self.run_config,
            'result': result.to_dict(),
            'incumbent_history': self.incumbent_history
        }

        with open(filename, 'w') as f:
            json.dump(summary_data, f, indent=2)

        self.logger.debug("Run summary saved", file=filename)
        return filename

    def generate_progress_report(self) -> Dict[str, Any]:
        """
        Generate current progress report.

        Returns:
            Progress report dictionary
        """
        if not self.generation_data:
            return {'status': 'No data available'}

        latest_gen = self.generation_data[-1]
        return {
            'current_generation': latest_gen['generation'],
            'elapsed_time_seconds': latest_gen['elapsed'],
            'incumbent_cost': latest_gen['incumbent_cost'],
            'current_best_cost': latest_gen['best_cost'],
            'current_avg_cost': latest_gen['avg_cost'],
            'feasible_count': latest_gen['feasible_count'],
            'generations_recorded': len(self.generation_data)
        }
