"""
Logging for the kQBF Genetic Algorithm

One process-wide logger with a coloured console handler and an optional
timestamped log file. Messages take keyword context that is rendered as
``message | key=value | ...``.
"""

import copy
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import psutil

from ga_constants import LoggingConstants, bytes_to_mb


class GAFormatter(logging.Formatter):
    """Formatter that colours the level name on terminals."""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        self.use_colors = use_colors and sys.stdout.isatty()
        layout = '%(levelname)-8s | %(name)s | %(message)s'
        if include_timestamp:
            super().__init__('[%(asctime)s] ' + layout, '%H:%M:%S')
        else:
            super().__init__(layout)

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        if color:
            # Records are shared between handlers; color a copy only
            record = copy.copy(record)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class GALogger:
    """
    Logger facade used by every component of the genetic algorithm.

    Wraps a named ``logging.Logger`` that does not propagate to the root
    logger, so repeated setup never duplicates output.
    """

    def __init__(self, name: str = "GA", level: str = LoggingConstants.DEFAULT_LOG_LEVEL,
                 log_to_file: bool = True, output_dir: str = LoggingConstants.DEFAULT_LOG_DIR,
                 console_colors: bool = True):
        """
        Args:
            name: Name of the underlying logger
            level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_to_file: Also write every level to a file in ``output_dir``
            output_dir: Directory of the log file
            console_colors: Colour level names when writing to a terminal
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self.logger.propagate = False
        self.log_file = None

        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(self.logger.level)
        console.setFormatter(GAFormatter(use_colors=console_colors, include_timestamp=False))
        self.logger.addHandler(console)

        if log_to_file:
            self._add_file_handler(Path(output_dir))

    def _add_file_handler(self, log_dir: Path):
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f"ga_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        handler = logging.FileHandler(log_path)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(GAFormatter(use_colors=False, include_timestamp=True))
        self.logger.addHandler(handler)
        self.log_file = str(log_path)

    @staticmethod
    def _render(message: str, exception: Optional[BaseException] = None, **context) -> str:
        parts = [message]
        parts.extend(f"{key}={value}" for key, value in context.items())
        if exception is not None:
            parts.append(f"Exception: {type(exception).__name__}: {exception}")
        return " | ".join(parts)

    def debug(self, message: str, **context):
        self.logger.debug(self._render(message, **context))

    def info(self, message: str, **context):
        self.logger.info(self._render(message, **context))

    def warning(self, message: str, **context):
        self.logger.warning(self._render(message, **context))

    def error(self, message: str, exception: Exception = None, **context):
        self.logger.error(self._render(message, exception, **context))

    def critical(self, message: str, exception: Exception = None, **context):
        self.logger.critical(self._render(message, exception, **context))

    # Run events

    def log_config_summary(self, config):
        self.info("GA Configuration loaded",
                  population=config.population_size,
                  generations=config.generations,
                  max_time=config.max_time_seconds,
                  mutation_rate=config.mutation_rate,
                  crossover=config.crossover_strategy,
                  mutation=config.mutation_strategy,
                  elite_carryover=config.elite_carryover)

    def log_generation_complete(self, generation: int, best_cost: Optional[float],
                                time_taken: float):
        """Debug line per generation with the resident memory of the process."""
        memory_mb = bytes_to_mb(psutil.Process().memory_info().rss)
        self.debug(f"Generation {generation} complete",
                   best_cost="n/a" if best_cost is None else f"{best_cost:.4f}",
                   time_taken=f"{time_taken:.3f}s",
                   memory=f"{memory_mb:.1f}MB")

    def log_incumbent_update(self, generation: int, solution):
        """Report a new best feasible solution."""
        self.info(f"(Gen. {generation}) BestSol = {solution}")

    def log_termination(self, generation: int, reason: str, elapsed: float):
        self.info(f"Search stopped at generation {generation}",
                  reason=reason, elapsed=f"{elapsed:.2f}s")

    def log_no_feasible_solution(self, generations: int):
        self.warning("No feasible solution found", generations=generations)


_global_logger: Optional[GALogger] = None


def get_logger(name: str = "GA") -> GALogger:
    """
    Return the process-wide logger, creating a console-only one on first use.

    ``name`` is only used when the logger does not exist yet.
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = GALogger(name, log_to_file=False)
    return _global_logger


def setup_logging(level: str = LoggingConstants.DEFAULT_LOG_LEVEL, log_to_file: bool = True,
                  output_dir: str = LoggingConstants.DEFAULT_LOG_DIR,
                  console_colors: bool = True) -> GALogger:
    """
    (Re)configure the process-wide logger.

    Returns:
        The new GALogger, also returned by later ``get_logger`` calls
    """
    global _global_logger
    _global_logger = GALogger(level=level, log_to_file=log_to_file,
                              output_dir=output_dir, console_colors=console_colors)
    return _global_logger
