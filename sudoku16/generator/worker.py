"""
Generator Worker Module - Background puzzle generation.

Runs the Generator in a thread and reports through plain callbacks, so
that a caller (the CLI, or any UI) can stay responsive and stop the run.
"""

import logging
import threading
from random import Random
from typing import Callable, List, Optional, Sequence

from ..grid import Grid
from ..settings import Settings
from ..solver import SolverContext
from .generator import Generator
from .symmetry import Symmetry

# Configure module logger
logger = logging.getLogger(__name__)


class GeneratorWorker(threading.Thread):
    """
    Background worker thread generating one or more puzzles.

    Callbacks are invoked from the worker thread:
        on_status(str): Worker status changes ("Running", "Finished", "Stopped")
        on_generated(Grid | None): A puzzle was generated (None if stopped)
        on_error(str): An unexpected error ended the run

    Example:
        worker = GeneratorWorker([Symmetry.Full], 0.0, 20.0,
                                 on_generated=puzzles.append)
        worker.start()
        # ...
        worker.request_stop()
        worker.join()
    """

    def __init__(self, symmetries: Sequence[Symmetry], min_difficulty: float,
                 max_difficulty: float, settings: Optional[Settings] = None,
                 count: int = 1, seed: Optional[int] = None,
                 on_status: Optional[Callable[[str], None]] = None,
                 on_generated: Optional[Callable[[Optional[Grid]], None]] = None,
                 on_error: Optional[Callable[[str], None]] = None):
        """
        Initialize the worker.

        Args:
            symmetries: Allowed symmetries
            min_difficulty: Minimum rating
            max_difficulty: Maximum rating
            settings: Techniques used to rate candidates
            count: Number of puzzles to generate
            seed: Seed of the random source, None for a random one
        """
        super().__init__(name="GeneratorWorker", daemon=True)
        self.symmetries: List[Symmetry] = list(symmetries)
        self.min_difficulty = min_difficulty
        self.max_difficulty = max_difficulty
        self.count = count
        self.context = SolverContext()
        self._generator = Generator(settings, self.context)
        self._random = Random(seed)
        self._running = False
        self._on_status = on_status
        self._on_generated = on_generated
        self._on_error = on_error

    def run(self):
        """Generate puzzles until the count is reached or a stop is requested."""
        self._running = True
        logger.info("Generator worker started")
        self._emit_status("Running")
        produced = 0
        try:
            while produced < self.count and not self.context.is_cancelled():
                grid = self._generator.generate(
                    self.symmetries, self.min_difficulty, self.max_difficulty, self._random)
                if self._on_generated is not None:
                    self._on_generated(grid)
                if grid is None:
                    break
                produced += 1
        except Exception as e:
            logger.exception("Error in generator worker")
            if self._on_error is not None:
                self._on_error(str(e))
        finally:
            self._running = False
            status = "Stopped" if self.context.is_cancelled() else "Finished"
            logger.info(f"Generator worker {status.lower()} after {produced} puzzle(s)")
            self._emit_status(status)

    def request_stop(self):
        """Request the worker to stop at the next checkpoint."""
        self._generator.interrupt()

    def is_running(self) -> bool:
        """Check if the worker is currently generating."""
        return self._running

    def _emit_status(self, status: str) -> None:
        if self._on_status is not None:
            self._on_status(status)
