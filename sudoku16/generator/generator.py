"""
Generator Module - Random puzzle generation under symmetry constraints.

A candidate puzzle is built by filling an empty grid with a random
solution and then clearing clues orbit by orbit (so that the clue pattern
keeps the chosen symmetry) for as long as the solution stays unique.
Candidates are rated by the Solver until one falls within the requested
difficulty range.
"""

import logging
from random import Random
from typing import Optional, Sequence, Set

from ..grid import CELL_COUNT, SIZE, Grid
from ..settings import Settings
from ..solver import Solver, SolverContext, format_difficulty
from ..solver.checks import BruteForceAnalysis
from .symmetry import Symmetry

logger = logging.getLogger(__name__)


class Generator:
    """
    Puzzle generator.

    Args:
        settings: Techniques used to rate candidates, defaults if None
        context: Cancellation shared with the rating Solver and the oracle
        oracle: Solution counter, a BruteForceAnalysis if None

    Example:
        generator = Generator()
        grid = generator.generate([Symmetry.Rotational180], 4.0, 6.0)
    """

    def __init__(self, settings: Optional[Settings] = None,
                 context: Optional[SolverContext] = None,
                 oracle: Optional[BruteForceAnalysis] = None):
        self.settings = settings if settings is not None else Settings()
        self.context = context if context is not None else SolverContext()
        self.oracle = oracle if oracle is not None else BruteForceAnalysis(self.context)

    def interrupt(self) -> None:
        """Stop any running generation at its next checkpoint."""
        logger.info("Generation interrupted")
        self.context.cancel()

    @property
    def is_interrupted(self) -> bool:
        return self.context.is_cancelled()

    def generate(self, symmetries: Sequence[Symmetry], min_difficulty: float,
                 max_difficulty: float, rnd: Optional[Random] = None) -> Optional[Grid]:
        """
        Generate a puzzle whose difficulty lies within [min, max].

        The first symmetry is picked at random, the next ones round-robin.
        This only returns once a puzzle is found or the generator is
        interrupted.

        Args:
            symmetries: Allowed symmetries
            min_difficulty: Minimum rating
            max_difficulty: Maximum rating
            rnd: Random source, a fresh one if None

        Returns:
            Puzzle with its clues fixed as givens, or None if interrupted

        Raises:
            ValueError: If no symmetry is given
        """
        symmetries = list(symmetries)
        if not symmetries:
            raise ValueError("No symmetries given")
        rnd = rnd if rnd is not None else Random()
        index = rnd.randrange(len(symmetries))
        attempt = 0
        while True:
            symmetry = symmetries[index]
            index = (index + 1) % len(symmetries)
            attempt += 1

            grid = self.generate_candidate(rnd, symmetry)
            if grid is None or self.is_interrupted:
                logger.info("Stopped")
                return None

            copy = grid.copy()
            solver = Solver(copy, self.settings, self.context)
            solver.rebuild_potential_values()
            difficulty = solver.analyse_difficulty(min_difficulty, max_difficulty)
            logger.info(grid.to_line())
            logger.info(f"ED={format_difficulty(difficulty)}")
            self.context.report_progress(
                0.0, f"Attempt {attempt}: ED={format_difficulty(difficulty)}")

            if self.is_interrupted:
                logger.info("Stopped")
                return None
            if min_difficulty <= difficulty <= max_difficulty:
                grid.fix_givens()
                return grid

    def generate_candidate(self, rnd: Random, symmetry: Symmetry) -> Optional[Grid]:
        """
        Generate a minimal puzzle with a unique solution and the given symmetry.

        Args:
            rnd: Random source
            symmetry: Symmetry of the clue pattern

        Returns:
            The puzzle, or None if no solution could be built or the
            generator was interrupted
        """
        grid = Grid()
        if not self.oracle.solve_random(grid, rnd, self.context):
            return None
        if self.is_interrupted:
            return None
        solution = grid.copy()

        sweeps = 0
        success = True
        while success:
            success = False
            sweeps += 1
            order = list(range(CELL_COUNT))
            rnd.shuffle(order)
            start = rnd.randrange(CELL_COUNT)
            frozen: Set[int] = set()
            for step in range(CELL_COUNT):
                index = order[(start + step) % CELL_COUNT]
                if index not in frozen and self._try_remove(grid, solution, symmetry, index, frozen):
                    success = True
                if self.is_interrupted:
                    return None
            logger.debug(f"Sweep {sweeps} done, {grid.count_filled()} clues left")

        logger.info(f"{grid.count_filled()} clues, got new sudoku")
        return grid

    def _try_remove(self, grid: Grid, solution: Grid, symmetry: Symmetry,
                    index: int, frozen: Set[int]) -> bool:
        """
        Clear the orbit of a cell and keep the change if the solution stays unique.

        Returns:
            True if at least one clue was removed for good
        """
        y, x = divmod(index, SIZE)
        removed = [
            (px, py) for px, py in symmetry.get_points(x, y)
            if grid.get_cell_value(px, py) != 0
        ]
        if not removed:
            return False
        for px, py in removed:
            grid.set_cell_value(px, py, 0)

        if self.oracle.count_solutions(solution, grid, self.context) == 1:
            clues = grid.count_filled()
            logger.debug(", ".join(f"r{py + 1}c{px + 1}=0" for px, py in removed)
                         + f" ({clues} clues)")
            self.context.report_progress(100.0 * (CELL_COUNT - clues) / CELL_COUNT,
                                         f"{clues} clues")
            return True

        for px, py in removed:
            grid.set_cell_value(px, py, solution.get_cell_value(px, py))
            frozen.add(py * SIZE + px)
        return False
