"""
Analyser - Rates a puzzle by solving it and summarizing the rules used.
"""

import logging
from typing import Optional

from ...grid import Grid
from ..accumulator import HintsAccumulator
from ..asker import Asker
from ..base import HintProducer, ProducerKind
from ..hint import AnalysisInfo, WarningHint

logger = logging.getLogger(__name__)


class Analyser(HintProducer):
    """
    Solves the grid of a Solver and reports an AnalysisInfo hint.

    The Solver's grid is modified; Solver.analyse() works on a copy.

    Args:
        solver: Engine used to solve the grid
        asker: Confirmation for the advanced techniques
    """
    name = "analyser"
    description = "Analysis"
    kind = ProducerKind.WARNING

    def __init__(self, solver, asker: Optional[Asker] = None):
        self.solver = solver
        self.asker = asker

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        result = self.solver.solve(self.asker)
        if result.was_cancelled:
            logger.info("Analysis cancelled")
            return
        if not result.is_solved:
            accu.add(WarningHint(
                rule=self, name="Analysis",
                message="The Sudoku cannot be solved with the selected techniques",
            ))
            return
        named = self.solver.to_named_list(result.rules)
        accu.add(AnalysisInfo(
            rule=self, name="Analysis", difficulty=result.difficulty,
            rules=tuple(result.rules.items()),
            rule_names=tuple(named.items()),
        ))
