"""
Brute Force Analysis - Backtracking oracle for solution counting.

The search works on plain lists of values and potential masks. Before
every branching step it places all naked and hidden singles, then branches
on the empty cell with the fewest potential values (lowest index first).
Because the branching cell only depends on the grid state, a search trying
values in increasing order and one trying them in decreasing order find
the same solution if and only if the solution is unique.
"""

import logging
from random import Random
from typing import List, Optional

from ...grid import CELL_COUNT, FULL_MASK, PEERS, REGIONS, Grid, bit, mask_values, popcount
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind
from ..context import SolverContext
from ..factory import register_producer
from ..hint import WarningHint

logger = logging.getLogger(__name__)

# Search nodes between two cancellation checks
CANCEL_CHECK_INTERVAL = 64


class SearchCancelled(Exception):
    """Raised inside the search when the context is cancelled."""


def _place(values: List[int], masks: List[int], index: int, value: int) -> bool:
    values[index] = value
    masks[index] = 0
    value_bit = bit(value)
    for peer in PEERS[index]:
        if values[peer] == value:
            return False
        masks[peer] &= ~value_bit
    return True


def _propagate(values: List[int], masks: List[int]) -> bool:
    """Place naked and hidden singles until none is left; False on contradiction."""
    changed = True
    while changed:
        changed = False
        for index in range(CELL_COUNT):
            if values[index]:
                continue
            mask = masks[index]
            if mask == 0:
                return False
            if mask & (mask - 1) == 0:
                if not _place(values, masks, index, mask.bit_length()):
                    return False
                changed = True
        for region in REGIONS:
            seen = twice = placed = 0
            for index in region.indices:
                if values[index]:
                    placed |= bit(values[index])
                else:
                    twice |= seen & masks[index]
                    seen |= masks[index]
            if (seen | placed) != FULL_MASK:
                return False
            singles = seen & ~twice & ~placed
            for value in mask_values(singles):
                for index in region.indices:
                    if values[index] == 0 and masks[index] & bit(value):
                        if not _place(values, masks, index, value):
                            return False
                        changed = True
                        break
    return True


@register_producer
class BruteForceAnalysis(HintProducer):
    """
    Solution oracle, also used as a warning producer.

    get_hints() reports a warning when the grid has no solution or more
    than one.

    Args:
        context: Polled for cancellation during long searches
    """
    name = "brute_force"
    description = "Brute Force Analysis"
    kind = ProducerKind.WARNING

    def __init__(self, context: Optional[SolverContext] = None):
        self.context = context
        self._active_context = context
        self._nodes = 0

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        count = self.count_solutions(None, grid, accu.context)
        if accu.should_stop():
            return
        if count == 0:
            accu.add(WarningHint(rule=self, name="Invalid Sudoku",
                                 message="The Sudoku has no solution"))
        elif count > 1:
            accu.add(WarningHint(rule=self, name="Invalid Sudoku",
                                 message="The Sudoku has more than one solution"))

    def count_solutions(self, solution: Optional[Grid], grid: Grid,
                        context: Optional[SolverContext] = None) -> int:
        """
        Count the solutions of a grid, up to two.

        Args:
            solution: Known solution of the grid, or None (not modified)
            grid: Grid to analyse (not modified)
            context: Overrides the oracle's context for this call

        Returns:
            0, 1 or 2 (meaning two or more). A cancelled search returns 0.
        """
        try:
            start = self._initial_state(grid, context)
            if start is None:
                return 0
            first = self._search(*start, descending=False, rnd=None)
            if first is None:
                return 0
            if solution is not None and first != solution.values():
                return 2
            start = self._initial_state(grid, context)
            last = self._search(*start, descending=True, rnd=None)
        except SearchCancelled:
            logger.debug("Solution count cancelled")
            return 0
        return 1 if first == last else 2

    def find_solution(self, grid: Grid,
                      context: Optional[SolverContext] = None) -> Optional[List[int]]:
        """
        Find the first solution in search order.

        Returns:
            The 256 values of a solution, or None if there is none or the
            search was cancelled
        """
        try:
            start = self._initial_state(grid, context)
            if start is None:
                return None
            return self._search(*start, descending=False, rnd=None)
        except SearchCancelled:
            logger.debug("Solution search cancelled")
            return None

    def solve_random(self, grid: Grid, rnd: Random,
                     context: Optional[SolverContext] = None) -> bool:
        """
        Fill the grid with a random solution, trying values in random order.

        Returns:
            False if the grid has no solution or the search was cancelled
        """
        try:
            start = self._initial_state(grid, context)
            if start is None:
                return False
            result = self._search(*start, descending=False, rnd=rnd)
        except SearchCancelled:
            logger.debug("Random solve cancelled")
            return False
        if result is None:
            return False
        for index, value in enumerate(result):
            grid.set_value(index, value)
        return True

    def _initial_state(self, grid: Grid, context: Optional[SolverContext]):
        self._active_context = context if context is not None else self.context
        self._nodes = 0
        values = grid.values()
        masks = [0] * CELL_COUNT
        for index in range(CELL_COUNT):
            if values[index]:
                continue
            mask = FULL_MASK
            for peer in PEERS[index]:
                if values[peer]:
                    mask &= ~bit(values[peer])
            masks[index] = mask
        for index in range(CELL_COUNT):
            value = values[index]
            if value and any(values[peer] == value for peer in PEERS[index]):
                return None
        return values, masks

    def _search(self, values: List[int], masks: List[int], descending: bool,
                rnd: Optional[Random]) -> Optional[List[int]]:
        self._nodes += 1
        if self._nodes % CANCEL_CHECK_INTERVAL == 0:
            context = self._active_context
            if context is not None and context.is_cancelled():
                raise SearchCancelled()
        if not _propagate(values, masks):
            return None

        best = -1
        best_count = 17
        for index in range(CELL_COUNT):
            if values[index] == 0:
                count = popcount(masks[index])
                if count < best_count:
                    best, best_count = index, count
                    if count == 2:
                        break
        if best < 0:
            return values

        candidates = mask_values(masks[best])
        if rnd is not None:
            rnd.shuffle(candidates)
        elif descending:
            candidates.reverse()
        for value in candidates:
            next_values = list(values)
            next_masks = list(masks)
            if not _place(next_values, next_masks, best, value):
                continue
            result = self._search(next_values, next_masks, descending, rnd)
            if result is not None:
                return result
        return None
