"""
Validity checks - Validators and warnings about the grid itself.

NoDoubles runs with every hint search. The warnings only run when no
other hint was found.
"""

from ...grid import REGIONS, Grid, bit, popcount
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind
from ..factory import register_producer
from ..hint import WarningHint

# Below this many givens a 16x16 puzzle is not considered uniquely solvable
MIN_GIVENS = 32

# With fewer distinct values, two missing values could be swapped
MIN_DISTINCT_VALUES = 15


@register_producer
class NoDoubles(HintProducer):
    """
    Reports a value placed twice in a region, an empty cell without any
    potential value, or a value that has no place left in a region.
    """
    name = "no_doubles"
    description = "No doubles"
    kind = ProducerKind.WARNING

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        values = grid.values()
        masks = grid.potentials()
        for region in REGIONS:
            placed = 0
            possible = 0
            for index in region.indices:
                value = values[index]
                if value:
                    if placed & bit(value):
                        accu.add(WarningHint(
                            rule=self, name="Invalid Sudoku", cell=index, value=value,
                            message=f"The value {value} appears more than once in the {region}",
                            regions=(region,),
                        ))
                        return
                    placed |= bit(value)
                else:
                    possible |= masks[index]
            for value in range(1, 17):
                if not (placed | possible) & bit(value):
                    accu.add(WarningHint(
                        rule=self, name="Invalid Sudoku", value=value,
                        message=f"The value {value} cannot be placed in the {region}",
                        regions=(region,),
                    ))
                    return
        for index in range(256):
            if values[index] == 0 and masks[index] == 0:
                accu.add(WarningHint(
                    rule=self, name="Invalid Sudoku", cell=index,
                    message="A cell has no potential value left",
                ))
                return


@register_producer
class NumberOfFilledCells(HintProducer):
    name = "number_of_filled_cells"
    description = "Number of givens"
    kind = ProducerKind.WARNING

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        count = grid.count_filled()
        if count < MIN_GIVENS:
            accu.add(WarningHint(
                rule=self, name="Missing givens",
                message=f"The Sudoku has {count} givens; "
                        f"at least {MIN_GIVENS} are needed for a unique solution",
            ))


@register_producer
class NumberOfValues(HintProducer):
    name = "number_of_values"
    description = "Number of distinct values"
    kind = ProducerKind.WARNING

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        used = 0
        for value in grid.values():
            if value:
                used |= bit(value)
        count = popcount(used)
        if count < MIN_DISTINCT_VALUES:
            accu.add(WarningHint(
                rule=self, name="Missing values",
                message=f"The Sudoku uses {count} distinct values; at least "
                        f"{MIN_DISTINCT_VALUES} are needed for a unique solution",
            ))
