"""
Singles - Naked Single and Hidden Single.
"""

from typing import Set, Tuple

from ...grid import BLOCKS, COLUMNS, REGIONS, ROWS, Grid, bit, first_value, popcount
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind, value_positions
from ..factory import register_producer
from ..hint import DirectHint


@register_producer
class NakedSingle(HintProducer):
    """
    A cell with exactly one potential value must hold that value.
    """
    name = "naked_single"
    description = "Naked Singles"
    kind = ProducerKind.DIRECT
    technique = SolvingTechnique.NakedSingle

    DIFFICULTY = 2.3

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        values = grid.values()
        masks = grid.potentials()
        for index in range(256):
            if accu.should_stop():
                return
            if values[index] == 0 and popcount(masks[index]) == 1:
                accu.add(DirectHint(
                    rule=self, name="Naked Single", difficulty=self.DIFFICULTY,
                    cell=index, value=first_value(masks[index]),
                ))


@register_producer
class HiddenSingle(HintProducer):
    """
    A value that fits in only one cell of a region must go there.

    Full houses (last empty cell of a region) are reported first, then
    hidden singles in blocks, then in rows and columns.
    """
    name = "hidden_single"
    description = "Hidden Singles"
    kind = ProducerKind.DIRECT
    technique = SolvingTechnique.HiddenSingle

    FULL_HOUSE = 1.0
    IN_BLOCK = 1.2
    IN_LINE = 1.5

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        values = grid.values()
        masks = grid.potentials()
        found: Set[Tuple[int, int]] = set()

        # Last empty cell of a region
        for region in REGIONS:
            empties = [i for i in region.indices if values[i] == 0]
            if len(empties) != 1:
                continue
            index = empties[0]
            mask = masks[index]
            if popcount(mask) != 1:
                continue
            self._add(accu, found, index, first_value(mask), self.FULL_HOUSE, region)
            if accu.should_stop():
                return

        for regions, difficulty in ((BLOCKS, self.IN_BLOCK), (ROWS + COLUMNS, self.IN_LINE)):
            for region in regions:
                for value in range(1, 17):
                    if accu.should_stop():
                        return
                    positions = value_positions(masks, region, bit(value))
                    if len(positions) == 1:
                        self._add(accu, found, positions[0], value, difficulty, region)

    def _add(self, accu, found, index, value, difficulty, region) -> None:
        if (index, value) in found:
            return
        found.add((index, value))
        accu.add(DirectHint(
            rule=self, name="Hidden Single", difficulty=difficulty,
            cell=index, value=value, regions=(region,),
        ))
