"""
Bivalue Universal Grave (type 1).

If every empty cell but one holds exactly two potential values, and every
value appears exactly twice in each region where it is still possible,
once the extra value of the trivalue cell is discounted, the grid would
have several solutions without that extra value. The trivalue cell must
therefore take it.
"""

from ...grid import REGIONS, Grid, bit, mask_values, popcount
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind, value_positions
from ..factory import register_producer
from ..hint import IndirectHint


@register_producer
class BivalueUniversalGrave(HintProducer):
    name = "bug"
    description = "Bivalue Universal Grave"
    kind = ProducerKind.INDIRECT
    technique = SolvingTechnique.BivalueUniversalGrave

    DIFFICULTY = 5.6

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        values = grid.values()
        masks = grid.potentials()
        extra = None
        for index in range(256):
            if values[index]:
                continue
            count = popcount(masks[index])
            if count == 2:
                continue
            if count != 3 or extra is not None:
                return
            extra = index
        if extra is None or accu.should_stop():
            return

        for value in mask_values(masks[extra]):
            after = list(masks)
            after[extra] &= ~bit(value)
            if self._is_grave(after):
                accu.add(IndirectHint.create(
                    rule=self, name=self.description, difficulty=self.DIFFICULTY,
                    removable={extra: masks[extra] & ~bit(value)},
                    cell=extra, value=value,
                ))
                return

    @staticmethod
    def _is_grave(masks) -> bool:
        for region in REGIONS:
            for value in range(1, 17):
                if len(value_positions(masks, region, bit(value))) not in (0, 2):
                    return False
        return True
