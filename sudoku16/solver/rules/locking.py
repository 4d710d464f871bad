"""
Locking - Pointing and Claiming, in direct and indirect variants.

Pointing: the cells of a block that can hold a value all lie on one line,
so the value can be removed from the rest of that line.
Claiming: the cells of a line that can hold a value all lie in one block,
so the value can be removed from the rest of that block.

The direct variant reports only the eliminations that leave a hidden
single behind, and assigns it.
"""

from typing import Dict, List, Optional, Tuple

from ...grid import BLOCKS, CELL_REGIONS, COLUMNS, ROWS, Grid, Region, bit
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind, value_positions
from ..factory import register_producer
from ..hint import IndirectHint


def _build_intersections() -> Tuple[Tuple[Region, Region, bool], ...]:
    # Blocks first (pointing), then rows and columns (claiming)
    pairs = []
    for block in BLOCKS:
        for line in ROWS + COLUMNS:
            if block.common_indices(line):
                pairs.append((block, line, True))
    for line in ROWS + COLUMNS:
        for block in BLOCKS:
            if block.common_indices(line):
                pairs.append((line, block, False))
    return tuple(pairs)


_INTERSECTIONS = _build_intersections()


@register_producer
class Locking(HintProducer):
    """
    Pointing and Claiming producer.

    Args:
        direct: Only report eliminations that produce a hidden single
    """
    name = "locking"
    description = "Pointing & Claiming"
    kind = ProducerKind.INDIRECT

    POINTING = 2.6
    CLAIMING = 2.8
    DIRECT_POINTING = 1.7
    DIRECT_CLAIMING = 1.9

    def __init__(self, direct: bool = False):
        self.direct = direct
        if direct:
            self.description = "Direct Pointing"
            self.kind = ProducerKind.DIRECT
            self.technique = SolvingTechnique.DirectPointing
        else:
            self.technique = SolvingTechnique.PointingClaiming

    def parameters(self) -> Tuple:
        return (self.direct,)

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        masks = grid.potentials()
        for source, cover, pointing in _INTERSECTIONS:
            if accu.should_stop():
                return
            self._report(masks, source, cover, pointing, accu)

    def _report(self, masks: List[int], source: Region, cover: Region,
                pointing: bool, accu: HintsAccumulator) -> None:
        shared = set(source.common_indices(cover))
        for value in range(1, 17):
            value_bit = bit(value)
            positions = value_positions(masks, source, value_bit)
            if len(positions) < 2 or not all(i in shared for i in positions):
                continue
            removable = {
                i: value_bit for i in cover.indices
                if i not in shared and masks[i] & value_bit
            }
            if not removable:
                continue
            if self.direct:
                single = self._hidden_single(masks, removable, value_bit, cover)
                if single is None:
                    continue
                accu.add(IndirectHint.create(
                    rule=self,
                    name="Direct Pointing" if pointing else "Direct Claiming",
                    difficulty=self.DIRECT_POINTING if pointing else self.DIRECT_CLAIMING,
                    removable=removable, cell=single[0], value=value,
                    regions=(source, cover, single[1]),
                ))
            else:
                accu.add(IndirectHint.create(
                    rule=self,
                    name="Pointing" if pointing else "Claiming",
                    difficulty=self.POINTING if pointing else self.CLAIMING,
                    removable=removable, regions=(source, cover),
                ))

    @staticmethod
    def _hidden_single(masks: List[int], removable: Dict[int, int], value_bit: int,
                       cover: Region) -> Optional[Tuple[int, Region]]:
        """Find a region left with a single place for the value after removal."""
        after = list(masks)
        for index, mask in removable.items():
            after[index] &= ~mask
        seen = set()
        for index in sorted(removable):
            for region in CELL_REGIONS[index]:
                if region == cover or region in seen:
                    continue
                seen.add(region)
                positions = value_positions(after, region, value_bit)
                if len(positions) == 1:
                    return positions[0], region
        return None
