"""
Unique Rectangle (type 1).

Four empty cells at the corners of a rectangle spanning exactly two blocks
cannot all be restricted to the same two values {x,y}, or x and y could be
swapped and the puzzle would not have a unique solution. If three corners
hold exactly {x,y}, x and y can be removed from the fourth.
"""

from itertools import combinations

from ...grid import BLOCK_SIZE, SIZE, Grid, block_number, popcount
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind
from ..factory import register_producer
from ..hint import IndirectHint


@register_producer
class UniqueLoops(HintProducer):
    name = "unique_loop"
    description = "Unique Rectangles"
    kind = ProducerKind.INDIRECT
    technique = SolvingTechnique.UniqueLoop

    DIFFICULTY = 4.5

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        values = grid.values()
        masks = grid.potentials()
        for y1, y2 in combinations(range(SIZE), 2):
            if accu.should_stop():
                return
            same_band = y1 // BLOCK_SIZE == y2 // BLOCK_SIZE
            for x1, x2 in combinations(range(SIZE), 2):
                same_stack = x1 // BLOCK_SIZE == x2 // BLOCK_SIZE
                if same_band == same_stack:
                    continue
                corners = (y1 * SIZE + x1, y1 * SIZE + x2, y2 * SIZE + x1, y2 * SIZE + x2)
                if any(values[i] for i in corners):
                    continue
                if len({block_number(i) for i in corners}) != 2:
                    continue
                self._check(masks, corners, accu)

    def _check(self, masks, corners, accu: HintsAccumulator) -> None:
        pairs = [i for i in corners if popcount(masks[i]) == 2]
        if len(pairs) != 3 or len({masks[i] for i in pairs}) != 1:
            return
        pair_mask = masks[pairs[0]]
        target = next(i for i in corners if i not in pairs)
        if masks[target] & pair_mask != pair_mask:
            return
        accu.add(IndirectHint.create(
            rule=self, name="Unique Rectangle type 1", difficulty=self.DIFFICULTY,
            removable={target: pair_mask},
        ))
