"""
Fish - X-Wing, Swordfish, Jellyfish and their larger relatives.

If a value can only be placed in N cover lines within N base lines, the
value can be removed from the cover lines outside the base lines.
"""

from typing import Tuple

from ...grid import COLUMNS, ROWS, Grid, bit, popcount
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind
from ..factory import register_producer
from ..hint import IndirectHint
from .sets import find_subsets

FISH_NAMES = {
    2: "X-Wing", 3: "Swordfish", 4: "Jellyfish", 5: "Starfish",
    6: "Whale", 7: "Leviathan", 8: "Loch Ness Monster",
}
FISH_TECHNIQUES = {
    2: SolvingTechnique.XWing, 3: SolvingTechnique.Swordfish,
    4: SolvingTechnique.Jellyfish, 5: SolvingTechnique.Starfish,
    6: SolvingTechnique.Whale, 7: SolvingTechnique.Leviathan,
    8: SolvingTechnique.LochNessMonster,
}
FISH_DIFFICULTY = {2: 3.2, 3: 3.8, 4: 5.2, 5: 5.5, 6: 5.5, 7: 5.5, 8: 5.6}


@register_producer
class Fisherman(HintProducer):
    """
    Basic fish producer.

    Args:
        degree: Number of base lines (2-8)
    """
    name = "fish"
    description = "Fish"
    kind = ProducerKind.INDIRECT

    def __init__(self, degree: int = 2):
        if degree not in FISH_NAMES:
            raise ValueError(f"Unsupported fish degree: {degree}")
        self.degree = degree
        self.description = FISH_NAMES[degree]
        self.technique = FISH_TECHNIQUES[degree]

    def parameters(self) -> Tuple:
        return (self.degree,)

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        masks = grid.potentials()
        for bases, covers in ((ROWS, COLUMNS), (COLUMNS, ROWS)):
            for value in range(1, 17):
                if accu.should_stop():
                    return
                value_bit = bit(value)
                # Cover positions of the value in every base line
                lines = []
                for base in bases:
                    pos = 0
                    for p, i in enumerate(base.indices):
                        if masks[i] & value_bit:
                            pos |= 1 << p
                    if 2 <= popcount(pos) <= self.degree:
                        lines.append((base, pos))
                if len(lines) < self.degree:
                    continue
                combos = find_subsets([pos for _base, pos in lines], self.degree, accu.should_stop)
                for combo in combos:
                    base_set = [lines[k][0] for k in combo]
                    cover_mask = 0
                    for k in combo:
                        cover_mask |= lines[k][1]
                    cover_set = [covers[p] for p in range(16) if cover_mask >> p & 1]
                    base_cells = {i for base in base_set for i in base.indices}
                    removable = {
                        i: value_bit for cover in cover_set for i in cover.indices
                        if i not in base_cells and masks[i] & value_bit
                    }
                    if removable:
                        accu.add(IndirectHint.create(
                            rule=self, name=FISH_NAMES[self.degree],
                            difficulty=FISH_DIFFICULTY[self.degree],
                            removable=removable, regions=tuple(base_set + cover_set),
                        ))
