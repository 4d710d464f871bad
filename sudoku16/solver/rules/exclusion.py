"""
Aligned Exclusion - Aligned Pair and Aligned Triplet Exclusion.

For a few base cells sharing a region with the first one, enumerate the
combinations of their potential values. A combination is impossible if two
base cells that see each other get the same value, or if it uses up every
potential value of an "excluding" cell that sees all base cells. Values
that appear in no possible combination can be removed.
"""

from itertools import combinations, product
from typing import List, Tuple

from ...grid import PEER_SETS, PEERS, Grid, bit, mask_values, popcount
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind
from ..factory import register_producer
from ..hint import IndirectHint

# Base cells with more potential values are skipped
MAX_BASE_VALUES = 6


@register_producer
class AlignedExclusion(HintProducer):
    """
    Aligned exclusion producer.

    Args:
        degree: Number of base cells, 2 (pairs) or 3 (triplets)
    """
    name = "aligned_exclusion"
    description = "Aligned Exclusion"
    kind = ProducerKind.INDIRECT

    def __init__(self, degree: int = 2):
        if degree not in (2, 3):
            raise ValueError(f"Unsupported aligned exclusion degree: {degree}")
        self.degree = degree
        if degree == 2:
            self.description = "Aligned Pair Exclusion"
            self.technique = SolvingTechnique.AlignedPairExclusion
            self.difficulty = 6.2
        else:
            self.description = "Aligned Triplet Exclusion"
            self.technique = SolvingTechnique.AlignedTripletExclusion
            self.difficulty = 7.5

    def parameters(self) -> Tuple:
        return (self.degree,)

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        masks = grid.potentials()
        bases = [i for i in range(256) if 2 <= popcount(masks[i]) <= MAX_BASE_VALUES]
        base_set = set(bases)
        for first in bases:
            if accu.should_stop():
                return
            partners = [p for p in PEERS[first] if p > first and p in base_set]
            for others in combinations(partners, self.degree - 1):
                cells = (first,) + others
                self._check(masks, cells, accu)

    def _check(self, masks: List[int], cells: Tuple[int, ...], accu: HintsAccumulator) -> None:
        common = set(PEER_SETS[cells[0]])
        for cell in cells[1:]:
            common &= PEER_SETS[cell]
        excluding = [
            masks[i] for i in common
            if 2 <= popcount(masks[i]) <= self.degree
        ]
        if not excluding:
            return
        allowed = [0] * len(cells)
        for combo in product(*(mask_values(masks[c]) for c in cells)):
            if self._conflicts(cells, combo):
                continue
            used = 0
            for v in combo:
                used |= bit(v)
            if any(ex & ~used == 0 for ex in excluding):
                continue
            for k, v in enumerate(combo):
                allowed[k] |= bit(v)
        if not all(allowed):
            return
        removable = {
            c: masks[c] & ~allowed[k] for k, c in enumerate(cells)
            if masks[c] & ~allowed[k]
        }
        if removable:
            accu.add(IndirectHint.create(
                rule=self, name=self.description, difficulty=self.difficulty,
                removable=removable,
            ))

    @staticmethod
    def _conflicts(cells: Tuple[int, ...], combo: Tuple[int, ...]) -> bool:
        for a, b in combinations(range(len(cells)), 2):
            if combo[a] == combo[b] and cells[b] in PEER_SETS[cells[a]]:
                return True
        return False
