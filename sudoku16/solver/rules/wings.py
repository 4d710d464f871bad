"""
Wings - XY-Wing and XYZ-Wing.
"""

from itertools import combinations
from typing import Tuple

from ...grid import CELL_REGIONS, PEER_SETS, PEERS, Grid, popcount
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind
from ..factory import register_producer
from ..hint import IndirectHint


@register_producer
class XYWing(HintProducer):
    """
    XY-Wing and XYZ-Wing producer.

    XY-Wing: a bivalue pivot {x,y} sees pincers {x,z} and {y,z}; z can be
    removed from every cell seeing both pincers.
    XYZ-Wing: a trivalue pivot {x,y,z} sees the same pincers; z can be
    removed from every cell seeing the pivot and both pincers.

    Args:
        xyz: Search XYZ-Wings instead of XY-Wings
    """
    name = "xy_wing"
    description = "XY-Wing"
    kind = ProducerKind.INDIRECT

    def __init__(self, xyz: bool = False):
        self.xyz = xyz
        self.description = "XYZ-Wing" if xyz else "XY-Wing"
        self.technique = SolvingTechnique.XYZWing if xyz else SolvingTechnique.XYWing
        self.difficulty = 4.4 if xyz else 4.2

    def parameters(self) -> Tuple:
        return (self.xyz,)

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        masks = grid.potentials()
        pivot_size = 3 if self.xyz else 2
        for pivot in range(256):
            if accu.should_stop():
                return
            pivot_mask = masks[pivot]
            if popcount(pivot_mask) != pivot_size:
                continue
            wings = [
                p for p in PEERS[pivot]
                if popcount(masks[p]) == 2 and popcount(masks[p] & pivot_mask) == (2 if self.xyz else 1)
            ]
            for a, b in combinations(wings, 2):
                mask_a, mask_b = masks[a], masks[b]
                if mask_a == mask_b:
                    continue
                z_mask = mask_a & mask_b
                if popcount(z_mask) != 1:
                    continue
                if self.xyz:
                    if (mask_a | mask_b) != pivot_mask:
                        continue
                elif z_mask & pivot_mask or (mask_a | mask_b) & pivot_mask != pivot_mask:
                    continue
                targets = PEER_SETS[a] & PEER_SETS[b]
                if self.xyz:
                    targets = targets & PEER_SETS[pivot]
                removable = {
                    i: z_mask for i in sorted(targets)
                    if i != pivot and masks[i] & z_mask
                }
                if removable:
                    accu.add(IndirectHint.create(
                        rule=self, name=self.description, difficulty=self.difficulty,
                        removable=removable,
                        regions=(_shared_region(pivot, a), _shared_region(pivot, b)),
                    ))


def _shared_region(a: int, b: int):
    for region in CELL_REGIONS[a]:
        if region.contains(b):
            return region
    raise ValueError(f"Cells {a} and {b} share no region")

