"""
Sets - Naked and Hidden Pairs through Octuplets.

Naked set: N cells of a region whose potential values together are
exactly N values; those values can be removed from the region's other
cells.
Hidden set: N values of a region that fit in exactly N cells together;
those cells cannot hold any other value.
"""

from typing import Callable, List, Sequence, Tuple

from ...grid import REGIONS, Grid, Region, bit, popcount
from ...techniques import SolvingTechnique
from ..accumulator import HintsAccumulator
from ..base import HintProducer, ProducerKind, value_positions
from ..factory import register_producer
from ..hint import IndirectHint

SET_NAMES = {
    2: "Pair", 3: "Triplet", 4: "Quad", 5: "Quintuplet",
    6: "Sextuplet", 7: "Septuplet", 8: "Octuplet",
}

NAKED_DIFFICULTY = {2: 3.0, 3: 3.6, 4: 5.0, 5: 5.4, 6: 5.4, 7: 5.4, 8: 5.6}
HIDDEN_DIFFICULTY = {2: 3.4, 3: 4.0, 4: 5.4, 5: 5.4, 6: 5.4, 7: 5.4, 8: 5.6}
DIRECT_HIDDEN_DIFFICULTY = {2: 2.0, 3: 2.5, 4: 4.3}


def find_subsets(masks: Sequence[int], degree: int,
                 should_stop: Callable[[], bool]) -> List[Tuple[int, ...]]:
    """
    Find combinations of `degree` masks whose union has exactly `degree` bits.

    Args:
        masks: Candidate masks, each with 2..degree bits
        degree: Size of the combination
        should_stop: Polled between branches

    Returns:
        Index tuples into masks, in lexicographic order
    """
    found: List[Tuple[int, ...]] = []
    chosen: List[int] = []

    def search(start: int, union: int) -> None:
        if should_stop():
            return
        if len(chosen) == degree:
            if popcount(union) == degree:
                found.append(tuple(chosen))
            return
        for i in range(start, len(masks) - (degree - len(chosen)) + 1):
            merged = union | masks[i]
            if popcount(merged) > degree:
                continue
            chosen.append(i)
            search(i + 1, merged)
            chosen.pop()

    search(0, 0)
    return found


@register_producer
class NakedSet(HintProducer):
    """
    Naked set producer.

    Args:
        degree: Number of cells in the set (2-8)
    """
    name = "naked_set"
    description = "Naked Sets"
    kind = ProducerKind.INDIRECT

    def __init__(self, degree: int = 2):
        if degree not in SET_NAMES:
            raise ValueError(f"Unsupported naked set degree: {degree}")
        self.degree = degree
        self.description = f"Naked {SET_NAMES[degree]}s"
        self.technique = SolvingTechnique.from_name(f"Naked{SET_NAMES[degree]}")

    def parameters(self) -> Tuple:
        return (self.degree,)

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        values = grid.values()
        masks = grid.potentials()
        for region in REGIONS:
            if accu.should_stop():
                return
            empties = [i for i in region.indices if values[i] == 0]
            if len(empties) <= self.degree:
                continue
            cells = [i for i in empties if 2 <= popcount(masks[i]) <= self.degree]
            for combo in find_subsets([masks[i] for i in cells], self.degree, accu.should_stop):
                members = {cells[k] for k in combo}
                set_mask = 0
                for i in members:
                    set_mask |= masks[i]
                removable = {
                    i: masks[i] & set_mask for i in empties
                    if i not in members and masks[i] & set_mask
                }
                if removable:
                    accu.add(IndirectHint.create(
                        rule=self, name=f"Naked {SET_NAMES[self.degree]}",
                        difficulty=NAKED_DIFFICULTY[self.degree],
                        removable=removable, regions=(region,),
                    ))


@register_producer
class HiddenSet(HintProducer):
    """
    Hidden set producer.

    Args:
        degree: Number of values in the set (2-8)
        direct: Only report sets whose eliminations leave a hidden single
            of another value in the region, and assign it (degree 2-4)
    """
    name = "hidden_set"
    description = "Hidden Sets"
    kind = ProducerKind.INDIRECT

    def __init__(self, degree: int = 2, direct: bool = False):
        if degree not in SET_NAMES or (direct and degree not in DIRECT_HIDDEN_DIFFICULTY):
            raise ValueError(f"Unsupported hidden set degree: {degree}")
        self.degree = degree
        self.direct = direct
        prefix = "Direct Hidden" if direct else "Hidden"
        self.description = f"{prefix} {SET_NAMES[degree]}s"
        if direct:
            self.kind = ProducerKind.DIRECT
        self.technique = SolvingTechnique.from_name(f"{prefix.replace(' ', '')}{SET_NAMES[degree]}")

    def parameters(self) -> Tuple:
        return (self.degree, self.direct)

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        masks = grid.potentials()
        for region in REGIONS:
            if accu.should_stop():
                return
            self._search_region(masks, region, accu)

    def _search_region(self, masks: List[int], region: Region, accu: HintsAccumulator) -> None:
        # Position masks: bit p set if region cell p can hold the value
        positions = {}
        for value in range(1, 17):
            pos = 0
            for p, i in enumerate(region.indices):
                if masks[i] & bit(value):
                    pos |= 1 << p
            if pos:
                positions[value] = pos
        if len(positions) <= self.degree:
            return
        candidates = [v for v, pos in positions.items() if 2 <= popcount(pos) <= self.degree]
        combos = find_subsets([positions[v] for v in candidates], self.degree, accu.should_stop)
        for combo in combos:
            set_values = [candidates[k] for k in combo]
            value_mask = 0
            cell_mask = 0
            for v in set_values:
                value_mask |= bit(v)
                cell_mask |= positions[v]
            cells = [i for p, i in enumerate(region.indices) if cell_mask >> p & 1]
            removable = {i: masks[i] & ~value_mask for i in cells if masks[i] & ~value_mask}
            if not removable:
                continue
            if self.direct:
                single = self._hidden_single(masks, region, removable, value_mask)
                if single is None:
                    continue
                index, value = single
                accu.add(IndirectHint.create(
                    rule=self, name=f"Direct Hidden {SET_NAMES[self.degree]}",
                    difficulty=DIRECT_HIDDEN_DIFFICULTY[self.degree],
                    removable=removable, cell=index, value=value, regions=(region,),
                ))
            else:
                accu.add(IndirectHint.create(
                    rule=self, name=f"Hidden {SET_NAMES[self.degree]}",
                    difficulty=HIDDEN_DIFFICULTY[self.degree],
                    removable=removable, regions=(region,),
                ))

    @staticmethod
    def _hidden_single(masks: List[int], region: Region, removable, value_mask: int):
        after = list(masks)
        for index, mask in removable.items():
            after[index] &= ~mask
        for value in range(1, 17):
            if value_mask & bit(value):
                continue
            remaining = value_positions(after, region, bit(value))
            if len(remaining) == 1 and len(value_positions(masks, region, bit(value))) > 1:
                return remaining[0], value
        return None
