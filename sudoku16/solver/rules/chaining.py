"""
Chaining - Forcing chains, from simple X/Y chains to nested dynamic chains.

A candidate is a (cell, value) pair, keyed as cell * 16 + (value - 1).
Assuming a candidate ON (the cell holds the value) or OFF (it does not)
and following its implications gives a branch of ON and OFF candidates:

* static propagation only uses links of the original grid
  (ON -> peers OFF; OFF -> the other value of a bivalue cell or the other
  place of a bilocal value ON);
* dynamic propagation works on a copy of the potential values, so that
  every OFF event can create new singles;
* from level 1 upwards, other techniques are run on the propagated grid
  whenever singles are exhausted, and their eliminations feed back into the
  branch ("Dynamic (+)" with basic techniques, nested chains above).

Conclusions:

* contradiction: a branch reaching both ON and OFF for some candidate (or
  an empty cell, or a value with no place left in a region) proves the
  opposite of its assumption;
* double implication: a candidate implied both when the source is ON and
  when it is OFF holds either way;
* cell and region forcing: a candidate implied by every possible value of a
  cell, or by every place of a value in a region, holds either way.
"""

import logging
from collections import deque
from typing import Dict, List, Optional, Tuple

from ...grid import CELL_REGIONS, PEERS, REGIONS, Grid, bit, mask_values, popcount
from ...techniques import SolvingTechnique
from ..accumulator import DefaultHintsAccumulator, HintsAccumulator
from ..base import HintProducer, ProducerKind
from ..factory import create_technique_producer, register_producer
from ..hint import Hint, IndirectHint

logger = logging.getLogger(__name__)


def candidate_key(cell: int, value: int) -> int:
    return cell * 16 + value - 1


def split_key(key: int) -> Tuple[int, int]:
    cell, offset = divmod(key, 16)
    return cell, offset + 1


def length_difficulty(complexity: int) -> float:
    """
    Extra difficulty for long chains.

    Every time the chain length passes the next threshold (4, 6, 8, 12,
    16, 24, ...) another 0.1 is added.
    """
    added = 0.0
    ceil = 4
    length = complexity - 2
    is_odd = False
    while length > ceil:
        added += 0.1
        if is_odd:
            ceil = ceil * 4 // 3
        else:
            ceil = ceil * 3 // 2
        is_odd = not is_odd
    return added


class Branch:
    """
    Implications of one assumption.

    Attributes:
        on: Candidates implied ON, with their distance from the assumption
        off: Candidates implied OFF, with their distance
        contradiction: True if the assumption leads to a contradiction
        complexity: Length of the contradiction, when there is one
    """
    __slots__ = ("on", "off", "contradiction", "complexity", "depth")

    def __init__(self):
        self.on: Dict[int, int] = {}
        self.off: Dict[int, int] = {}
        self.contradiction = False
        self.complexity = 0
        self.depth = 0


class Propagator:
    """
    Follows implications on a fixed grid state.

    Args:
        grid: Grid the assumptions are made on
        dynamic: Use dynamic propagation
        inner: Producers run on the propagated grid when singles run out
        accu: Polled for cancellation
    """

    def __init__(self, grid: Grid, dynamic: bool, inner: List[HintProducer],
                 accu: HintsAccumulator):
        self.grid = grid
        self.values = grid.values()
        self.masks = grid.potentials()
        self.dynamic = dynamic
        self.inner = inner
        self.accu = accu
        # Values already placed in each region
        self.placed = [0] * len(REGIONS)
        for r, region in enumerate(REGIONS):
            for i in region.indices:
                if self.values[i]:
                    self.placed[r] |= bit(self.values[i])
        self._region_number = {region: r for r, region in enumerate(REGIONS)}

    def run(self, key: int, on: bool) -> Branch:
        branch = Branch()
        work = list(self.masks) if self.dynamic else self.masks
        queue = deque()
        if not self._record(branch, work, queue, key, on, 0):
            return branch
        while True:
            if not self._drain(branch, work, queue):
                return branch
            if not self.inner or not self._apply_inner(branch, work, queue):
                return branch

    def _drain(self, branch: Branch, work: List[int], queue: deque) -> bool:
        while queue:
            key, on, depth = queue.popleft()
            cell, value = split_key(key)
            value_bit = bit(value)
            if on:
                for other in mask_values(work[cell] & ~value_bit):
                    if not self._record(branch, work, queue, candidate_key(cell, other), False, depth + 1):
                        return False
                for peer in PEERS[cell]:
                    if work[peer] & value_bit:
                        if not self._record(branch, work, queue, candidate_key(peer, value), False, depth + 1):
                            return False
            else:
                for target in self._off_consequences(branch, work, cell, value_bit, depth):
                    if target is None:
                        return False
                    if not self._record(branch, work, queue, target, True, depth + 1):
                        return False
        return True

    def _off_consequences(self, branch: Branch, work: List[int], cell: int,
                          value_bit: int, depth: int):
        """Candidates turned ON by an OFF event; None marks a contradiction."""
        remaining = work[cell] & ~value_bit if not self.dynamic else work[cell]
        if popcount(remaining) == 1:
            yield candidate_key(cell, mask_values(remaining)[0])
        value = value_bit.bit_length()
        for region in CELL_REGIONS[cell]:
            if self.placed[self._region_number[region]] & value_bit:
                continue
            places = [
                i for i in region.indices
                if work[i] & value_bit and (self.dynamic or i != cell)
            ]
            if len(places) == 1:
                yield candidate_key(places[0], value)
            elif not places and self.dynamic:
                self._contradict(branch, depth + 1)
                yield None
                return

    def _record(self, branch: Branch, work: List[int], queue: deque,
                key: int, on: bool, depth: int) -> bool:
        """Add an implication; return False once the branch is contradictory."""
        target, opposite = (branch.on, branch.off) if on else (branch.off, branch.on)
        if key in target:
            return True
        target[key] = depth
        branch.depth = max(branch.depth, depth)
        if key in opposite:
            self._contradict(branch, depth + opposite[key])
            return False
        if self.dynamic and not on:
            cell, value = split_key(key)
            work[cell] &= ~bit(value)
            if work[cell] == 0:
                self._contradict(branch, depth)
                return False
        queue.append((key, on, depth))
        return True

    @staticmethod
    def _contradict(branch: Branch, complexity: int) -> None:
        branch.contradiction = True
        branch.complexity = max(complexity, 1)

    def _apply_inner(self, branch: Branch, work: List[int], queue: deque) -> bool:
        """
        Run the inner producers on the propagated grid.

        Returns:
            True if new implications were queued and propagation should go on
        """
        grid = self.grid.copy()
        for index in range(256):
            if not self.values[index]:
                grid.set_potentials(index, work[index])
        depth = branch.depth + 1
        for producer in self.inner:
            if self.accu.should_stop():
                return False
            hints: List[Hint] = []
            producer.get_hints(grid, DefaultHintsAccumulator(hints, self.accu.context))
            progressed = False
            for hint in hints:
                for cell, mask in getattr(hint, "removable", ()):
                    for value in mask_values(mask):
                        key = candidate_key(cell, value)
                        if key in branch.off:
                            continue
                        progressed = True
                        if not self._record(branch, work, queue, key, False, depth):
                            return False
                if hint.cell is not None:
                    key = candidate_key(hint.cell, hint.value)
                    if key not in branch.on:
                        progressed = True
                        if not self._record(branch, work, queue, key, True, depth):
                            return False
            if progressed:
                return True
        return False


@register_producer
class Chaining(HintProducer):
    """
    Forcing chains producer.

    Args:
        multiple: Look for cell and region forcing chains
        dynamic: Use dynamic propagation
        nishio: Only look for contradictions of ON assumptions
        level: 0 for plain chains, 1 for "Dynamic (+)", 2 and more for
            nested chains using chains of lower levels as inner rules
        nesting: Nesting of the inner dynamic chains at level 4 and more
    """
    name = "chaining"
    description = "Forcing Chains & Cycles"
    kind = ProducerKind.INDIRECT

    def __init__(self, multiple: bool = False, dynamic: bool = False,
                 nishio: bool = False, level: int = 0, nesting: int = 0):
        self.multiple = multiple
        self.dynamic = dynamic or level > 0
        self.nishio = nishio
        self.level = level
        self.nesting = nesting
        self._inner: Optional[List[HintProducer]] = None

        if level >= 2:
            self.description = "Nested Forcing Chains"
            self.technique = SolvingTechnique.NestedForcingChain
            self.base_difficulty = 9.5 + 0.5 * (level - 2) + 0.5 * nesting
        elif level == 1:
            self.description = "Dynamic Forcing Chains (+)"
            self.technique = SolvingTechnique.DynamicForcingChainPlus
            self.base_difficulty = 9.0
        elif self.dynamic and multiple:
            self.description = "Dynamic Forcing Chains"
            self.technique = SolvingTechnique.DynamicForcingChain
            self.base_difficulty = 8.5
        elif multiple:
            self.description = "Multiple Forcing Chains"
            self.technique = SolvingTechnique.MultipleForcingChain
            self.base_difficulty = 8.0
        elif nishio:
            self.description = "Nishio Forcing Chains"
            self.technique = SolvingTechnique.NishioForcingChain
            self.base_difficulty = 7.5
        else:
            self.technique = SolvingTechnique.ForcingChainCycle
            self.base_difficulty = 7.0

    def parameters(self) -> Tuple:
        return (self.multiple, self.dynamic, self.nishio, self.level, self.nesting)

    @property
    def inner_producers(self) -> List[HintProducer]:
        """Producers applied on propagated grids (level 1 and more)."""
        if self._inner is None:
            inner: List[HintProducer] = []
            if self.level >= 1:
                inner += [
                    create_technique_producer(SolvingTechnique.PointingClaiming),
                    create_technique_producer(SolvingTechnique.HiddenPair),
                    create_technique_producer(SolvingTechnique.NakedPair),
                    create_technique_producer(SolvingTechnique.XWing),
                ]
            if self.level >= 2:
                inner.append(Chaining())
            if self.level >= 3:
                inner.append(Chaining(multiple=True))
            if self.level >= 4:
                inner.append(Chaining(multiple=True, dynamic=True, level=self.nesting))
            self._inner = inner
        return self._inner

    def get_hints(self, grid: Grid, accu: HintsAccumulator) -> None:
        values = grid.values()
        masks = grid.potentials()
        propagator = Propagator(grid, self.dynamic, self.inner_producers, accu)
        branches: Dict[Tuple[int, bool], Branch] = {}

        def branch(key: int, on: bool) -> Branch:
            found = branches.get((key, on))
            if found is None:
                found = propagator.run(key, on)
                branches[(key, on)] = found
            return found

        hints: Dict[Hint, int] = {}

        def add(hint: Hint) -> None:
            if hint not in hints:
                hints[hint] = len(hints)

        binary = not self.multiple or self.dynamic
        for cell in range(256):
            if values[cell]:
                continue
            for value in mask_values(masks[cell]):
                if accu.should_stop():
                    return
                if binary:
                    self._binary_chains(masks, cell, value, branch, add)
            if self.multiple and popcount(masks[cell]) >= 2:
                if accu.should_stop():
                    return
                sources = [candidate_key(cell, v) for v in mask_values(masks[cell])]
                self._forcing_chains(masks, sources, branch, add, "Cell")

        if self.multiple:
            for region in REGIONS:
                for value in range(1, 17):
                    if accu.should_stop():
                        return
                    places = [i for i in region.indices if masks[i] & bit(value)]
                    if len(places) >= 2:
                        sources = [candidate_key(i, value) for i in places]
                        self._forcing_chains(masks, sources, branch, add, "Region")

        if hints:
            logger.debug(f"{self.producer_id}: {len(hints)} hints from {len(branches)} branches")
        # Easiest chains first
        for hint in sorted(hints, key=lambda h: (h.difficulty, hints[h])):
            if accu.should_stop():
                return
            accu.add(hint)

    def _binary_chains(self, masks, cell, value, branch, add) -> None:
        key = candidate_key(cell, value)
        on_branch = branch(key, True)
        if on_branch.contradiction:
            add(self._eliminate(masks, key, "Contradiction", on_branch.complexity,
                                on_branch))
        if self.nishio:
            return
        off_branch = branch(key, False)
        if off_branch.contradiction:
            add(self._assign(masks, key, "Contradiction", off_branch.complexity,
                             off_branch))
            return
        if on_branch.contradiction:
            return
        for target in sorted(on_branch.off.keys() & off_branch.off.keys()):
            if target != key and self._present(masks, target):
                complexity = on_branch.off[target] + off_branch.off[target]
                add(self._eliminate(masks, target, "Double", complexity,
                                    on_branch, off_branch))
        for target in sorted(on_branch.on.keys() & off_branch.on.keys()):
            if target != key:
                complexity = on_branch.on[target] + off_branch.on[target]
                add(self._assign(masks, target, "Double", complexity,
                                 on_branch, off_branch))

    def _forcing_chains(self, masks, sources, branch, add, kind: str) -> None:
        branches = [branch(key, True) for key in sources]
        if any(b.contradiction for b in branches):
            return
        source_set = set(sources)
        common_off = set(branches[0].off)
        common_on = set(branches[0].on)
        for b in branches[1:]:
            common_off &= b.off.keys()
            common_on &= b.on.keys()
        for target in sorted(common_off - source_set):
            if self._present(masks, target):
                complexity = sum(b.off[target] for b in branches)
                add(self._eliminate(masks, target, kind, complexity, *branches))
        for target in sorted(common_on - source_set):
            complexity = sum(b.on[target] for b in branches)
            add(self._assign(masks, target, kind, complexity, *branches))

    @staticmethod
    def _present(masks, key: int) -> bool:
        cell, value = split_key(key)
        return bool(masks[cell] & bit(value))

    def _eliminate(self, masks, key: int, kind: str, complexity: int,
                   *branches: Branch) -> IndirectHint:
        cell, value = split_key(key)
        return IndirectHint.create(
            rule=self, name=self._hint_name(kind),
            difficulty=self._difficulty(complexity, branches),
            removable={cell: bit(value)},
        )

    def _assign(self, masks, key: int, kind: str, complexity: int,
                *branches: Branch) -> IndirectHint:
        cell, value = split_key(key)
        return IndirectHint.create(
            rule=self, name=self._hint_name(kind),
            difficulty=self._difficulty(complexity, branches),
            removable={cell: masks[cell] & ~bit(value)},
            cell=cell, value=value,
        )

    def _hint_name(self, kind: str) -> str:
        if self.level == 0 and not self.dynamic and not self.multiple and not self.nishio:
            return "Forcing Chain"
        if self.nishio:
            return "Nishio Forcing Chain"
        name = f"{kind} Forcing Chains"
        if self.dynamic:
            name = f"Dynamic {name}"
        if self.level == 1:
            name += " (+)"
        elif self.level >= 2:
            name = f"Nested {name}"
        return name

    def _difficulty(self, complexity: int, branches: Tuple[Branch, ...]) -> float:
        base = self.base_difficulty
        if self.level == 0 and not self.dynamic and not self.multiple and not self.nishio:
            # Chains on a single value (X-chains) are easier
            involved = set()
            for b in branches:
                involved.update(split_key(k)[1] for k in b.on)
                involved.update(split_key(k)[1] for k in b.off)
            if len(involved) == 1:
                base = 6.6
        return round(base + length_difficulty(complexity), 1)
