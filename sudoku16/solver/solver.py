"""
Solver Module - The solving engine.

The Solver owns ordered tiers of technique producers built from the
enabled techniques, and runs them on its grid to list hints, solve step
by step, or rate the difficulty of a puzzle.

Tiers, in order: direct, indirect, validators, warnings, chaining,
extended chaining, advanced and experimental. Warnings and the chaining
tiers only run when the earlier tiers found nothing; the advanced tiers
additionally need a confirmation from an Asker, remembered for the
lifetime of the Solver until a pass completes without them.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

from ..grid import Grid
from ..settings import Settings
from ..techniques import SolvingTechnique
from .accumulator import DefaultHintsAccumulator, HintsAccumulator, SingleHintAccumulator
from .asker import Asker
from .base import HintProducer
from .checks import Analyser, BruteForceAnalysis, NoDoubles, NumberOfFilledCells, NumberOfValues
from .context import SolverContext
from .factory import create_technique_producer
from .hint import Hint, RuleUsage, SolutionHint, WarningHint
from .priority import lowered_priority
from .solution import (
    UNRATABLE,
    Rating,
    RatingMode,
    SolveMetrics,
    SolveResult,
    SolveStatus,
)

logger = logging.getLogger(__name__)

ADVANCED_WARNING1 = ("This Sudoku seems to require advanced techniques\n"
                     "that may take a very long computing time.\n"
                     "Do you want to continue anyway?")
ADVANCED_WARNING2 = ("The next solving techniques are advanced ones\n"
                     "that may take a very long computing time.\n"
                     "Do you want to continue anyway?")

# Difficulties from which analyse_difficulty() stops early
RATING_CUTOFF = 12.0

T = SolvingTechnique

# Techniques in tier order; an entry may carry producer arguments of its own
TierEntry = Union[SolvingTechnique, Tuple[SolvingTechnique, dict]]

DIRECT_TIER: Tuple[TierEntry, ...] = (
    T.HiddenSingle, T.DirectPointing, T.DirectHiddenPair, T.NakedSingle,
    T.DirectHiddenTriplet,
)

INDIRECT_TIER: Tuple[TierEntry, ...] = (
    T.PointingClaiming, T.NakedPair, T.XWing, T.HiddenPair, T.NakedTriplet,
    T.Swordfish, T.HiddenTriplet, T.XYWing, T.DirectHiddenQuad, T.XYZWing,
    T.UniqueLoop, T.NakedQuad, T.Jellyfish, T.HiddenQuad,
    T.NakedQuintuplet, T.HiddenQuintuplet, T.NakedSextuplet, T.HiddenSextuplet,
    T.NakedSeptuplet, T.HiddenSeptuplet, T.Starfish, T.Whale, T.Leviathan,
    T.NakedOctuplet, T.HiddenOctuplet, T.LochNessMonster,
    T.BivalueUniversalGrave, T.AlignedPairExclusion,
)

CHAINING_TIER: Tuple[TierEntry, ...] = (
    T.ForcingChainCycle, T.AlignedTripletExclusion, T.NishioForcingChain,
    T.MultipleForcingChain, T.DynamicForcingChain,
)

CHAINING2_TIER: Tuple[TierEntry, ...] = (T.DynamicForcingChainPlus,)

ADVANCED_TIER: Tuple[TierEntry, ...] = (
    (T.NestedForcingChain, {"level": 2}),
    (T.NestedForcingChain, {"level": 3}),
)

EXPERIMENTAL_TIER: Tuple[TierEntry, ...] = tuple(
    (T.NestedForcingChain, {"level": 4, "nesting": nesting})
    for nesting in range(3)
)


class Solver:
    """
    Solving engine bound to one grid.

    The grid must have up-to-date potential values, see
    rebuild_potential_values().

    Args:
        grid: Grid to work on (modified by solving operations)
        settings: Enabled techniques and options, defaults if None
        context: Cancellation and progress, a fresh one if None

    Example:
        grid, status = load_from_text(text)
        solver = Solver(grid)
        solver.rebuild_potential_values()
        result = solver.solve()
    """

    def __init__(self, grid: Grid, settings: Optional[Settings] = None,
                 context: Optional[SolverContext] = None):
        self.grid = grid
        self.settings = settings if settings is not None else Settings()
        self.context = context if context is not None else SolverContext()
        self.is_using_advanced = False
        self._last_fingerprint: Optional[str] = None

        self.oracle = BruteForceAnalysis(self.context)
        self.direct_producers = self._build(DIRECT_TIER)
        self.indirect_producers = self._build(INDIRECT_TIER)
        self.validator_producers: List[HintProducer] = [NoDoubles()]
        self.warning_producers: List[HintProducer] = [
            NumberOfFilledCells(), NumberOfValues(), self.oracle,
        ]
        self.chaining_producers = self._build(CHAINING_TIER)
        self.chaining2_producers = self._build(CHAINING2_TIER)
        self.advanced_producers = self._build(ADVANCED_TIER)
        self.experimental_producers: List[HintProducer] = []
        if self.settings.is_using_all_techniques():
            self.experimental_producers = self._build(EXPERIMENTAL_TIER)

    def _build(self, tier: Sequence[TierEntry]) -> List[HintProducer]:
        producers = []
        for entry in tier:
            technique, overrides = entry if isinstance(entry, tuple) else (entry, {})
            if self.settings.is_using(technique):
                producers.append(create_technique_producer(technique, **overrides))
        return producers

    # --- grid maintenance ---

    def rebuild_potential_values(self) -> None:
        self.grid.rebuild_potential_values()

    def cancel_potential_values(self) -> None:
        self.grid.cancel_potential_values()

    def is_solved(self) -> bool:
        return self.grid.is_solved()

    # --- checks ---

    def check_validity(self) -> Optional[Hint]:
        """
        Get the first validator or warning hint.

        Returns:
            A WarningHint if the grid is invalid or ambiguous, else None
        """
        accu = SingleHintAccumulator(self.context)
        with lowered_priority(self.settings.lower_priority):
            self._run(self.validator_producers, accu)
            if accu.hint is None:
                self._run(self.warning_producers, accu)
        return accu.hint

    def check_unique_solution(self) -> Optional[Hint]:
        """
        Count the solutions of the grid.

        Returns:
            A WarningHint unless there is exactly one solution
        """
        accu = SingleHintAccumulator(self.context)
        with lowered_priority(self.settings.lower_priority):
            self.oracle.get_hints(self.grid, accu)
        return accu.hint

    # --- hint listing ---

    def get_all_hints(self, asker: Optional[Asker] = None) -> List[Hint]:
        """
        List the hints of the easiest tier that has any.

        Args:
            asker: Confirms the advanced tiers; None means yes

        Returns:
            Hints in tier and producer order, without duplicates
        """
        result: List[Hint] = []
        accu = DefaultHintsAccumulator(result, self.context)
        with lowered_priority(self.settings.lower_priority):
            self._collect([], result, accu, asker)
        if not self.context.is_cancelled():
            self._last_fingerprint = self.grid.fingerprint()
        return result

    def gather_hints(self, previous_hints: Sequence[Hint], result: List[Hint],
                     accu: HintsAccumulator, asker: Optional[Asker] = None) -> None:
        """
        Incremental variant of get_all_hints().

        Hints of previous_hints are reused producer by producer instead of
        running the producer again, as long as they were gathered by this
        Solver on the same grid state. The accumulator should append to
        result.

        Args:
            previous_hints: Hints from the last pass of this Solver
            result: List the accumulator appends to
            accu: Accumulator receiving the hints
            asker: Confirms the advanced tiers; None means yes
        """
        fingerprint = self.grid.fingerprint()
        previous = list(previous_hints)
        if previous and fingerprint != self._last_fingerprint:
            logger.debug("Grid changed since the last pass, recomputing all hints")
            previous = []
        with lowered_priority(self.settings.lower_priority):
            self._collect(previous, result, accu, asker)
        if not self.context.is_cancelled():
            self._last_fingerprint = fingerprint

    def _collect(self, previous: List[Hint], result: List[Hint],
                 accu: HintsAccumulator, asker: Optional[Asker]) -> None:
        self._gather(self.direct_producers, previous, result, accu)
        self._gather(self.indirect_producers, previous, result, accu)
        self._gather(self.validator_producers, previous, result, accu)
        if not result:
            self._gather(self.warning_producers, previous, result, accu)
        if not result:
            self._gather(self.chaining_producers, previous, result, accu)
        if not result:
            self._gather(self.chaining2_producers, previous, result, accu)

        entered = False
        if (not result and not self.context.is_cancelled()
                and (self.advanced_producers or self.experimental_producers)
                and self._confirm(asker, ADVANCED_WARNING2)):
            entered = True
            self._gather(self.advanced_producers, previous, result, accu)
            if not result and self.settings.is_using_all_techniques():
                self._gather(self.experimental_producers, previous, result, accu)
        if not entered:
            self.is_using_advanced = False

    def _gather(self, producers: Sequence[HintProducer], previous: List[Hint],
                result: List[Hint], accu: HintsAccumulator) -> None:
        for producer in producers:
            if self.context.is_cancelled():
                return
            producer_id = producer.producer_id
            if len(result) < len(previous) and producer_id != previous[-1].producer_id:
                index = len(result)
                while index < len(previous) and previous[index].producer_id == producer_id:
                    accu.add(previous[index])
                    index += 1
            else:
                producer.get_hints(self.grid, accu)

    def _confirm(self, asker: Optional[Asker], message: str) -> bool:
        if not self.is_using_advanced:
            if asker is not None and not asker.ask(message):
                return False
            logger.info("Entering advanced techniques")
            self.is_using_advanced = True
        return True

    def _run(self, producers: Sequence[HintProducer], accu: HintsAccumulator) -> None:
        for producer in producers:
            if accu.should_stop():
                return
            producer.get_hints(self.grid, accu)

    def _next_hint(self, tiers: Sequence[Sequence[HintProducer]]) -> Optional[Hint]:
        accu = SingleHintAccumulator(self.context)
        for producers in tiers:
            self._run(producers, accu)
            if accu.should_stop():
                break
        return accu.hint

    # --- solving ---

    def solve(self, asker: Optional[Asker] = None) -> SolveResult:
        """
        Solve the grid step by step, always applying the easiest hint.

        Args:
            asker: Confirms the advanced tiers; None means yes

        Returns:
            SolveResult with status, rule usage counts and difficulty
        """
        start = time.time()
        rules: Dict[RuleUsage, int] = {}
        difficulty = 0.0
        status = SolveStatus.SOLVED
        basic = (self.direct_producers, self.indirect_producers,
                 self.chaining_producers, self.chaining2_producers)

        with lowered_priority(self.settings.lower_priority):
            while not self.grid.is_solved():
                if self.context.is_cancelled():
                    status = SolveStatus.CANCELLED
                    break
                hint = self._next_hint(basic)
                if (hint is None and not self.context.is_cancelled()
                        and (self.advanced_producers or self.experimental_producers)
                        and self._confirm(asker, ADVANCED_WARNING1)):
                    hint = self._next_hint((self.advanced_producers, self.experimental_producers))
                if hint is None or not hint.is_worth():
                    status = (SolveStatus.CANCELLED if self.context.is_cancelled()
                              else SolveStatus.UNSOLVABLE)
                    break
                hint.apply(self.grid)
                usage = RuleUsage.of(hint)
                rules[usage] = rules.get(usage, 0) + 1
                difficulty = max(difficulty, hint.difficulty)
                self.context.report_progress(
                    100.0 * self.grid.count_filled() / 256, hint.name)

        elapsed = (time.time() - start) * 1000
        result = SolveResult(
            status=status,
            rules=dict(sorted(rules.items())),
            difficulty=difficulty,
            metrics=SolveMetrics(computation_time_ms=elapsed, steps=sum(rules.values())),
        )
        logger.info(f"Solve finished: {status.name}, difficulty {difficulty:.1f}, "
                    f"{result.steps} steps in {elapsed:.0f}ms")
        return result

    def analyse_difficulty(self, min_difficulty: float, max_difficulty: float) -> float:
        """
        Rate the grid by solving it, without the advanced tiers.

        Stops as soon as the rating is known to be out of [min, max]:
        once it exceeds max, or once it reaches min when max is at least
        12.0 (nothing harder exists below the advanced tiers).

        Returns:
            Maximum step difficulty, 20.0 if the grid cannot be solved
        """
        difficulty = 0.0
        tiers = (self.direct_producers, self.indirect_producers,
                 self.chaining_producers, self.chaining2_producers)
        with lowered_priority(self.settings.lower_priority):
            while not self.grid.is_solved():
                if self.context.is_cancelled():
                    return difficulty
                hint = self._next_hint(tiers)
                if hint is None:
                    if self.context.is_cancelled():
                        return difficulty
                    return UNRATABLE
                difficulty = max(difficulty, hint.difficulty)
                if difficulty >= min_difficulty and max_difficulty >= RATING_CUTOFF:
                    break
                if difficulty > max_difficulty:
                    break
                hint.apply(self.grid)
        return difficulty

    def get_difficulty(self, want: RatingMode = RatingMode.NONE,
                       on_step: Optional[Callable[[Hint, Grid], None]] = None) -> Rating:
        """
        Rate the grid and compute its pearl and diamond ratings.

        The diamond rating is the difficulty after the first step, the pearl
        rating the difficulty at the first placement. With want set, a
        later step harder than the pearl (or, for DIAMOND, a first
        placement harder than the diamond) invalidates the rating.

        Args:
            want: Constraints to enforce
            on_step: Called with each applied hint and the grid after it

        Returns:
            Rating(difficulty, pearl, diamond), difficulty 20.0 when
            unsolvable or invalidated
        """
        difficulty = pearl = diamond = 0.0
        tiers = (self.direct_producers, self.indirect_producers,
                 self.chaining_producers, self.chaining2_producers,
                 self.advanced_producers, self.experimental_producers)
        with lowered_priority(self.settings.lower_priority):
            while not self.grid.is_solved():
                if self.context.is_cancelled():
                    break
                hint = self._next_hint(tiers)
                if hint is None:
                    if not self.context.is_cancelled():
                        difficulty = UNRATABLE
                    break
                difficulty = max(difficulty, hint.difficulty)
                hint.apply(self.grid)
                if on_step is not None:
                    on_step(hint, self.grid)
                if pearl == 0.0:
                    if diamond == 0.0:
                        diamond = difficulty
                    if hint.cell is not None:
                        if want is RatingMode.DIAMOND and difficulty > diamond:
                            difficulty = UNRATABLE
                            break
                        pearl = difficulty
                elif want is not RatingMode.NONE and difficulty > pearl:
                    difficulty = UNRATABLE
                    break
        return Rating(difficulty=difficulty, pearl=pearl, diamond=diamond)

    @staticmethod
    def to_named_list(rules: Dict[RuleUsage, int]) -> Dict[str, int]:
        """Merge usage counts of rules sharing a name, keeping first-seen order."""
        named: Dict[str, int] = {}
        for rule, count in rules.items():
            named[rule.name] = named.get(rule.name, 0) + count
        return named

    # --- whole-puzzle operations ---

    def analyse(self, asker: Optional[Asker] = None) -> Optional[Hint]:
        """
        Check the grid, then solve a copy of it and summarize the rules used.

        The grid is left as it was.

        Returns:
            A WarningHint if the grid is invalid, else an AnalysisInfo
            (None if cancelled)
        """
        backup = self.grid.copy()
        try:
            self.rebuild_potential_values()
            hint = self.check_validity()
            if hint is None:
                accu = SingleHintAccumulator(self.context)
                Analyser(self, asker).get_hints(self.grid, accu)
                hint = accu.hint
        finally:
            backup.copy_to(self.grid)
        return hint

    def brute_force_solve(self) -> Optional[Hint]:
        """
        Find a solution by brute force.

        Returns:
            A SolutionHint filling the grid, or a WarningHint if the grid
            is invalid or has no solution
        """
        accu = SingleHintAccumulator(self.context)
        self._run(self.validator_producers, accu)
        if accu.hint is not None:
            return accu.hint
        with lowered_priority(self.settings.lower_priority):
            solution = self.oracle.find_solution(self.grid)
        if solution is None:
            if self.context.is_cancelled():
                return None
            return WarningHint(rule=self.oracle, name="Invalid Sudoku",
                               message="The Sudoku has no solution")
        return SolutionHint(rule=self.oracle, name="Solution",
                            solution=tuple(solution))
