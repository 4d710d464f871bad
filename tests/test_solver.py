"""
Test script for the solving engine

Tests:
1. Hint listing and tier order
2. Incremental hint gathering
3. Advanced techniques confirmation
4. Solving, rating (pearl, diamond, monotonicity) and analysis
5. Lowered process priority

Usage:
    python test_solver.py
"""

import logging
import sys
from pathlib import Path
from random import Random

import psutil

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from grids import (
    LONE_CELL,
    LONE_VALUE,
    deadly_grid,
    diagonal_grid,
    lone_cell_grid,
    solution_values,
    solved_grid,
)
from sudoku16.grid import bit
from sudoku16.settings import Settings
from sudoku16.solver import (
    AlwaysAsker,
    AnalysisInfo,
    CallbackAsker,
    DefaultHintsAccumulator,
    DirectHint,
    HintProducer,
    IndirectHint,
    NeverAsker,
    ProducerKind,
    Rating,
    RatingMode,
    SolutionHint,
    Solver,
    SolverContext,
    SolveStatus,
    WarningHint,
)
from sudoku16.solver.checks import BruteForceAnalysis
from sudoku16.solver.priority import SOLVING_NICENESS, lowered_priority, reset_restore_failure
from sudoku16.techniques import SolvingTechnique

T = SolvingTechnique


def make_solver(grid, settings=None, context=None):
    if settings is None:
        settings = Settings(lower_priority=False)
    solver = Solver(grid, settings, context)
    solver.rebuild_potential_values()
    return solver


def test_single_naked_single():
    """One empty cell, only Naked Singles enabled: exactly one assignment."""
    print("\n" + "="*60)
    print("TEST: Lone naked single")
    print("="*60)

    settings = Settings.with_techniques([T.NakedSingle], lower_priority=False)
    solver = make_solver(lone_cell_grid(), settings)
    hints = solver.get_all_hints()
    for hint in hints:
        print(f"  {hint.difficulty:.1f} {hint}")
    assert len(hints) == 1
    assert isinstance(hints[0], DirectHint)
    assert (hints[0].cell, hints[0].value) == (LONE_CELL, LONE_VALUE)
    print("  [PASS] Lone naked single tests")


def test_tier_order():
    print("\n" + "="*60)
    print("TEST: Tier order and determinism")
    print("="*60)

    solver = make_solver(lone_cell_grid())
    hints = solver.get_all_hints()
    for hint in hints:
        print(f"  {hint.difficulty:.1f} {hint}")
    assert [h.name for h in hints] == ["Hidden Single", "Naked Single"]
    assert hints[0].difficulty == 1.0

    first = make_solver(diagonal_grid()).get_all_hints()
    second = make_solver(diagonal_grid()).get_all_hints()
    assert first == second
    assert [h.producer_id for h in first] == [h.producer_id for h in second]
    print("  [PASS] Tier order tests")


def test_incremental_gathering():
    """Reusing the previous pass gives the same hints as a fresh pass."""
    print("\n" + "="*60)
    print("TEST: Incremental gathering")
    print("="*60)

    solver = make_solver(diagonal_grid())
    previous = solver.get_all_hints()
    print(f"  {len(previous)} hints in the first pass")

    result = []
    solver.gather_hints(previous, result, DefaultHintsAccumulator(result))
    assert result == previous

    # After a change of the grid, previous hints are not trusted
    previous[0].apply(solver.grid)
    result = []
    solver.gather_hints(previous, result, DefaultHintsAccumulator(result))
    assert result == solver.get_all_hints()
    assert previous[0] not in result
    print("  [PASS] Incremental gathering tests")


def test_advanced_confirmation():
    print("\n" + "="*60)
    print("TEST: Advanced techniques confirmation")
    print("="*60)

    settings = Settings.with_techniques([T.NestedForcingChain], lower_priority=False)
    solver = make_solver(lone_cell_grid(), settings)

    assert solver.get_all_hints(NeverAsker()) == []
    assert not solver.is_using_advanced

    questions = []

    def answer(message):
        questions.append(message)
        return True

    hints = solver.get_all_hints(CallbackAsker(answer))
    print(f"  {len(hints)} nested chaining hints")
    assert hints and solver.is_using_advanced
    assert all(h.cell == LONE_CELL and h.value == LONE_VALUE for h in hints)
    assert len(questions) == 1

    # The answer is remembered
    assert solver.get_all_hints(NeverAsker()) == hints
    assert len(questions) == 1

    # A pass that does not need the advanced tiers resets it
    basic = Solver(solver.grid, Settings(lower_priority=False))
    basic.is_using_advanced = True
    basic.get_all_hints(NeverAsker())
    assert not basic.is_using_advanced
    print("  [PASS] Advanced confirmation tests")


def test_solve():
    print("\n" + "="*60)
    print("TEST: Solve")
    print("="*60)

    solver = make_solver(diagonal_grid())
    result = solver.solve()
    print(f"  {result.status.name}: {result.steps} steps, difficulty {result.difficulty}, "
          f"{result.metrics.computation_time_ms:.0f}ms")
    assert result.is_solved
    assert solver.grid.values() == solution_values()
    assert result.steps == 10 and result.difficulty == 1.0
    assert result.rule_names() == ["Hidden Single"]

    settings = Settings.with_techniques([T.NakedSingle], lower_priority=False)
    result = make_solver(diagonal_grid(), settings).solve()
    assert result.is_solved and result.difficulty == 2.3

    result = make_solver(deadly_grid(), settings).solve()
    assert result.status is SolveStatus.UNSOLVABLE

    context = SolverContext()
    context.cancel()
    result = make_solver(diagonal_grid(), context=context).solve()
    assert result.was_cancelled
    print("  [PASS] Solve tests")


def test_rating():
    print("\n" + "="*60)
    print("TEST: Rating")
    print("="*60)

    steps = []
    rating = make_solver(diagonal_grid()).get_difficulty(
        RatingMode.NONE, lambda hint, grid: steps.append(hint))
    print(f"  {rating.format()}")
    assert rating.format() == "ED=1.0/1.0/1.0"
    assert rating.format("%g %r", "puzzle") == "puzzle 1.0"
    assert len(steps) == 10

    settings = Settings.with_techniques([T.NakedSingle], lower_priority=False)
    rating = make_solver(diagonal_grid(), settings).get_difficulty(RatingMode.PEARL)
    assert (rating.difficulty, rating.pearl, rating.diamond) == (2.3, 2.3, 2.3)

    rating = make_solver(deadly_grid(), settings).get_difficulty()
    assert rating.difficulty == 20.0

    solver = make_solver(diagonal_grid())
    assert solver.analyse_difficulty(0.0, 20.0) == 1.0
    print("  [PASS] Rating tests")


class ScriptedProducer(HintProducer):
    """Hands out a fixed sequence of steps, one per call."""
    name = "scripted"
    description = "Scripted steps"
    kind = ProducerKind.DIRECT

    def __init__(self, steps):
        # (difficulty, cell, value); value 0 removes a value the cell cannot hold
        self.steps = list(steps)

    def get_hints(self, grid, accu):
        if not self.steps:
            return
        difficulty, cell, value = self.steps.pop(0)
        if value:
            accu.add(DirectHint(rule=self, name="Placement", difficulty=difficulty,
                                cell=cell, value=value))
        else:
            accu.add(IndirectHint.create(rule=self, name="Elimination", difficulty=difficulty,
                                         removable={cell: bit(16)}))


def scripted_rating(steps, want):
    """Rate a grid with two empty cells, solved by the given steps."""
    solver = make_solver(diagonal_grid(2))
    solver.direct_producers = [ScriptedProducer(steps)]
    solver.indirect_producers = []
    solver.chaining_producers = []
    solver.chaining2_producers = []
    solver.advanced_producers = []
    solver.experimental_producers = []
    applied = []
    rating = solver.get_difficulty(want, lambda hint, grid: applied.append(hint.name))
    print(f"  {want.name:8} {rating.format()} after {applied}")
    return rating, applied


def test_pearl_and_diamond():
    """Steps harder than the diamond or pearl rating invalidate the rating."""
    print("\n" + "="*60)
    print("TEST: Pearl and diamond")
    print("="*60)

    first, second = solution_values()[0], solution_values()[17]

    # Elimination, then a harder first placement
    harder_placement = [(2.6, 0, 0), (3.0, 0, first), (1.0, 17, second)]
    rating, applied = scripted_rating(harder_placement, RatingMode.DIAMOND)
    assert rating == Rating(difficulty=20.0, pearl=0.0, diamond=2.6)
    assert applied == ["Elimination", "Placement"]
    for want in (RatingMode.PEARL, RatingMode.NONE):
        rating, applied = scripted_rating(harder_placement, want)
        assert rating == Rating(difficulty=3.0, pearl=3.0, diamond=2.6)
        assert len(applied) == 3

    # First placement, then a harder elimination
    harder_later = [(2.0, 0, first), (4.0, 17, 0), (1.0, 17, second)]
    for want in (RatingMode.PEARL, RatingMode.DIAMOND):
        rating, applied = scripted_rating(harder_later, want)
        assert rating == Rating(difficulty=20.0, pearl=2.0, diamond=2.0)
        assert applied == ["Placement", "Elimination"]
    rating, applied = scripted_rating(harder_later, RatingMode.NONE)
    assert rating == Rating(difficulty=4.0, pearl=2.0, diamond=2.0)
    assert len(applied) == 3
    print("  [PASS] Pearl and diamond tests")


def test_rating_monotonicity():
    """Removing a clue, while the solution stays unique, never lowers the rating."""
    print("\n" + "="*60)
    print("TEST: Rating monotonicity")
    print("="*60)

    oracle = BruteForceAnalysis()
    solution = solved_grid()
    grid = solved_grid()
    order = list(range(256))
    Random(9).shuffle(order)

    previous = 0.0
    removed = 0
    ratings = []
    for index in order:
        if removed == 100:
            break
        grid.set_value(index, 0)
        if oracle.count_solutions(solution, grid) != 1:
            grid.set_value(index, solution.get_value(index))
            continue
        removed += 1
        puzzle = grid.copy()
        difficulty = make_solver(puzzle).get_difficulty().difficulty
        assert difficulty >= previous, \
            f"removing clue {index} lowered the rating from {previous} to {difficulty}"
        if difficulty != previous:
            ratings.append((removed, difficulty))
        previous = difficulty
    print(f"  {removed} clues removed, rating changes {ratings}")
    assert removed == 100
    print("  [PASS] Rating monotonicity tests")


def test_analyse():
    print("\n" + "="*60)
    print("TEST: Analyse")
    print("="*60)

    solver = make_solver(diagonal_grid())
    before = solver.grid.fingerprint()
    info = solver.analyse(AlwaysAsker())
    print(info.describe())
    assert isinstance(info, AnalysisInfo)
    assert info.difficulty == 1.0
    assert info.rule_names == (("Hidden Single", 10),)
    assert solver.grid.fingerprint() == before

    warning = make_solver(deadly_grid()).analyse()
    assert isinstance(warning, WarningHint) and not isinstance(warning, AnalysisInfo)
    assert warning.message == "The Sudoku has more than one solution"
    print("  [PASS] Analyse tests")


class UnprivilegedProcess:
    """Stand-in for psutil.Process whose niceness can only go up."""

    def __init__(self, niceness=0):
        self.niceness = niceness

    def nice(self, value=None):
        if value is None:
            return self.niceness
        if value < self.niceness:
            raise psutil.AccessDenied()
        self.niceness = value


class RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_lowered_priority():
    """A failed restore is logged at INFO and later passes keep the priority."""
    print("\n" + "="*60)
    print("TEST: Lowered priority")
    print("="*60)

    if psutil.WINDOWS:
        print("  [SKIP] POSIX niceness only")
        return

    log = logging.getLogger("sudoku16.solver.priority")
    handler = RecordingHandler()
    old_level = log.level
    log.addHandler(handler)
    log.setLevel(logging.INFO)
    reset_restore_failure()
    try:
        proc = UnprivilegedProcess()
        with lowered_priority(False, proc):
            assert proc.niceness == 0

        with lowered_priority(True, proc):
            assert proc.niceness == SOLVING_NICENESS
        assert proc.niceness == SOLVING_NICENESS
        infos = [r for r in handler.records if r.levelno == logging.INFO]
        print(f"  {infos[0].getMessage() if infos else None}")
        assert len(infos) == 1 and "Could not restore priority 0" in infos[0].getMessage()

        # Once restoring failed, the priority is left alone
        other = UnprivilegedProcess()
        with lowered_priority(True, other):
            assert other.niceness == 0
        assert len(handler.records) == 1

        reset_restore_failure()
        with lowered_priority(True, other):
            assert other.niceness == SOLVING_NICENESS
    finally:
        reset_restore_failure()
        log.removeHandler(handler)
        log.setLevel(old_level)
    print("  [PASS] Lowered priority tests")


def test_checks():
    print("\n" + "="*60)
    print("TEST: Validity and brute force")
    print("="*60)

    assert make_solver(diagonal_grid()).check_validity() is None
    assert make_solver(diagonal_grid()).check_unique_solution() is None
    assert make_solver(deadly_grid()).check_unique_solution() is not None

    grid = lone_cell_grid()
    grid.set_value(1, 1)
    hint = make_solver(grid).check_validity()
    assert hint is not None and hint.name == "Invalid Sudoku"

    solver = make_solver(diagonal_grid())
    hint = solver.brute_force_solve()
    assert isinstance(hint, SolutionHint)
    hint.apply(solver.grid)
    assert solver.grid.values() == solution_values()
    print("  [PASS] Check tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# SOLVER TESTS")
    print("#"*60)

    tests = [
        ("Lone naked single", test_single_naked_single),
        ("Tier order", test_tier_order),
        ("Incremental gathering", test_incremental_gathering),
        ("Advanced confirmation", test_advanced_confirmation),
        ("Solve", test_solve),
        ("Rating", test_rating),
        ("Pearl and diamond", test_pearl_and_diamond),
        ("Rating monotonicity", test_rating_monotonicity),
        ("Analyse", test_analyse),
        ("Lowered priority", test_lowered_priority),
        ("Checks", test_checks),
    ]
    results = []
    for name, test in tests:
        try:
            test()
            results.append((name, True))
        except AssertionError as e:
            print(f"  [FAIL] {e}")
            results.append((name, False))

    print("\n" + "="*60)
    print("SUMMARY")
    print("="*60)
    for name, passed in results:
        print(f"  {name}: [{'PASS' if passed else 'FAIL'}]")

    if all(passed for _name, passed in results):
        print("\nAll tests PASSED!")
        return 0
    print("\nSome tests FAILED!")
    return 1


if __name__ == "__main__":
    sys.exit(main())
