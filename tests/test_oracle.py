"""
Test script for the brute force oracle and the validity checks

Usage:
    python test_oracle.py
"""

import sys
from pathlib import Path
from random import Random

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from grids import deadly_grid, diagonal_grid, lone_cell_grid, solution_values, solved_grid
from sudoku16.grid import PEERS, Grid
from sudoku16.solver import DefaultHintsAccumulator, SingleHintAccumulator
from sudoku16.solver.checks import (
    BruteForceAnalysis,
    NoDoubles,
    NumberOfFilledCells,
    NumberOfValues,
)


def is_valid_solution(values):
    return all(v != 0 for v in values) and all(
        values[i] != values[p] for i in range(256) for p in PEERS[i]
    )


def test_count_solutions():
    print("\n" + "="*60)
    print("TEST: Solution count")
    print("="*60)

    oracle = BruteForceAnalysis()
    counts = {
        "solved": oracle.count_solutions(None, solved_grid()),
        "one empty cell": oracle.count_solutions(None, lone_cell_grid()),
        "diagonal": oracle.count_solutions(None, diagonal_grid(16)),
        "rectangle": oracle.count_solutions(None, deadly_grid()),
    }
    for name, count in counts.items():
        print(f"  {name}: {count}")
    assert counts == {"solved": 1, "one empty cell": 1, "diagonal": 1, "rectangle": 2}

    # A value placed twice
    grid = lone_cell_grid()
    grid.set_value(1, 1)
    assert oracle.count_solutions(None, grid) == 0

    # With the known solution, the analysed grid is left untouched
    grid = deadly_grid()
    solution = solved_grid()
    assert oracle.count_solutions(solution, grid) == 2
    assert oracle.count_solutions(solution, diagonal_grid()) == 1
    assert solution.values() == solution_values()
    assert grid.count_filled() == 252
    print("  [PASS] Solution count tests")


def test_find_solution():
    print("\n" + "="*60)
    print("TEST: Find solution")
    print("="*60)

    oracle = BruteForceAnalysis()
    assert oracle.find_solution(diagonal_grid()) == solution_values()

    grid = lone_cell_grid()
    grid.set_value(1, 1)
    assert oracle.find_solution(grid) is None
    print("  [PASS] Find solution tests")


def test_solve_random():
    """A seeded random fill of an empty grid is a valid, reproducible solution."""
    print("\n" + "="*60)
    print("TEST: Random solution")
    print("="*60)

    oracle = BruteForceAnalysis()
    first = Grid()
    assert oracle.solve_random(first, Random(42))
    print(f"  {first.to_line()[:32]}...")
    assert is_valid_solution(first.values())

    second = Grid()
    assert oracle.solve_random(second, Random(42))
    assert second.values() == first.values()
    print("  [PASS] Random solution tests")


def test_warnings():
    print("\n" + "="*60)
    print("TEST: Warnings")
    print("="*60)

    oracle = BruteForceAnalysis()
    result = []
    oracle.get_hints(deadly_grid(), DefaultHintsAccumulator(result))
    assert len(result) == 1
    assert result[0].message == "The Sudoku has more than one solution"
    assert not result[0].is_worth()

    result = []
    oracle.get_hints(diagonal_grid(), DefaultHintsAccumulator(result))
    assert not result

    # Duplicate value in row 1
    grid = lone_cell_grid()
    grid.set_value(1, 1)
    accu = SingleHintAccumulator()
    NoDoubles().get_hints(grid, accu)
    print(f"  {accu.hint}")
    assert accu.hint is not None and accu.hint.name == "Invalid Sudoku"
    assert "more than once" in accu.hint.message

    # An empty cell that lost all its potential values
    grid = lone_cell_grid()
    grid.set_potentials(grid.empty_indices()[0], 0)
    accu = SingleHintAccumulator()
    NoDoubles().get_hints(grid, accu)
    assert accu.hint is not None

    accu = SingleHintAccumulator()
    NoDoubles().get_hints(diagonal_grid(), accu)
    assert accu.hint is None

    few = Grid.from_values(solution_values()[:16] + [0] * 240)
    result = []
    NumberOfFilledCells().get_hints(few, DefaultHintsAccumulator(result))
    NumberOfValues().get_hints(few, DefaultHintsAccumulator(result))
    assert [h.name for h in result] == ["Missing givens"]

    result = []
    NumberOfValues().get_hints(Grid.from_values([1, 2] + [0] * 254), DefaultHintsAccumulator(result))
    assert [h.name for h in result] == ["Missing values"]
    print("  [PASS] Warning tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# ORACLE TESTS")
    print("#"*60)

    tests = [
        ("Solution count", test_count_solutions),
        ("Find solution", test_find_solution),
        ("Random solution", test_solve_random),
        ("Warnings", test_warnings),
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
