"""
Test script for puzzle generation

Generation runs a full brute force search per removed clue, so these tests
take a while.

Usage:
    python test_generator.py
"""

import sys
import time
from pathlib import Path
from random import Random

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from grids import solved_grid
from sudoku16.generator import Generator, GeneratorWorker, Symmetry
from sudoku16.grid import Grid
from sudoku16.settings import Settings
from sudoku16.solver.checks import BruteForceAnalysis


def test_symmetry_orbits():
    """Orbits start with the cell itself and are closed under the symmetry."""
    print("\n" + "="*60)
    print("TEST: Symmetry orbits")
    print("="*60)

    assert Symmetry.None_.get_points(3, 4) == ((3, 4),)
    assert Symmetry.Rotational180.get_points(0, 0) == ((0, 0), (15, 15))
    assert Symmetry.BiDiagonal.get_points(0, 0) == ((0, 0), (15, 15))
    assert len(Symmetry.Orthogonal.get_points(3, 5)) == 4
    assert len(Symmetry.Full.get_points(1, 2)) == 8
    assert len(Symmetry.Rotational90.get_points(1, 2)) == 4

    for symmetry in Symmetry:
        sizes = set()
        for y in range(16):
            for x in range(16):
                orbit = symmetry.get_points(x, y)
                assert orbit[0] == (x, y)
                for px, py in orbit:
                    assert set(symmetry.get_points(px, py)) == set(orbit), \
                        f"{symmetry.name} orbit of ({x},{y}) not closed"
                sizes.add(len(orbit))
        print(f"  {symmetry.name:14} orbit sizes {sorted(sizes)}")
    print("  [PASS] Symmetry orbit tests")


def test_symmetry_names():
    print("\n" + "="*60)
    print("TEST: Symmetry names")
    print("="*60)

    assert Symmetry.from_name("None") is Symmetry.None_
    assert Symmetry.from_name("rotational180") is Symmetry.Rotational180
    assert Symmetry.from_name("180° rotational") is Symmetry.Rotational180
    assert Symmetry.from_name("Anti-diagonal") is Symmetry.AntiDiagonal
    try:
        Symmetry.from_name("Spiral")
        assert False, "unknown symmetry accepted"
    except ValueError:
        pass
    assert all(symmetry.description for symmetry in Symmetry)
    print("  [PASS] Symmetry name tests")


def test_candidate():
    """A candidate keeps its symmetry and has a unique solution."""
    print("\n" + "="*60)
    print("TEST: Candidate puzzle")
    print("="*60)

    generator = Generator(Settings(lower_priority=False))
    start = time.perf_counter()
    grid = generator.generate_candidate(Random(7), Symmetry.Rotational180)
    elapsed = time.perf_counter() - start
    assert grid is not None
    print(f"  {grid.count_filled()} clues in {elapsed:.1f}s")
    print(f"  {grid.to_line()}")

    assert grid.count_filled() < 256
    assert BruteForceAnalysis().count_solutions(None, grid) == 1
    for index in grid.filled_indices():
        y, x = divmod(index, 16)
        for px, py in Symmetry.Rotational180.get_points(x, y):
            assert grid.get_cell_value(px, py) != 0, "clue pattern is not symmetric"
    print("  [PASS] Candidate tests")


def test_repair():
    """A removal that breaks uniqueness is undone and its orbit frozen."""
    print("\n" + "="*60)
    print("TEST: Clue removal and repair")
    print("="*60)

    generator = Generator(Settings(lower_priority=False))
    oracle = BruteForceAnalysis()

    # Any single clue of a solved grid can go
    grid = solved_grid()
    frozen = set()
    assert generator._try_remove(grid, solved_grid(), Symmetry.None_, 40, frozen)
    assert grid.get_value(40) == 0 and not frozen
    assert not generator._try_remove(grid, solved_grid(), Symmetry.None_, 40, frozen)
    assert not frozen

    # Every clue of a minimal candidate is needed
    grid = generator.generate_candidate(Random(3), Symmetry.None_)
    assert grid is not None
    solution = Grid.from_values(oracle.find_solution(grid))
    before = grid.values()
    index = grid.filled_indices()[0]
    frozen = set()
    assert not generator._try_remove(grid, solution, Symmetry.None_, index, frozen)
    assert grid.values() == before
    assert frozen == {index}

    # Orbits are restored and frozen as a whole
    y, x = divmod(index, 16)
    px, py = Symmetry.Rotational180.get_points(x, y)[1]
    grid.set_cell_value(px, py, solution.get_cell_value(px, py))
    before = grid.values()
    frozen = set()
    assert not generator._try_remove(grid, solution, Symmetry.Rotational180, index, frozen)
    assert grid.values() == before
    assert frozen == {index, py * 16 + px}
    print(f"  {grid.count_filled()} clues, frozen {sorted(frozen)}")
    print("  [PASS] Repair tests")


def test_generate():
    """Any difficulty, no symmetry: the first candidate is accepted."""
    print("\n" + "="*60)
    print("TEST: Generate")
    print("="*60)

    generator = Generator(Settings(lower_priority=False))
    grid = generator.generate([Symmetry.None_], 0.0, 20.0, Random(11))
    assert grid is not None
    print(f"  {grid.count_filled()} clues")
    assert grid.count_filled() < 256
    assert BruteForceAnalysis().count_solutions(None, grid) == 1
    assert all(grid.is_given(i) for i in grid.filled_indices())

    try:
        generator.generate([], 0.0, 20.0)
        assert False, "generation without symmetry accepted"
    except ValueError:
        pass

    generator.interrupt()
    assert generator.is_interrupted
    assert generator.generate([Symmetry.Full], 0.0, 20.0, Random(1)) is None
    print("  [PASS] Generate tests")


def test_worker_stop():
    print("\n" + "="*60)
    print("TEST: Worker stop")
    print("="*60)

    statuses = []
    generated = []
    worker = GeneratorWorker([Symmetry.None_], 0.0, 20.0,
                             settings=Settings(lower_priority=False), seed=3,
                             on_status=statuses.append, on_generated=generated.append)
    worker.request_stop()
    worker.start()
    worker.join(timeout=30)
    print(f"  Statuses: {statuses}")
    assert not worker.is_alive()
    assert not worker.is_running()
    assert statuses == ["Running", "Stopped"]
    assert generated == []
    print("  [PASS] Worker stop tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# GENERATOR TESTS")
    print("#"*60)

    tests = [
        ("Symmetry orbits", test_symmetry_orbits),
        ("Symmetry names", test_symmetry_names),
        ("Candidate", test_candidate),
        ("Repair", test_repair),
        ("Generate", test_generate),
        ("Worker stop", test_worker_stop),
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
