"""
Test script for puzzle text formats

Tests:
1. Reading and writing formats 1-4
2. Load status for short and ambiguous input
3. Files and pencil marks

Usage:
    python test_io.py
"""

import sys
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from grids import LONE_CELL, LONE_VALUE, diagonal_grid, lone_cell_grid
from sudoku16.io import (
    LoadStatus,
    PuzzleFormat,
    format_pencil_marks,
    load_from_file,
    load_from_text,
    parse_values,
    save_to_file,
    save_to_text,
)


def test_letters_format():
    print("\n" + "="*60)
    print("TEST: Letters format")
    print("="*60)

    grid = lone_cell_grid()
    text = save_to_text(grid)
    lines = text.splitlines()
    print(f"  First line: {lines[0]}")
    assert len(lines) == 16 and all(len(line) == 16 for line in lines)
    assert lines[0].startswith("ABCD")
    assert lines[5][7] == "."

    loaded, status = load_from_text(text)
    assert status is LoadStatus.OK
    assert loaded.values() == grid.values()

    # Single line form, as written by Grid.to_line()
    loaded, status = load_from_text(grid.to_line(), PuzzleFormat.LETTERS)
    assert status is LoadStatus.OK
    assert loaded.get_value(LONE_CELL) == 0
    print("  [PASS] Letters format tests")


def test_hex_and_one_based_formats():
    print("\n" + "="*60)
    print("TEST: Hex and one-based formats")
    print("="*60)

    grid = lone_cell_grid()
    hex_text = save_to_text(grid, PuzzleFormat.HEX)
    assert hex_text.splitlines()[0].startswith("0123")
    values, status = parse_values(hex_text, PuzzleFormat.HEX)
    assert status is LoadStatus.OK and values == grid.values()

    one_based = save_to_text(grid, PuzzleFormat.ONE_BASED)
    assert one_based.splitlines()[0].endswith("DEFG")
    # '0' also marks an empty cell in this format
    values, status = parse_values(one_based.replace(".", "0"), PuzzleFormat.ONE_BASED)
    assert status is LoadStatus.OK and values == grid.values()

    # Separators drawn around the grid are padding
    boxed = "\n".join("|" + line + "|" for line in one_based.splitlines())
    values, status = parse_values(boxed, PuzzleFormat.ONE_BASED)
    assert status is LoadStatus.OK and values == grid.values()
    print("  [PASS] Hex and one-based format tests")


def test_decimal_format():
    print("\n" + "="*60)
    print("TEST: Decimal format")
    print("="*60)

    grid = lone_cell_grid()
    text = save_to_text(grid, PuzzleFormat.DECIMAL)
    first = text.splitlines()[0]
    print(f"  First line: {first}")
    assert first == "".join(f"{v:>3}" for v in range(1, 17))

    values, status = parse_values(text, PuzzleFormat.DECIMAL)
    assert status is LoadStatus.OK
    assert values == grid.values()
    assert values[LONE_CELL] == 0
    assert values.count(16) == 16

    # 200 two-digit cells: enough digits, not enough cells
    values, status = parse_values("16 " * 200, PuzzleFormat.DECIMAL)
    assert status is LoadStatus.WARNING
    assert values[:200] == [16] * 200 and values[200:] == [0] * 56
    print("  [PASS] Decimal format tests")


def test_unreadable_text():
    print("\n" + "="*60)
    print("TEST: Unreadable text")
    print("="*60)

    grid, status = load_from_text("ABCDEFG")
    assert status is LoadStatus.ERROR
    assert grid.count_filled() == 0

    grid, status = load_from_file(Path(tempfile.gettempdir()) / "no-such-puzzle.txt")
    assert status is LoadStatus.ERROR
    print("  [PASS] Unreadable text tests")


def test_files():
    print("\n" + "="*60)
    print("TEST: Files")
    print("="*60)

    grid = diagonal_grid()
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "puzzle.txt"
        assert save_to_file(grid, path, PuzzleFormat.HEX)
        loaded, status = load_from_file(path, PuzzleFormat.HEX)
        assert status is LoadStatus.OK
        assert loaded.values() == grid.values()

        assert not save_to_file(grid, Path(tmp) / "missing" / "puzzle.txt")
    print("  [PASS] File tests")


def test_pencil_marks():
    print("\n" + "="*60)
    print("TEST: Pencil marks")
    print("="*60)

    grid = lone_cell_grid()
    text = format_pencil_marks(grid)
    lines = text.splitlines()
    print(lines[0])
    print(lines[1])
    assert len(lines) == 21
    assert lines[0] == lines[5] == lines[20]
    assert lines[0].startswith("+") and lines[1].startswith("|")
    # Row 5, column 7: the empty cell shows its only potential value
    assert lines[7].split()[9] == ".ABCDEFGHIJKLMNOP"[LONE_VALUE]
    print("  [PASS] Pencil mark tests")


def main():
    """Run all tests."""
    print("\n" + "#"*60)
    print("# PUZZLE FORMAT TESTS")
    print("#"*60)

    tests = [
        ("Letters format", test_letters_format),
        ("Hex and one-based formats", test_hex_and_one_based_formats),
        ("Decimal format", test_decimal_format),
        ("Unreadable text", test_unreadable_text),
        ("Files", test_files),
        ("Pencil marks", test_pencil_marks),
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
