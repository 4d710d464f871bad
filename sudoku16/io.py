"""
Puzzle IO Module - Reading and writing puzzles as plain text.

Reading is lenient: lines are joined, characters that are neither a value
nor an empty-cell marker of the chosen format are treated as padding, so a
single line of 256 characters, 16 lines of 16 characters, or a grid drawn
with separators all load.

Formats:
    1: values written 0-9A-F, '.' for empty
    2: values written 1-9A-G, '.' or '0' for empty
    3: values written as decimal numbers 1-16, '.' for empty
    4: values written A-P, '.' or '0' for empty (default)
"""

import logging
from enum import Enum, IntEnum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .grid import CELL_COUNT, SIZE, Grid, mask_values, popcount

logger = logging.getLogger(__name__)

ERROR_MSG = "Unreadable Sudoku format"
WARNING_MSG = ("Warning: the Sudoku format was not recognized.\n"
               "The Sudoku may not have been read correctly")


class PuzzleFormat(IntEnum):
    HEX = 1
    ONE_BASED = 2
    DECIMAL = 3
    LETTERS = 4


class LoadStatus(Enum):
    """Outcome of loading a puzzle."""
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


# Characters of values 1-16 (index 0 is the empty cell)
_OUTPUT_CHARS = {
    PuzzleFormat.HEX: ".0123456789ABCDEF",
    PuzzleFormat.ONE_BASED: ".123456789ABCDEFG",
    PuzzleFormat.LETTERS: ".ABCDEFGHIJKLMNOP",
}

_EMPTY_CHARS = {
    PuzzleFormat.HEX: ".",
    PuzzleFormat.ONE_BASED: ".0",
    PuzzleFormat.DECIMAL: ".",
    PuzzleFormat.LETTERS: ".0",
}


def _char_value(ch: str, fmt: PuzzleFormat) -> Optional[int]:
    """Value of a single character, 0 for empty, None for padding."""
    if ch in _EMPTY_CHARS[fmt]:
        return 0
    if fmt is PuzzleFormat.DECIMAL:
        return int(ch) if "1" <= ch <= "9" else None
    index = _OUTPUT_CHARS[fmt].find(ch)
    return index if index > 0 else None


def _count_cells(text: str, fmt: PuzzleFormat) -> int:
    if fmt is PuzzleFormat.DECIMAL:
        return sum(1 for ch in text if ch.isdigit() or ch == ".")
    return sum(1 for ch in text if _char_value(ch, fmt) is not None)


def parse_values(text: str, fmt: PuzzleFormat = PuzzleFormat.LETTERS) -> Tuple[List[int], LoadStatus]:
    """
    Read up to 256 values from text.

    Args:
        text: Puzzle text, possibly spanning several lines
        fmt: Puzzle format

    Returns:
        (values, status): 256 values (0 for empty) and the load status.
        With ERROR, values are all 0.
    """
    fmt = PuzzleFormat(fmt)
    text = " ".join(text.splitlines()) + " "
    values = [0] * CELL_COUNT
    if _count_cells(text, fmt) < CELL_COUNT:
        return values, LoadStatus.ERROR

    cell = 0
    pos = 0
    while cell < CELL_COUNT and pos < len(text):
        ch = text[pos]
        pos += 1
        if fmt is PuzzleFormat.DECIMAL and ch == "1" and "0" <= text[pos] <= "6":
            values[cell] = 10 + int(text[pos])
            pos += 1
            cell += 1
            continue
        value = _char_value(ch, fmt)
        if value is not None:
            values[cell] = value
            cell += 1
    return values, LoadStatus.OK if cell == CELL_COUNT else LoadStatus.WARNING


def load_from_text(text: str, fmt: PuzzleFormat = PuzzleFormat.LETTERS) -> Tuple[Grid, LoadStatus]:
    """
    Load a puzzle from text.

    Returns:
        (grid, status): the grid is empty when the status is ERROR
    """
    values, status = parse_values(text, fmt)
    if status is LoadStatus.ERROR:
        logger.warning(ERROR_MSG)
    elif status is LoadStatus.WARNING:
        logger.warning(WARNING_MSG.replace("\n", " "))
    return Grid.from_values(values), status


def load_from_file(path: Union[str, Path],
                   fmt: PuzzleFormat = PuzzleFormat.LETTERS) -> Tuple[Grid, LoadStatus]:
    """
    Load a puzzle from a text file.

    Unreadable files give an empty grid and LoadStatus.ERROR.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error while reading file {path}: {e}")
        return Grid(), LoadStatus.ERROR
    return load_from_text(text, fmt)


def save_to_text(grid: Grid, fmt: PuzzleFormat = PuzzleFormat.LETTERS) -> str:
    """Render the values of a grid as 16 lines of 16 cells."""
    fmt = PuzzleFormat(fmt)
    lines = []
    for y in range(SIZE):
        cells = []
        for x in range(SIZE):
            value = grid.get_cell_value(x, y)
            if fmt is PuzzleFormat.DECIMAL:
                cells.append(f"{value if value else '.':>3}")
            else:
                cells.append(_OUTPUT_CHARS[fmt][value])
        lines.append("".join(cells))
    return "\n".join(lines) + "\n"


def save_to_file(grid: Grid, path: Union[str, Path],
                 fmt: PuzzleFormat = PuzzleFormat.LETTERS) -> bool:
    """
    Save a grid to a text file.

    Returns:
        True on success, False if the file could not be written
    """
    path = Path(path)
    try:
        path.write_text(save_to_text(grid, fmt), encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to save puzzle to {path}: {e}")
        return False
    logger.info(f"Puzzle saved to {path}")
    return True


def format_pencil_marks(grid: Grid, fmt: PuzzleFormat = PuzzleFormat.LETTERS) -> str:
    """
    Draw the grid with the potential values of every empty cell.

    Every cell is as wide as the largest set of potential values.
    """
    fmt = PuzzleFormat(fmt)
    chars = _OUTPUT_CHARS.get(fmt, _OUTPUT_CHARS[PuzzleFormat.LETTERS])
    values = grid.values()
    masks = grid.potentials()
    width = max([1] + [popcount(m) for m in masks])
    separator = "+" + ("-" * (4 * (width + 1)) + "-+") * 4

    lines = []
    for band in range(4):
        lines.append(separator)
        for row in range(4):
            y = band * 4 + row
            text = "|"
            for stack in range(4):
                for col in range(4):
                    index = y * SIZE + stack * 4 + col
                    if values[index]:
                        marks = chars[values[index]]
                    else:
                        marks = "".join(chars[v] for v in mask_values(masks[index]))
                    text += " " + marks.ljust(width)
                text += " |"
            lines.append(text)
    lines.append(separator)
    return "\n".join(lines)
