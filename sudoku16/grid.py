"""
Grid Module - Mutable 16x16 grid with per-cell potential values.

Cell values and potential-value bitmasks live in numpy arrays indexed by
``index = y * 16 + x``. Bit ``v - 1`` of a mask stands for value ``v``.
A filled cell always has an empty potential set.

Regions are the 16 blocks, 16 rows and 16 columns, iterated in that order.
"""

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple

import numpy as np


SIZE = 16
BLOCK_SIZE = 4
CELL_COUNT = SIZE * SIZE
FULL_MASK = (1 << SIZE) - 1
VALUE_CHARS = ".ABCDEFGHIJKLMNOP"


# ---------- Bitmask helpers ----------

def bit(value: int) -> int:
    """Mask with the single bit for ``value`` (1-16)."""
    return 1 << (value - 1)


def popcount(mask: int) -> int:
    return mask.bit_count()


def mask_values(mask: int) -> List[int]:
    """Values present in a mask, ascending."""
    values = []
    while mask:
        low = mask & -mask
        values.append(low.bit_length())
        mask ^= low
    return values


def first_value(mask: int) -> int:
    """Smallest value in a non-empty mask."""
    return (mask & -mask).bit_length()


def values_mask(values: Iterable[int]) -> int:
    mask = 0
    for value in values:
        mask |= bit(value)
    return mask


# ---------- Topology ----------

class RegionKind(Enum):
    BLOCK = "block"
    ROW = "row"
    COLUMN = "column"


@dataclass(frozen=True)
class Region:
    """
    A block, row or column: 16 cell indices with the uniqueness constraint.

    Attributes:
        kind: Partition kind
        number: 0-based number within its kind
        indices: Cell indices, in reading order
    """
    kind: RegionKind
    number: int
    indices: Tuple[int, ...]

    def __str__(self) -> str:
        return f"{self.kind.value} {self.number + 1}"

    def contains(self, index: int) -> bool:
        return index in _REGION_SETS[self]

    def common_indices(self, other: "Region") -> List[int]:
        """Indices of cells shared with another region, in this region's order."""
        other_set = _REGION_SETS[other]
        return [i for i in self.indices if i in other_set]


def _block_indices(number: int) -> Tuple[int, ...]:
    top = (number // BLOCK_SIZE) * BLOCK_SIZE
    left = (number % BLOCK_SIZE) * BLOCK_SIZE
    return tuple(
        (top + dy) * SIZE + left + dx
        for dy in range(BLOCK_SIZE)
        for dx in range(BLOCK_SIZE)
    )


BLOCKS: Tuple[Region, ...] = tuple(
    Region(RegionKind.BLOCK, b, _block_indices(b)) for b in range(SIZE)
)
ROWS: Tuple[Region, ...] = tuple(
    Region(RegionKind.ROW, y, tuple(y * SIZE + x for x in range(SIZE))) for y in range(SIZE)
)
COLUMNS: Tuple[Region, ...] = tuple(
    Region(RegionKind.COLUMN, x, tuple(y * SIZE + x for y in range(SIZE))) for x in range(SIZE)
)
REGIONS: Tuple[Region, ...] = BLOCKS + ROWS + COLUMNS

_REGIONS_BY_KIND: Dict[RegionKind, Tuple[Region, ...]] = {
    RegionKind.BLOCK: BLOCKS,
    RegionKind.ROW: ROWS,
    RegionKind.COLUMN: COLUMNS,
}
_REGION_SETS: Dict[Region, FrozenSet[int]] = {r: frozenset(r.indices) for r in REGIONS}


def block_number(index: int) -> int:
    y, x = divmod(index, SIZE)
    return (y // BLOCK_SIZE) * BLOCK_SIZE + x // BLOCK_SIZE


# (block, row, column) of every cell
CELL_REGIONS: Tuple[Tuple[Region, Region, Region], ...] = tuple(
    (BLOCKS[block_number(i)], ROWS[i // SIZE], COLUMNS[i % SIZE]) for i in range(CELL_COUNT)
)

PEER_SETS: Tuple[FrozenSet[int], ...] = tuple(
    frozenset(j for region in CELL_REGIONS[i] for j in region.indices if j != i)
    for i in range(CELL_COUNT)
)
PEERS: Tuple[Tuple[int, ...], ...] = tuple(tuple(sorted(p)) for p in PEER_SETS)

# numpy gather tables for vectorized elimination
_REGION_INDEX = np.array([r.indices for r in REGIONS], dtype=np.intp)
_CELL_REGION_INDEX = np.array(
    [[block_number(i), SIZE + i // SIZE, 2 * SIZE + i % SIZE] for i in range(CELL_COUNT)],
    dtype=np.intp,
)


def sees(a: int, b: int) -> bool:
    """True if two distinct cells share a region."""
    return b in PEER_SETS[a]


def cell_name(index: int) -> str:
    y, x = divmod(index, SIZE)
    return f"r{y + 1}c{x + 1}"


def _check_value(value: int) -> None:
    if not 0 <= value <= SIZE:
        raise ValueError(f"Cell value out of range: {value}")


def _check_coords(x: int, y: int) -> int:
    if not (0 <= x < SIZE and 0 <= y < SIZE):
        raise ValueError(f"Cell coordinates out of range: ({x}, {y})")
    return y * SIZE + x


# ---------- Grid ----------

class Cell:
    """
    View on one cell of a grid.

    Cells are lightweight handles; all state lives in the owning Grid.
    """
    __slots__ = ("_grid", "index")

    def __init__(self, grid: "Grid", index: int):
        self._grid = grid
        self.index = index

    @property
    def x(self) -> int:
        return self.index % SIZE

    @property
    def y(self) -> int:
        return self.index // SIZE

    @property
    def value(self) -> int:
        return self._grid.get_value(self.index)

    def set_value(self, value: int) -> None:
        self._grid.set_value(self.index, value)

    def set_value_and_cancel(self, value: int) -> None:
        """Set the value and remove it from the potentials of every peer."""
        self._grid.set_value_and_cancel(self.index, value)

    def is_empty(self) -> bool:
        return self.value == 0

    @property
    def potential_values(self) -> int:
        """Potential values as a bitmask."""
        return self._grid.get_potentials(self.index)

    def potential_list(self) -> List[int]:
        return mask_values(self.potential_values)

    def has_potential_value(self, value: int) -> bool:
        return bool(self.potential_values & bit(value))

    def add_potential_value(self, value: int) -> None:
        self._grid.add_potentials(self.index, bit(value))

    def remove_potential_value(self, value: int) -> None:
        self._grid.remove_potentials(self.index, bit(value))

    def clear_potential_values(self) -> None:
        self._grid.set_potentials(self.index, 0)

    def cardinality(self) -> int:
        return popcount(self.potential_values)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self._grid is other._grid and self.index == other.index

    def __hash__(self) -> int:
        return hash(self.index)

    def __repr__(self) -> str:
        return cell_name(self.index)


class Grid:
    """
    16x16 grid of values and potential values.

    Attributes are private numpy arrays; use the accessors. Coordinates
    are (x, y) with x the column; flat indices are y * 16 + x.
    """

    def __init__(self):
        self._values = np.zeros(CELL_COUNT, dtype=np.int8)
        self._potentials = np.zeros(CELL_COUNT, dtype=np.int32)
        self._givens = np.zeros(CELL_COUNT, dtype=bool)

    @classmethod
    def from_values(cls, values: Sequence[int]) -> "Grid":
        """
        Create a grid from 256 values (0 for empty), in reading order.

        Raises:
            ValueError: If the sequence has the wrong length or bad values
        """
        if len(values) != CELL_COUNT:
            raise ValueError(f"Expected {CELL_COUNT} values, got {len(values)}")
        grid = cls()
        for value in values:
            _check_value(int(value))
        grid._values[:] = np.asarray(values, dtype=np.int8)
        return grid

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        """Create a grid from 16 rows of 16 values."""
        if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
            raise ValueError("Expected 16 rows of 16 values")
        return cls.from_values([v for row in rows for v in row])

    # --- values ---

    def get_cell_value(self, x: int, y: int) -> int:
        return int(self._values[_check_coords(x, y)])

    def set_cell_value(self, x: int, y: int, value: int) -> None:
        self.set_value(_check_coords(x, y), value)

    def get_cell(self, x: int, y: int) -> Cell:
        return Cell(self, _check_coords(x, y))

    def cell_at(self, index: int) -> Cell:
        return Cell(self, index)

    def get_value(self, index: int) -> int:
        return int(self._values[index])

    def set_value(self, index: int, value: int) -> None:
        _check_value(value)
        self._values[index] = value
        if value:
            self._potentials[index] = 0

    def set_value_and_cancel(self, index: int, value: int) -> None:
        self.set_value(index, value)
        if value:
            peers = np.fromiter(PEERS[index], dtype=np.intp)
            self._potentials[peers] &= np.int32(FULL_MASK ^ bit(value))

    def values(self) -> List[int]:
        """All 256 values as a plain list."""
        return self._values.tolist()

    # --- potentials ---

    def get_potentials(self, index: int) -> int:
        return int(self._potentials[index])

    def set_potentials(self, index: int, mask: int) -> None:
        self._potentials[index] = mask & FULL_MASK

    def add_potentials(self, index: int, mask: int) -> None:
        self._potentials[index] = int(self._potentials[index]) | (mask & FULL_MASK)

    def remove_potentials(self, index: int, mask: int) -> None:
        self._potentials[index] = int(self._potentials[index]) & (FULL_MASK ^ mask)

    def potentials(self) -> List[int]:
        """All 256 potential masks as a plain list."""
        return self._potentials.tolist()

    def rebuild_potential_values(self) -> None:
        """Give every empty cell all 16 values, then cancel by placed values."""
        self._potentials[self._values == 0] = FULL_MASK
        self.cancel_potential_values()

    def cancel_potential_values(self) -> None:
        """
        Remove all illegal potential values according to the placed values.

        A placed value is removed from every other cell of its block, row and
        column; filled cells lose all potentials. Idempotent.
        """
        values = self._values.astype(np.int32)
        filled = values > 0
        bits = np.where(filled, np.left_shift(1, np.maximum(values - 1, 0)), 0)
        used = np.bitwise_or.reduce(bits[_REGION_INDEX], axis=1)
        peer_used = np.bitwise_or.reduce(used[_CELL_REGION_INDEX], axis=1)
        self._potentials &= (FULL_MASK ^ peer_used).astype(np.int32)
        self._potentials[filled] = 0

    # --- regions ---

    @staticmethod
    def get_regions(kind: RegionKind) -> Tuple[Region, ...]:
        return _REGIONS_BY_KIND[kind]

    # --- whole grid ---

    def copy_to(self, other: "Grid") -> None:
        """Deep copy values, potentials and givens into another grid."""
        np.copyto(other._values, self._values)
        np.copyto(other._potentials, self._potentials)
        np.copyto(other._givens, self._givens)

    def copy(self) -> "Grid":
        result = Grid()
        self.copy_to(result)
        return result

    def fix_givens(self) -> None:
        """Mark the current clues as permanent givens."""
        self._givens[:] = self._values != 0

    def is_given(self, index: int) -> bool:
        return bool(self._givens[index])

    def is_solved(self) -> bool:
        return bool(np.all(self._values != 0))

    def count_filled(self) -> int:
        return int(np.count_nonzero(self._values))

    def filled_indices(self) -> List[int]:
        return np.flatnonzero(self._values).tolist()

    def empty_indices(self) -> List[int]:
        return np.flatnonzero(self._values == 0).tolist()

    def values_equal(self, other: "Grid") -> bool:
        return bool(np.array_equal(self._values, other._values))

    def fingerprint(self) -> str:
        """Digest of values and potentials, for cheap state comparison."""
        digest = hashlib.sha256(self._values.tobytes())
        digest.update(self._potentials.tobytes())
        return digest.hexdigest()

    def to_line(self) -> str:
        """Single-line 256-character form, A-P for values, '.' for empty."""
        return "".join(VALUE_CHARS[v] for v in self._values.tolist())

    def __str__(self) -> str:
        line = self.to_line()
        return "\n".join(line[y * SIZE:(y + 1) * SIZE] for y in range(SIZE))

    def __repr__(self) -> str:
        return f"Grid({self.count_filled()} filled)"
