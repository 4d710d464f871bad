"""
Symmetry Module - Symmetries a generated puzzle can have.
"""

from enum import Enum
from typing import Tuple

from ..grid import SIZE

Point = Tuple[int, int]

_LAST = SIZE - 1


def _orbit(*points: Point) -> Tuple[Point, ...]:
    # Points on an axis map to themselves; keep each point once
    return tuple(dict.fromkeys(points))


class Symmetry(Enum):
    """
    Symmetry of the clue pattern of a puzzle.

    get_points(x, y) returns the orbit of a cell: the cells that must be
    cleared or kept together to preserve the symmetry, (x, y) first.
    """
    Vertical = "Vertical"
    Horizontal = "Horizontal"
    Diagonal = "Diagonal"
    AntiDiagonal = "Anti-diagonal"
    BiDiagonal = "Bi-diagonal"
    Orthogonal = "Orthogonal"
    Rotational180 = "180° rotational"
    Rotational90 = "90° rotational"
    None_ = "None"
    Full = "Full"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Symmetry":
        """
        Look up a symmetry by member name or label, case-insensitively.

        Raises:
            ValueError: If the name matches no symmetry
        """
        key = name.strip().lower()
        for symmetry in cls:
            if key in (symmetry.name.lower().rstrip("_"), symmetry.value.lower()):
                return symmetry
        raise ValueError(f"Unknown symmetry: {name}")

    def get_points(self, x: int, y: int) -> Tuple[Point, ...]:
        m = _LAST
        if self is Symmetry.Vertical:
            return _orbit((x, y), (m - x, y))
        if self is Symmetry.Horizontal:
            return _orbit((x, y), (x, m - y))
        if self is Symmetry.Diagonal:
            return _orbit((x, y), (m - y, m - x))
        if self is Symmetry.AntiDiagonal:
            return _orbit((x, y), (y, x))
        if self is Symmetry.BiDiagonal:
            return _orbit((x, y), (y, x), (m - y, m - x), (m - x, m - y))
        if self is Symmetry.Orthogonal:
            return _orbit((x, y), (m - x, y), (x, m - y), (m - x, m - y))
        if self is Symmetry.Rotational180:
            return _orbit((x, y), (m - x, m - y))
        if self is Symmetry.Rotational90:
            return _orbit((x, y), (m - x, m - y), (y, m - x), (m - y, x))
        if self is Symmetry.Full:
            return _orbit((x, y), (m - x, y), (x, m - y), (m - x, m - y),
                          (y, x), (m - y, x), (y, m - x), (m - y, m - x))
        return ((x, y),)

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Symmetry.Vertical: "Mirror symmetry around the vertical axis",
    Symmetry.Horizontal: "Mirror symmetry around the horizontal axis",
    Symmetry.Diagonal: "Mirror symmetry around the raising diagonal",
    Symmetry.AntiDiagonal: "Mirror symmetry around the falling diagonal",
    Symmetry.BiDiagonal: "Mirror symmetries around both diagonals",
    Symmetry.Orthogonal: "Mirror symmetries around the horizontal and vertical axes",
    Symmetry.Rotational180: "Symmetric under a 180° rotation (central symmetry)",
    Symmetry.Rotational90: "Symmetric under a 90° rotation",
    Symmetry.None_: "No symmetry",
    Symmetry.Full: "All symmetries (around the 8 axes and under a 90° rotation)",
}
