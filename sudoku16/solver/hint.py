"""
Hint Module - Deductions produced by technique producers.

A hint is immutable once produced. It records the producer (rule) that
found it, a difficulty and either a cell assignment, a set of removable
potential values, or both (the "direct" technique variants). Equality is
by content, never by producer identity, so accumulators can deduplicate.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..grid import Grid, Region, cell_name, mask_values


@dataclass(frozen=True)
class Hint:
    """
    Base class of all hints.

    Attributes:
        rule: Producer that found the hint (not part of equality)
        name: Technique name shown to the user
        difficulty: Step difficulty, higher is harder
        cell: Index of the assigned cell, or None
        value: Assigned value (1-16) when cell is set
        regions: Regions involved, for display only
    """
    rule: Any = field(compare=False, repr=False)
    name: str = ""
    difficulty: float = 0.0
    cell: Optional[int] = None
    value: int = 0
    regions: Tuple[Region, ...] = field(default=(), compare=False, repr=False)

    @property
    def producer_id(self) -> str:
        """Stable identifier of the producing technique instance."""
        return self.rule.producer_id if self.rule is not None else ""

    def is_worth(self) -> bool:
        """True if applying the hint changes the grid."""
        return self.cell is not None

    def apply(self, grid: Grid) -> None:
        raise NotImplementedError

    def describe(self) -> str:
        if self.cell is not None:
            return f"{self.name}: {cell_name(self.cell)}={self.value}"
        return self.name

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class DirectHint(Hint):
    """A hint that assigns a value to a cell."""

    def __post_init__(self):
        if self.cell is None or not 1 <= self.value <= 16:
            raise ValueError(f"Direct hint needs a cell and a value, got {self.cell}={self.value}")

    def apply(self, grid: Grid) -> None:
        grid.set_value_and_cancel(self.cell, self.value)


@dataclass(frozen=True)
class IndirectHint(Hint):
    """
    A hint that removes potential values, optionally followed by an
    assignment it makes obvious.

    Attributes:
        removable: Sorted (cell index, mask of removable values) pairs
    """
    removable: Tuple[Tuple[int, int], ...] = ()

    @classmethod
    def create(cls, rule: Any, name: str, difficulty: float,
               removable: Dict[int, int], cell: Optional[int] = None,
               value: int = 0, regions: Tuple[Region, ...] = ()) -> "IndirectHint":
        """
        Create an IndirectHint from a removable-potentials dictionary.

        Entries with an empty mask are dropped.
        """
        pairs = tuple(sorted((i, m) for i, m in removable.items() if m))
        return cls(rule=rule, name=name, difficulty=difficulty, cell=cell,
                   value=value, regions=regions, removable=pairs)

    def is_worth(self) -> bool:
        return bool(self.removable) or self.cell is not None

    def apply(self, grid: Grid) -> None:
        for index, mask in self.removable:
            grid.remove_potentials(index, mask)
        if self.cell is not None:
            grid.set_value_and_cancel(self.cell, self.value)

    def describe(self) -> str:
        parts = [
            f"{cell_name(index)}<>{','.join(str(v) for v in mask_values(mask))}"
            for index, mask in self.removable
        ]
        text = self.name
        if parts:
            text += ": " + ", ".join(parts)
        if self.cell is not None:
            text += f", {cell_name(self.cell)}={self.value}"
        return text


@dataclass(frozen=True)
class WarningHint(Hint):
    """
    A hint reporting a property of the grid (invalid, ambiguous, ...).

    Applying a warning does not change the grid.
    """
    message: str = ""

    def is_worth(self) -> bool:
        return False

    def apply(self, grid: Grid) -> None:
        pass

    def describe(self) -> str:
        return f"{self.name}: {self.message}" if self.message else self.name


@dataclass(frozen=True, order=True)
class RuleUsage:
    """Identity of a rule for usage statistics, ordered by difficulty then name."""
    difficulty: float
    name: str

    @classmethod
    def of(cls, hint: Hint) -> "RuleUsage":
        return cls(hint.difficulty, hint.name)


@dataclass(frozen=True)
class AnalysisInfo(WarningHint):
    """
    Rating of a puzzle and the list of rules used to solve it.

    The grid is not modified by applying this hint.

    Attributes:
        rules: (rule, count) pairs, sorted by difficulty
        rule_names: (name, count) pairs, in the same order
    """
    rules: Tuple[Tuple[RuleUsage, int], ...] = ()
    rule_names: Tuple[Tuple[str, int], ...] = ()

    @property
    def total(self) -> float:
        return sum(rule.difficulty * count for rule, count in self.rules)

    @property
    def steps(self) -> int:
        return sum(count for _name, count in self.rule_names)

    def describe(self) -> str:
        lines = [f"Sudoku Rating: {self.difficulty:.1f}"]
        if self.steps:
            lines.append(f"Total: {self.total:.1f} in {self.steps} steps "
                         f"(average {self.total / self.steps:.2f})")
        for name, count in self.rule_names:
            lines.append(f"{count} x {name}")
        return "\n".join(lines)


@dataclass(frozen=True)
class SolutionHint(WarningHint):
    """Full solution found by brute force; applying it fills the grid."""
    solution: Tuple[int, ...] = ()

    def is_worth(self) -> bool:
        return bool(self.solution)

    def apply(self, grid: Grid) -> None:
        for index, value in enumerate(self.solution):
            if grid.get_value(index) == 0:
                grid.set_value(index, value)
