"""
Solution Module - Outcomes of solving and rating passes.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List

from .hint import RuleUsage


# Rating reported when no technique applies or a rating is invalidated
UNRATABLE = 20.0


class SolveStatus(Enum):
    """
    Outcome of a solving pass.

    States:
        SOLVED: Grid completely filled
        UNSOLVABLE: No enabled technique applies and the grid is incomplete
        CANCELLED: Stopped by cooperative cancellation
    """
    SOLVED = auto()
    UNSOLVABLE = auto()
    CANCELLED = auto()


class RatingMode(Enum):
    """
    Constraints checked while computing pearl and diamond ratings.

    Modes:
        NONE: Record pearl and diamond only
        PEARL: No step after the first placement may be harder than pearl
        DIAMOND: Additionally, the first placement may not be harder than diamond
    """
    NONE = "none"
    PEARL = "p"
    DIAMOND = "d"


@dataclass
class SolveMetrics:
    """
    Statistics of a solving pass.

    Attributes:
        computation_time_ms: Time taken in milliseconds
        steps: Number of hints applied
    """
    computation_time_ms: float = 0.0
    steps: int = 0


@dataclass
class SolveResult:
    """
    Result of Solver.solve().

    Attributes:
        status: Solved, unsolvable or cancelled
        rules: Usage count per rule, sorted by difficulty then name
        difficulty: Maximum step difficulty
        metrics: Performance statistics
    """
    status: SolveStatus
    rules: Dict[RuleUsage, int] = field(default_factory=dict)
    difficulty: float = 0.0
    metrics: SolveMetrics = field(default_factory=SolveMetrics)

    @property
    def is_solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    @property
    def was_cancelled(self) -> bool:
        return self.status is SolveStatus.CANCELLED

    @property
    def total(self) -> float:
        """Sum of the difficulties of all applied steps."""
        return sum(rule.difficulty * count for rule, count in self.rules.items())

    @property
    def steps(self) -> int:
        return sum(self.rules.values())

    def rule_names(self) -> List[str]:
        return [rule.name for rule in self.rules]


@dataclass(frozen=True)
class Rating:
    """
    Result of Solver.get_difficulty().

    Attributes:
        difficulty: Maximum step difficulty, or 20.0 if unratable/invalidated
        pearl: Running difficulty at the first placement
        diamond: Running difficulty after the first step
    """
    difficulty: float = 0.0
    pearl: float = 0.0
    diamond: float = 0.0

    def format(self, template: str = "ED=%r/%p/%d", puzzle: str = "") -> str:
        """
        Render the rating with %r, %p, %d and %g (puzzle) placeholders.
        """
        out = []
        i = 0
        while i < len(template):
            ch = template[i]
            if ch != "%" or i + 1 >= len(template):
                out.append(ch)
                i += 1
                continue
            code = template[i + 1]
            i += 2
            if code == "r":
                out.append(format_difficulty(self.difficulty))
            elif code == "p":
                out.append(format_difficulty(self.pearl))
            elif code == "d":
                out.append(format_difficulty(self.diamond))
            elif code == "g":
                out.append(puzzle)
            else:
                out.append(ch)
        return "".join(out)


def format_difficulty(value: float) -> str:
    """Format a difficulty rounded to one decimal, e.g. 7.15 -> '7.2'."""
    tenths = int((value + 0.05) * 10)
    return f"{tenths // 10}.{tenths % 10}"
