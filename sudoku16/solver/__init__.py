"""
Solver Package - Rule-based solving engine for 16x16 Sudoku.

Technique producers are registered by name and assembled by the Solver into
ordered tiers according to the enabled techniques.

Public API:
    - Solver: Solving engine bound to one grid
    - Hint, DirectHint, IndirectHint, WarningHint: Deductions
    - AnalysisInfo, SolutionHint: Whole-puzzle results
    - SolveResult, Rating: Outcomes of solving and rating passes
    - SolverContext: Cancellation and progress
    - Asker: Confirmation gate for the advanced techniques
    - create_producer(), create_technique_producer(): Factory functions
    - get_producer_names(), get_producer_info(): Registry metadata

Usage:
    from sudoku16.solver import Solver, SolverContext

    solver = Solver(grid, settings, SolverContext(timeout_sec=60))
    solver.rebuild_potential_values()
    for hint in solver.get_all_hints():
        print(hint)
"""

# Core data structures
from .hint import (
    AnalysisInfo,
    DirectHint,
    Hint,
    IndirectHint,
    RuleUsage,
    SolutionHint,
    WarningHint,
)
from .solution import (
    UNRATABLE,
    Rating,
    RatingMode,
    SolveMetrics,
    SolveResult,
    SolveStatus,
    format_difficulty,
)
from .context import SolverContext
from .accumulator import DefaultHintsAccumulator, HintsAccumulator, SingleHintAccumulator
from .asker import AlwaysAsker, Asker, CallbackAsker, NeverAsker

# Producer framework
from .base import HintProducer, ProducerKind
from .factory import (
    create_producer,
    create_technique_producer,
    get_producer_info,
    get_producer_names,
    register_producer,
)

# Import producers to register them
from . import rules
from . import checks

from .solver import ADVANCED_WARNING1, ADVANCED_WARNING2, Solver

__all__ = [
    # Hints
    "Hint",
    "DirectHint",
    "IndirectHint",
    "WarningHint",
    "AnalysisInfo",
    "SolutionHint",
    "RuleUsage",
    # Results
    "UNRATABLE",
    "Rating",
    "RatingMode",
    "SolveMetrics",
    "SolveResult",
    "SolveStatus",
    "format_difficulty",
    # Context and accumulators
    "SolverContext",
    "HintsAccumulator",
    "DefaultHintsAccumulator",
    "SingleHintAccumulator",
    "Asker",
    "AlwaysAsker",
    "NeverAsker",
    "CallbackAsker",
    # Producer framework
    "HintProducer",
    "ProducerKind",
    "create_producer",
    "create_technique_producer",
    "get_producer_info",
    "get_producer_names",
    "register_producer",
    # Engine
    "Solver",
    "ADVANCED_WARNING1",
    "ADVANCED_WARNING2",
]
