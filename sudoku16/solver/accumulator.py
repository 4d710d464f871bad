"""
Hints Accumulator Module - Collectors handed to technique producers.

Producers push every hint they find into an accumulator and poll
should_stop() inside long loops. The Solver picks the accumulator:
bulk gathering deduplicates, immediate solving keeps the first hint.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Set

from .context import SolverContext
from .hint import Hint


class HintsAccumulator(ABC):
    """
    Abstract collector of hints.

    Attributes:
        context: Optional solver context, polled for cancellation
    """

    def __init__(self, context: Optional[SolverContext] = None):
        self.context = context

    @abstractmethod
    def add(self, hint: Hint) -> None:
        """Accept a hint found by a producer."""
        pass

    def should_stop(self) -> bool:
        """
        Check whether producers should stop searching.

        Returns:
            True if no further hints are wanted or the pass was cancelled
        """
        return self.context is not None and self.context.is_cancelled()


class DefaultHintsAccumulator(HintsAccumulator):
    """
    Appends hints to a result list, skipping hints equal to one already there.
    """

    def __init__(self, result: Optional[List[Hint]] = None,
                 context: Optional[SolverContext] = None):
        super().__init__(context)
        self.result: List[Hint] = result if result is not None else []
        self._seen: Set[Hint] = set(self.result)

    def add(self, hint: Hint) -> None:
        if hint not in self._seen:
            self._seen.add(hint)
            self.result.append(hint)


class SingleHintAccumulator(HintsAccumulator):
    """
    Keeps the first hint only; asks producers to stop once it has one.
    """

    def __init__(self, context: Optional[SolverContext] = None):
        super().__init__(context)
        self._hint: Optional[Hint] = None

    @property
    def hint(self) -> Optional[Hint]:
        return self._hint

    def add(self, hint: Hint) -> None:
        if self._hint is None:
            self._hint = hint

    def should_stop(self) -> bool:
        return self._hint is not None or super().should_stop()
