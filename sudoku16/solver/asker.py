"""
Asker Module - Yes/no confirmation gate for expensive technique tiers.
"""

from abc import ABC, abstractmethod
from typing import Callable


class Asker(ABC):
    """Answers a yes/no question, typically by asking the user."""

    @abstractmethod
    def ask(self, message: str) -> bool:
        pass


class AlwaysAsker(Asker):
    """Always confirms."""

    def ask(self, message: str) -> bool:
        return True


class NeverAsker(Asker):
    """Never confirms."""

    def ask(self, message: str) -> bool:
        return False


class CallbackAsker(Asker):
    """Delegates to a callable, e.g. a console prompt."""

    def __init__(self, callback: Callable[[str], bool]):
        self._callback = callback

    def ask(self, message: str) -> bool:
        return bool(self._callback(message))
