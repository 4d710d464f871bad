"""
Rules Package - Technique producer implementations.

Import this module to register all built-in producers.
"""

from .singles import HiddenSingle, NakedSingle
from .locking import Locking
from .sets import HiddenSet, NakedSet
from .fish import Fisherman
from .wings import XYWing
from .unique import UniqueLoops
from .bug import BivalueUniversalGrave
from .exclusion import AlignedExclusion
from .chaining import Chaining

__all__ = [
    "HiddenSingle",
    "NakedSingle",
    "Locking",
    "HiddenSet",
    "NakedSet",
    "Fisherman",
    "XYWing",
    "UniqueLoops",
    "BivalueUniversalGrave",
    "AlignedExclusion",
    "Chaining",
]
