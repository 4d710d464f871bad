"""
Checks Package - Validators, warnings, the brute force oracle and the
analyser.
"""

from .validity import NoDoubles, NumberOfFilledCells, NumberOfValues
from .brute_force import BruteForceAnalysis
from .analysis import Analyser

__all__ = [
    "NoDoubles",
    "NumberOfFilledCells",
    "NumberOfValues",
    "BruteForceAnalysis",
    "Analyser",
]
