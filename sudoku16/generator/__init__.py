"""
Generator Package - Random minimal puzzles with symmetric clue patterns.
"""

from .symmetry import Symmetry
from .generator import Generator
from .worker import GeneratorWorker

__all__ = [
    "Symmetry",
    "Generator",
    "GeneratorWorker",
]
