"""
sudoku16 - Rating, solving and generation of 16x16 Sudoku puzzles.

Public API:
    - Grid: 16x16 values and potential values
    - Settings, load_settings(), save_settings(): Enabled techniques and options
    - SolvingTechnique: Named solving techniques
    - Solver: Solving engine (see sudoku16.solver)
    - Generator, GeneratorWorker, Symmetry: Puzzle generation
    - load_from_text(), save_to_text(): Puzzle text formats
"""

from .grid import Grid
from .techniques import SolvingTechnique
from .settings import Settings, load_settings, save_settings
from .io import LoadStatus, PuzzleFormat, format_pencil_marks, load_from_file, load_from_text, save_to_file, save_to_text
from .solver import Solver, SolverContext
from .generator import Generator, GeneratorWorker, Symmetry

__version__ = "1.0.0"

__all__ = [
    "Grid",
    "SolvingTechnique",
    "Settings",
    "load_settings",
    "save_settings",
    "LoadStatus",
    "PuzzleFormat",
    "format_pencil_marks",
    "load_from_file",
    "load_from_text",
    "save_to_file",
    "save_to_text",
    "Solver",
    "SolverContext",
    "Generator",
    "GeneratorWorker",
    "Symmetry",
]
