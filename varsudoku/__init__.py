from .config import SolverConfig
from .errors import InvalidInputError
from .grid import Grid, UnitKind
from .solver import SolveResult, SolveStatus, SudokuSolver, solve
from .strategies import Strategy

__all__ = [
    "Grid",
    "InvalidInputError",
    "SolveResult",
    "SolveStatus",
    "SolverConfig",
    "Strategy",
    "SudokuSolver",
    "UnitKind",
    "solve",
]
