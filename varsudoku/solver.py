import sys
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .config import SolverConfig, DEFAULT_MAX_CALLS
from .grid import Grid
from .strategies import Strategy, enabled
from .utils import bits_iter, num_ones, logger


class SolveStatus(Enum):
    SOLVED = "solved"
    NO_SOLUTION = "no-solution"
    ABORTED = "aborted"


@dataclass
class SolveResult:
    status: SolveStatus
    grid: Optional[Grid]        # the solved grid, None unless SOLVED
    calls: int                  # search nodes visited
    duration_ms: int

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED


class SudokuSolver:
    """
    Depth-first search over a Grid. Each node applies the configured
    strategies, then branches on the most constrained empty cell, cloning the
    grid for every tentative value. The solver instance owns the call counter,
    so separate solvers never interfere.
    """

    def __init__(self, grid: Grid, config: Optional[SolverConfig] = None):
        self.grid = grid
        self.config = config or SolverConfig(box=grid.box)
        self.strategies = enabled(self.config.strategies)
        self.calls = 0
        self.aborted = False
        logger.info("SudokuSolver ready (n=%d, box=%d, strategies=%r, max_calls=%d)",
                    grid.n, grid.box, self.config.strategies.to_letters(), self.config.max_calls)

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[int]], config: Optional[SolverConfig] = None) -> "SudokuSolver":
        config = config or SolverConfig()
        return cls(Grid.from_matrix(matrix, config.box), config)

    # ----- Helpers -----
    @staticmethod
    def _select_cell(grid: Grid) -> int:
        """
        Empty cell with the fewest candidates, lowest row-major index on ties.
        Returns -1 if some empty cell has no candidates left.
        """
        best_idx, best_count = -1, grid.n + 1
        for idx in grid.unassigned:
            c = num_ones(grid.opts[idx])
            if c == 0:
                return -1
            if c < best_count:
                best_idx, best_count = idx, c
        return best_idx

    # ----- Search -----
    def _search(self, grid: Grid) -> Optional[Grid]:
        self.calls += 1
        if self.calls > self.config.max_calls:
            if not self.aborted:
                logger.warning("Search: call ceiling %d reached, aborting", self.config.max_calls)
            self.aborted = True
            return None

        if grid.is_solved():
            return grid

        for strategy in self.strategies:
            if not strategy(grid):
                logger.debug("Search: contradiction from %s", strategy.__name__)
                return None
            if grid.is_solved():
                return grid

        if grid.has_conflict:
            return None
        best_idx = self._select_cell(grid)
        if best_idx == -1:
            return None
        logger.debug("Search: branching on cell %s (%d options)",
                     grid.cell(best_idx), num_ones(grid.opts[best_idx]))

        # try each option (clone grid for branch)
        for v in bits_iter(grid.opts[best_idx]):
            if not grid.is_legal_at(best_idx, v):
                continue
            branch = grid.clone()
            branch.assign(best_idx, v)  # seed assignment
            solved = self._search(branch)
            if solved is not None:
                return solved
            if self.aborted:
                return None
        return None

    # ----- Public ------
    def solve(self) -> SolveResult:
        """Search from a private copy of the grid; the solver's grid stays untouched."""
        start = time.time()
        self.calls = 0
        self.aborted = False
        # One frame per branching level, at most one level per empty cell
        depth = len(self.grid.unassigned) + 500
        if sys.getrecursionlimit() < depth:
            sys.setrecursionlimit(depth)
        solved = self._search(self.grid.clone())
        duration_ms = int((time.time() - start) * 1000)

        if solved is not None:
            status = SolveStatus.SOLVED
        elif self.aborted:
            status = SolveStatus.ABORTED
        else:
            status = SolveStatus.NO_SOLUTION
        logger.info("solve -> %s (calls=%d, %d ms)", status.value, self.calls, duration_ms)
        return SolveResult(status=status, grid=solved, calls=self.calls, duration_ms=duration_ms)


def solve(
    matrix: Sequence[Sequence[int]],
    box: int = 3,
    strategies: Strategy = Strategy.ALL,
    max_calls: int = DEFAULT_MAX_CALLS,
) -> SolveResult:
    """Build a grid from an N x N matrix and search it. Raises InvalidInputError on malformed input."""
    config = SolverConfig(strategies=strategies, max_calls=max_calls, box=box)
    return SudokuSolver.from_matrix(matrix, config).solve()
