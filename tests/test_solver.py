import sys

import pytest

from varsudoku.config import SolverConfig
from varsudoku.errors import InvalidInputError
from varsudoku.grid import Grid
from varsudoku.solver import SolveStatus, SudokuSolver, solve
from varsudoku.strategies import Strategy

from conftest import LATIN_4, assert_complete


def test_classic_puzzle_full_strategies(puzzle, solution):
    result = solve(puzzle, box=3, strategies=Strategy.from_letters("ruhn"))
    assert result.status is SolveStatus.SOLVED
    assert result.solved
    assert result.grid.to_matrix() == solution
    assert_complete(result.grid.to_matrix(), 3)


def test_single_blank_with_reduction_only(latin_one_blank):
    result = solve(latin_one_blank, box=2, strategies=Strategy.REDUCTION)
    assert result.solved
    assert result.grid.value(2, 1) == 1
    assert result.grid.to_matrix() == LATIN_4
    assert result.calls == 1


def test_complete_grid_needs_no_branching(solution):
    result = solve(solution, strategies=Strategy.NONE)
    assert result.solved
    assert result.calls == 1
    assert result.grid.to_matrix() == solution


@pytest.mark.parametrize("strategies", [Strategy.NONE, Strategy.REDUCTION, Strategy.ALL])
def test_duplicate_clues_fail_fast(duplicate_clues, strategies):
    result = solve(duplicate_clues, strategies=strategies)
    assert result.status is SolveStatus.NO_SOLUTION
    assert result.grid is None
    assert result.calls == 1


@pytest.mark.parametrize("strategies", [Strategy.NONE, Strategy.ALL])
def test_unsolvable_puzzle(unsolvable_4, strategies):
    result = solve(unsolvable_4, box=2, strategies=strategies)
    assert result.status is SolveStatus.NO_SOLUTION
    assert not result.solved


def test_strategy_equivalence(puzzle, solution):
    bare = solve(puzzle, strategies=Strategy.NONE)
    full = solve(puzzle, strategies=Strategy.ALL)
    assert bare.solved and full.solved
    assert bare.grid.same_values(full.grid)
    assert bare.grid.to_matrix() == solution
    assert full.calls <= bare.calls


@pytest.mark.parametrize("letters", ["r", "ru", "rh", "rn", "run"])
def test_partial_strategy_sets_agree(puzzle, solution, letters):
    result = solve(puzzle, strategies=Strategy.from_letters(letters))
    assert result.solved
    assert result.grid.to_matrix() == solution


def test_call_ceiling_aborts(puzzle):
    result = solve(puzzle, strategies=Strategy.NONE, max_calls=5)
    assert result.status is SolveStatus.ABORTED
    assert result.grid is None
    # the call that crossed the ceiling is counted
    assert result.calls == 6


def test_abort_is_distinct_from_no_solution(puzzle, unsolvable_4):
    aborted = solve(puzzle, strategies=Strategy.NONE, max_calls=1)
    unsolvable = solve(unsolvable_4, box=2, strategies=Strategy.NONE, max_calls=1)
    assert aborted.status is SolveStatus.ABORTED
    assert unsolvable.status is SolveStatus.NO_SOLUTION


def test_invalid_input_is_raised():
    with pytest.raises(InvalidInputError):
        solve([[1, 2], [3, 4]], box=3)


def test_solver_leaves_input_grid_untouched(puzzle):
    grid = Grid.from_matrix(puzzle)
    before = (list(grid.board), list(grid.opts), list(grid.unassigned))
    result = SudokuSolver(grid, SolverConfig()).solve()
    assert result.solved
    assert (grid.board, grid.opts, grid.unassigned) == before


def test_solvers_keep_separate_counters(puzzle, latin_one_blank):
    a = SudokuSolver.from_matrix(puzzle, SolverConfig(strategies=Strategy.NONE))
    b = SudokuSolver.from_matrix(latin_one_blank, SolverConfig(strategies=Strategy.REDUCTION, box=2))
    ra = a.solve()
    rb = b.solve()
    assert rb.calls == 1
    assert ra.calls == a.calls > 1
    # solving again restarts the count
    assert a.solve().calls == ra.calls


def test_sixteen_by_sixteen():
    box, n = 4, 16
    full = [[(box * (r % box) + r // box + c) % n + 1 for c in range(n)] for r in range(n)]
    assert_complete(full, box)
    puzzle = [[0 if (r * 7 + c * 3) % 4 == 0 else full[r][c] for c in range(n)] for r in range(n)]

    result = solve(puzzle, box=box, strategies=Strategy.ALL)
    assert result.solved
    assert_complete(result.grid.to_matrix(), box)
    for r in range(n):
        for c in range(n):
            if puzzle[r][c]:
                assert result.grid.value(r, c) == puzzle[r][c]


def test_config_validation():
    with pytest.raises(ValueError):
        SolverConfig(max_calls=0)
    with pytest.raises(ValueError):
        SolverConfig(box=0)
    assert SolverConfig.from_letters("rn", max_calls=10).strategies == Strategy.REDUCTION | Strategy.NAKED_PAIR


def test_select_cell_prefers_lowest_index_on_ties(empty_4):
    g = Grid.from_matrix(empty_4, 2)
    for r, c in ((1, 0), (0, 3)):
        g.remove_candidate(r, c, 1)
        g.remove_candidate(r, c, 2)
    assert SudokuSolver._select_cell(g) == g.index(0, 3)
    g.remove_candidate(3, 3, 4)
    g.remove_candidate(3, 3, 3)
    g.remove_candidate(3, 3, 2)
    assert SudokuSolver._select_cell(g) == g.index(3, 3)


def test_select_cell_reports_empty_candidates(empty_4):
    g = Grid.from_matrix(empty_4, 2)
    for v in (1, 2, 3, 4):
        g.remove_candidate(2, 2, v)
    assert SudokuSolver._select_cell(g) == -1


def test_failed_cell_tries_each_candidate_once(empty_4):
    g = Grid.from_matrix(empty_4, 2)
    for c in (0, 1, 2):
        g.remove_candidate(0, c, 3)
        g.remove_candidate(0, c, 4)
    # three cells of row 0 share {1, 2}: either value for (0,0) empties (0,2)
    solver = SudokuSolver(g, SolverConfig(strategies=Strategy.REDUCTION, box=2))
    assert SudokuSolver._select_cell(g) == g.index(0, 0)
    result = solver.solve()
    assert result.status is SolveStatus.NO_SOLUTION
    assert result.grid is None
    assert solver.calls == 1 + len(g.candidates_of(0, 0))


def test_solve_raises_recursion_limit(monkeypatch, puzzle):
    limits = []
    monkeypatch.setattr(sys, "getrecursionlimit", lambda: 50)
    monkeypatch.setattr(sys, "setrecursionlimit", limits.append)
    assert solve(puzzle, strategies=Strategy.ALL).solved
    assert limits == [51 + 500]


def test_solve_keeps_higher_recursion_limit(monkeypatch, latin_one_blank):
    limits = []
    monkeypatch.setattr(sys, "getrecursionlimit", lambda: 100_000)
    monkeypatch.setattr(sys, "setrecursionlimit", limits.append)
    assert solve(latin_one_blank, box=2, strategies=Strategy.REDUCTION).solved
    assert limits == []
