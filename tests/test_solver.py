"""Tests for both solve strategies and the solve entry points."""

import threading

import pytest
import z3

from z3sudoku.backend import SolverHandle, Status
from z3sudoku.cache import ModelCache
from z3sudoku.errors import InvalidGridError
from z3sudoku.grid import clone_grid, is_solved
from z3sudoku.solver import (Outcome, SelfContainedStrategy,
                             SharedModelStrategy, has_unique_solution,
                             make_strategy, solve, solve_all)

STRATEGIES = {
    "shared": lambda: SharedModelStrategy(ModelCache()),
    "shared-reuse": lambda: SharedModelStrategy(ModelCache(), reuse_solver=True),
    "shared-pairwise": lambda: SharedModelStrategy(ModelCache(native_distinct=False)),
    "self-contained": lambda: SelfContainedStrategy(),
}


@pytest.fixture(params=sorted(STRATEGIES))
def strategy(request):
    return STRATEGIES[request.param]()


def test_solves_classic_puzzle(strategy, puzzle, solution):
    before = clone_grid(puzzle)
    result = strategy.solve(puzzle)
    assert result.solved
    assert result.outcome is Outcome.SOLVED
    assert result.grid == solution
    assert puzzle == before


def test_givens_are_kept(strategy, puzzle):
    out = strategy.solve(puzzle).grid
    assert is_solved(out)
    for r in range(9):
        for c in range(9):
            if puzzle[r][c]:
                assert out[r][c] == puzzle[r][c]


def test_solved_grid_is_returned_unchanged(strategy, solution):
    result = strategy.solve(solution)
    assert result.solved
    assert result.grid == solution


@pytest.mark.parametrize("make", [SharedModelStrategy, SelfContainedStrategy])
def test_empty_grid_has_a_valid_completion(make, empty):
    result = make().solve(empty)
    assert result.solved
    assert is_solved(result.grid)


def test_single_hole(strategy, solution):
    grid = clone_grid(solution)
    grid[4][4] = 0
    result = strategy.solve(grid)
    assert result.solved
    assert result.grid[4][4] == 5


@pytest.mark.parametrize("dup", [
    ((0, 2), 5),    # row: 5 already at (0, 0)
    ((2, 0), 5),    # column
    ((1, 1), 5),    # box
])
def test_duplicate_givens_are_unsatisfiable(strategy, puzzle, dup):
    (r, c), v = dup
    grid = clone_grid(puzzle)
    grid[r][c] = v
    result = strategy.solve(grid)
    assert result.outcome is Outcome.UNSATISFIABLE
    assert not result.solved
    assert result.grid is grid


def test_strategies_agree(puzzle):
    a = SharedModelStrategy(ModelCache()).solve(puzzle)
    b = SelfContainedStrategy().solve(puzzle)
    assert a.outcome is b.outcome is Outcome.SOLVED
    assert a.grid == b.grid


def test_invalid_input_is_rejected_before_solving(strategy):
    with pytest.raises(InvalidGridError):
        strategy.solve([[0] * 9] * 8)
    with pytest.raises(InvalidGridError):
        strategy.solve([[0] * 9] * 8 + [[0] * 8 + [12]])


def test_reused_solver_is_isolated_between_puzzles(puzzle, solution):
    cache = ModelCache()
    s = SharedModelStrategy(cache, reuse_solver=True)
    bad = clone_grid(puzzle)
    bad[0][2] = 5
    assert s.solve(puzzle).grid == solution
    assert s.solve(bad).outcome is Outcome.UNSATISFIABLE
    assert s.solve(puzzle).grid == solution
    assert cache.reusable_solver().num_scopes == 0


def test_concurrent_shared_solves(puzzle, solution):
    s = SharedModelStrategy(ModelCache())
    results = []
    threads = [threading.Thread(target=lambda: results.append(s.solve(puzzle).grid))
               for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == [solution] * 4


def test_unknown_is_reported_distinctly(monkeypatch, puzzle):
    monkeypatch.setattr(SolverHandle, "check", lambda self: Status.UNKNOWN)
    monkeypatch.setattr(SolverHandle, "reason_unknown", lambda self: "timeout")
    result = SelfContainedStrategy(timeout_ms=1).solve(puzzle)
    assert result.outcome is Outcome.UNKNOWN
    assert result.reason == "timeout"
    assert result.grid is puzzle


def test_engine_errors_become_results(monkeypatch, puzzle):
    def boom(self, f):
        raise z3.Z3Exception("boom")

    monkeypatch.setattr(SolverHandle, "assert_formula", boom)
    result = SelfContainedStrategy().solve(puzzle)
    assert result.outcome is Outcome.ERROR
    assert result.grid is puzzle


def test_solve_contract(puzzle, solution):
    assert solve(puzzle) == solution
    bad = clone_grid(puzzle)
    bad[0][1] = 5
    assert solve(bad) is bad
    assert solve(puzzle, make_strategy("self-contained")) == solution


def test_make_strategy():
    assert isinstance(make_strategy(), SharedModelStrategy)
    s = make_strategy("shared", reuse_solver=True, timeout_ms=500, native_distinct=False)
    assert s.reuse_solver and s.timeout_ms == 500
    assert s.cache.native_distinct is False
    assert isinstance(make_strategy("self-contained"), SelfContainedStrategy)
    with pytest.raises(ValueError):
        make_strategy("backtracking")


def test_timeout_still_solves_easy_puzzle(puzzle, solution):
    assert make_strategy("shared", timeout_ms=60000).solve(puzzle).grid == solution


def test_solve_all_unique(puzzle, solution):
    assert solve_all(puzzle) == [solution]
    assert has_unique_solution(puzzle)


RECTANGLE = [(0, 3), (0, 4), (3, 3), (3, 4)]


def _two_solution_grid(solution):
    # 6/7 in row 0 and 7/6 in row 3 can swap without breaking any unit
    grid = clone_grid(solution)
    for r, c in RECTANGLE:
        grid[r][c] = 0
    return grid


@pytest.mark.parametrize("make", [SharedModelStrategy, SelfContainedStrategy])
def test_solve_all_finds_both_rectangle_completions(make, solution):
    grid = _two_solution_grid(solution)
    sols = solve_all(grid, strategy=make())
    assert len(sols) == 2
    assert sols[0] != sols[1]
    assert all(is_solved(s) for s in sols)
    assert solution in sols
    swapped = clone_grid(solution)
    swapped[0][3], swapped[0][4] = swapped[0][4], swapped[0][3]
    swapped[3][3], swapped[3][4] = swapped[3][4], swapped[3][3]
    assert swapped in sols
    assert not has_unique_solution(grid, strategy=make())


def test_solve_all_respects_max_solutions(solution):
    assert len(solve_all(_two_solution_grid(solution), max_solutions=1)) == 1


def test_solve_all_stops_on_engine_error(monkeypatch, puzzle):
    def boom(self, f):
        raise z3.Z3Exception("boom")

    monkeypatch.setattr(SolverHandle, "assert_formula", boom)
    assert solve_all(puzzle, strategy=SelfContainedStrategy()) == []


def test_solve_all_unsat(puzzle):
    bad = clone_grid(puzzle)
    bad[0][1] = 5
    assert solve_all(bad) == []
