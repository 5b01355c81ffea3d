"""
Solve strategies.

Both strategies implement ``ConstraintModel.solve(grid) -> SolveResult`` and
build mathematically equivalent formulas; they differ only in what they share:

- ``SharedModelStrategy`` reuses the generic rules cached in a ``ModelCache``
  and adds a fresh instance formula per puzzle.
- ``SelfContainedStrategy`` builds the whole model per puzzle in its own z3
  context and touches no shared state at all.
"""
import enum
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import z3

from .backend import SolverHandle, Status
from .cache import ModelCache
from .constraints import (blocking_constraint, cell_constraints,
                          ensure_constrained, instance_constraints)
from .decoder import decode
from .grid import Grid, validate_grid
from .variables import VariableGrid

log = logging.getLogger(__name__)


class Outcome(enum.Enum):
    SOLVED = "solved"
    UNSATISFIABLE = "unsatisfiable"
    UNKNOWN = "unknown"
    ERROR = "error"


@dataclass
class SolveResult:
    """
    ``grid`` is a new, filled grid when solved and the caller's own input
    object otherwise.
    """
    grid: Sequence[Sequence[int]]
    outcome: Outcome
    reason: Optional[str] = None
    elapsed: float = 0.0

    @property
    def solved(self) -> bool:
        return self.outcome is Outcome.SOLVED


def _conclude(handle: SolverHandle, grid, X: VariableGrid, t0: float) -> SolveResult:
    status = handle.check()
    elapsed = time.perf_counter() - t0
    if status is Status.SATISFIABLE:
        return SolveResult(decode(grid, handle.model(), X), Outcome.SOLVED, elapsed=elapsed)
    if status is Status.UNSATISFIABLE:
        log.info("Failed to solve sudoku: givens are unsatisfiable")
        return SolveResult(grid, Outcome.UNSATISFIABLE, elapsed=elapsed)
    reason = handle.reason_unknown()
    log.warning("Could not determine satisfiability: %s", reason)
    return SolveResult(grid, Outcome.UNKNOWN, reason=reason, elapsed=elapsed)


class ConstraintModel(ABC):
    name = "abstract"

    def __init__(self, *, timeout_ms: Optional[int] = None):
        self.timeout_ms = timeout_ms

    @abstractmethod
    def prepare(self, grid: Sequence[Sequence[int]]) -> Tuple[SolverHandle, VariableGrid]:
        """A new handle, owned by the caller, with every constraint for ``grid`` asserted."""

    def solve(self, grid: Sequence[Sequence[int]]) -> SolveResult:
        validate_grid(grid)
        t0 = time.perf_counter()
        try:
            handle, X = self.prepare(grid)
            return _conclude(handle, grid, X, t0)
        except z3.Z3Exception as exc:
            log.warning("%s: solver error: %s", self.name, exc)
            return SolveResult(grid, Outcome.ERROR, reason=str(exc),
                               elapsed=time.perf_counter() - t0)

    def iter_solutions(self, grid: Sequence[Sequence[int]],
                       max_solutions: Optional[int] = None) -> Iterator[Grid]:
        """
        Yield distinct solutions, blocking each one before looking for the next.
        Stops early, with a warning, on UNKNOWN or on a solver error.
        """
        validate_grid(grid)
        found = 0
        try:
            handle, X = self.prepare(grid)
            while True:
                status = handle.check()
                if status is not Status.SATISFIABLE:
                    if status is Status.UNKNOWN:
                        log.warning("enumeration stopped after %d solution(s): %s",
                                    found, handle.reason_unknown())
                    return
                sol = decode(grid, handle.model(), X)
                yield sol
                found += 1
                if max_solutions is not None and found >= max_solutions:
                    return
                handle.assert_formula(blocking_constraint(X, sol))
        except z3.Z3Exception as exc:
            log.warning("%s: enumeration stopped after %d solution(s), solver error: %s",
                        self.name, found, exc)


class SharedModelStrategy(ConstraintModel):
    """
    Generic rules come from ``cache``; only the givens are built per call.

    With ``reuse_solver=True`` the cache's pre-seeded handle is used under the
    cache lock, with the instance asserted inside a push/pop scope. Otherwise
    each solve gets an independent handle seeded from the cached formula.
    """
    name = "shared"

    def __init__(self, cache: Optional[ModelCache] = None, *, reuse_solver: bool = False,
                 timeout_ms: Optional[int] = None):
        super().__init__(timeout_ms=timeout_ms)
        self.cache = cache if cache is not None else ModelCache()
        self.reuse_solver = reuse_solver

    def prepare(self, grid):
        X = self.cache.variables
        handle = self.cache.fresh_solver(timeout_ms=self.timeout_ms)
        handle.assert_formula(instance_constraints(X, grid))
        return handle, X

    def solve(self, grid: Sequence[Sequence[int]]) -> SolveResult:
        if not self.reuse_solver:
            return super().solve(grid)
        validate_grid(grid)
        t0 = time.perf_counter()
        X = self.cache.variables
        instance = instance_constraints(X, grid)
        try:
            with self.cache.lock:
                handle = self.cache.reusable_solver()
                handle.set_timeout(self.timeout_ms)
                with handle.scope():
                    handle.assert_formula(instance)
                    # decode before the scope pops; the model dies with it
                    return _conclude(handle, grid, X, t0)
        except z3.Z3Exception as exc:
            log.warning("%s: solver error: %s", self.name, exc)
            return SolveResult(grid, Outcome.ERROR, reason=str(exc),
                               elapsed=time.perf_counter() - t0)


class SelfContainedStrategy(ConstraintModel):
    """Fresh z3 context, variables and solver for every puzzle; nothing is shared."""
    name = "self-contained"

    def prepare(self, grid):
        X = VariableGrid.allocate("cell")
        handle = SolverHandle(z3.Context(), timeout_ms=self.timeout_ms)
        handle.assert_formula(ensure_constrained(X, cell_constraints(X, grid)))
        return handle, X


# ------------------------
# Configuration
# ------------------------

_STRATEGY_MAP = {
    "shared": SharedModelStrategy,
    "self-contained": SelfContainedStrategy,
}


def make_strategy(name: str = "shared", *, timeout_ms: Optional[int] = None,
                  reuse_solver: bool = False, native_distinct: bool = True,
                  cache: Optional[ModelCache] = None) -> ConstraintModel:
    """
    - name: 'shared' | 'self-contained'
    - timeout_ms: per-check z3 timeout; expiry gives Outcome.UNKNOWN (None = no limit)
    - reuse_solver, native_distinct, cache: shared strategy only
    """
    if name not in _STRATEGY_MAP:
        raise ValueError(f"unknown strategy {name!r}; expected one of {sorted(_STRATEGY_MAP)}")
    if name == "shared":
        if cache is None:
            cache = ModelCache(native_distinct=native_distinct)
        return SharedModelStrategy(cache, reuse_solver=reuse_solver, timeout_ms=timeout_ms)
    return SelfContainedStrategy(timeout_ms=timeout_ms)


_default: Optional[ConstraintModel] = None
_default_lock = threading.Lock()


def default_strategy() -> ConstraintModel:
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = SharedModelStrategy(ModelCache())
    return _default


# ------------------------
# Entry points
# ------------------------

def solve(grid: Sequence[Sequence[int]], strategy: Optional[ConstraintModel] = None):
    """
    Solve a 9x9 Sudoku (0 = blank). Returns a new solved grid, or ``grid``
    itself, unchanged, when no solution was found.
    """
    result = (strategy or default_strategy()).solve(grid)
    return result.grid


def solve_all(grid: Sequence[Sequence[int]], *, max_solutions: Optional[int] = None,
              strategy: Optional[ConstraintModel] = None) -> List[Grid]:
    """
    All solutions of ``grid`` (up to ``max_solutions``); empty if unsatisfiable.
    Solver errors and UNKNOWN results end the enumeration early and are logged.
    """
    return list((strategy or default_strategy()).iter_solutions(grid, max_solutions))


def has_unique_solution(grid: Sequence[Sequence[int]],
                        strategy: Optional[ConstraintModel] = None) -> bool:
    return len(solve_all(grid, max_solutions=2, strategy=strategy)) == 1
