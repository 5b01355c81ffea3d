"""Thin wrapper around a z3 solver speaking the ``expr`` IR."""
import enum
import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import z3

from .errors import MissingAssignmentError
from .expr import Formula, Lowering, Var

log = logging.getLogger(__name__)


class Status(enum.Enum):
    SATISFIABLE = "sat"
    UNSATISFIABLE = "unsat"
    UNKNOWN = "unknown"


def _status(result: z3.CheckSatResult) -> Status:
    # CheckSatResult defines __eq__ without __hash__, so no dict lookup
    if result == z3.sat:
        return Status.SATISFIABLE
    if result == z3.unsat:
        return Status.UNSATISFIABLE
    return Status.UNKNOWN


class Model:
    """A satisfying assignment, valid for the handle that produced it."""

    def __init__(self, z3_model: z3.ModelRef, lowering: Lowering):
        self._model = z3_model
        self._lowering = lowering

    def evaluate(self, var: Var) -> int:
        # no model completion: an unassigned variable must surface, not become 0
        value = self._model.eval(self._lowering.term(var), model_completion=False)
        if not z3.is_int_value(value):
            raise MissingAssignmentError(var.name)
        return value.as_long()


# z3 reads UINT_MAX as "no timeout"
NO_TIMEOUT = 4294967295


class SolverHandle:
    """
    Accumulates asserted formulas and answers satisfiability queries.

    A handle is bound to one ``z3.Context``; z3 contexts are not thread-safe,
    so a handle must only be used by one thread at a time.
    """

    def __init__(self, ctx: Optional[z3.Context] = None, *, timeout_ms: Optional[int] = None):
        self.ctx = ctx if ctx is not None else z3.Context()
        self.lowering = Lowering(self.ctx)
        self._solver = z3.Solver(ctx=self.ctx)
        if timeout_ms is not None:
            self.set_timeout(timeout_ms)
        self._last: Optional[Status] = None

    def set_timeout(self, timeout_ms: Optional[int]) -> None:
        self._solver.set(timeout=NO_TIMEOUT if timeout_ms is None else int(timeout_ms))

    def assert_formula(self, f: Formula) -> None:
        self._solver.add(self.lowering.formula(f))

    def check(self) -> Status:
        t0 = time.perf_counter()
        self._last = _status(self._solver.check())
        log.debug("check -> %s in %.3fs", self._last.value, time.perf_counter() - t0)
        return self._last

    def model(self) -> Model:
        if self._last is not Status.SATISFIABLE:
            raise RuntimeError("model() is only valid after a SATISFIABLE check")
        return Model(self._solver.model(), self.lowering)

    def reason_unknown(self) -> str:
        return self._solver.reason_unknown()

    def push(self) -> None:
        self._solver.push()

    def pop(self) -> None:
        self._solver.pop()
        self._last = None

    @property
    def num_scopes(self) -> int:
        return self._solver.num_scopes()

    @contextmanager
    def scope(self) -> Iterator["SolverHandle"]:
        """Assertions made inside the block are retracted on exit."""
        self.push()
        try:
            yield self
        finally:
            self.pop()
