import logging
import threading
from typing import Optional

import z3

from .backend import SolverHandle
from .constraints import ensure_constrained, generic_constraints
from .expr import Formula
from .variables import VariableGrid

log = logging.getLogger(__name__)


class ModelCache:
    """
    Shared, lazily built state for the shared-model strategy: one variable grid,
    the generic formula over it, and optionally one solver that already has the
    generic formula asserted.

    Every piece is built at most once (double-checked under ``lock``). The
    formula is immutable once published and may be read from any thread.

    The reusable solver is NOT safe for concurrent use. Callers must hold
    ``lock`` for the whole push / assert / check / decode / pop sequence.
    Concurrent solves should use ``fresh_solver()`` instead, which seeds an
    independent handle, in its own z3 context, from the cached formula.
    """

    def __init__(self, *, native_distinct: bool = True, prefix: str = "x"):
        self.native_distinct = native_distinct
        self.prefix = prefix
        self.lock = threading.RLock()
        self._variables: Optional[VariableGrid] = None
        self._generic: Optional[Formula] = None
        self._solver: Optional[SolverHandle] = None

    @property
    def variables(self) -> VariableGrid:
        if self._variables is None:
            with self.lock:
                if self._variables is None:
                    self._variables = VariableGrid.allocate(self.prefix)
        return self._variables

    def generic_formula(self) -> Formula:
        if self._generic is None:
            with self.lock:
                if self._generic is None:
                    log.debug("building generic constraints (native_distinct=%s)",
                              self.native_distinct)
                    self._generic = ensure_constrained(self.variables, generic_constraints(
                        self.variables, native_distinct=self.native_distinct))
        return self._generic

    def reusable_solver(self) -> SolverHandle:
        if self._solver is None:
            with self.lock:
                if self._solver is None:
                    log.debug("seeding reusable solver with generic constraints")
                    handle = SolverHandle(z3.Context())
                    handle.assert_formula(self.generic_formula())
                    self._solver = handle
        return self._solver

    def fresh_solver(self, *, timeout_ms: Optional[int] = None) -> SolverHandle:
        handle = SolverHandle(z3.Context(), timeout_ms=timeout_ms)
        handle.assert_formula(self.generic_formula())
        return handle
