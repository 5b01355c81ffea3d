from typing import Sequence

from .errors import UnconstrainedVariableError
from .expr import (Formula, Not, Var, all_distinct, between, conj, disj, eq,
                   ne, pairwise_distinct, variables_of)
from .grid import EMPTY, SIZE, peer_groups
from .variables import VariableGrid


def _distinct(group, native: bool) -> Formula:
    return all_distinct(group) if native else pairwise_distinct(group)


def generic_constraints(X: VariableGrid, *, native_distinct: bool = True) -> Formula:
    """
    Puzzle-independent Sudoku rules over ``X``:
      - each cell contains a value in 1..9
      - each row, column and 3x3 box contains a digit at most once
    With ``native_distinct=False`` each group is spelled out as its 36 pairwise
    disequalities instead of a single all-distinct.
    """
    cells_c = [between(1, v, SIZE) for v in X.all()]
    rows_c = [_distinct(row, native_distinct) for row in X.rows()]
    cols_c = [_distinct(col, native_distinct) for col in X.columns()]
    sq_c = [_distinct(box, native_distinct) for box in X.boxes()]
    return conj(*cells_c, *rows_c, *cols_c, *sq_c)


def instance_constraints(X: VariableGrid, grid: Sequence[Sequence[int]]) -> Formula:
    """Pin every given digit; empty cells contribute nothing."""
    return conj(*(eq(X[r, c], grid[r][c])
                  for r in range(SIZE)
                  for c in range(SIZE)
                  if grid[r][c] != EMPTY))


def cell_constraints(X: VariableGrid, grid: Sequence[Sequence[int]]) -> Formula:
    """
    Self-contained encoding, one block per cell.

    Every cell must differ from each of its 8 row, 8 column and 8 box peers
    (written as "not any equal"; a cell is never compared with itself). An
    empty cell is then bounded to 1..9 and a filled cell is pinned to its digit.
    Filled cells keep their exclusions so that duplicated givens stay
    unsatisfiable.
    """
    parts = []
    for r in range(SIZE):
        for c in range(SIZE):
            v = X[r, c]
            exclusions = [
                ne_any(v, [X[p] for p in group])
                for group in peer_groups(r, c)
            ]
            if grid[r][c] == EMPTY:
                parts.append(conj(between(1, v, SIZE), *exclusions))
            else:
                parts.append(conj(eq(v, grid[r][c]), *exclusions))
    return conj(*parts)


def ne_any(v: Var, others: Sequence[Var]) -> Formula:
    """v differs from every term in ``others``."""
    return Not(disj(*(eq(v, o) for o in others)))


def blocking_constraint(X: VariableGrid, solution: Sequence[Sequence[int]]) -> Formula:
    """Forbid ``solution``: at least one cell must take a different value."""
    return disj(*(ne(X[r, c], solution[r][c]) for r in range(SIZE) for c in range(SIZE)))


def ensure_constrained(X: VariableGrid, f: Formula) -> Formula:
    """
    Return ``f`` unchanged if it mentions every cell of ``X``; otherwise raise
    UnconstrainedVariableError. A cell missing here would come back from the
    solver without an assignment.
    """
    missing = set(X.all()) - variables_of(f)
    if missing:
        raise UnconstrainedVariableError(v.name for v in missing)
    return f
