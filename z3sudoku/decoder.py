from typing import Sequence

from .backend import Model
from .grid import SIZE, Grid, clone_grid
from .variables import VariableGrid


def decode(grid: Sequence[Sequence[int]], model: Model, X: VariableGrid) -> Grid:
    """
    Copy ``grid`` and fill every cell from ``model``.
    Raises MissingAssignmentError if the model lacks any cell variable.
    """
    out = clone_grid(grid)
    for r in range(SIZE):
        for c in range(SIZE):
            out[r][c] = model.evaluate(X[r, c])
    return out
