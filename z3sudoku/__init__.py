"""Solve 9x9 Sudoku by encoding it as integer constraints for the z3 SMT solver."""
from .backend import Model, SolverHandle, Status
from .cache import ModelCache
from .constraints import (blocking_constraint, cell_constraints,
                          ensure_constrained, generic_constraints,
                          instance_constraints)
from .decoder import decode
from .errors import (InvalidGridError, MissingAssignmentError, SudokuError,
                     UnconstrainedVariableError)
from .grid import (Grid, clone_grid, format_grid, is_solved, parse_puzzle,
                   print_grid, validate_grid)
from .solver import (ConstraintModel, Outcome, SelfContainedStrategy,
                     SharedModelStrategy, SolveResult, default_strategy,
                     has_unique_solution, make_strategy, solve, solve_all)
from .variables import VariableGrid

__version__ = "0.1.0"
