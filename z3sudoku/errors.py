class SudokuError(Exception):
    """Base class for errors raised by z3sudoku."""


class InvalidGridError(SudokuError, ValueError):
    """The input grid has the wrong shape or holds values outside 0..9."""


class MissingAssignmentError(SudokuError, RuntimeError):
    """
    A satisfiable check produced a model without a value for one of the cell
    variables. This is an encoding bug, never a property of the puzzle.
    """

    def __init__(self, name: str):
        super().__init__(f"model has no assignment for variable {name!r}")
        self.name = name


class UnconstrainedVariableError(SudokuError, RuntimeError):
    """A structural formula leaves some cell variables out entirely."""

    def __init__(self, names):
        names = sorted(names)
        super().__init__(f"{len(names)} cell variable(s) never constrained, e.g. {names[0]!r}")
        self.names = names
