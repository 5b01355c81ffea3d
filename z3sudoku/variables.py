from typing import List

from .expr import Var
from .grid import BOX, SIZE, box_cells


class VariableGrid:
    """9x9 integer decision variables, one per cell, named ``{prefix}_{row}_{col}`` (1-based)."""

    def __init__(self, cells: List[List[Var]]):
        self.cells = cells

    @classmethod
    def allocate(cls, prefix: str = "x") -> "VariableGrid":
        return cls([[Var(f"{prefix}_{r + 1}_{c + 1}") for c in range(SIZE)] for r in range(SIZE)])

    def __getitem__(self, rc) -> Var:
        r, c = rc
        return self.cells[r][c]

    def row(self, r: int) -> List[Var]:
        return list(self.cells[r])

    def column(self, c: int) -> List[Var]:
        return [self.cells[r][c] for r in range(SIZE)]

    def box(self, br: int, bc: int) -> List[Var]:
        return [self.cells[r][c] for r, c in box_cells(br, bc)]

    def rows(self) -> List[List[Var]]:
        return [self.row(r) for r in range(SIZE)]

    def columns(self) -> List[List[Var]]:
        return [self.column(c) for c in range(SIZE)]

    def boxes(self) -> List[List[Var]]:
        return [self.box(br, bc) for br in range(BOX) for bc in range(BOX)]

    def all(self) -> List[Var]:
        return [v for row in self.cells for v in row]
