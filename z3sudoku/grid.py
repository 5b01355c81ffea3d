from typing import List, Sequence, Tuple

from .errors import InvalidGridError

SIZE = 9
BOX = 3
DIGITS = range(1, SIZE + 1)
EMPTY = 0

Grid = List[List[int]]
Cell = Tuple[int, int]


# ------------------------
# Units (0-based indices)
# ------------------------

def row_cells(r: int) -> List[Cell]:
    return [(r, c) for c in range(SIZE)]


def column_cells(c: int) -> List[Cell]:
    return [(r, c) for r in range(SIZE)]


def box_cells(br: int, bc: int) -> List[Cell]:
    """Cells of the box in box-row ``br`` and box-column ``bc`` (both 0..2)."""
    return [(br * BOX + dr, bc * BOX + dc) for dr in range(BOX) for dc in range(BOX)]


def box_of(r: int, c: int) -> Tuple[int, int]:
    return r // BOX, c // BOX


def units() -> List[List[Cell]]:
    """All 27 groups that must hold each digit once: rows, columns, boxes."""
    out = [row_cells(r) for r in range(SIZE)]
    out += [column_cells(c) for c in range(SIZE)]
    out += [box_cells(br, bc) for br in range(BOX) for bc in range(BOX)]
    return out


def peer_groups(r: int, c: int) -> Tuple[List[Cell], List[Cell], List[Cell]]:
    """
    Row, column and box neighbours of (r, c), each excluding the cell itself,
    so every group has exactly 8 entries.
    """
    row = [cell for cell in row_cells(r) if cell != (r, c)]
    col = [cell for cell in column_cells(c) if cell != (r, c)]
    box = [cell for cell in box_cells(*box_of(r, c)) if cell != (r, c)]
    return row, col, box


# ------------------------
# Grid helpers
# ------------------------

def validate_grid(grid: Sequence[Sequence[int]]) -> None:
    """Reject anything that is not 9 rows of 9 ints in 0..9."""
    if len(grid) != SIZE:
        raise InvalidGridError(f"expected {SIZE} rows, got {len(grid)}")
    for r, row in enumerate(grid):
        if len(row) != SIZE:
            raise InvalidGridError(f"row {r} has {len(row)} cells, expected {SIZE}")
        for c, v in enumerate(row):
            # bool is an int subclass but never a valid cell value
            if not isinstance(v, int) or isinstance(v, bool):
                raise InvalidGridError(f"cell ({r},{c}) is not an int: {v!r}")
            if not (EMPTY <= v <= SIZE):
                raise InvalidGridError(f"cell ({r},{c}) value {v} out of range 0..{SIZE}")


def clone_grid(grid: Sequence[Sequence[int]]) -> Grid:
    return [list(row) for row in grid]


def is_solved(grid: Sequence[Sequence[int]]) -> bool:
    """True when every row, column and box holds 1..9 exactly once."""
    want = set(DIGITS)
    return all({grid[r][c] for r, c in unit} == want for unit in units())


# ------------------------
# Parsing / printing
# ------------------------

def parse_puzzle(lines: Sequence[str]) -> Grid:
    """
    Accepts:
      - rows of digits with 0/. for blanks (no spaces), e.g. '530070000'
      - or space-separated integers, e.g. '5 3 0 0 7 0 0 0 0'
    Blank lines are skipped.
    """
    rows: Grid = []
    for raw in lines:
        s = raw.strip()
        if not s:
            continue
        if " " in s:
            toks = s.split()
            try:
                row = [0 if t == "." else int(t) for t in toks]
            except ValueError:
                raise InvalidGridError(f"bad token in row {s!r}") from None
        else:
            row = []
            for ch in s:
                if ch in "0.":
                    row.append(0)
                elif ch.isdigit():
                    row.append(int(ch))
                else:
                    raise InvalidGridError(f"unexpected character {ch!r} in row {s!r}")
        rows.append(row)
    validate_grid(rows)
    return rows


def _symbol(v: int) -> str:
    return "." if v == EMPTY else str(v)


def format_grid(grid: Sequence[Sequence[int]]) -> str:
    out = []
    for r in range(SIZE):
        if r % BOX == 0 and r != 0:
            out.append("-" * 21)
        parts = []
        for c in range(SIZE):
            if c % BOX == 0 and c != 0:
                parts.append("|")
            parts.append(_symbol(grid[r][c]))
        out.append(" ".join(parts))
    return "\n".join(out)


def print_grid(grid: Sequence[Sequence[int]]) -> None:
    print(format_grid(grid))
    print()
