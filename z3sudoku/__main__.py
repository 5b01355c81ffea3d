import argparse
import logging
import sys
from pathlib import Path

from .errors import InvalidGridError
from .grid import parse_puzzle, print_grid
from .solver import make_strategy, solve_all

PUZZLE = [
    "530070000",
    "600195000",
    "098000060",
    "800060003",
    "400803001",
    "700020006",
    "060000280",
    "000419005",
    "000080079",
]


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="z3sudoku", description="Solve a 9x9 Sudoku with z3.")
    parser.add_argument("puzzle", nargs="?", type=Path,
                        help="file with 9 rows of digits, 0 or . for blanks (default: demo puzzle)")
    parser.add_argument("--strategy", choices=["shared", "self-contained"], default="shared")
    parser.add_argument("--reuse-solver", action="store_true",
                        help="assert givens into the cached solver inside push/pop")
    parser.add_argument("--timeout-ms", type=int, default=None)
    parser.add_argument("--all", type=int, default=None, metavar="N",
                        help="enumerate up to N solutions")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")

    lines = args.puzzle.read_text().splitlines() if args.puzzle else PUZZLE
    try:
        grid = parse_puzzle(lines)
    except InvalidGridError as exc:
        print(f"Bad puzzle: {exc}", file=sys.stderr)
        return 2

    strategy = make_strategy(args.strategy, timeout_ms=args.timeout_ms,
                             reuse_solver=args.reuse_solver)
    print_grid(grid)

    if args.all is not None:
        sols = solve_all(grid, max_solutions=args.all, strategy=strategy)
        if not sols:
            print("UNSAT (no solution)")
            return 1
        print("Num solutions:", len(sols))
        for g in sols:
            print_grid(g)
        return 0

    result = strategy.solve(grid)
    if not result.solved:
        print(f"Failed to solve sudoku ({result.outcome.value})")
        return 1
    print(f"Solved in {result.elapsed:.3f}s:")
    print_grid(result.grid)
    return 0


if __name__ == "__main__":
    sys.exit(main())
