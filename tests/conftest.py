import pytest

from z3sudoku.grid import parse_puzzle

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

SOLUTION = [
    "534678912",
    "672195348",
    "198342567",
    "859761423",
    "426853791",
    "713924856",
    "961537284",
    "287419635",
    "345286179",
]


@pytest.fixture
def puzzle():
    return parse_puzzle(PUZZLE)


@pytest.fixture
def solution():
    return parse_puzzle(SOLUTION)


@pytest.fixture
def empty():
    return [[0] * 9 for _ in range(9)]
