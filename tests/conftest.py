from typing import List

import pytest

PUZZLE = "530070000600195000098000060800060003400803001700020006060000280000419005000080079"
SOLUTION = "534678912672195348198342567859761423426853791713924856961537284287419635345286179"

LATIN_4 = [
    [1, 2, 3, 4],
    [3, 4, 1, 2],
    [2, 1, 4, 3],
    [4, 3, 2, 1],
]


def to_matrix(mission: str, n: int = 9) -> List[List[int]]:
    return [[int(ch) for ch in mission[r * n:(r + 1) * n]] for r in range(n)]


def assert_complete(matrix: List[List[int]], box: int) -> None:
    """Every row, column and block holds exactly 1..n."""
    n = box * box
    full = set(range(1, n + 1))
    for r in range(n):
        assert sorted(matrix[r]) == sorted(full)
    for c in range(n):
        assert {matrix[r][c] for r in range(n)} == full
    for br in range(0, n, box):
        for bc in range(0, n, box):
            block = [matrix[br + dr][bc + dc] for dr in range(box) for dc in range(box)]
            assert sorted(block) == sorted(full)


@pytest.fixture
def puzzle() -> List[List[int]]:
    return to_matrix(PUZZLE)


@pytest.fixture
def solution() -> List[List[int]]:
    return to_matrix(SOLUTION)


@pytest.fixture
def latin_one_blank() -> List[List[int]]:
    m = [row[:] for row in LATIN_4]
    m[2][1] = 0
    return m


@pytest.fixture
def empty_4() -> List[List[int]]:
    return [[0] * 4 for _ in range(4)]


@pytest.fixture
def unsolvable_4() -> List[List[int]]:
    # (0,2) needs 3 or 4, but its column already holds both
    return [
        [1, 2, 0, 0],
        [0, 0, 3, 0],
        [0, 0, 4, 0],
        [0, 0, 0, 0],
    ]


@pytest.fixture
def duplicate_clues(puzzle) -> List[List[int]]:
    puzzle[0][2] = 5  # row 0 already holds a 5
    return puzzle
