from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Sequence, Tuple

from .errors import InvalidInputError
from .utils import bit_of, bits_iter, full_mask, num_ones

Cell = Tuple[int, int]


class UnitKind(Enum):
    ROW = "row"
    COLUMN = "column"
    BLOCK = "block"


UNIT_KINDS: Tuple[UnitKind, ...] = (UnitKind.ROW, UnitKind.COLUMN, UnitKind.BLOCK)


@dataclass(slots=True, eq=False)
class Grid:
    """
    Sudoku grid of side n = box * box that tracks:
      - board:  list[int] with 0 for empty, or assigned value 1..n
      - opts:   list[int] of n-bit candidate masks (bit k => value k+1)
      - rows / cols / blocks: masks of the values already placed in each unit
      - unassigned: flat indices of the empty cells, row-major
    Cells are addressed either as (row, col) or as the flat index row*n + col.
    """
    n: int                             # side length (e.g., 9)
    box: int                           # block side (e.g., 3 for 9x9)
    all_mask: int                      # (1<<n)-1
    board: List[int] = field(default_factory=list)
    opts: List[int] = field(default_factory=list)
    rows: List[int] = field(default_factory=list)
    cols: List[int] = field(default_factory=list)
    blocks: List[int] = field(default_factory=list)
    unassigned: List[int] = field(default_factory=list)
    # Peers per unit kind: the other cells sharing that unit with a cell.
    # Immutable, shared between clones.
    peers: Dict[UnitKind, Tuple[Tuple[int, ...], ...]] = field(default_factory=dict)
    # Set when two clues share a unit; such a grid can never be solved
    has_conflict: bool = False

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[int]], box: int = 3) -> "Grid":
        n = len(matrix)
        if n == 0:
            raise InvalidInputError("The puzzle matrix is empty")
        if box < 1 or box * box != n:
            raise InvalidInputError(
                f"A {n}x{n} matrix does not match block size {box} (expected {box * box}x{box * box})"
            )
        for r, row in enumerate(matrix):
            if len(row) != n:
                raise InvalidInputError(f"Row {r + 1} has {len(row)} values, expected {n}")
            for c, v in enumerate(row):
                if isinstance(v, bool) or not isinstance(v, int):
                    raise InvalidInputError(f"Invalid value at ({r + 1},{c + 1}): {v!r} (not an integer)")
                if v < 0 or v > n:
                    raise InvalidInputError(f"Invalid value at ({r + 1},{c + 1}): {v} (allowed: 0..{n})")

        all_mask = full_mask(n)
        grid = cls(
            n = n,
            box = box,
            all_mask = all_mask,
            board = [0] * (n * n),
            opts = [all_mask] * (n * n),
            rows = [0] * n,
            cols = [0] * n,
            blocks = [0] * n,
            peers = _build_peers(n, box),
        )

        for r, row in enumerate(matrix):
            for c, v in enumerate(row):
                idx = r * n + c
                if v == 0:
                    grid.unassigned.append(idx)
                    continue
                bit = bit_of(v)
                b = grid.block_of(idx)
                # Clue legality is not validated here; the conflict surfaces on first propagation
                if (grid.rows[r] | grid.cols[c] | grid.blocks[b]) & bit:
                    grid.has_conflict = True
                grid.board[idx] = v
                grid.opts[idx] = bit
                grid.rows[r] |= bit
                grid.cols[c] |= bit
                grid.blocks[b] |= bit
        return grid

    # Index helpers

    def index(self, r: int, c: int) -> int:
        return r * self.n + c

    def cell(self, idx: int) -> Cell:
        return divmod(idx, self.n)

    def block_of(self, idx: int) -> int:
        r, c = divmod(idx, self.n)
        return (r // self.box) * self.box + c // self.box

    def unit_mask(self, idx: int) -> int:
        """Values already placed in the row, column or block of a cell index."""
        r, c = divmod(idx, self.n)
        return self.rows[r] | self.cols[c] | self.blocks[self.block_of(idx)]

    # Inspection

    def value(self, r: int, c: int) -> int:
        return self.board[self.index(r, c)]

    def is_assigned(self, r: int, c: int) -> bool:
        return self.board[self.index(r, c)] != 0

    def candidates_mask(self, r: int, c: int) -> int:
        return self.opts[self.index(r, c)]

    def candidates_of(self, r: int, c: int) -> List[int]:
        """Remaining candidate values for a cell, ascending."""
        return list(bits_iter(self.opts[self.index(r, c)]))

    def candidate_count(self, idx: int) -> int:
        return num_ones(self.opts[idx])

    def is_legal(self, r: int, c: int, v: int) -> bool:
        return self.is_legal_at(self.index(r, c), v)

    def is_legal_at(self, idx: int, v: int) -> bool:
        """True if v is not yet placed in the row, column or block of idx."""
        return not (self.unit_mask(idx) & bit_of(v))

    def unit_peers(self, r: int, c: int, kind: UnitKind) -> List[Cell]:
        """The other n-1 cells sharing the given unit with (r, c)."""
        return [self.cell(j) for j in self.peers[kind][self.index(r, c)]]

    def unassigned_cells(self) -> List[Cell]:
        return [self.cell(idx) for idx in self.unassigned]

    def is_solved(self) -> bool:
        full = self.all_mask
        return (
            all(m == full for m in self.rows)
            and all(m == full for m in self.cols)
            and all(m == full for m in self.blocks)
        )

    def same_values(self, other: "Grid") -> bool:
        """True if both grids hold the same values in every cell."""
        return self.n == other.n and self.board == other.board

    # Mutations (local, no cascading)

    def set_value(self, r: int, c: int, v: int) -> None:
        self.assign(self.index(r, c), v)

    def assign(self, idx: int, v: int) -> None:
        if self.board[idx] != 0:
            raise ValueError(f"Cell {self.cell(idx)} is already assigned")
        if v < 1 or v > self.n:
            raise ValueError(f"Value {v} out of range 1..{self.n}")
        if not self.is_legal_at(idx, v):
            raise ValueError(f"Value {v} is not legal at {self.cell(idx)}")

        bit = bit_of(v)
        r, c = divmod(idx, self.n)
        self.board[idx] = v
        self.opts[idx] = bit
        self.rows[r] |= bit
        self.cols[c] |= bit
        self.blocks[self.block_of(idx)] |= bit
        self.unassigned.remove(idx)

    def remove_candidate(self, r: int, c: int, v: int) -> None:
        self.eliminate(self.index(r, c), bit_of(v))

    def eliminate(self, idx: int, mask: int) -> None:
        self.opts[idx] &= ~mask

    def restrict_candidates(self, r: int, c: int, mask: int) -> None:
        """Keep only the candidates of (r, c) that are also in mask."""
        self.opts[self.index(r, c)] &= mask

    def clone(self) -> "Grid":
        "Creates a deep copy of the grid"
        return Grid(
            n=self.n,
            box=self.box,
            all_mask=self.all_mask,
            board=self.board.copy(),
            opts=self.opts.copy(),
            rows=self.rows.copy(),
            cols=self.cols.copy(),
            blocks=self.blocks.copy(),
            unassigned=self.unassigned.copy(),
            peers=self.peers,
            has_conflict=self.has_conflict,
        )

    # Convenience

    def to_matrix(self) -> List[List[int]]:
        n = self.n
        return [self.board[r * n:(r + 1) * n] for r in range(n)]

    def to_board_string(self) -> str:
        """Serialize the current board to a pretty string with block separators."""
        width = len(str(self.n))
        rows = []
        for i in range(self.n):
            # Build one row with vertical separators
            row_parts = []
            for j in range(self.n):
                row_parts.append(str(self.board[i * self.n + j]).rjust(width))
                # Add vertical line if we're at the end of a block
                if (j + 1) % self.box == 0 and j + 1 < self.n:
                    row_parts.append("|")
            line = " ".join(row_parts)
            rows.append(line)

            # Add horizontal line if we're at the end of a block
            if (i + 1) % self.box == 0 and i + 1 < self.n:
                rows.append("-" * len(line))
        return "\n".join(rows)


@lru_cache(maxsize=None)
def _build_peers(n: int, box: int) -> Dict[UnitKind, Tuple[Tuple[int, ...], ...]]:
    rows, cols, blocks = [], [], []
    for i in range(n * n):
        # Determine the row and column of i (given the number of columns n)
        r, c = divmod(i, n)

        rows.append(tuple(r * n + k for k in range(n) if k != c))
        cols.append(tuple(k * n + c for k in range(n) if k != r))

        # Top-left corner of the block holding i
        br, bc = (r // box) * box, (c // box) * box
        blocks.append(tuple(
            (br + dr) * n + (bc + dc)
            for dr in range(box) for dc in range(box)
            if (br + dr, bc + dc) != (r, c)
        ))

    return {
        UnitKind.ROW: tuple(rows),
        UnitKind.COLUMN: tuple(cols),
        UnitKind.BLOCK: tuple(blocks),
    }
