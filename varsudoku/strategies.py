from enum import Flag
from itertools import combinations
from typing import Callable, List, Tuple

from .grid import Grid, UNIT_KINDS
from .utils import bit_of, bits_iter, mask_of, num_ones, val_of, logger


class Strategy(Flag):
    """Reduction strategies the search may apply before branching."""
    NONE = 0
    REDUCTION = 1       # r - candidate reduction
    UNIQUE = 2          # u - unique candidate in a unit
    HIDDEN_PAIR = 4     # h - hidden pairs
    NAKED_PAIR = 8      # n - naked pairs
    ALL = REDUCTION | UNIQUE | HIDDEN_PAIR | NAKED_PAIR

    @classmethod
    def from_letters(cls, letters: str) -> "Strategy":
        """Parse the letter form, e.g. "ruhn" or "rh". Empty means pure search."""
        result = cls.NONE
        for ch in (letters or "").lower():
            if ch not in _LETTERS:
                raise ValueError(f"Unknown strategy {ch!r} (use letters from 'ruhn')")
            result |= _LETTERS[ch]
        return result

    def to_letters(self) -> str:
        return "".join(ch for ch, flag in _LETTERS.items() if flag in self)


_LETTERS = {
    "r": Strategy.REDUCTION,
    "u": Strategy.UNIQUE,
    "h": Strategy.HIDDEN_PAIR,
    "n": Strategy.NAKED_PAIR,
}


# ----- Candidate reduction -----
def candidate_reduction(grid: Grid) -> bool:
    """
    Strip from every empty cell the values already placed in its row, column
    and block, nailing down cells left with a single candidate. Repeats full
    passes until one makes no assignment.
    Returns False on contradiction (a cell without candidates).
    """
    if grid.has_conflict:
        logger.debug("Reduction: conflicting clues")
        return False

    dirty = True
    while dirty:
        dirty = False
        for idx in list(grid.unassigned):
            if grid.board[idx] != 0:
                continue
            mask = grid.opts[idx] & ~grid.unit_mask(idx)
            grid.opts[idx] = mask
            if mask == 0:
                logger.debug("Reduction: no candidates left at %s", grid.cell(idx))
                return False
            if num_ones(mask) == 1:
                # sole candidate - nail it to this cell
                grid.assign(idx, val_of(mask))
                dirty = True
    return True


# ----- Unique candidate (hidden single) -----
def _confined_to(grid: Grid, idx: int, bit: int) -> bool:
    """True if no peer in at least one unit of idx still allows bit."""
    opts = grid.opts
    for kind in UNIT_KINDS:
        if not any(opts[j] & bit for j in grid.peers[kind][idx]):
            return True
    return False


def unique_candidate(grid: Grid) -> bool:
    """
    If a value can only go in one cell within a unit, it must go there.
    Every assignment is followed by candidate reduction.
    Returns False on contradiction.
    """
    dirty = True
    while dirty:
        dirty = False
        for idx in list(grid.unassigned):
            if grid.board[idx] != 0:
                continue
            for v in bits_iter(grid.opts[idx]):
                if not _confined_to(grid, idx, bit_of(v)):
                    continue
                if not grid.is_legal_at(idx, v):
                    # the unit has nowhere left to put v
                    logger.debug("Unique: %d confined to %s but illegal there", v, grid.cell(idx))
                    return False
                grid.assign(idx, v)
                dirty = True
                if not candidate_reduction(grid):
                    return False
                break
    return True


# ----- Hidden pair -----
def _hidden_partner(grid: Grid, peers: Tuple[int, ...], b1: int, b2: int) -> int:
    """
    The single peer holding both b1 and b2 when no other peer holds either,
    otherwise -1. Together with the current cell, the pair then occupies
    exactly two cells of the unit.
    """
    partner = -1
    opts = grid.opts
    for j in peers:
        m = opts[j]
        has1, has2 = bool(m & b1), bool(m & b2)
        if has1 and has2:
            if partner != -1:
                return -1
            partner = j
        elif has1 or has2:
            return -1
    return partner


def hidden_pair(grid: Grid) -> bool:
    """
    A pair of values is hidden if, within a unit, it occurs in exactly two
    cells and none of its values occurs in the other cells of the unit. All
    other candidates of those two cells can then be dropped.
    Returns False on contradiction.
    """
    dirty = False
    for idx in list(grid.unassigned):
        if grid.board[idx] != 0 or grid.candidate_count(idx) < 3:
            continue  # examine only empty cells with at least three candidates
        restricted = False
        for v1, v2 in combinations(list(bits_iter(grid.opts[idx])), 2):
            pair = mask_of((v1, v2))
            for kind in UNIT_KINDS:
                partner = _hidden_partner(grid, grid.peers[kind][idx], bit_of(v1), bit_of(v2))
                if partner == -1:
                    continue
                grid.opts[idx] &= pair
                grid.opts[partner] &= pair
                logger.debug("Hidden pair (%d,%d) in %s of %s and %s",
                             v1, v2, kind.value, grid.cell(idx), grid.cell(partner))
                dirty = True
                restricted = True
                break
            if restricted:
                break

    if dirty:  # new singletons may appear - continue with reduction and uniqueness
        if not candidate_reduction(grid):
            return False
        if not unique_candidate(grid):
            return False
    return True


# ----- Naked pair -----
def naked_pair(grid: Grid) -> bool:
    """
    A pair is naked if it is alone in a cell. If the same naked pair shows up
    in two cells of a unit, its values can be dropped from all other cells of
    that unit.
    Returns False on contradiction.
    """
    dirty = False
    for idx in list(grid.unassigned):
        if grid.board[idx] != 0:
            continue
        pair = grid.opts[idx]
        if num_ones(pair) != 2:
            continue  # look for naked pairs only
        for kind in UNIT_KINDS:
            peers = grid.peers[kind][idx]
            twin = next((j for j in peers if grid.board[j] == 0 and grid.opts[j] == pair), -1)
            if twin == -1:
                continue
            for j in peers:
                if j == twin or not grid.opts[j] & pair:
                    continue
                if grid.board[j] != 0:
                    # a value of the pair is already placed in this unit
                    logger.debug("Naked pair at %s clashes with %s", grid.cell(idx), grid.cell(j))
                    return False
                grid.eliminate(j, pair)
                dirty = True

    if dirty:
        if not candidate_reduction(grid):
            return False
    return True


PIPELINE: List[Tuple[Strategy, Callable[[Grid], bool]]] = [
    (Strategy.REDUCTION, candidate_reduction),
    (Strategy.UNIQUE, unique_candidate),
    (Strategy.HIDDEN_PAIR, hidden_pair),
    (Strategy.NAKED_PAIR, naked_pair),
]


def enabled(strategies: Strategy) -> List[Callable[[Grid], bool]]:
    """The strategy functions selected by the flags, in their fixed order."""
    return [fn for flag, fn in PIPELINE if flag in strategies]
