from pathlib import Path
from typing import List, Sequence, Tuple, Union

from .errors import InvalidInputError
from .grid import Grid
from .utils import logger

PathLike = Union[str, Path]
Matrix = List[List[int]]


def parse_puzzle(text: str, box: int = 3) -> Matrix:
    """
    Parse puzzle text: n = box*box non-blank lines of n whitespace-separated
    integers, 0 for a blank cell. Lines past the n-th are ignored.
    """
    n = box * box
    rows: Matrix = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip() or len(rows) == n:
            continue
        tokens = line.split()
        if len(tokens) != n:
            raise InvalidInputError(f"Line {lineno}: expected {n} values, got {len(tokens)}")
        try:
            rows.append([int(t) for t in tokens])
        except ValueError as e:
            raise InvalidInputError(f"Line {lineno}: {e}") from e
    if len(rows) != n:
        raise InvalidInputError(f"Expected {n} rows, got {len(rows)}")
    return rows


def read_puzzle(path: PathLike, box: int = 3) -> Matrix:
    path = Path(path)
    logger.debug("Reading puzzle %s (box=%d)", path, box)
    try:
        return parse_puzzle(path.read_text(), box)
    except InvalidInputError as e:
        raise InvalidInputError(f"Non-valid file {path.name}: {e}") from e


def list_puzzle_files(path: PathLike) -> List[Path]:
    """A single file, or every *.txt file below a directory, sorted."""
    path = Path(path)
    if path.is_file():
        return [path]
    if path.is_dir():
        return sorted(p for p in path.rglob("*.txt") if p.is_file())
    raise FileNotFoundError(f"No such file or directory: {path}")


def normalize_line(line: str, n: int = 9) -> str:
    """
    Turn a one-line puzzle ("4.....8.5.3..." or "003020600...") into n rows
    of n space-separated values. Digits are kept, anything else is a blank.
    """
    cells = line.strip()
    if len(cells) != n * n:
        raise InvalidInputError(f"Expected {n * n} characters, got {len(cells)}")
    values = [ch if ch.isdigit() else "0" for ch in cells]
    rows = [" ".join(values[r * n:(r + 1) * n]) for r in range(n)]
    return "\n".join(rows) + "\n"


def normalize_collection(source: PathLike, out_dir: PathLike, prefix: str = "e", n: int = 9) -> List[Path]:
    """Write every non-blank line of source as its own puzzle file: <prefix>1.txt, <prefix>2.txt, ..."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    lines = [ln for ln in Path(source).read_text().splitlines() if ln.strip()]
    for k, line in enumerate(lines, start=1):
        target = out_dir / f"{prefix}{k}.txt"
        target.write_text(normalize_line(line, n))
        written.append(target)
    logger.info("Normalized %d puzzles into %s", len(written), out_dir)
    return written


def find_duplicates(paths: Sequence[PathLike], box: int = 3) -> List[Tuple[Path, Path]]:
    """Pairs (later, earlier) of puzzle files holding the same grid."""
    seen: List[Tuple[Path, Grid]] = []
    duplicates: List[Tuple[Path, Path]] = []
    for p in map(Path, paths):
        grid = Grid.from_matrix(read_puzzle(p, box), box)
        for other_path, other in seen:
            if grid.same_values(other):
                logger.info("%s already exists as %s", p.name, other_path.name)
                duplicates.append((p, other_path))
        seen.append((p, grid))
    return duplicates
