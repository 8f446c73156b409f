import argparse
import logging
import sys
import time
from typing import List, Optional

from varsudoku.config import SolverConfig, DEFAULT_BLOCK_SIZE, DEFAULT_MAX_CALLS
from varsudoku.errors import InvalidInputError
from varsudoku.grid import Grid
from varsudoku.puzzle_io import list_puzzle_files, read_puzzle
from varsudoku.solver import SolveStatus, SudokuSolver
from varsudoku.strategies import Strategy
from varsudoku.utils import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Solve Sudoku puzzle files by propagation and backtracking search")
    parser.add_argument("-f", "--file", required=True, help="Puzzle file (or directory of *.txt puzzles)")
    parser.add_argument(
        "-b",
        "--block-size",
        type=int,
        default=DEFAULT_BLOCK_SIZE,
        help="Block size B; puzzles are B^2 x B^2 (default: %(default)s)",
    )
    parser.add_argument(
        "-s",
        "--strategies",
        default="",
        help="Strategies [r - candidate reduction, u - uniqueness in unit, h - hidden pairs, n - naked pairs]",
    )
    parser.add_argument(
        "--max-calls",
        type=int,
        default=DEFAULT_MAX_CALLS,
        help="Abort a puzzle after this many search calls (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SolverConfig(
            strategies=Strategy.from_letters(args.strategies),
            max_calls=args.max_calls,
            box=args.block_size,
        )
        files = list_puzzle_files(args.file)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}")
        parser.print_usage()
        return 1

    print(f"Args:\n Strategies = {config.strategies.to_letters()}\n Block = {config.box}\n file = {args.file}\n")

    counters: List[int] = []
    calls_sum = 0
    solved_count = 0
    max_calls = 0
    start = time.time()

    for path in files:
        try:
            grid = Grid.from_matrix(read_puzzle(path, config.box), config.box)
        except InvalidInputError as e:
            logger.error("Invalid puzzle %s: %s", path, e)
            print(f"{path.name}: INVALID INPUT ({e})\n")
            return 1
        print(f"{path.name} Original")
        print(grid.to_board_string() + "\n")

        result = SudokuSolver(grid, config).solve()
        if result.solved:
            print(f"{path.name} Solved: {result.calls}")
            print(result.grid.to_board_string() + "\n")
            counters.append(result.calls)
            calls_sum += result.calls
            solved_count += 1
            max_calls = max(max_calls, result.calls)
        else:
            counters.append(0)
            if result.status is SolveStatus.ABORTED:
                print(f"{path.name}: ABORTED after {result.calls - 1} calls!\n")
            else:
                print(f"{path.name}: NO SOLUTION!\n")

    elapsed = time.time() - start
    print("".join(f"\t{p.name:>10}" for p in files))
    print("".join(f"\t{c:>10d}" for c in counters))
    if solved_count:
        print(
            f"#Solved puzzles = {solved_count}, Avg. Running time = {elapsed / solved_count:5.3f} seconds, "
            f"Avg #calls = {calls_sum / solved_count:5.3f}, Max #calls {max_calls}"
        )
    else:
        print("#Solved puzzles = 0")
    return 0


if __name__ == "__main__":
    sys.exit(run())
