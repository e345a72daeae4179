"""
Offline script: solve a board stored in a file and print it.

The file is either the JSON transport encoding ({"rows", "cols", "colors", "idxToColor"})
or plain text with one row per line and whitespace separated color tokens, e.g.

    0 0 1 1
    0 2 2 1
    3 3 2 1
    3 3 3 3
"""

import argparse
import sys
from time import time

from queens_board import Board, InvalidInput
from queens_online import print_colored_grid
from queens_solver import solution_to_json, solve


def load_board(text):
    if text.lstrip().startswith("{"):
        return Board.from_json(text)
    return Board.from_text(text)


def build_parser():
    parser = argparse.ArgumentParser(description="Solve a Queens puzzle read from a file.")
    parser.add_argument("board", help="board file (JSON or text grid), '-' for stdin")
    parser.add_argument("--json", action="store_true", help="print the solution as a JSON list of cell indices")
    parser.add_argument("--no-forward-check", action="store_true", help="disable forward checking")
    parser.add_argument("--no-nogoods", action="store_true", help="disable the dead-end cache")
    parser.add_argument("--verbose", action="store_true", help="print search statistics")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        if args.board == "-":
            text = sys.stdin.read()
        else:
            with open(args.board, encoding="utf-8") as f:
                text = f.read()
        board = load_board(text)
    except OSError as e:
        print(f"Could not read {args.board}: {e}", file=sys.stderr)
        return 2
    except InvalidInput as e:
        print(f"Invalid board: {e}", file=sys.stderr)
        return 2

    start_time = time()
    solution = solve(
        board,
        forward_check=not args.no_forward_check,
        use_nogoods=not args.no_nogoods,
        verbose=args.verbose,
    )
    end_time = time()

    if args.json:
        print(solution_to_json(solution))
    elif solution is None:
        print("No solution found.")
    else:
        print(f"Solution found after: {end_time - start_time:.2f} seconds")
        print_colored_grid(board, solution)

    return 0 if solution is not None else 1


if __name__ == "__main__":
    sys.exit(main())
