from itertools import permutations

from queens_board import Board


# Exactly one valid placement: {1, 7, 8, 14}. The only other non-touching permutation
# (cells 2, 4, 11, 13) puts two queens in color 0.
UNIQUE_4X4 = [
    [0, 0, 0, 0],
    [0, 1, 1, 1],
    [2, 2, 2, 2],
    [3, 3, 3, 3],
]
UNIQUE_4X4_SOLUTION = {1, 7, 8, 14}


def brute_force_solutions(board):
    """Every valid placement, found by trying each column permutation (square boards only)."""
    n = board.rows
    found = []
    for perm in permutations(range(board.cols), n):
        if any(abs(perm[r] - perm[r + 1]) == 1 for r in range(n - 1)):
            continue
        cells = [r * board.cols + c for r, c in enumerate(perm)]
        colors = {board.color_of(idx) for idx in cells}
        if len(colors) == n and colors == board.colors:
            found.append(cells)
    return found


def non_touching_permutations(n):
    return [
        perm for perm in permutations(range(n))
        if all(abs(perm[r] - perm[r + 1]) != 1 for r in range(n - 1))
    ]


def planted_board(n, rng):
    """
    Solvable board: plant a valid placement, one region per queen, then grow the regions
    into the free cells by random orthogonal flood fill.
    """
    perm = rng.choice(non_touching_permutations(n))
    colors = [None] * (n * n)
    for r, c in enumerate(perm):
        colors[r * n + c] = r

    while None in colors:
        options = []
        for idx, color in enumerate(colors):
            if color is not None:
                continue
            r, c = divmod(idx, n)
            for dr, dc in [(-1, 0), (1, 0), (0, -1), (0, 1)]:
                nr, nc = r + dr, c + dc
                if 0 <= nr < n and 0 <= nc < n and colors[nr * n + nc] is not None:
                    options.append((idx, colors[nr * n + nc]))
        idx, color = rng.choice(options)
        colors[idx] = color

    return Board(n, n, colors)


def noise_board(n, rng):
    """Random colors per cell, usually unsolvable."""
    return Board(n, n, [rng.randrange(n) for _ in range(n * n)])


def board_corpus(rng, count=30):
    boards = []
    for i in range(count):
        n = 4 + i % 3
        if i % 2:
            boards.append(planted_board(n, rng))
        else:
            boards.append(noise_board(n, rng))
    return boards
