"""
Backtracking solver for the Queens puzzle.

Place one queen per row, per column and per color region, with no two queens touching diagonally.
The search is a plain depth-first backtracking with three tricks on top:
- forward checking: stop a branch as soon as an open row, column or color has no cell left to take a queen
- most constrained first: try the cells of the tightest row/column/color before anything else
- diagonal pressure counters: instead of re-checking neighbours, every cell keeps a count of the queens touching it

On top of that, partial placements that turned out to be dead ends are remembered (the "nogoods") so the
same set of queens is not explored again when it is reached in another order.
"""

import json


class SearchState:
    """
    Mutable bookkeeping for one solve call. Created fresh per call and thrown away after.

    Invariant: pressure[cell] == number of placed queens diagonally adjacent to cell.
    """

    def __init__(self, board):
        self.board = board
        self.row_used = [False] * board.rows
        self.col_used = [False] * board.cols
        self.color_used = {color: False for color in board.colors}
        self.pressure = [0] * board.size
        self.placed = []
        self.stats = {"nodes": 0, "backtracks": 0, "pruned": 0, "nogood_hits": 0}

    def _mark(self, idx, used):
        # shared by place and unplace, with opposite signs
        row, col = divmod(idx, self.board.cols)
        self.row_used[row] = used
        self.col_used[col] = used
        self.color_used[self.board.color_of(idx)] = used

        delta = 1 if used else -1
        for neighbor in self.board.diagonal_neighbors(idx):
            self.pressure[neighbor] += delta

    def place(self, idx):
        """Put a queen on idx."""
        self._mark(idx, True)
        self.placed.append(idx)

    def unplace(self):
        """Take back the last queen placed. Returns its index."""
        idx = self.placed.pop()
        self._mark(idx, False)
        return idx

    def is_eligible(self, idx):
        row, col = divmod(idx, self.board.cols)
        return (
            not self.row_used[row]
            and not self.col_used[col]
            and not self.color_used[self.board.color_of(idx)]
            and self.pressure[idx] == 0
        )

    def is_complete(self):
        return all(self.row_used) and all(self.col_used) and all(self.color_used.values())

    def pressure_is_consistent(self):
        """Recount the diagonal pressure from scratch and compare it with the counters."""
        expected = [0] * self.board.size
        for idx in self.placed:
            for neighbor in self.board.diagonal_neighbors(idx):
                expected[neighbor] += 1
        return expected == self.pressure


class _TrieNode:
    __slots__ = ("children", "is_leaf")

    def __init__(self):
        self.children = {}
        self.is_leaf = False


class NoGoods:
    """
    Cache of partial placements known to lead nowhere, stored as a trie over their sorted cell indices.

    The search state only depends on which cells hold a queen (not on the order they were placed in),
    so a dead-end set stays a dead end inside any larger placement. The cache lives for one solve call.
    """

    def __init__(self):
        self.root = _TrieNode()
        self.size = 0

    def insert(self, cells):
        current = self.root
        for idx in sorted(cells):
            current = current.children.setdefault(idx, _TrieNode())
        if not current.is_leaf:
            current.is_leaf = True
            self.size += 1

    def rules_out(self, cells):
        """
        True if a recorded dead end is a prefix of the sorted placement (and therefore a subset of it).
        """
        current = self.root
        for idx in sorted(cells):
            current = current.children.get(idx)
            if current is None:
                return False
            if current.is_leaf:
                return True
        return False


def find_candidates(state, forward_check=True):
    """
    Collect the cells a queen can go on next, most constrained first.

    A cell qualifies when its row, column and color are still open and no placed queen touches it diagonally.
    While scanning, we count for every open row, column and color how many qualifying cells it still has.

    Returns:
    - None if forward checking proves the branch dead (some open row/column/color has no cell left)
    - otherwise the list of candidate indices, sorted by the (min, sum) of their row/column/color counts
    """
    board = state.board
    row_spots = [0] * board.rows
    col_spots = [0] * board.cols
    color_spots = {color: 0 for color, used in state.color_used.items() if not used}

    candidates = []
    for idx in range(board.size):
        if state.is_eligible(idx):
            row, col = divmod(idx, board.cols)
            row_spots[row] += 1
            col_spots[col] += 1
            color_spots[board.color_of(idx)] += 1
            candidates.append(idx)

    if forward_check and (
        any(not used and row_spots[r] == 0 for r, used in enumerate(state.row_used))
        or any(not used and col_spots[c] == 0 for c, used in enumerate(state.col_used))
        or any(spots == 0 for spots in color_spots.values())
    ):
        return None

    def constrainedness(idx):
        row, col = divmod(idx, board.cols)
        counts = (row_spots[row], col_spots[col], color_spots[board.color_of(idx)])
        return min(counts), sum(counts)

    candidates.sort(key=constrainedness)
    return candidates


def _search(state, forward_check, nogoods):
    if len(state.placed) == state.board.rows:
        # with rows == cols == colors this always holds, otherwise the board can't be solved
        return state.is_complete()

    state.stats["nodes"] += 1
    candidates = find_candidates(state, forward_check)
    if candidates is None:
        state.stats["pruned"] += 1
        if nogoods is not None:
            nogoods.insert(state.placed)
        return False

    for idx in candidates:
        if nogoods is not None and nogoods.rules_out(state.placed + [idx]):
            state.stats["nogood_hits"] += 1
            continue

        state.place(idx)
        if _search(state, forward_check, nogoods):
            return True  # keep the placement, it is part of the answer
        state.unplace()
        state.stats["backtracks"] += 1

    if nogoods is not None:
        nogoods.insert(state.placed)
    return False


def solve(board, forward_check=True, use_nogoods=True, verbose=False):
    """
    Find one valid queen placement for the board.

    Args:
    - board: a queens_board.Board (never modified).
    - forward_check: prune branches where an open row/column/color ran out of cells. Only affects speed.
    - use_nogoods: remember dead-end placements for the rest of the search. Only affects speed.
    - verbose: print a short summary of the search.

    Returns:
    - list of board.rows cell indices (in placement order), or None if the board has no solution
    """
    state = SearchState(board)
    nogoods = NoGoods() if use_nogoods else None

    found = _search(state, forward_check, nogoods)

    if verbose:
        stats = state.stats
        print(
            f"Searched {stats['nodes']} nodes: {stats['backtracks']} backtracks, "
            f"{stats['pruned']} pruned by forward checking, {stats['nogood_hits']} skipped as nogoods"
        )

    if not found:
        return None
    return list(state.placed)


def is_valid_solution(board, cells):
    """
    Check a placement against the rules: every row, column and color exactly once, no diagonal neighbours.
    """
    cells = list(cells)
    if len(cells) != board.rows:
        return False
    if any(not 0 <= idx < board.size for idx in cells):
        return False

    positions = [board.row_col(idx) for idx in cells]
    if {r for r, _ in positions} != set(range(board.rows)):
        return False
    if sorted(c for _, c in positions) != list(range(board.cols)):
        return False
    colors = [board.color_of(idx) for idx in cells]
    if len(set(colors)) != len(colors) or set(colors) != board.colors:
        return False

    placed = set(cells)
    for idx in cells:
        if any(neighbor in placed for neighbor in board.diagonal_neighbors(idx)):
            return False
    return True


def solution_grid(board, cells):
    """The solved grid as rows of 1 (queen) and 0 (empty)."""
    grid = [[0] * board.cols for _ in range(board.rows)]
    for idx in cells:
        r, c = board.row_col(idx)
        grid[r][c] = 1
    return grid


def solution_to_json(cells):
    """Transport encoding of a result: a JSON list of indices, or null for no solution."""
    return json.dumps(None if cells is None else list(cells))
