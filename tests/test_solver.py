import json
import random

import pytest

from queens_board import Board
from queens_solver import (
    NoGoods,
    SearchState,
    find_candidates,
    is_valid_solution,
    solution_grid,
    solution_to_json,
    solve,
)
from tests.helpers import (
    UNIQUE_4X4,
    UNIQUE_4X4_SOLUTION,
    board_corpus,
    brute_force_solutions,
    planted_board,
)


def test_trivial_one_by_one_board():
    assert solve(Board(1, 1, [0])) == [0]


def test_two_by_two_has_no_solution():
    # cells 0 and 3 share a region, 1 and 2 the other one
    board = Board(2, 2, ["a", "b", "b", "a"])
    assert solve(board) is None
    assert brute_force_solutions(board) == []


def test_unique_four_by_four_solution():
    board = Board.from_grid(UNIQUE_4X4)
    solution = solve(board)
    assert set(solution) == UNIQUE_4X4_SOLUTION
    assert is_valid_solution(board, solution)


@pytest.mark.parametrize("forward_check", [True, False])
@pytest.mark.parametrize("use_nogoods", [True, False])
def test_unique_solution_in_every_configuration(forward_check, use_nogoods):
    board = Board.from_grid(UNIQUE_4X4)
    solution = solve(board, forward_check=forward_check, use_nogoods=use_nogoods)
    assert set(solution) == UNIQUE_4X4_SOLUTION


def test_planted_boards_are_solved_validly():
    rng = random.Random(1234)
    for n in (4, 5, 6, 7, 8):
        board = planted_board(n, rng)
        solution = solve(board)
        assert solution is not None, board.to_dict()
        assert len(solution) == n
        assert is_valid_solution(board, solution)


def test_failure_agrees_with_brute_force():
    rng = random.Random(42)
    for board in board_corpus(rng, count=40):
        solution = solve(board)
        expected = brute_force_solutions(board)
        if solution is None:
            assert expected == [], board.to_dict()
        else:
            assert is_valid_solution(board, solution)
            assert sorted(solution) in [sorted(s) for s in expected]


def test_pruning_never_changes_the_outcome():
    rng = random.Random(7)
    for board in board_corpus(rng, count=40):
        outcomes = {
            solve(board, forward_check=fc, use_nogoods=ng) is not None
            for fc in (True, False)
            for ng in (True, False)
        }
        assert len(outcomes) == 1, board.to_dict()


def test_repeated_solves_are_consistent():
    rng = random.Random(99)
    for board in board_corpus(rng, count=12):
        results = [solve(board) for _ in range(3)]
        found = {r is not None for r in results}
        assert len(found) == 1
        for r in results:
            if r is not None:
                assert is_valid_solution(board, r)


def test_solve_does_not_touch_the_board():
    board = Board.from_grid(UNIQUE_4X4)
    before = board.to_dict()
    solve(board)
    assert board.to_dict() == before


def test_non_square_boards_fail():
    assert solve(Board(2, 3, [0, 0, 0, 1, 1, 1])) is None
    assert solve(Board(1, 2, [0, 0])) is None
    assert solve(Board(3, 1, [0, 1, 2])) is None


def test_declared_color_without_cells_fails():
    assert solve(Board(1, 1, [0], colors=[0, 1])) is None


def test_more_colors_than_rows_fails():
    assert solve(Board(1, 1, [0], colors=[0, "extra"])) is None
    assert solve(Board(1, 1, ["only"])) == [0]


def test_place_and_unplace_are_symmetric():
    board = Board(4, 4, list(range(16)))
    state = SearchState(board)
    snapshot = (list(state.row_used), list(state.col_used), dict(state.color_used), list(state.pressure))

    state.place(5)
    assert state.row_used[1] and state.col_used[1] and state.color_used[5]
    assert [state.pressure[i] for i in (0, 2, 8, 10)] == [1, 1, 1, 1]
    assert state.pressure_is_consistent()

    state.place(15)
    assert state.pressure[10] == 2
    assert state.pressure_is_consistent()

    assert state.unplace() == 15
    assert state.pressure[10] == 1
    assert state.unplace() == 5
    assert (list(state.row_used), list(state.col_used), dict(state.color_used), list(state.pressure)) == snapshot
    assert state.placed == []


def test_candidates_skip_used_lines_colors_and_pressure():
    board = Board.from_grid(UNIQUE_4X4)
    state = SearchState(board)
    state.place(1)  # row 0, col 1, color 0

    candidates = find_candidates(state, forward_check=False)
    for idx in candidates:
        row, col = board.row_col(idx)
        assert row != 0 and col != 1
        assert board.color_of(idx) != 0
        assert state.pressure[idx] == 0
    # cells 4, 6 touch the queen diagonally
    assert 4 not in candidates and 6 not in candidates
    assert set(candidates) == {7, 8, 10, 11, 12, 14, 15}


def test_candidates_are_ordered_most_constrained_first():
    board = Board.from_grid(UNIQUE_4X4)
    state = SearchState(board)
    state.place(1)

    candidates = find_candidates(state)
    # row 1 has a single open cell left (7), so it comes first
    assert candidates[0] == 7


def test_forward_check_prunes_dead_branch():
    board = Board.from_grid(UNIQUE_4X4)
    state = SearchState(board)
    state.place(4)  # row 1 col 0, color 0: row 0 has nothing left

    assert find_candidates(state) is None
    assert find_candidates(state, forward_check=False) != []


def test_nogoods_match_recorded_prefixes():
    nogoods = NoGoods()
    nogoods.insert([7, 3])
    assert nogoods.size == 1
    assert nogoods.rules_out([3, 7])
    assert nogoods.rules_out([9, 7, 3])
    assert not nogoods.rules_out([3])
    assert not nogoods.rules_out([3, 8])

    nogoods.insert([3, 7])
    assert nogoods.size == 1


def test_verbose_prints_search_summary(capsys):
    solve(Board.from_grid(UNIQUE_4X4), verbose=True)
    out = capsys.readouterr().out
    assert "nodes" in out and "backtracks" in out


def test_silent_by_default(capsys):
    solve(Board.from_grid(UNIQUE_4X4))
    assert capsys.readouterr().out == ""


def test_is_valid_solution_rejects_broken_placements():
    board = Board.from_grid(UNIQUE_4X4)
    assert is_valid_solution(board, [1, 7, 8, 14])
    assert not is_valid_solution(board, [1, 7, 8])          # too short
    assert not is_valid_solution(board, [2, 4, 11, 13])     # two queens in color 0
    assert not is_valid_solution(board, [0, 5, 10, 15])     # diagonal neighbours
    assert not is_valid_solution(board, [1, 7, 8, 99])      # off the board


def test_solution_grid_and_json():
    board = Board.from_grid(UNIQUE_4X4)
    assert solution_grid(board, [1, 7, 8, 14]) == [
        [0, 1, 0, 0],
        [0, 0, 0, 1],
        [1, 0, 0, 0],
        [0, 0, 1, 0],
    ]
    assert json.loads(solution_to_json([1, 7, 8, 14])) == [1, 7, 8, 14]
    assert solution_to_json(None) == "null"
