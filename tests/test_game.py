"""Unit tests for tic-tac-toe board evaluation."""

import itertools

import pytest

from xocpu.game import (
    WINNING_LINES,
    GameStatus,
    InvalidBoardError,
    Symbol,
    available_moves,
    empty_board,
    has_win,
    is_draw,
    is_terminal,
    parse_board,
    place,
    validate_board,
    winning_line,
)

X, O = Symbol.X, Symbol.O


def test_empty_board_is_ongoing():
    board = empty_board()
    outcome = is_terminal(board)
    assert outcome.status is GameStatus.ONGOING
    assert outcome.winner is None
    assert not outcome.finished
    assert available_moves(board) == list(range(9))


@pytest.mark.parametrize("line", WINNING_LINES)
@pytest.mark.parametrize("symbol", [X, O])
def test_single_line_wins_for_its_symbol_only(line, symbol):
    board = [None] * 9
    for index in line:
        board[index] = symbol

    assert has_win(board, symbol)
    assert not has_win(board, symbol.opponent())
    assert is_terminal(board).winner is symbol
    assert winning_line(board) == line


def test_full_boards_without_a_line_are_draws():
    draws = 0
    for cells in itertools.product((X, O), repeat=9):
        if has_win(cells, X) or has_win(cells, O):
            continue
        draws += 1
        assert is_draw(cells)
        assert is_terminal(cells).status is GameStatus.DRAW
        assert winning_line(cells) is None
    assert draws > 0


def test_is_draw_ignores_wins():
    board = parse_board("XXXOOXOXO")
    assert is_draw(board)
    assert is_terminal(board).status is GameStatus.WIN


def test_is_draw_false_with_empty_cell():
    assert not is_draw(parse_board("XOXOXO.OX"))


def test_terminal_checks_x_before_o():
    # Not reachable in play, but the order must be stable.
    board = parse_board("XXXOOO...")
    assert is_terminal(board).winner is X


def test_has_win_rejects_empty_symbol():
    with pytest.raises(ValueError):
        has_win(empty_board(), None)


def test_place_returns_new_board():
    board = empty_board()
    after = place(board, 4, X)
    assert board == empty_board()
    assert after[4] is X
    assert available_moves(after) == [0, 1, 2, 3, 5, 6, 7, 8]


def test_place_rejects_occupied_or_out_of_range_cell():
    board = place(empty_board(), 0, X)
    with pytest.raises(ValueError):
        place(board, 0, O)
    with pytest.raises(ValueError):
        place(board, 9, O)


def test_parse_board_accepts_loose_values():
    board = parse_board(["x", "O", "", " ", None, ".", "X", "o", "X"])
    assert board == (X, O, None, None, None, None, X, O, X)


def test_parse_board_accepts_symbol_cells():
    board = place(empty_board(), 4, X)
    assert parse_board(board) == board
    assert parse_board([O] + [None] * 8)[0] is O


def test_parse_board_rejects_unknown_values_and_sizes():
    with pytest.raises(InvalidBoardError):
        parse_board("XO?......")
    with pytest.raises(InvalidBoardError):
        parse_board("XO")


def test_validate_board_rejects_raw_strings():
    with pytest.raises(InvalidBoardError):
        validate_board(["X"] + [None] * 8)
