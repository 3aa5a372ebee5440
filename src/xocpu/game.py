"""Core rules for tic-tac-toe: symbols, boards, and win/draw detection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple


class Symbol(str, Enum):
    """The two playable marks. Empty cells are ``None``, never a member."""

    X = "X"
    O = "O"

    def opponent(self) -> "Symbol":
        return Symbol.O if self is Symbol.X else Symbol.X


Cell = Optional[Symbol]
Board = Sequence[Cell]

BOARD_SIZE = 9
CENTER = 4
CORNERS: Tuple[int, ...] = (0, 2, 6, 8)

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class InvalidBoardError(ValueError):
    """Raised when a board does not have 9 cells of ``Symbol`` or ``None``."""


class GameStatus(str, Enum):
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    status: GameStatus
    winner: Optional[Symbol] = None

    @property
    def finished(self) -> bool:
        return self.status is not GameStatus.ONGOING


ONGOING = Outcome(GameStatus.ONGOING)
DRAW = Outcome(GameStatus.DRAW)


# ---------- Board helpers ----------


def empty_board() -> Tuple[Cell, ...]:
    return (None,) * BOARD_SIZE


def parse_board(cells: Iterable[Optional[str]]) -> Tuple[Cell, ...]:
    """
    Build a board from loose cell values.
    'X'/'O' (any case) become symbols; '', ' ', '.' and None are empty.
    """
    board: List[Cell] = []
    for value in cells:
        if value is None or value in ("", " ", "."):
            board.append(None)
            continue
        if isinstance(value, Symbol):
            board.append(value)
            continue
        try:
            board.append(Symbol(str(value).upper()))
        except ValueError as exc:
            raise InvalidBoardError(f"Unknown cell value {value!r}") from exc
    validate_board(board)
    return tuple(board)


def validate_board(board: Board) -> None:
    if len(board) != BOARD_SIZE:
        raise InvalidBoardError(
            f"Board must have {BOARD_SIZE} cells, got {len(board)}"
        )
    for index, cell in enumerate(board):
        if cell is not None and not isinstance(cell, Symbol):
            raise InvalidBoardError(f"Cell {index} holds {cell!r}")


def available_moves(board: Board) -> List[int]:
    """Empty cell indices in ascending order."""
    return [i for i, cell in enumerate(board) if cell is None]


def place(board: Board, index: int, symbol: Symbol) -> Tuple[Cell, ...]:
    """Return a new board with ``symbol`` at ``index``."""
    if not 0 <= index < BOARD_SIZE:
        raise ValueError(f"Cell index {index} is out of range")
    if board[index] is not None:
        raise ValueError("Cell already occupied")
    cells = list(board)
    cells[index] = symbol
    return tuple(cells)


# ---------- Evaluation ----------


def has_win(board: Board, symbol: Symbol) -> bool:
    if symbol is None:
        raise ValueError("Only X or O can win")
    for a, b, c in WINNING_LINES:
        if board[a] == symbol and board[b] == symbol and board[c] == symbol:
            return True
    return False


def is_draw(board: Board) -> bool:
    # Callers check has_win for both symbols first.
    return all(cell is not None for cell in board)


def is_terminal(board: Board) -> Outcome:
    for symbol in (Symbol.X, Symbol.O):
        if has_win(board, symbol):
            return Outcome(GameStatus.WIN, symbol)
    if is_draw(board):
        return DRAW
    return ONGOING


def winning_line(board: Board) -> Optional[Tuple[int, int, int]]:
    """The first fully occupied line, used to highlight a finished game."""
    for line in WINNING_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return line
    return None
