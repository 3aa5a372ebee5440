"""Computer move selection: exhaustive minimax and a layered heuristic."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .game import (
    CENTER,
    CORNERS,
    Board,
    Cell,
    Symbol,
    available_moves,
    has_win,
    is_draw,
)

logger = logging.getLogger(__name__)

# Terminal score ceiling; depth is subtracted so quicker wins score higher.
WIN_SCORE = 10


class Difficulty(str, Enum):
    RANDOM = "random"
    MIXED = "mixed"
    HARD = "hard"
    OPTIMAL = "optimal"


class FallbackPolicy(str, Enum):
    """Last heuristic step once win, block, center and corners are exhausted."""

    FIRST = "first"
    RANDOM = "random"


# ---- optimal ----


def best_move(board: Board, mover: Symbol, opponent: Symbol) -> Optional[int]:
    """
    Pick the minimax-optimal move for ``mover``.

    Candidates are scanned in ascending index order and the first one with
    the best score wins. Search runs on a private copy, so ``board`` is left
    untouched. Returns None when the board is full.
    """
    cells: List[Cell] = list(board)
    best_score = -math.inf
    move: Optional[int] = None

    for index in available_moves(cells):
        cells[index] = mover
        score = _minimax(cells, 0, False, mover, opponent)
        cells[index] = None
        if score > best_score:
            best_score = score
            move = index
    return move


def _minimax(
    cells: List[Cell],
    depth: int,
    maximizing: bool,
    mover: Symbol,
    opponent: Symbol,
) -> float:
    if has_win(cells, mover):
        return WIN_SCORE - depth
    if has_win(cells, opponent):
        return depth - WIN_SCORE
    if is_draw(cells):
        return 0

    if maximizing:
        value = -math.inf
        for index in available_moves(cells):
            cells[index] = mover
            value = max(value, _minimax(cells, depth + 1, False, mover, opponent))
            cells[index] = None
        return value

    value = math.inf
    for index in available_moves(cells):
        cells[index] = opponent
        value = min(value, _minimax(cells, depth + 1, True, mover, opponent))
        cells[index] = None
    return value


# ---- heuristic ----


def _completing_move(cells: List[Cell], symbol: Symbol) -> Optional[int]:
    """First empty cell that would give ``symbol`` a line right away."""
    for index in available_moves(cells):
        cells[index] = symbol
        won = has_win(cells, symbol)
        cells[index] = None
        if won:
            return index
    return None


def heuristic_move(
    board: Board,
    mover: Symbol,
    opponent: Symbol,
    fallback: FallbackPolicy = FallbackPolicy.FIRST,
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """Win, else block, else center, else a corner, else the fallback cell."""
    cells: List[Cell] = list(board)
    moves = available_moves(cells)
    if not moves:
        return None

    move = _completing_move(cells, mover)
    if move is not None:
        return move
    move = _completing_move(cells, opponent)
    if move is not None:
        return move

    if cells[CENTER] is None:
        return CENTER
    for corner in CORNERS:
        if cells[corner] is None:
            return corner

    if fallback is FallbackPolicy.RANDOM:
        return (rng or random).choice(moves)
    return moves[0]


# ---- random ----


def random_move(board: Board, rng: Optional[random.Random] = None) -> Optional[int]:
    moves = available_moves(board)
    if not moves:
        return None
    return (rng or random).choice(moves)


# ---- configurable player ----


@dataclass
class MoveSelector:
    """Computer player that picks moves according to a difficulty level.

      - MoveSelector(player=Symbol.O, difficulty=Difficulty.OPTIMAL)
      - choose(board) -> cell index
    """

    player: Symbol
    difficulty: Difficulty = Difficulty.MIXED
    fallback: FallbackPolicy = FallbackPolicy.FIRST
    mix_ratio: float = 0.5
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.mix_ratio <= 1.0:
            raise ValueError("mix_ratio must be between 0 and 1")

    @property
    def opponent(self) -> Symbol:
        return self.player.opponent()

    def choose(self, board: Board) -> int:
        if not available_moves(board):
            raise RuntimeError("No valid moves available")

        strategy = self.difficulty
        if strategy is Difficulty.MIXED:
            use_heuristic = self.rng.random() < self.mix_ratio
            strategy = Difficulty.HARD if use_heuristic else Difficulty.RANDOM

        if strategy is Difficulty.OPTIMAL:
            move = best_move(board, self.player, self.opponent)
        elif strategy is Difficulty.HARD:
            move = heuristic_move(
                board, self.player, self.opponent, self.fallback, self.rng
            )
        else:
            move = random_move(board, self.rng)

        logger.debug(
            "%s (%s) plays %s via %s",
            self.player.value,
            self.difficulty.value,
            move,
            strategy.value,
        )
        return move  # type: ignore[return-value]
