"""xocpu package exposing tic-tac-toe rules, move selection, and the web service."""

from .ai import Difficulty, FallbackPolicy, MoveSelector, best_move, heuristic_move
from .game import GameStatus, Outcome, Symbol, has_win, is_draw, is_terminal
from .ui import app

__all__ = [
    "Difficulty",
    "FallbackPolicy",
    "GameStatus",
    "MoveSelector",
    "Outcome",
    "Symbol",
    "app",
    "best_move",
    "has_win",
    "heuristic_move",
    "is_draw",
    "is_terminal",
]
