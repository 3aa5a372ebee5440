"""FastAPI service that runs tic-tac-toe games against the computer."""

from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fastapi import BackgroundTasks, FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .ai import Difficulty, FallbackPolicy, MoveSelector
from .game import (
    Cell,
    GameStatus,
    Outcome,
    Symbol,
    available_moves,
    empty_board,
    is_terminal,
    place,
    winning_line,
)

logger = logging.getLogger(__name__)

AI_THINK_DELAY: Tuple[float, float] = (0.5, 0.6)


@dataclass
class Scoreboard:
    """Running tally of finished games, kept in memory only."""

    player: int = 0
    cpu: int = 0
    ties: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, outcome: Outcome, player_symbol: Symbol) -> None:
        with self.lock:
            if outcome.status is GameStatus.DRAW:
                self.ties += 1
            elif outcome.winner is player_symbol:
                self.player += 1
            else:
                self.cpu += 1

    def reset(self) -> None:
        with self.lock:
            self.player = self.cpu = self.ties = 0

    def as_dict(self) -> Dict[str, int]:
        return {"player": self.player, "cpu": self.cpu, "ties": self.ties}


@dataclass
class GameSession:
    """A single game between a human and a computer opponent."""

    player_symbol: Symbol
    ai: MoveSelector
    board: Tuple[Cell, ...] = field(default_factory=empty_board)
    starter: Symbol = Symbol.X
    alternate_start: bool = True
    current_player: Symbol = Symbol.X
    outcome: Outcome = field(default_factory=lambda: is_terminal(empty_board()))
    move_log: List[Dict[str, object]] = field(default_factory=list)
    ai_pending: bool = False
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def apply(self, index: int) -> None:
        """Play ``index`` for the side to move and settle the result."""
        if self.outcome.finished:
            raise ValueError("Game already finished")
        mover = self.current_player
        self.board = place(self.board, index, mover)
        self.move_log.append({"player": mover.value, "cellIndex": index})
        self.outcome = is_terminal(self.board)
        if self.outcome.finished:
            SCOREBOARD.record(self.outcome, self.player_symbol)
            logger.info(
                "Game finished: %s (winner=%s)",
                self.outcome.status.value,
                self.outcome.winner.value if self.outcome.winner else None,
            )
        else:
            self.current_player = mover.opponent()

    def reset(self) -> None:
        """Clear the board for the next round; the starter swaps each round."""
        if self.alternate_start:
            self.starter = self.starter.opponent()
        self.board = empty_board()
        self.current_player = self.starter
        self.outcome = is_terminal(self.board)
        self.move_log = []
        self.ai_pending = False


SESSIONS: Dict[str, GameSession] = {}
SCOREBOARD = Scoreboard()
app = FastAPI(title="xocpu", description="Tic-tac-toe against the computer")


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    model_config = ConfigDict(populate_by_name=True)

    player_symbol: Symbol = Field(default=Symbol.X, alias="playerSymbol")
    difficulty: Difficulty = Field(
        default=Difficulty.MIXED,
        description="Strategy used by the computer player",
    )
    fallback: FallbackPolicy = Field(
        default=FallbackPolicy.FIRST,
        description="Heuristic move when no win, block, center or corner applies",
    )
    alternate_start: bool = Field(
        default=True,
        alias="alternateStart",
        description="Swap who moves first on every restart",
    )


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _create_session(request: NewGameRequest) -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    ai = MoveSelector(
        player=request.player_symbol.opponent(),
        difficulty=request.difficulty,
        fallback=request.fallback,
    )
    session = GameSession(
        player_symbol=request.player_symbol,
        ai=ai,
        alternate_start=request.alternate_start,
    )
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s: player=%s difficulty=%s",
        session_id,
        request.player_symbol.value,
        request.difficulty.value,
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _play_ai_move(session: GameSession) -> None:
    """Let the computer move if it is its turn. Caller holds the lock."""
    if session.outcome.finished or session.current_player != session.ai.player:
        return
    session.apply(session.ai.choose(session.board))


def _run_ai_turn(game_id: str) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, random.uniform(*AI_THINK_DELAY)))

    with session.lock:
        try:
            _play_ai_move(session)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        outcome = session.outcome
        line = winning_line(session.board)
        state: Dict[str, object] = {
            "id": game_id,
            "board": [cell.value if cell else "" for cell in session.board],
            "playerSymbol": session.player_symbol.value,
            "cpuSymbol": session.ai.player.value,
            "currentPlayer": session.current_player.value,
            "starter": session.starter.value,
            "difficulty": session.ai.difficulty.value,
            "status": outcome.status.value,
            "winner": outcome.winner.value if outcome.winner else None,
            "winningLine": list(line) if line else None,
            "availableMoves": (
                [] if outcome.finished else available_moves(session.board)
            ),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
            "scores": SCOREBOARD.as_dict(),
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        if session.outcome.finished:
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.current_player != session.player_symbol:
            raise HTTPException(status_code=400, detail="It is not your turn")

        try:
            session.apply(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        logger.info("Game %s: player took cell %d", game_id, cell_index)

        should_schedule_ai = (
            not session.outcome.finished
            and session.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id)


def _schedule_cpu_opening(
    game_id: str, session: GameSession, background_tasks: BackgroundTasks
) -> None:
    # The computer opens when it holds the starting symbol for this round.
    with session.lock:
        if session.current_player != session.ai.player:
            return
        session.ai_pending = True
    background_tasks.add_task(_run_ai_turn, game_id)


@app.post("/api/game")
def create_game(
    request: NewGameRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    game_id, session = _create_session(request)
    _schedule_cpu_opening(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(
    game_id: str, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.reset()
    logger.info("Game %s restarted", game_id)
    _schedule_cpu_opening(game_id, session, background_tasks)
    return _serialize_session(game_id, session)


@app.get("/api/scores")
def get_scores() -> Dict[str, int]:
    return SCOREBOARD.as_dict()


@app.delete("/api/scores")
def reset_scores() -> Dict[str, int]:
    SCOREBOARD.reset()
    logger.info("Score tally reset")
    return SCOREBOARD.as_dict()
