"""
The TurnController is the entrypoint into the domain layer for the service layer.

It owns one GameSession and is responsible for everything that happens around a placement:
whose turn it is, forced passes (with their countdown), and detecting the end of the game.
Every state change is reported to a GameListener so a presentation layer can follow along.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Protocol

from src.core.config import SessionConfig
from src.core.exceptions import GameStateError, NotYourTurnError
from src.core.shared_types import Color, Status, opposite_color
from src.othello.cell import Cell
from src.othello.listener import GameListener
from src.othello.rules import (
    AppliedMove,
    Outcome,
    apply_move,
    compute_outcome,
    has_any_valid_move,
    valid_moves,
)
from src.othello.session import GameSession
from src.othello.square import Square

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Just the parts of an event loop the controller needs (an asyncio loop fits as-is)"""

    def time(self) -> float: ...
    def call_later(self, delay: float, callback: Callable[[], object]) -> TimerHandle: ...


# --- PHASES (read-only view of the session) ---
@dataclass(frozen=True)
class AwaitingMove:
    color: Color


@dataclass(frozen=True)
class Passing:
    color: Color
    deadline: float


@dataclass(frozen=True)
class GameOver:
    outcome: Outcome


@dataclass(frozen=True)
class OpponentLeft:
    """Terminal, and separate from GameOver: a game that had already ended keeps its outcome."""

    outcome: Optional[Outcome]


Phase = AwaitingMove | Passing | GameOver | OpponentLeft


class TurnController:
    def __init__(
        self,
        scheduler: Scheduler,
        listener: Optional[GameListener] = None,
        *,
        config: SessionConfig = SessionConfig(),
        local_colors: Iterable[Color] = tuple(Color),
    ) -> None:
        self.scheduler = scheduler
        self.listener = listener or GameListener()
        self.config = config
        # colors played on this machine: only those get valid-move hints
        self.local_colors = frozenset(local_colors)
        self.session = GameSession.new()
        self._pass_timer: Optional[TimerHandle] = None

    @property
    def phase(self) -> Phase:
        session = self.session
        if session.opponent_left:
            return OpponentLeft(session.outcome)

        if session.status == Status.GAME_OVER:
            # for the typechecker: the outcome is always set together with the status
            assert session.outcome is not None
            return GameOver(session.outcome)

        if session.status == Status.PASSING:
            assert session.pending_pass is not None and session.pass_deadline is not None
            return Passing(session.pending_pass, session.pass_deadline)

        return AwaitingMove(session.turn)

    @property
    def has_pending_pass(self) -> bool:
        return self._pass_timer is not None

    # --- DOMAIN LAYER API CALLED BY SERVICES ---
    def reset(self, session: Optional[GameSession] = None) -> None:
        """
        Throw away the current game and start over
        ----

        Works from any phase, and is the only thing that cancels a running pass countdown.
        Without an argument the standard opening is used, white to move.
        A supplied session goes through the usual evaluation: it may start in a pass, or be over at once.
        """
        if session is not None and session.status == Status.PASSING:
            raise GameStateError("Cannot start from a session that is in the middle of a pass.")

        self._cancel_pass_timer()
        self.session = session or GameSession.new()
        logger.info("Resetting game")

        self.listener.on_reset()
        for square, cell in self.session.board.cells.items():
            if cell != Cell.EMPTY:
                self.listener.on_cell_changed(square, cell)
        self.listener.on_score_changed(self.session.board.count_stones())

        if self.session.game_over:
            assert self.session.outcome is not None
            self.listener.on_game_over(self.session.outcome)
            self.listener.on_valid_moves(frozenset())
            return

        if self.session.opponent_left:
            self.listener.on_valid_moves(frozenset())
            return

        # a supplied position may already call for a pass or be finished: evaluate it as if
        # the other color had just moved
        self._advance(mover=opposite_color(self.session.turn))

    def play(self, square: Square, color: Color) -> AppliedMove:
        """
        Attempt a placement
        -----

        1. the session must still be running and not in the middle of a pass
        2. it must be `color`'s turn
        3. the placement must capture something (otherwise IllegalMoveError, board untouched)
        4. update the board, the move history, notify the listener
        5. decide who moves next: opponent, a forced pass, or the end of the game
        """
        session = self.session
        if session.is_terminal:
            raise GameStateError(f"Game is not in progress. phase: {self.phase}")

        if session.status == Status.PASSING:
            raise GameStateError(
                f"Waiting for {session.pending_pass} to finish passing before the next move."
            )

        if color != session.turn:
            raise NotYourTurnError(
                f"It is not {color}'s turn. Waiting for {session.turn} to make a move first."
            )

        applied = apply_move(session.board, square, color)
        session.record_move(square)
        logger.info("play %s %s (flipped %d)", color, square.to_algebraic(), len(applied.flipped))

        stone = Cell.of(color)
        self.listener.on_cell_changed(square, stone)
        for captured in sorted(applied.flipped):
            self.listener.on_cell_changed(captured, stone)
        self.listener.on_flip(applied.flipped)
        self.listener.on_score_changed(session.board.count_stones())

        self._advance(mover=color)
        return applied

    def declare_pass(self, color: Color) -> None:
        """
        Enter the passing phase for `color` on outside request (a peer reporting its own pass).

        Only accepted when it is `color`'s turn and `color` truly has no placement.
        """
        session = self.session
        if session.is_terminal:
            raise GameStateError(f"Game is not in progress. phase: {self.phase}")

        if session.status == Status.PASSING:
            raise GameStateError(f"{session.pending_pass} is already passing.")

        if color != session.turn:
            raise NotYourTurnError(f"{color} cannot pass: it is {session.turn}'s turn.")

        if has_any_valid_move(session.board, color):
            raise GameStateError(f"{color} cannot pass while a legal placement exists.")

        self._start_pass(color)

    def mark_opponent_left(self, color: Color) -> None:
        """The remote player disconnected. Terminal: nothing is undone, nothing more can happen."""
        self._cancel_pass_timer()
        if self.session.opponent_left:
            return

        self.session.opponent_left = True
        logger.info("Opponent (%s) left the game", color)
        self.listener.on_opponent_left(color)
        self.listener.on_valid_moves(frozenset())

    def shutdown(self) -> None:
        """Stop the pass countdown without touching the session (used when the owner goes away)."""
        self._cancel_pass_timer()

    def playable_squares(self) -> frozenset[Square]:
        """Squares the local user may click right now (valid-move hints)."""
        session = self.session
        if session.is_terminal or session.status != Status.AWAITING_MOVE:
            return frozenset()

        if session.turn not in self.local_colors:
            return frozenset()

        return valid_moves(session.board, session.turn)

    # -- PRIVATE HELPERS ---
    def _advance(self, mover: Color) -> None:
        """
        Evaluate the position after `mover` placed a stone (or after `mover`'s pass ran out)
        ----

        * somebody ran out of stones, or the board is full --> game over
        * the opponent can place a stone --> opponent's turn
        * only the mover can place a stone --> the opponent must pass
        * nobody can place a stone --> game over
        """
        session = self.session
        board = session.board
        opponent = opposite_color(mover)

        count = board.count_stones()
        if count.black == 0 or count.white == 0 or board.is_full():
            self._finish()
            return

        if has_any_valid_move(board, opponent):
            session.turn = opponent
            session.status = Status.AWAITING_MOVE
            self.listener.on_turn_changed(opponent)
            self._notify_valid_moves()
            return

        if has_any_valid_move(board, mover):
            self._start_pass(opponent)
            return

        self._finish()

    def _start_pass(self, color: Color) -> None:
        session = self.session
        session.turn = color
        session.status = Status.PASSING
        session.pending_pass = color
        session.pass_deadline = self.scheduler.time() + self.config.pass_delay
        session.record_pass()
        self._pass_timer = self.scheduler.call_later(self.config.pass_delay, self._on_pass_expired)
        logger.info("pass %s", color)

        self.listener.on_turn_changed(color)
        self.listener.on_pass(color)
        self.listener.on_valid_moves(frozenset())

    def _on_pass_expired(self) -> None:
        self._pass_timer = None
        session = self.session
        passed = session.pending_pass
        if passed is None:
            return

        session.pending_pass = None
        session.pass_deadline = None
        logger.debug("pass by %s is over", passed)
        self._advance(mover=passed)

    def _cancel_pass_timer(self) -> None:
        if self._pass_timer is not None:
            self._pass_timer.cancel()
            self._pass_timer = None

    def _finish(self) -> None:
        session = self.session
        outcome = compute_outcome(session.board)
        session.status = Status.GAME_OVER
        session.outcome = outcome
        logger.info(
            "Game over: %s (black %d, white %d)",
            "tie" if outcome.is_tie else f"{outcome.winner} wins",
            outcome.black,
            outcome.white,
        )
        self.listener.on_game_over(outcome)
        self.listener.on_valid_moves(frozenset())

    def _notify_valid_moves(self) -> None:
        self.listener.on_valid_moves(self.playable_squares())
