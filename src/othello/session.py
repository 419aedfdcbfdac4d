"""
The GameSession holds the canonical state of one game: the board plus turn bookkeeping.

It is plain data. Only the TurnController (src/othello/turns.py) mutates it, and a reset replaces it wholesale.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import GameStateError
from src.core.models import SessionModel
from src.core.shared_types import Color, Status
from src.othello.board import Board
from src.othello.rules import Outcome, compute_outcome
from src.othello.square import Square

PASS_NOTATION = "pass"


@dataclass
class GameSession:
    board: Board
    turn: Color = Color.WHITE
    status: Status = Status.AWAITING_MOVE
    outcome: Optional[Outcome] = None
    last_move: Optional[Square] = None
    pending_pass: Optional[Color] = None
    pass_deadline: Optional[float] = None
    history: list[str] = field(default_factory=list)
    opponent_left: bool = False

    @classmethod
    def new(cls) -> Self:
        """Standard opening position, white to move."""
        return cls(board=Board.starting_position())

    @classmethod
    def from_layout(
        cls, layout: str, turn: Color = Color.WHITE, status: Status = Status.AWAITING_MOVE
    ) -> Self:
        """Convenience method: start a session from an arbitrary position"""
        board = Board.from_layout(layout)
        outcome = compute_outcome(board) if status == Status.GAME_OVER else None
        return cls(board=board, turn=turn, status=status, outcome=outcome)

    @property
    def game_over(self) -> bool:
        return self.status == Status.GAME_OVER

    @property
    def is_terminal(self) -> bool:
        """No further moves can be made: the game ended or the opponent is gone."""
        return self.game_over or self.opponent_left

    # --- BOUNDARY CONVERSION ---
    def to_model(self) -> SessionModel:
        """Encode into the transport-safe snapshot"""
        return SessionModel(
            layout=self.board.to_layout(),
            turn=self.turn.value,
            status=self.status.value,
            winner=(
                self.outcome.winner.value
                if self.outcome is not None and self.outcome.winner is not None
                else None
            ),
            last_move=self.last_move.to_algebraic() if self.last_move else None,
            history=list(self.history),
            opponent_left=self.opponent_left,
        )

    @classmethod
    def from_model(cls, model: SessionModel) -> Self:
        """
        Rebuild a session from a snapshot.
        ----

        NOTE a snapshot never carries a running pass timer: a session in the passing status cannot be restored.
        NOTE the outcome is recomputed from the stones on the board, same as when the game originally ended.
        """
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        status = Status(model.status)
        if status == Status.PASSING:
            raise GameStateError("Cannot restore a session in the middle of a pass.")

        board = Board.from_layout(model.layout)
        return cls(
            board=board,
            turn=Color(model.turn),
            status=status,
            outcome=compute_outcome(board) if status == Status.GAME_OVER else None,
            last_move=Square.from_algebraic(model.last_move) if model.last_move else None,
            history=list(model.history),
            opponent_left=model.opponent_left,
        )

    def record_move(self, square: Square) -> None:
        self.last_move = square
        self.history.append(square.to_algebraic())

    def record_pass(self) -> None:
        self.history.append(PASS_NOTATION)
