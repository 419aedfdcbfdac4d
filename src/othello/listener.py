"""
Engine-to-presentation callbacks.

The rendering layer subclasses GameListener and overrides what it needs. It derives all of its visual flags
(valid-move markers, last-move marker, flip animation, score text) from these notifications; it never
feeds them back into the engine.
"""

from src.core.shared_types import Color
from src.othello.board import StoneCount
from src.othello.cell import Cell
from src.othello.rules import Outcome
from src.othello.square import Square


class GameListener:
    """No-op base class: every hook does nothing unless overridden."""

    def on_reset(self) -> None:
        """The board went back to a fresh position. Redraw everything."""

    def on_cell_changed(self, square: Square, cell: Cell) -> None:
        """A single square got a new stone (placed, or flipped)."""

    def on_flip(self, squares: frozenset[Square]) -> None:
        """The stones captured by the last placement. Start the flip animation here."""

    def on_score_changed(self, count: StoneCount) -> None: ...

    def on_turn_changed(self, color: Color) -> None: ...

    def on_pass(self, color: Color) -> None:
        """`color` has no legal placement and will be skipped once the pass notice expires."""

    def on_game_over(self, outcome: Outcome) -> None: ...

    def on_valid_moves(self, squares: frozenset[Square]) -> None:
        """Recomputed after every settle. Empty when the local user cannot move right now."""

    def on_move_rejected(self, square: Square, color: Color, reason: str) -> None:
        """A local placement attempt was refused. Nothing on the board changed."""

    def on_opponent_left(self, color: Color) -> None:
        """The remote player (`color`) disconnected. Terminal for the session."""
