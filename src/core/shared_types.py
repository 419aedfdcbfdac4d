"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    AWAITING_MOVE = "awaiting move"
    PASSING = "passing"
    GAME_OVER = "game over"


# --- Color does NOT contain an option for empty squares. That lives in src/othello/cell.py (Cell.EMPTY)
# --- NOTE the values double as the wire encoding of a color in peer messages, so do not rename them


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"


class MessageKind(StrEnum):
    MOVE = "move"
    PASS = "pass"
    RESET = "reset"


def opposite_color(color: Color) -> Color:
    return Color.WHITE if color == Color.BLACK else Color.BLACK
