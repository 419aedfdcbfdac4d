"""Defines the possible contents of a board cell"""

from enum import Enum, auto
from typing import Self

from src.core.shared_types import Color


class Cell(Enum):
    EMPTY = auto()
    BLACK = auto()
    WHITE = auto()

    @classmethod
    def of(cls, color: Color) -> Self:
        """The cell holding a stone of the given player's color."""
        return cls.BLACK if color == Color.BLACK else cls.WHITE

    @property
    def color(self) -> Color | None:
        # NOTE: an empty cell has no owner
        if self == Cell.BLACK:
            return Color.BLACK
        if self == Cell.WHITE:
            return Color.WHITE
        return None

    @classmethod
    def from_layout(cls, character: str) -> Self:
        # lower case letters only: 'b' for a black stone, 'w' for a white stone
        return LAYOUT_TO_CELL[character]

    def to_layout(self) -> str:
        return CELL_TO_LAYOUT[self]


LAYOUT_TO_CELL: dict[str, Cell] = {
    "b": Cell.BLACK,
    "w": Cell.WHITE,
}

CELL_TO_LAYOUT: dict[Cell, str] = {value: key for key, value in LAYOUT_TO_CELL.items()}
