"""The Game board only stores which stone sits on which square. All legality lives in src/othello/rules.py"""

from dataclasses import dataclass
from typing import Self

from src.core.exceptions import InvalidLayoutError
from src.core.shared_types import Color
from src.othello.cell import LAYOUT_TO_CELL, Cell
from src.othello.square import BOARD_DIMENSIONS, Square, all_squares

STARTING_LAYOUT = "8/8/8/3wb3/3bw3/8/8/8"
EMPTY_LAYOUT = "/".join(["8"] * BOARD_DIMENSIONS[1])


@dataclass(frozen=True)
class StoneCount:
    black: int
    white: int

    def of(self, color: Color) -> int:
        return self.black if color == Color.BLACK else self.white

    @property
    def total(self) -> int:
        return self.black + self.white


@dataclass
class Board:
    cells: dict[Square, Cell]

    @classmethod
    def starting_position(cls) -> Self:
        """Standard opening: white on (3,3) and (4,4), black on (4,3) and (3,4)."""
        return cls.from_layout(STARTING_LAYOUT)

    @classmethod
    def empty(cls) -> Self:
        return cls({square: Cell.EMPTY for square in all_squares()})

    @classmethod
    def from_layout(cls, layout: str) -> Self:
        """Construct a board from a layout string.

        Same idea as the piece placement part of a chess FEN string:
        8/8/8/3wb3/3bw3/8/8/8
        means:
        * the first three rows (y = 0, 1, 2) are empty
        * row y = 3 has three empty squares, a white stone on (3,3), a black stone on (4,3), three more empty squares
        * row y = 4 mirrors it
        * the last three rows are empty
        """
        rows = layout.strip().split("/")
        if len(rows) != BOARD_DIMENSIONS[1]:
            raise InvalidLayoutError(
                f"Layout must contain {BOARD_DIMENSIONS[1]} rows separated by '/', got {len(rows)}: {layout!r}"
            )

        cells: dict[Square, Cell] = {}
        for y, row in enumerate(rows):
            x = 0
            for character in row:
                if character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    for _ in range(int(character)):
                        cells[Square(x, y)] = Cell.EMPTY
                        x += 1
                elif character in LAYOUT_TO_CELL:
                    cells[Square(x, y)] = Cell.from_layout(character)
                    x += 1
                else:
                    raise InvalidLayoutError(
                        f"Unknown character {character!r} in layout row {y}: {row!r}"
                    )
            if x != BOARD_DIMENSIONS[0]:
                raise InvalidLayoutError(
                    f"Layout row {y} covers {x} squares instead of {BOARD_DIMENSIONS[0]}: {row!r}"
                )
        return cls(cells)

    def to_layout(self) -> str:
        """Rows are separated by slashes in the layout string."""
        return "/".join(self._row_to_layout(y) for y in range(BOARD_DIMENSIONS[1]))

    def _row_to_layout(self, y: int) -> str:
        characters: list[str] = []
        empty_count = 0
        for x in range(BOARD_DIMENSIONS[0]):
            cell = self.get(Square(x, y))

            if cell != Cell.EMPTY:
                if empty_count > 0:
                    characters.append(str(empty_count))
                    empty_count = 0
                characters.append(cell.to_layout())
            else:
                empty_count += 1

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            characters.append(str(empty_count))
        return "".join(characters)

    def get(self, square: Square) -> Cell:
        return self.cells[square]

    def set(self, square: Square, cell: Cell) -> None:
        self.cells[square] = cell

    def locate(self, cell: Cell) -> list[Square]:
        return [square for square, content in self.cells.items() if content == cell]

    def empty_squares(self) -> list[Square]:
        return self.locate(Cell.EMPTY)

    def count_stones(self) -> StoneCount:
        black = 0
        white = 0
        for cell in self.cells.values():
            if cell == Cell.BLACK:
                black += 1
            elif cell == Cell.WHITE:
                white += 1
        return StoneCount(black=black, white=white)

    def is_full(self) -> bool:
        return self.count_stones().total == BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
