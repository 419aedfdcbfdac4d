"""Unit tests for /src/othello/square.py"""

from string import ascii_lowercase

import pytest

from src.othello.square import BOARD_DIMENSIONS, Square, all_squares


@pytest.mark.parametrize(
    "x, y, notation",
    [(x, y, f"{ascii_lowercase[x]}{y + 1}") for x in range(8) for y in range(8)],
)
def test_creating_from_algebraic(x: int, y: int, notation: str) -> None:
    """'a1' maps to (0, 0): the letter is the column (x), the digit the row (y)"""
    square = Square.from_algebraic(notation)
    assert square == Square(x, y)
    assert square.to_algebraic() == notation


def test_square_within_bounds() -> None:
    for square in all_squares():
        assert square.is_within_bounds()


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (8, 0), (0, 8), (8, 8)])
def test_square_out_of_bounds(x: int, y: int) -> None:
    assert not Square(x, y).is_within_bounds()


def test_all_squares_row_by_row() -> None:
    squares = all_squares()
    assert len(squares) == BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
    assert len(set(squares)) == len(squares)
    assert squares[0] == Square(0, 0)
    assert squares[1] == Square(1, 0)
    assert squares[-1] == Square(7, 7)
