"""
Placement and capture rules

Key idea: the same raycasting used for sliding chess pieces. From a candidate square we walk along each of
the 8 directions until we leave the board, and look at the run of stones we pass.

Everything here is a pure function of the board, except `apply_move`, which is the only way a stone gets placed.
"""

from dataclasses import dataclass

from src.core.exceptions import IllegalMoveError
from src.core.shared_types import Color, opposite_color
from src.othello.board import Board
from src.othello.cell import Cell
from src.othello.square import Square

Vector = tuple[int, int]


@dataclass(frozen=True)
class AppliedMove:
    """Result of a placement: the captured squares drive the flip animation/notification."""

    square: Square
    color: Color
    flipped: frozenset[Square]


@dataclass(frozen=True)
class Outcome:
    """Final result. `winner is None` means a tie."""

    winner: Color | None
    black: int
    white: int

    @property
    def is_tie(self) -> bool:
        return self.winner is None


# --- SCANNING ---
def directions_of() -> list[Vector]:
    """All 8 directions as (dx, dy) vectors. Never (0, 0) (standing still)."""
    return [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if dx or dy]


def scan_from(square: Square, dx: int, dy: int) -> list[Square]:
    """Squares strictly beyond `square` along (dx, dy), up to the edge of the board."""
    squares: list[Square] = []
    target = Square(square.x + dx, square.y + dy)
    while target.is_within_bounds():
        squares.append(target)
        target = Square(target.x + dx, target.y + dy)
    return squares


def capture_run(board: Board, square: Square, direction: Vector, color: Color) -> list[Square]:
    """
    Opponent squares that a stone of `color` on `square` would capture along one direction.
    ---

    A direction captures when the scan starts with one or more opponent stones and the run is closed by
    a stone of our own color. Hitting an empty square or the edge first means nothing is captured.
    An empty list therefore means: not a capturing direction.
    """
    own = Cell.of(color)
    opponent = Cell.of(opposite_color(color))

    run: list[Square] = []
    for target in scan_from(square, *direction):
        cell = board.get(target)
        if cell == opponent:
            run.append(target)
            continue
        if cell == own:
            # NOTE: zero-length runs (our own stone right next to the square) never capture
            return run
        return []
    return []


def is_capturing_direction(board: Board, square: Square, direction: Vector, color: Color) -> bool:
    return bool(capture_run(board, square, direction, color))


# --- LEGALITY ---
def is_valid_move(board: Board, square: Square, color: Color) -> bool:
    """An empty square that captures in at least one direction."""
    if not square.is_within_bounds():
        return False

    if board.get(square) != Cell.EMPTY:
        return False

    return any(
        is_capturing_direction(board, square, direction, color)
        for direction in directions_of()
    )


def compute_flips(board: Board, square: Square, color: Color) -> frozenset[Square]:
    """Union of the captured runs over every capturing direction (target square itself excluded)."""
    flips: set[Square] = set()
    for direction in directions_of():
        flips.update(capture_run(board, square, direction, color))
    return frozenset(flips)


def valid_moves(board: Board, color: Color) -> frozenset[Square]:
    return frozenset(
        square for square in board.empty_squares() if is_valid_move(board, square, color)
    )


def has_any_valid_move(board: Board, color: Color) -> bool:
    return any(is_valid_move(board, square, color) for square in board.empty_squares())


# --- MUTATION ---
def apply_move(board: Board, square: Square, color: Color) -> AppliedMove:
    """
    Place a stone and flip every captured opponent stone.

    Raises IllegalMoveError (and leaves the board untouched) if the placement is not valid.
    """
    if not is_valid_move(board, square, color):
        raise IllegalMoveError(
            f"Move not allowed: {color} cannot play on {square.to_algebraic()}"
        )

    flipped = compute_flips(board, square, color)
    stone = Cell.of(color)
    board.set(square, stone)
    for captured in flipped:
        board.set(captured, stone)
    return AppliedMove(square=square, color=color, flipped=flipped)


# --- ENDING THE GAME ---
def compute_outcome(board: Board) -> Outcome:
    """Always computed from the stones currently on the board."""
    count = board.count_stones()
    if count.black > count.white:
        winner: Color | None = Color.BLACK
    elif count.white > count.black:
        winner = Color.WHITE
    else:
        winner = None
    return Outcome(winner=winner, black=count.black, white=count.white)
