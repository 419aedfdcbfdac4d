"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/helpers required for testing multiple layers.
"""

from dataclasses import dataclass, field
from typing import Callable

import pytest

from src.core.shared_types import Color
from src.othello.board import StoneCount
from src.othello.cell import Cell
from src.othello.listener import GameListener
from src.othello.rules import Outcome
from src.othello.square import Square


class ManualTimer:
    def __init__(self, due: float, callback: Callable[[], object]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls `advance()`. Timers fire in order of their due time."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[ManualTimer] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], object]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        return [timer for timer in self.timers if not timer.cancelled]

    def advance(self, seconds: float = 0.0) -> None:
        """Move the clock forward and fire everything that became due (including timers scheduled on the way)."""
        target = self.now + seconds
        while True:
            due = [timer for timer in self.pending if timer.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            self.now = max(self.now, timer.due)
            timer.callback()
        self.now = target


@dataclass
class RecordingListener(GameListener):
    """Keeps every notification as a (hook name, argument) tuple, in order."""

    events: list[tuple[str, object]] = field(default_factory=list)

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def last(self, name: str) -> object:
        for event_name, value in reversed(self.events):
            if event_name == name:
                return value
        raise AssertionError(f"No {name} notification recorded.")

    def on_reset(self) -> None:
        self.events.append(("reset", None))

    def on_cell_changed(self, square: Square, cell: Cell) -> None:
        self.events.append(("cell", (square, cell)))

    def on_flip(self, squares: frozenset[Square]) -> None:
        self.events.append(("flip", squares))

    def on_score_changed(self, count: StoneCount) -> None:
        self.events.append(("score", count))

    def on_turn_changed(self, color: Color) -> None:
        self.events.append(("turn", color))

    def on_pass(self, color: Color) -> None:
        self.events.append(("pass", color))

    def on_game_over(self, outcome: Outcome) -> None:
        self.events.append(("game_over", outcome))

    def on_valid_moves(self, squares: frozenset[Square]) -> None:
        self.events.append(("valid_moves", squares))

    def on_move_rejected(self, square: Square, color: Color, reason: str) -> None:
        self.events.append(("rejected", (square, color, reason)))

    def on_opponent_left(self, color: Color) -> None:
        self.events.append(("opponent_left", color))


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def make_listener() -> Callable[[], RecordingListener]:
    """For tests with more than one game instance (each one needs its own listener)."""
    return RecordingListener
