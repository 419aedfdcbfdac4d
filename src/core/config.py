"""
Session configuration.

These values are fixed for every game (the board size lives with Square in src/othello/square.py).
They are collected here so tests can shorten the timers without patching modules.
"""

from dataclasses import dataclass

# How long the "X must pass" notice stays up before play moves on.
PASS_DELAY_SECONDS = 1.0

# Time the presentation needs to finish the capture-flip animation.
# New events wait in the queue for this long after a move changed the board.
FLIP_SETTLE_SECONDS = 0.4

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class SessionConfig:
    pass_delay: float = PASS_DELAY_SECONDS
    flip_settle: float = FLIP_SETTLE_SECONDS
