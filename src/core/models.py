"""
Boundary layer data model(s).

A transport-safe snapshot of a game session, built from plain strings/lists only.
The presentation layer (or a test) can compare, log or ship it without knowing about Board, Square or Cell.
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make SessionModel easier to read
ColorName = str
SquareName = str


@dataclass
class SessionModel:
    """Snapshot of a GameSession: board layout + turn bookkeeping."""

    layout: str
    turn: ColorName
    status: str
    winner: Optional[ColorName] = None
    last_move: Optional[SquareName] = None
    history: list[str] = field(default_factory=list)
    opponent_left: bool = False
