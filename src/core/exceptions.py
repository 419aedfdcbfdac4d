"""
Custom exceptions shared by all layers.

Domain code raises these; the service layer decides what a failure means for the user
(a rejected click, a dropped peer message, a finished session).
"""


class GameError(Exception):
    """Top-level exception for anything that goes wrong while playing."""


class GameStateError(GameError):
    """The session is in a phase that does not allow the requested operation."""


class IllegalMoveError(GameError):
    """A placement that does not capture anything, or lands on an occupied square."""


class NotYourTurnError(GameError):
    """A color tried to move while the other color is to move."""


class InvalidLayoutError(GameError):
    """A board layout string could not be parsed."""


class ProtocolError(GameError):
    """A peer message is malformed, or breaks the authority rules of the sync protocol."""


class ChannelClosedError(GameError):
    """The peer channel is closed: nothing can be sent or received any more."""
