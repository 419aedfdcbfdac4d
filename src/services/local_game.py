"""Orchestration of a local game: two users sharing one board."""

import logging
from typing import Optional

from src.core.config import SessionConfig
from src.core.exceptions import GameError
from src.othello.listener import GameListener
from src.othello.square import Square
from src.othello.turns import Scheduler, TurnController

logger = logging.getLogger(__name__)


class LocalGameService:
    """Both colors are played on this machine, so a click always plays for whoever is to move."""

    def __init__(
        self,
        scheduler: Scheduler,
        listener: Optional[GameListener] = None,
        config: SessionConfig = SessionConfig(),
    ) -> None:
        self.listener = listener or GameListener()
        self.controller = TurnController(scheduler, self.listener, config=config)

    def start(self) -> None:
        self.controller.reset()

    def reset(self) -> None:
        self.controller.reset()

    def click(self, square: Square) -> bool:
        """
        A user clicked a square.

        Returns True if a stone was placed. Anything else (invalid square, game over, pass in progress)
        leaves the board untouched and is reported through `on_move_rejected`.
        """
        color = self.controller.session.turn
        try:
            self.controller.play(square, color)
        except GameError as exc:
            logger.info("invalid play %s %s: %s", color, square.to_algebraic(), exc)
            self.listener.on_move_rejected(square, color, str(exc))
            return False
        return True
