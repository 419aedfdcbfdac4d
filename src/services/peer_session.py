"""
Orchestration of a remote game: two independently running instances kept in agreement by relaying events.

Authority rules
----
* each side is the only authority for placements of its own color: it plays them locally, then sends a Move
* a Move from the peer is never trusted blindly, it is validated again by the local engine
* each side reports its own forced passes with a Pass message
* either side can Reset both games
* the connection initiator plays white, the acceptor plays black; fixed for the lifetime of the session

There is no reconciliation: a message the local engine refuses is dropped (and logged) without touching the board.
"""

import logging
from functools import partial
from typing import Optional

from src.api.messages import MovePayload, PeerMessage, decode_message, encode_message
from src.core.config import SessionConfig
from src.core.exceptions import (
    ChannelClosedError,
    GameError,
    GameStateError,
    ProtocolError,
)
from src.core.shared_types import Color, MessageKind, opposite_color
from src.net.channel import Payload, PeerChannel
from src.othello.board import StoneCount
from src.othello.cell import Cell
from src.othello.listener import GameListener
from src.othello.rules import Outcome
from src.othello.square import Square
from src.othello.turns import AwaitingMove, Passing, Scheduler, TurnController
from src.services.event_processor import EventProcessor

logger = logging.getLogger(__name__)


def color_for_role(initiator: bool) -> Color:
    """The side that opened the connection plays white, the side that accepted it plays black."""
    return Color.WHITE if initiator else Color.BLACK


class PeerSession:
    def __init__(
        self,
        channel: PeerChannel,
        *,
        initiator: bool,
        scheduler: Scheduler,
        listener: Optional[GameListener] = None,
        config: SessionConfig = SessionConfig(),
    ) -> None:
        self.channel = channel
        self.local_color = color_for_role(initiator)
        self.remote_color = opposite_color(self.local_color)
        self.scheduler = scheduler
        self.listener = listener or GameListener()
        self.controller = TurnController(
            scheduler,
            _RelayListener(self, self.listener),
            config=config,
            local_colors=(self.local_color,),
        )
        self.closed = False
        self._closed_locally = False
        # passes of the peer our own engine already derived, not yet confirmed by the peer's Pass message
        self._expected_passes = 0
        # peer moves that arrived while our own pass notice was still up
        self._held_moves: list[MovePayload] = []
        self._flush_scheduled = False

    # --- LIFECYCLE ---
    def start(self) -> None:
        """The channel just opened: whatever was played locally before is discarded."""
        logger.info("Connected, playing %s", self.local_color)
        self.controller.reset()

    async def run(self, processor: EventProcessor) -> None:
        """Feed inbound messages into the processor until the channel closes."""
        while True:
            try:
                payload = await self.channel.receive()
            except ChannelClosedError:
                processor.submit(self.handle_disconnect)
                return
            processor.submit(partial(self.handle_message, payload))

    def close(self) -> None:
        """The local user ends the remote game."""
        if self.closed:
            return

        self.closed = True
        self._closed_locally = True
        self._held_moves.clear()
        self.controller.shutdown()
        self.channel.close()
        logger.info("Closed the connection")

    def handle_disconnect(self) -> None:
        """The channel went down. Terminal for this session (no reconnection)."""
        if self._closed_locally:
            return

        self.closed = True
        self._held_moves.clear()
        self.controller.mark_opponent_left(self.remote_color)

    # --- LOCAL INPUT ---
    def play(self, square: Square) -> bool:
        """A click by the local user. Returns True if a stone was placed (and relayed to the peer)."""
        try:
            if self.closed:
                raise GameStateError("The remote game is over: the connection is closed.")
            self.controller.play(square, self.local_color)
        except GameError as exc:
            logger.info("invalid play %s %s: %s", self.local_color, square.to_algebraic(), exc)
            self.listener.on_move_rejected(square, self.local_color, str(exc))
            return False

        self._send(PeerMessage.for_move(square, self.local_color))
        return True

    def request_reset(self) -> None:
        """The local user pressed reset: both games start over."""
        if self.closed:
            raise GameStateError("Cannot reset a closed remote game. Start a new connection instead.")

        self._send(PeerMessage.for_reset())
        self.controller.reset()

    # --- INBOUND ---
    def handle_message(self, payload: Payload | str | bytes) -> bool:
        """
        Apply one message from the peer.
        ----

        Returns True when the board changed. A message that breaks the protocol is dropped and logged.
        """
        logger.debug("remote data %s", payload)
        if self.closed:
            logger.debug("Session closed, ignoring remote data")
            return False

        try:
            message = decode_message(payload)
            if message.kind == MessageKind.RESET:
                self.controller.reset()
                return False

            if message.kind == MessageKind.PASS:
                self._apply_remote_pass()
                return False

            # for the type checker: kind MOVE always carries a move payload
            assert message.move is not None
            return self._apply_remote_move(message.move)
        except GameError as exc:
            logger.warning("Dropped message from peer (%s): %s", self.remote_color, exc)
            return False

    # -- PRIVATE HELPERS ---
    def _apply_remote_move(self, move: MovePayload) -> bool:
        if move.color != self.remote_color:
            raise ProtocolError(
                f"Peer sent a move for {move.color}, but the peer plays {self.remote_color}."
            )

        phase = self.controller.phase
        if isinstance(phase, Passing) and phase.color == self.local_color:
            # the peer's pass countdown ran out before ours: replay once ours is over
            logger.debug("Holding peer move %s until our pass is over", move.square.to_algebraic())
            self._held_moves.append(move)
            return False

        if phase != AwaitingMove(self.remote_color):
            raise ProtocolError(f"Peer ({self.remote_color}) moved while local phase is {phase}.")

        self.controller.play(move.square, move.color)
        return True

    def _apply_remote_pass(self) -> None:
        if self._expected_passes == 0:
            # we had not derived this pass ourselves: enter it now (validated by the controller)
            self.controller.declare_pass(self.remote_color)
        # NOTE declare_pass reports through on_pass as well, which counted one expected pass
        self._expected_passes -= 1

    def _flush_held_moves(self) -> bool:
        self._flush_scheduled = False
        held, self._held_moves = self._held_moves, []
        changed = False
        for move in held:
            try:
                changed = self._apply_remote_move(move) or changed
            except GameError as exc:
                logger.warning("Dropped held move from peer (%s): %s", self.remote_color, exc)
        return changed

    def _send(self, message: PeerMessage) -> None:
        try:
            self.channel.send(encode_message(message))
        except ChannelClosedError:
            # the close notification is on its way through receive(); the session ends there
            logger.warning("Could not send %s to peer: channel closed", message.kind)

    # --- HOOKS CALLED BY THE RELAY LISTENER ---
    def _on_reset(self) -> None:
        self._expected_passes = 0
        self._held_moves.clear()

    def _on_pass(self, color: Color) -> None:
        if color == self.local_color:
            self._send(PeerMessage.for_pass())
        else:
            self._expected_passes += 1

    def _on_turn_changed(self, color: Color) -> None:
        if color == self.remote_color and self._held_moves and not self._flush_scheduled:
            self._flush_scheduled = True
            self.scheduler.call_later(0, self._flush_held_moves)


class _RelayListener(GameListener):
    """Passes every notification on to the presentation; the protocol reacts to a few of them."""

    def __init__(self, session: PeerSession, inner: GameListener) -> None:
        self._session = session
        self._inner = inner

    def on_reset(self) -> None:
        self._session._on_reset()
        self._inner.on_reset()

    def on_cell_changed(self, square: Square, cell: Cell) -> None:
        self._inner.on_cell_changed(square, cell)

    def on_flip(self, squares: frozenset[Square]) -> None:
        self._inner.on_flip(squares)

    def on_score_changed(self, count: StoneCount) -> None:
        self._inner.on_score_changed(count)

    def on_turn_changed(self, color: Color) -> None:
        self._inner.on_turn_changed(color)
        self._session._on_turn_changed(color)

    def on_pass(self, color: Color) -> None:
        self._inner.on_pass(color)
        self._session._on_pass(color)

    def on_game_over(self, outcome: Outcome) -> None:
        self._inner.on_game_over(outcome)

    def on_valid_moves(self, squares: frozenset[Square]) -> None:
        self._inner.on_valid_moves(squares)

    def on_move_rejected(self, square: Square, color: Color, reason: str) -> None:
        self._inner.on_move_rejected(square, color, reason)

    def on_opponent_left(self, color: Color) -> None:
        self._inner.on_opponent_left(color)
