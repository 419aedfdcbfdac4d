"""
Single sequential event processor for one game instance.

Local input, inbound peer messages and timer expiries are all turned into handlers on one queue.
Handlers run one at a time and to completion, so a GameSession is never mutated by two things at once.
"""

import asyncio
import logging
from typing import Callable, Optional

from src.core.config import SessionConfig

logger = logging.getLogger(__name__)

# A handler returns True when it changed the board (the processor then waits for the flip animation)
Handler = Callable[[], object]

_STOP = object()


class QueuedTimer:
    """Handle returned by `EventProcessor.call_later`. Cancelling also covers an expiry that is already queued."""

    def __init__(self) -> None:
        self.cancelled = False
        self._loop_handle: Optional[asyncio.TimerHandle] = None

    def cancel(self) -> None:
        self.cancelled = True
        if self._loop_handle is not None:
            self._loop_handle.cancel()


class EventProcessor:
    def __init__(self, config: SessionConfig = SessionConfig()) -> None:
        self.config = config
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    # --- SCHEDULER PROTOCOL (used by the TurnController) ---
    def time(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callable[[], object]) -> QueuedTimer:
        """
        Run `callback` through the queue once `delay` seconds passed.

        NOTE the loop timer only enqueues; the callback itself runs in turn with every other event.
        """
        timer = QueuedTimer()

        def _expire() -> None:
            if not timer.cancelled:
                self.submit(lambda: None if timer.cancelled else callback())

        timer._loop_handle = asyncio.get_running_loop().call_later(delay, _expire)
        return timer

    # --- EVENTS ---
    def submit(self, handler: Handler) -> None:
        self._queue.put_nowait(handler)

    def stop(self) -> None:
        """Finish the events already queued, then leave `run()`."""
        self._queue.put_nowait(_STOP)

    async def run(self) -> None:
        self._running = True
        try:
            while True:
                handler = await self._queue.get()
                if handler is _STOP:
                    break

                assert callable(handler)
                changed_board = handler()

                # suspend-then-resume while the presentation animates the flips: later events simply wait
                if changed_board is True and self.config.flip_settle > 0:
                    await asyncio.sleep(self.config.flip_settle)
        finally:
            self._running = False
            logger.debug("Event processor stopped")
