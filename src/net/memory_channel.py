"""Implementation of PeerChannel on top of asyncio queues, for two instances living in the same process"""

import asyncio
import json
import logging
from typing import Optional

from src.core.exceptions import ChannelClosedError
from src.net.channel import Payload

logger = logging.getLogger(__name__)

# Marks the end of the stream in a receiving queue (after every message sent before the close)
_CLOSED = object()


class MemoryChannel:
    """One endpoint of an in-process channel. Create connected endpoints with `memory_channel_pair()`."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._inbox: asyncio.Queue[object] = asyncio.Queue()
        self._peer: Optional["MemoryChannel"] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, payload: Payload) -> None:
        if self._closed or self._peer is None:
            raise ChannelClosedError(f"Channel {self.name!r} is closed.")

        # go through JSON so both sides never share objects, same as over a real wire
        wire_copy = json.loads(json.dumps(payload))
        logger.debug("%s -> %s", self.name, wire_copy)
        self._peer._inbox.put_nowait(wire_copy)

    async def receive(self) -> Payload:
        item = await self._inbox.get()
        return self._unwrap(item)

    def receive_nowait(self) -> Optional[Payload]:
        """Next queued message, or None if nothing is waiting. Raises ChannelClosedError at the end of the stream."""
        try:
            item = self._inbox.get_nowait()
        except asyncio.QueueEmpty:
            return None
        return self._unwrap(item)

    def close(self) -> None:
        if self._closed:
            return

        self._closed = True
        self._inbox.put_nowait(_CLOSED)
        peer = self._peer
        if peer is not None and not peer._closed:
            peer._closed = True
            peer._inbox.put_nowait(_CLOSED)
        logger.debug("Channel %r closed", self.name)

    def _unwrap(self, item: object) -> Payload:
        if item is _CLOSED:
            # keep the marker in place: every later receive sees the close as well
            self._inbox.put_nowait(_CLOSED)
            raise ChannelClosedError(f"Channel {self.name!r} was closed.")
        assert isinstance(item, dict)
        return item


def memory_channel_pair(
    first: str = "initiator", second: str = "acceptor"
) -> tuple[MemoryChannel, MemoryChannel]:
    """Two endpoints wired to each other: what one sends, the other receives."""
    left = MemoryChannel(first)
    right = MemoryChannel(second)
    left._peer = right
    right._peer = left
    return left, right
