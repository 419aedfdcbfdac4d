"""Protocol channel (can implement later for WebRTC data channels / websockets etc.)"""

from typing import Any, Protocol

Payload = dict[str, Any]


class PeerChannel(Protocol):
    """
    Ordered, reliable, bidirectional message transport between two game instances.

    Establishing the connection (signaling, NAT traversal, ...) is not part of this protocol:
    a PeerChannel is handed over already open.
    """

    def send(self, payload: Payload) -> None:
        """Queue a message for the peer. Never blocks. Raises ChannelClosedError once closed."""
        ...

    async def receive(self) -> Payload:
        """Next message from the peer, in the order sent. Raises ChannelClosedError when the channel closes."""
        ...

    def close(self) -> None:
        """Close both directions. Idempotent."""
        ...
