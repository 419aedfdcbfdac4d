"""Unit tests for /src/api/messages.py"""

import json

import pytest
from pydantic import ValidationError

from src.api.messages import (
    MovePayload,
    PeerMessage,
    decode_message,
    encode_message,
)
from src.core.exceptions import ProtocolError
from src.core.shared_types import Color, MessageKind
from src.othello.square import Square


def test_move_wire_format() -> None:
    message = PeerMessage.for_move(Square(2, 3), Color.BLACK)
    assert message.kind == MessageKind.MOVE
    assert encode_message(message) == {"move": {"x": 2, "y": 3, "color": "black"}}


def test_pass_wire_format() -> None:
    message = PeerMessage.for_pass()
    assert message.kind == MessageKind.PASS
    assert encode_message(message) == {"pass": {}}


def test_reset_wire_format() -> None:
    message = PeerMessage.for_reset()
    assert message.kind == MessageKind.RESET
    assert encode_message(message) == {"reset": {}}


def test_decode_move() -> None:
    message = decode_message({"move": {"x": 2, "y": 3, "color": "black"}})
    assert message.move == MovePayload(x=2, y=3, color=Color.BLACK)
    assert message.move.square == Square(2, 3)


@pytest.mark.parametrize("raw", ['{"pass": {}}', b'{"pass": {}}'])
def test_decode_json_text(raw: str | bytes) -> None:
    assert decode_message(raw).kind == MessageKind.PASS


def test_decoded_message_equals_the_sent_one() -> None:
    message = PeerMessage.for_move(Square(7, 0), Color.WHITE)
    wire = json.dumps(encode_message(message))
    assert decode_message(wire) == message


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"move": {"x": 2, "y": 3, "color": "black"}, "reset": {}},
        {"move": {"x": 8, "y": 3, "color": "black"}},
        {"move": {"x": -1, "y": 3, "color": "black"}},
        {"move": {"x": 2, "y": 3, "color": "green"}},
        {"move": {"x": 2, "y": 3}},
        {"move": {"x": 2, "y": 3, "color": "black", "flipped": []}},
        {"castle": {}},
        {"pass": {"color": "white"}},
        "not json",
    ],
)
def test_malformed_messages(payload: object) -> None:
    with pytest.raises(ProtocolError):
        decode_message(payload)  # type: ignore[arg-type]


def test_message_is_immutable() -> None:
    message = PeerMessage.for_move(Square(2, 3), Color.BLACK)
    with pytest.raises(ValidationError):
        message.move.x = 4  # type: ignore[union-attr, misc]
