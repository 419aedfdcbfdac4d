"""Peer messages: what two game instances send each other over the channel"""

import json
from typing import Any, Mapping, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.core.exceptions import ProtocolError
from src.core.shared_types import Color, MessageKind
from src.othello.square import BOARD_DIMENSIONS, Square


# --- PAYLOADS ---
class MovePayload(BaseModel):
    """A placement made by the sender, always for the sender's own color."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    x: int = Field(ge=0, lt=BOARD_DIMENSIONS[0])
    y: int = Field(ge=0, lt=BOARD_DIMENSIONS[1])
    color: Color

    @property
    def square(self) -> Square:
        return Square(self.x, self.y)


class PassPayload(BaseModel):
    """The sender's own engine found that the sender has no legal placement."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ResetPayload(BaseModel):
    """Both sides go back to the starting position."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# --- THE MESSAGE ---
class PeerMessage(BaseModel):
    """
    Tagged record: exactly one of `move`, `pass`, `reset` is populated.

    Wire examples:
    * {"move": {"x": 2, "y": 3, "color": "black"}}
    * {"pass": {}}
    * {"reset": {}}
    """

    # NOTE 'pass' is a keyword in python, hence the alias
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    move: Optional[MovePayload] = None
    pass_: Optional[PassPayload] = Field(default=None, alias="pass")
    reset: Optional[ResetPayload] = None

    @model_validator(mode="after")
    def exactly_one_variant(self) -> Self:
        populated = [value for value in (self.move, self.pass_, self.reset) if value is not None]
        if len(populated) != 1:
            raise ValueError(
                f"A peer message needs exactly one of {', '.join(kind.value for kind in MessageKind)}; got {len(populated)}."
            )
        return self

    @classmethod
    def for_move(cls, square: Square, color: Color) -> Self:
        return cls(move=MovePayload(x=square.x, y=square.y, color=color))

    @classmethod
    def for_pass(cls) -> Self:
        return cls(pass_=PassPayload())

    @classmethod
    def for_reset(cls) -> Self:
        return cls(reset=ResetPayload())

    @property
    def kind(self) -> MessageKind:
        if self.move is not None:
            return MessageKind.MOVE
        if self.pass_ is not None:
            return MessageKind.PASS
        return MessageKind.RESET


# --- ENCODING / DECODING ---
def encode_message(message: PeerMessage) -> dict[str, Any]:
    """JSON-friendly dict (by alias, so the pass variant is written as 'pass')."""
    return message.model_dump(mode="json", by_alias=True, exclude_none=True)


def decode_message(payload: Mapping[str, Any] | str | bytes) -> PeerMessage:
    """Parse a raw payload from the channel. Anything that is not a well-formed message raises ProtocolError."""
    try:
        if isinstance(payload, (str, bytes)):
            return PeerMessage.model_validate_json(payload)
        return PeerMessage.model_validate(payload)
    except ValidationError as exc:
        raise ProtocolError(f"Malformed peer message: {_preview(payload)}") from exc


def _preview(payload: Mapping[str, Any] | str | bytes) -> str:
    if isinstance(payload, bytes):
        return payload.decode(errors="replace")
    if isinstance(payload, str):
        return payload
    try:
        return json.dumps(payload)
    except TypeError:
        return repr(payload)
