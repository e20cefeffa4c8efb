"""
Message models for the timed exchange protocol.

A protocol run is driven by a MessageSequence: an ordered, immutable list of
ProtocolMessage entries. The sending side waits ``delay`` milliseconds before
each send; the receiving side expects each message ``delay`` milliseconds
after it started waiting for it.
"""

import json
from typing import Iterable, Iterator, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from wscadence.config.constants import MAX_DELAY_MS


class ProtocolMessage(BaseModel):
    """A single entry of a message sequence.

    Example:
    {
      "text": "hello",
      "delay": 2000
    }
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., min_length=1, strict=True, description="The message text")
    delay: int = Field(
        ...,
        gt=0,
        le=MAX_DELAY_MS,
        description="Delay in milliseconds before this message is sent or received",
    )

    @field_validator("delay", mode="before")
    def validate_delay_is_number(cls, v):
        """Accept JSON numbers only; booleans and numeric strings are rejected."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise PydanticCustomError("number_type", "Input should be a number")
        return v


class MessageSequence:
    """Ordered, read-only sequence of protocol messages.

    The sequence has no mutation API, so a single instance can be shared by
    every protocol run of a process.
    """

    __slots__ = ("_messages",)

    def __init__(self, messages: Iterable[ProtocolMessage] = ()):
        self._messages: Tuple[ProtocolMessage, ...] = tuple(messages)

    def at(self, index: int) -> Optional[ProtocolMessage]:
        """Get the message at ``index``, or None past the end of the sequence."""
        if 0 <= index < len(self._messages):
            return self._messages[index]
        return None

    @property
    def total_delay_ms(self) -> int:
        """Sum of all delays; the nominal duration of a full run."""
        return sum(message.delay for message in self._messages)

    def to_json(self) -> str:
        """Serialize to the JSON form accepted by the sequence loader."""
        return json.dumps([message.model_dump() for message in self._messages])

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ProtocolMessage]:
        return iter(self._messages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageSequence):
            return NotImplemented
        return self._messages == other._messages

    def __hash__(self) -> int:
        return hash(self._messages)

    def __repr__(self) -> str:
        return f"MessageSequence({list(self._messages)!r})"


def create_default_sequence() -> MessageSequence:
    """Create the default message sequence.

    - "hello" after 2 seconds;
    - "still here?" after 3 seconds;
    - "you can leave now" after 3.5 seconds, 4 times in a row.
    """
    messages = [
        ProtocolMessage(text="hello", delay=2 * 1000),
        ProtocolMessage(text="still here?", delay=3 * 1000),
    ]
    messages.extend(
        ProtocolMessage(text="you can leave now", delay=3500) for _ in range(4)
    )
    return MessageSequence(messages)
