"""
Connection contract consumed by the protocol engines.

The engines only read the connection state and use five primitive operations.
Everything else (handshake, framing, the wire protocol) stays behind a
Transport implementation.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class ConnectionState(str, Enum):
    """
    Lifecycle of a duplex connection.

    State Flow:
    CONNECTING → OPEN → CLOSING → CLOSED
         ↓
       CLOSED (handshake failed or cancelled)
    """

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class Transport(ABC):
    """A single duplex text connection.

    Exactly one protocol engine drives a given transport, so implementations
    need no locking.
    """

    @property
    @abstractmethod
    def state(self) -> ConnectionState:
        """Current connection state."""

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    @abstractmethod
    async def wait_open(self) -> None:
        """Return once the connection has left the CONNECTING state.

        Returns immediately if it is already open or already closed.
        """

    @abstractmethod
    async def receive(self) -> Optional[str]:
        """Wait for the next inbound text message.

        Each call resolves with exactly one message, in arrival order. Returns
        None once the connection is no longer open. Safe to cancel: a cancelled
        call does not consume a message.
        """

    @abstractmethod
    async def send(self, text: str) -> None:
        """Send a text message; does nothing unless the connection is open."""

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Calling it again has no effect."""
