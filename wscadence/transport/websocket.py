"""
Transport implementation on top of the ``websockets`` asyncio API.

The same class serves both sides of the exchange:

- ``WebSocketTransport.connect(url)`` starts a client handshake in the
  background and returns at once in the CONNECTING state, so the receiving
  side can wait for the open signal like any other suspension point.
- ``WebSocketTransport.accept(connection)`` wraps a connection handed over by
  a ``websockets`` server, which is already open.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from websockets.asyncio.client import connect
from websockets.asyncio.connection import Connection
from websockets.exceptions import ConnectionClosed
from websockets.protocol import State

from wscadence.config.constants import LOGGER_NAME
from wscadence.exceptions import TransportError
from wscadence.transport.base import ConnectionState, Transport

logger = logging.getLogger(LOGGER_NAME)

_STATES = {
    State.CONNECTING: ConnectionState.CONNECTING,
    State.OPEN: ConnectionState.OPEN,
    State.CLOSING: ConnectionState.CLOSING,
    State.CLOSED: ConnectionState.CLOSED,
}


class WebSocketTransport(Transport):
    """
    A WebSocket connection seen through the Transport contract.

    Attributes:
        url (Optional[str]): Target URL for client connections
        connection (Optional[Connection]): Underlying websockets connection,
            None until the client handshake completes
    """

    def __init__(self, connection: Optional[Connection] = None, url: Optional[str] = None):
        self.url = url
        self.connection = connection
        self._connect_task: Optional[asyncio.Task] = None

    @classmethod
    def connect(cls, url: str, **options: Any) -> "WebSocketTransport":
        """Start connecting to ``url``; must be called from a running event loop.

        Extra keyword arguments are passed to ``websockets.asyncio.client.connect``.
        """
        transport = cls(url=url)
        transport._connect_task = asyncio.create_task(transport._open(options))
        return transport

    @classmethod
    def accept(cls, connection: Connection) -> "WebSocketTransport":
        """Wrap a connection accepted by a websockets server."""
        return cls(connection=connection)

    async def _open(self, options: Dict[str, Any]) -> None:
        try:
            self.connection = await connect(self.url, **options)
            logger.info(f"Connected to {self.url}")
        except Exception as e:
            logger.error(f"Failed to connect to {self.url}: {e}")

    @property
    def state(self) -> ConnectionState:
        if self.connection is None:
            if self._connect_task is not None and not self._connect_task.done():
                return ConnectionState.CONNECTING
            return ConnectionState.CLOSED
        return _STATES[self.connection.state]

    async def wait_open(self) -> None:
        if self._connect_task is not None and not self._connect_task.done():
            await asyncio.wait({self._connect_task})

    async def receive(self) -> Optional[str]:
        if not self.is_open:
            return None
        try:
            message = await self.connection.recv()
        except ConnectionClosed:
            return None
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return message

    async def send(self, text: str) -> None:
        if not self.is_open:
            return
        try:
            await self.connection.send(text)
        except ConnectionClosed:
            logger.debug("Connection closed while sending; message dropped")

    async def close(self) -> None:
        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
            await asyncio.wait({self._connect_task})

        if self.connection is None or self.connection.state is State.CLOSED:
            return

        try:
            await self.connection.close()
        except Exception as e:
            logger.error(f"Error closing WebSocket connection: {e}")
            raise TransportError(f"Cannot close the connection: {e}") from e

    def __repr__(self) -> str:
        return f"WebSocketTransport(url={self.url!r}, state={self.state.value})"
