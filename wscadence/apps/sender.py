"""
Sending side application: a WebSocket server running the sender protocol.

Every accepted connection gets its own protocol run, started as soon as the
connection is accepted. Once the sequence is over the connection stays open
until the peer leaves or the server stops.
"""

import asyncio
import logging
from typing import Optional

from websockets.asyncio.server import Server, ServerConnection, serve

from wscadence.apps.base import BaseApp, resolve_sequence
from wscadence.config.constants import LOGGER_NAME
from wscadence.config.models import Role
from wscadence.exceptions import TransportError
from wscadence.protocol.sender import SenderProtocol
from wscadence.transport.websocket import WebSocketTransport

logger = logging.getLogger(LOGGER_NAME)


class SenderApp(BaseApp):
    """WebSocket server sending the message sequence to each client."""

    role = Role.SENDER

    def __init__(self, config):
        super().__init__(config)
        self.protocol: Optional[SenderProtocol] = None
        self.server: Optional[Server] = None

    async def start(self) -> None:
        self.protocol = SenderProtocol(resolve_sequence(self.config, self.role))

        host, port = self.config.sender.host, self.config.sender.port
        self.server = await serve(self.handle_connection, host, port)
        logger.info(f"The WebSocket service is started at ws://{host}:{port}")

        await self.server.wait_closed()

    async def handle_connection(self, connection: ServerConnection) -> None:
        """Run the sender protocol over a newly accepted connection."""
        logger.info(f"Client connected from {connection.remote_address}")
        transport = WebSocketTransport.accept(connection)

        run = asyncio.create_task(self.protocol.execute(transport))
        closed = asyncio.create_task(connection.wait_closed())
        try:
            await asyncio.wait({run, closed}, return_when=asyncio.FIRST_COMPLETED)
            # The connection is closed when this handler returns
            await closed
        finally:
            # A run still waiting out a delay would not send anything anyway
            run.cancel()
            closed.cancel()
        logger.info(f"Client {connection.remote_address} disconnected")

    async def stop(self) -> None:
        if self.server is None:
            return
        try:
            self.server.close()
            await self.server.wait_closed()
        except Exception as e:
            logger.error(f"Error stopping the WebSocket service: {e}")
            raise TransportError(f"Cannot stop the WebSocket service: {e}") from e
