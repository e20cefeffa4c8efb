"""
Receiving side application: a WebSocket client running the receiver protocol.
"""

import logging
from typing import Optional

from wscadence.apps.base import BaseApp, resolve_sequence
from wscadence.config.constants import LOGGER_NAME
from wscadence.config.models import Role
from wscadence.protocol.receiver import ReceiveReport, ReceiverProtocol
from wscadence.transport.websocket import WebSocketTransport

logger = logging.getLogger(LOGGER_NAME)


class ReceiverApp(BaseApp):
    """Connects to the sending side and verifies the sequence it sends."""

    role = Role.RECEIVER

    def __init__(self, config):
        super().__init__(config)
        self.transport: Optional[WebSocketTransport] = None
        self.report: Optional[ReceiveReport] = None

    async def start(self) -> None:
        protocol = ReceiverProtocol(
            resolve_sequence(self.config, self.role),
            tolerance_ms=self.config.receiver.tolerance_ms,
        )

        url = self.config.receiver.target_url
        self.transport = WebSocketTransport.connect(url)

        logger.debug(f"Starting to listen {url}...")
        self.report = await protocol.wait(self.transport)

        logger.info(
            f"The message sequence is over ({self.report.outcome.value}, "
            f"{self.report.matched_count}/{self.report.expected_count} matched); exiting..."
        )

    async def stop(self) -> None:
        if self.transport is not None:
            await self.transport.close()
