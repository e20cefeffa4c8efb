"""
Sending side of the timed exchange protocol.

The sender pushes a message sequence over an open connection, waiting each
message's delay before sending it. It never reads from the connection and
never retries; a connection that stops being open simply ends the run.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from wscadence.config.constants import LOGGER_NAME
from wscadence.protocol.clock import Clock, SystemClock
from wscadence.protocol.loader import load_sequence_file
from wscadence.protocol.messages import MessageSequence
from wscadence.transport.base import Transport

logger = logging.getLogger(LOGGER_NAME)


class SenderProtocol:
    """
    Sends a message sequence with per-message delays.

    One instance can serve any number of connections, one ``execute`` call per
    connection; the sequence is shared read-only between the calls.
    """

    def __init__(self, messages: MessageSequence, clock: Optional[Clock] = None):
        self.messages = messages
        self.clock = clock or SystemClock()

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> "SenderProtocol":
        """Create a sender for the message sequence stored in ``path``."""
        return cls(load_sequence_file(path), **kwargs)

    async def execute(self, transport: Transport) -> int:
        """
        Send the messages over the given connection.

        Returns once the sequence is exhausted or the connection is no longer
        open. The connection is left as it is.

        Returns:
            int: Number of messages sent while the connection was open
        """
        index = 0

        while True:
            if not transport.is_open:
                logger.info(
                    f"Connection is {transport.state.value}; "
                    f"{len(self.messages) - index} message(s) abandoned"
                )
                return index

            message = self.messages.at(index)
            if message is None:
                logger.info(f"Message sequence is over; {index} message(s) sent")
                return index

            await asyncio.sleep(message.delay / 1000)
            await transport.send(message.text)
            if not transport.is_open:
                # The send was a no-op; the message is abandoned with the rest
                continue

            logger.debug(f'Sent "{message.text}" at {self.clock.now().isoformat()}')

            index += 1
