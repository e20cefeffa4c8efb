"""
Receiving side of the timed exchange protocol.

The receiver waits for the connection to open, then checks that the peer
delivers the expected message sequence: every message must carry the
expected text and arrive within a tolerance window around
``start + delay``, where ``start`` is the moment the check of that message
began. The first failed check ends the run; nothing is retried and the
receiver never skips ahead to a later message.

To avoid hanging on a message that never comes, each read is raced against
a timeout of ``delay + tolerance``. When the read and the timeout complete
together, the message wins and the window check decides the verdict.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from wscadence.config.constants import DEFAULT_TOLERANCE_MS, LOGGER_NAME
from wscadence.exceptions import TransportError
from wscadence.protocol.clock import Clock, SystemClock
from wscadence.protocol.loader import load_sequence_file
from wscadence.protocol.messages import MessageSequence, ProtocolMessage
from wscadence.transport.base import ConnectionState, Transport

logger = logging.getLogger(LOGGER_NAME)


class Verdict(str, Enum):
    """Outcome of checking a single expected message."""

    MATCHED = "matched"  # Right text inside the window
    MISMATCHED = "mismatched"  # Wrong text, or right text outside the window
    TIMED_OUT = "timed_out"  # Nothing arrived before the timeout
    ABANDONED = "abandoned"  # Connection stopped being open


@dataclass(frozen=True)
class VerificationResult:
    """Record of one verification step."""

    index: int
    expected: ProtocolMessage
    verdict: Verdict
    actual_text: Optional[str] = None
    actual_time: Optional[datetime] = None
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.verdict is Verdict.MATCHED


@dataclass
class ReceiveReport:
    """All verification steps of one run, in sequence order."""

    expected_count: int
    results: List[VerificationResult] = field(default_factory=list)

    @property
    def matched_count(self) -> int:
        return sum(1 for result in self.results if result.ok)

    @property
    def completed(self) -> bool:
        """True if every expected message was matched."""
        return self.matched_count == self.expected_count

    @property
    def outcome(self) -> Verdict:
        """MATCHED for a completed run, otherwise the verdict that ended it."""
        if self.results and not self.results[-1].ok:
            return self.results[-1].verdict
        if self.completed:
            return Verdict.MATCHED
        return Verdict.ABANDONED


class ReceiverProtocol:
    """
    Verifies that a peer delivers a message sequence on time.

    States:
    CONNECTING → VERIFYING (index 0..n) → DONE

    - CONNECTING: wait for the open signal if the connection is still opening.
    - VERIFYING: race a read against the timeout, then check text and timing.
    - DONE: close the connection if it is still opening or open.
    """

    def __init__(
        self,
        messages: MessageSequence,
        clock: Optional[Clock] = None,
        tolerance_ms: int = DEFAULT_TOLERANCE_MS,
    ):
        self.messages = messages
        self.clock = clock or SystemClock()
        self.tolerance_ms = tolerance_ms

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> "ReceiverProtocol":
        """Create a receiver expecting the message sequence stored in ``path``."""
        return cls(load_sequence_file(path), **kwargs)

    async def wait(self, transport: Transport) -> ReceiveReport:
        """
        Receive and verify the expected message sequence.

        Returns once the whole sequence is verified, a check fails, or the
        connection closes. The connection is always closed on return.

        Returns:
            ReceiveReport: The verification steps taken
        """
        report = ReceiveReport(expected_count=len(self.messages))

        try:
            if transport.state is ConnectionState.CONNECTING:
                await transport.wait_open()
            await self._verify(transport, report)
        finally:
            await self._disconnect(transport)

        return report

    async def _verify(self, transport: Transport, report: ReceiveReport) -> None:
        index = 0

        while True:
            if not transport.is_open:
                self._abandon(report, index, transport)
                return

            message = self.messages.at(index)

            if message is None:
                logger.info("Message sequence is over")
                return

            start_time = self.clock.now()
            expected_time = self.clock.add_milliseconds(start_time, message.delay)
            window_start = self.clock.add_milliseconds(expected_time, -self.tolerance_ms)
            window_end = self.clock.add_milliseconds(expected_time, self.tolerance_ms)

            actual_text = await self._read(transport, message.delay + self.tolerance_ms)
            actual_time = self.clock.now()

            if not transport.is_open:
                self._abandon(report, index, transport)
                return

            if actual_text is None:
                verdict = Verdict.TIMED_OUT
            elif actual_text == message.text and self.clock.is_between(
                actual_time, window_start, window_end
            ):
                verdict = Verdict.MATCHED
            else:
                verdict = Verdict.MISMATCHED

            report.results.append(
                VerificationResult(
                    index=index,
                    expected=message,
                    verdict=verdict,
                    actual_text=actual_text,
                    actual_time=actual_time,
                    window_start=window_start,
                    window_end=window_end,
                )
            )

            if verdict is not Verdict.MATCHED:
                logger.error(
                    f'Protocol ERR: expected "{message.text}" between '
                    f"{window_start.isoformat()} and {window_end.isoformat()}"
                )
                if actual_text is not None:
                    logger.debug(f'Got "{actual_text}" at {actual_time.isoformat()}')
                return

            logger.info(f'Protocol OK: "{actual_text}" received at {actual_time.isoformat()}')
            index += 1

    async def _read(self, transport: Transport, timeout_ms: int) -> Optional[str]:
        """Race the next inbound message against a timeout.

        Returns None if the timeout fires first. A message that completed by
        the time the race is resolved wins over the timeout.
        """
        receive_task = asyncio.create_task(transport.receive())
        try:
            await asyncio.wait({receive_task}, timeout=timeout_ms / 1000)
            if receive_task.done():
                return receive_task.result()

            receive_task.cancel()
            await asyncio.wait({receive_task})
            if receive_task.cancelled():
                return None
            return receive_task.result()
        finally:
            if not receive_task.done():
                receive_task.cancel()

    def _abandon(self, report: ReceiveReport, index: int, transport: Transport) -> None:
        message = self.messages.at(index)
        if message is None:
            logger.info(f"Connection is {transport.state.value} after the last message")
            return

        report.results.append(
            VerificationResult(index=index, expected=message, verdict=Verdict.ABANDONED)
        )
        logger.warning(
            f"Connection is {transport.state.value}; "
            f"{len(self.messages) - index} expected message(s) abandoned"
        )

    async def _disconnect(self, transport: Transport) -> None:
        if transport.state not in (ConnectionState.CONNECTING, ConnectionState.OPEN):
            return
        try:
            await transport.close()
        except TransportError as e:
            logger.warning(f"Error closing connection after protocol run: {e}")
