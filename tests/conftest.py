"""
Pytest configuration file for the wscadence test suite.

This file contains fixtures and fakes shared across multiple test files:
an in-memory Transport and a Clock that returns scripted times.
"""

import asyncio
import logging
import socket
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

import pytest

from wscadence.config import settings
from wscadence.config.constants import LOGGER_NAME
from wscadence.protocol.clock import Clock
from wscadence.transport.base import ConnectionState, Transport

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeTransport(Transport):
    """In-memory transport; must be created inside a running event loop."""

    def __init__(self, state: ConnectionState = ConnectionState.OPEN, inbound: Iterable[str] = ()):
        self._state = state
        self.sent: List[str] = []
        self.sent_at: List[float] = []
        self.close_calls = 0
        self.inbox: asyncio.Queue = asyncio.Queue()
        self._opened = asyncio.Event()
        self._closed = asyncio.Event()
        for text in inbound:
            self.inbox.put_nowait(text)

    @property
    def state(self) -> ConnectionState:
        return self._state

    def open(self) -> None:
        self._state = ConnectionState.OPEN
        self._opened.set()

    def drop(self) -> None:
        """Simulate the peer going away."""
        self._state = ConnectionState.CLOSED
        self._opened.set()
        self._closed.set()

    def deliver(self, text: str) -> None:
        self.inbox.put_nowait(text)

    def deliver_later(self, text: str, seconds: float) -> None:
        asyncio.get_running_loop().call_later(seconds, self.deliver, text)

    async def wait_open(self) -> None:
        if self._state is ConnectionState.CONNECTING:
            await self._opened.wait()

    async def receive(self) -> Optional[str]:
        if not self.is_open:
            return None
        get_task = asyncio.ensure_future(self.inbox.get())
        closed_task = asyncio.ensure_future(self._closed.wait())
        try:
            await asyncio.wait({get_task, closed_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (get_task, closed_task):
                if not task.done():
                    task.cancel()
        if get_task.done() and not get_task.cancelled():
            return get_task.result()
        return None

    async def send(self, text: str) -> None:
        if not self.is_open:
            return
        self.sent.append(text)
        self.sent_at.append(asyncio.get_running_loop().time())

    async def close(self) -> None:
        self.close_calls += 1
        if self._state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
            self.drop()


class ScriptedClock(Clock):
    """Clock returning T0 + the given millisecond offsets, one per call."""

    def __init__(self, offsets_ms: Iterable[int]):
        self._times = [T0 + timedelta(milliseconds=offset) for offset in offsets_ms]
        self.calls = 0

    def now(self) -> datetime:
        time = self._times[self.calls]
        self.calls += 1
        return time


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport; call it from inside an async test."""
    return FakeTransport


@pytest.fixture
def scripted_clock():
    return ScriptedClock


@pytest.fixture(autouse=True)
def reset_logging():
    """Let records from the package logger reach caplog."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    yield


@pytest.fixture(autouse=True)
def reset_config():
    """Drop the cached application configuration between tests."""
    settings.set_config(None)
    yield
    settings.set_config(None)


@pytest.fixture
def free_port():
    """A TCP port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
