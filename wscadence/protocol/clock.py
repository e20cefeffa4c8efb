"""
Time source for the protocol engines.

The engines never call ``datetime.now()`` directly; they read the current time
through a Clock so tests can substitute a scripted one.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Current time plus the arithmetic the receiving side needs."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""

    @staticmethod
    def add_milliseconds(time: datetime, milliseconds: int) -> datetime:
        """Get ``time`` shifted by ``milliseconds`` (which may be negative)."""
        return time + timedelta(milliseconds=milliseconds)

    @staticmethod
    def is_between(time: datetime, start: datetime, end: datetime) -> bool:
        """Check if ``time`` is within ``[start, end]``, bounds included."""
        return start <= time <= end


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
