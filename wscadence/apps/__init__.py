"""Host applications wiring the protocol engines to real connections."""

from .base import BaseApp, resolve_sequence
from .receiver import ReceiverApp
from .sender import SenderApp

__all__ = ["BaseApp", "ReceiverApp", "SenderApp", "resolve_sequence"]
