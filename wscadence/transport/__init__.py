"""Connection abstractions used by the protocol engines."""

from .base import ConnectionState, Transport
from .websocket import WebSocketTransport

__all__ = ["ConnectionState", "Transport", "WebSocketTransport"]
