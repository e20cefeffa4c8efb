"""
wscadence - timed message exchange harness for WebSocket connections.

One side sends a scripted sequence of text messages with configured delays;
the other side checks that each message arrives with the right text inside a
tolerance window around its expected time.
"""

from wscadence.protocol import (
    MessageSequence,
    ProtocolMessage,
    ReceiverProtocol,
    SenderProtocol,
    create_default_sequence,
    load_sequence_file,
)
from wscadence.transport import ConnectionState, Transport, WebSocketTransport

__version__ = "1.0.0"

__all__ = [
    "ConnectionState",
    "MessageSequence",
    "ProtocolMessage",
    "ReceiverProtocol",
    "SenderProtocol",
    "Transport",
    "WebSocketTransport",
    "create_default_sequence",
    "load_sequence_file",
]
