"""
Timed message exchange protocol.

- ``SenderProtocol`` sends a message sequence with per-message delays.
- ``ReceiverProtocol`` checks that the sequence arrives with the right text
  and timing.
"""

from .clock import Clock, SystemClock
from .loader import load_sequence_file, parse_sequence_data, parse_sequence_json
from .messages import MessageSequence, ProtocolMessage, create_default_sequence
from .receiver import ReceiveReport, ReceiverProtocol, VerificationResult, Verdict
from .sender import SenderProtocol

__all__ = [
    "Clock",
    "MessageSequence",
    "ProtocolMessage",
    "ReceiveReport",
    "ReceiverProtocol",
    "SenderProtocol",
    "SystemClock",
    "VerificationResult",
    "Verdict",
    "create_default_sequence",
    "load_sequence_file",
    "parse_sequence_data",
    "parse_sequence_json",
]
