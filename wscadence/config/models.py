"""
Configuration models for the wscadence application.

This module defines dataclasses for the different configuration domains
(the sending side, the receiving side, logging), providing typed access
and validation for all application settings.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from wscadence.config.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_RECEIVER_PROTOCOL_FILENAME,
    DEFAULT_SENDER_PROTOCOL_FILENAME,
    DEFAULT_TOLERANCE_MS,
    MAX_DELAY_MS,
)


class Role(Enum):
    """Which side of the exchange the process plays."""

    SENDER = "sender"
    RECEIVER = "receiver"


class LogLevel(Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class SenderConfig:
    """Settings of the sending side (the WebSocket server)."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    protocol_filename: str = DEFAULT_SENDER_PROTOCOL_FILENAME


@dataclass
class ReceiverConfig:
    """Settings of the receiving side (the WebSocket client)."""

    target_url: str = f"ws://localhost:{DEFAULT_PORT}"
    protocol_filename: str = DEFAULT_RECEIVER_PROTOCOL_FILENAME
    tolerance_ms: int = DEFAULT_TOLERANCE_MS


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_dir: Path = Path("logs")
    log_filename: str = "wscadence.log"
    max_log_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    console_output: bool = True
    file_output: bool = True


@dataclass
class ApplicationConfig:
    """Master application configuration containing all domain configs."""

    sender: SenderConfig = field(default_factory=SenderConfig)
    receiver: ReceiverConfig = field(default_factory=ReceiverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Explicit sequence file; overrides the role defaults when set
    protocol_file: Optional[Path] = None

    def protocol_filename_for(self, role: Role) -> str:
        """Get the default sequence file name for the given role."""
        if role is Role.SENDER:
            return self.sender.protocol_filename
        return self.receiver.protocol_filename

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.sender.port <= 0 or self.sender.port > 65535:
            errors.append("Server port must be between 1 and 65535")

        if not self.receiver.target_url.startswith(("ws://", "wss://")):
            errors.append(
                f"Target URL must use the ws:// or wss:// scheme; got {self.receiver.target_url!r}"
            )

        if not 0 <= self.receiver.tolerance_ms <= MAX_DELAY_MS:
            errors.append(f"Tolerance must be between 0 and {MAX_DELAY_MS} ms")

        return errors
