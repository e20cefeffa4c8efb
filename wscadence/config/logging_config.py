"""
Configure logging for the application.

This module provides a consistent logging configuration for both sides of
the harness, ensuring the protocol "OK"/"ERR" lines are formatted the same
way and directed to the appropriate outputs (console, file).
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from wscadence.config.constants import LOGGER_NAME
from wscadence.config.models import LoggingConfig


def configure_logging(
    name: str = LOGGER_NAME, config: Optional[LoggingConfig] = None
) -> logging.Logger:
    """
    Configure the application logger with console and file handlers.

    Args:
        name: Name of the logger to configure
        config: Logging settings; defaults are used when omitted

    Returns:
        logging.Logger: The configured logger instance
    """
    config = config or LoggingConfig()

    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.level.value))

    # Remove existing handlers if any
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    # Create formatter
    formatter = logging.Formatter(config.format)

    if config.console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        # Set encoding to utf-8 if possible
        if hasattr(console_handler.stream, "reconfigure"):
            try:
                console_handler.stream.reconfigure(encoding="utf-8")  # type: ignore
            except Exception as e:
                logger.warning(f"Could not reconfigure console stream encoding: {e}")
        logger.addHandler(console_handler)

    if config.file_output:
        try:
            log_dir = Path(config.log_dir)
            log_dir.mkdir(parents=True, exist_ok=True)

            file_handler = RotatingFileHandler(
                log_dir / config.log_filename,
                maxBytes=config.max_log_size,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except Exception as e:
            logger.warning(f"Could not set up file logging: {e}")

    # Prevent log propagation to root logger
    logger.propagate = False

    logger.debug("Logging configured")
    return logger
