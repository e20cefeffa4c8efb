"""
Environment variable loader for wscadence configuration.

This module handles loading configuration from environment variables,
with type conversion, validation, and fallback to defaults.

Environment variables must be explicitly loaded using load_env_file() before
accessing any configuration functions.
"""

import os
from pathlib import Path
from typing import Optional, Type, TypeVar, cast

from dotenv import load_dotenv

from wscadence.config.constants import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_RECEIVER_PROTOCOL_FILENAME,
    DEFAULT_SENDER_PROTOCOL_FILENAME,
    DEFAULT_TOLERANCE_MS,
    ENV_FILES,
    MAX_DELAY_MS,
)
from wscadence.config.models import (
    ApplicationConfig,
    LoggingConfig,
    LogLevel,
    ReceiverConfig,
    SenderConfig,
)
from wscadence.exceptions import ConfigurationError

# Track if environment variables have been loaded
_env_loaded = False


def load_env_file(env_file: Optional[str] = None) -> None:
    """Load environment variables from .env files.

    This function must be called before accessing any configuration functions.
    Variables already present in the process environment are never overridden.

    Args:
        env_file: Path to a .env file. If None, ``.env.local`` and then
            ``.env`` from the working directory are loaded, so a variable
            defined in both takes its value from ``.env.local``.
    """
    global _env_loaded
    if env_file:
        load_dotenv(env_file)
    else:
        for name in ENV_FILES:
            load_dotenv(Path.cwd() / name)
    _env_loaded = True


def _check_env_loaded() -> None:
    """Check if environment variables have been loaded, raise error if not."""
    if not _env_loaded:
        raise RuntimeError(
            "Environment variables not loaded. Call load_env_file() before accessing configuration."
        )


T = TypeVar("T")


def safe_convert(value: Optional[str], target_type: Type[T], default: T) -> T:
    """Safely convert environment variable string to target type."""
    if value is None:
        return default

    try:
        if target_type == bool:
            return cast(T, value.lower() == "true")
        elif target_type == int:
            return cast(T, int(value))
        elif target_type == str:
            return cast(T, value)
        elif target_type == Path:
            return cast(T, Path(value))
        else:
            return default
    except (ValueError, TypeError):
        return default


def safe_string_or_none(value: Optional[str]) -> Optional[str]:
    """Convert environment variable to string or None if empty."""
    if value is None or value.strip() == "":
        return None
    return value.strip()


def parse_port(value: Optional[str], default: int = DEFAULT_PORT) -> int:
    """Parse a TCP port number.

    A missing or blank value gives the default. Anything else must be an
    integer between 1 and 65535; otherwise the process cannot start.
    """
    value = safe_string_or_none(value)
    if value is None:
        return default
    try:
        port = int(value)
    except ValueError:
        raise ConfigurationError(f'Expect "PORT" to be a port number; got {value!r}') from None
    if port <= 0 or port > 65535:
        raise ConfigurationError(f'Expect "PORT" to be between 1 and 65535; got {port}')
    return port


def parse_tolerance(value: Optional[str], default: int = DEFAULT_TOLERANCE_MS) -> int:
    """Parse the receiver tolerance in milliseconds.

    A missing or blank value gives the default. Anything else must be an
    integer between 0 and MAX_DELAY_MS; otherwise the process cannot start.
    """
    value = safe_string_or_none(value)
    if value is None:
        return default
    try:
        tolerance = int(value)
    except ValueError:
        raise ConfigurationError(
            f'Expect "TOLERANCE_MS" to be an integer number; got {value!r}'
        ) from None
    if tolerance < 0 or tolerance > MAX_DELAY_MS:
        raise ConfigurationError(
            f'Expect "TOLERANCE_MS" to be between 0 and {MAX_DELAY_MS}; got {tolerance}'
        )
    return tolerance


def load_sender_config() -> SenderConfig:
    """Load sending side configuration from environment variables."""
    _check_env_loaded()

    return SenderConfig(
        host=os.getenv("HOST", DEFAULT_HOST),
        port=parse_port(os.getenv("PORT")),
        protocol_filename=os.getenv(
            "SENDER_PROTOCOL_FILENAME", DEFAULT_SENDER_PROTOCOL_FILENAME
        ),
    )


def load_receiver_config() -> ReceiverConfig:
    """Load receiving side configuration from environment variables."""
    _check_env_loaded()

    port = parse_port(os.getenv("PORT"))
    return ReceiverConfig(
        target_url=safe_string_or_none(os.getenv("TARGET_URL"))
        or f"ws://localhost:{port}",
        protocol_filename=os.getenv(
            "RECEIVER_PROTOCOL_FILENAME", DEFAULT_RECEIVER_PROTOCOL_FILENAME
        ),
        tolerance_ms=parse_tolerance(os.getenv("TOLERANCE_MS")),
    )


def load_logging_config() -> LoggingConfig:
    """Load logging configuration from environment variables."""
    _check_env_loaded()

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = LogLevel.INFO
    try:
        log_level = LogLevel(log_level_str)
    except ValueError:
        pass

    return LoggingConfig(
        level=log_level,
        format=os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ),
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
        log_filename=os.getenv("LOG_FILENAME", "wscadence.log"),
        max_log_size=safe_convert(os.getenv("LOG_MAX_SIZE"), int, 10 * 1024 * 1024),
        backup_count=safe_convert(os.getenv("LOG_BACKUP_COUNT"), int, 5),
        console_output=safe_convert(os.getenv("LOG_CONSOLE_OUTPUT"), bool, True),
        file_output=safe_convert(os.getenv("LOG_FILE_OUTPUT"), bool, True),
    )


def load_application_config() -> ApplicationConfig:
    """Load complete application configuration from environment variables."""
    _check_env_loaded()

    protocol_file = safe_string_or_none(os.getenv("PROTOCOL_FILE"))

    config = ApplicationConfig(
        sender=load_sender_config(),
        receiver=load_receiver_config(),
        logging=load_logging_config(),
        protocol_file=Path(protocol_file) if protocol_file else None,
    )

    # Validate configuration and raise exceptions for critical errors
    validation_errors = config.validate()
    if validation_errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(
            f"  - {error}" for error in validation_errors
        )
        raise ConfigurationError(error_msg)

    return config

