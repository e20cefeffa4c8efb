"""
Command line entry point.

Runs one side of the timed message exchange:

    python -m wscadence sender     # WebSocket server sending the sequence
    python -m wscadence receiver   # WebSocket client verifying the sequence

Settings come from the environment (and .env.local / .env files); command
line options override them.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from wscadence.apps.receiver import ReceiverApp
from wscadence.apps.sender import SenderApp
from wscadence.config.env_loader import load_env_file, parse_port
from wscadence.config.logging_config import configure_logging
from wscadence.config.models import ApplicationConfig
from wscadence.config.settings import get_config
from wscadence.exceptions import ConfigurationError, SequenceLoadError, TransportError

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_STARTUP_ERROR = 2

APPS = {"sender": SenderApp, "receiver": ReceiverApp}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wscadence",
        description="Send or verify a timed sequence of WebSocket text messages",
    )
    parser.add_argument("role", choices=sorted(APPS), help="Side of the exchange to run")
    parser.add_argument("--env-file", help="Load environment variables from this file")
    parser.add_argument("--protocol-file", type=Path, help="Message sequence JSON file")
    parser.add_argument("--port", help="Port to listen on (sender)")
    parser.add_argument("--url", help="WebSocket URL to connect to (receiver)")
    return parser


def apply_overrides(config: ApplicationConfig, args: argparse.Namespace) -> ApplicationConfig:
    """Apply command line options on top of the environment configuration."""
    if args.protocol_file is not None:
        config.protocol_file = args.protocol_file
    if args.port is not None:
        config.sender.port = parse_port(args.port)
    if args.url is not None:
        config.receiver.target_url = args.url

    errors = config.validate()
    if errors:
        raise ConfigurationError(
            "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
        )
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        load_env_file(args.env_file)
        config = apply_overrides(get_config(), args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_STARTUP_ERROR

    logger = configure_logging(config=config.logging)
    app_class = APPS[args.role]

    try:
        app = asyncio.run(app_class.run(config))
    except SequenceLoadError as e:
        logger.error(f"Cannot load the message sequence: {e}")
        return EXIT_STARTUP_ERROR
    except (TransportError, OSError) as e:
        logger.error(f"The {args.role} failed: {e}")
        return EXIT_FAILED

    if app.is_shutting_down:
        return EXIT_OK
    if isinstance(app, ReceiverApp) and not app.report.completed:
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
