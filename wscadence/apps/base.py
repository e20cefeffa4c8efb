"""
Base class for the sender and receiver applications.

An application is started once and stopped gracefully on a shutdown signal
(SIGTERM, SIGINT or SIGUSR2). The protocol engines know nothing about
signals: stopping an application closes the connections it owns, and the
engines notice the closed connections and finish on their own.
"""

import asyncio
import logging
import signal
from pathlib import Path
from typing import List, Optional

from wscadence.config.constants import LOGGER_NAME
from wscadence.config.models import ApplicationConfig, Role
from wscadence.protocol.loader import load_sequence_file
from wscadence.protocol.messages import MessageSequence, create_default_sequence

logger = logging.getLogger(LOGGER_NAME)

SHUTDOWN_SIGNALS = ("SIGTERM", "SIGINT", "SIGUSR2")


def resolve_sequence(config: ApplicationConfig, role: Role) -> MessageSequence:
    """
    Load the message sequence for the given role.

    Lookup order:
    1. ``config.protocol_file`` when set; any load error is fatal.
    2. The role's default file name in the working directory, if it exists.
    3. The built-in default sequence.
    """
    if config.protocol_file is not None:
        sequence = load_sequence_file(config.protocol_file)
        logger.info(f"Using message sequence from {config.protocol_file}")
        return sequence

    default_file = Path.cwd() / config.protocol_filename_for(role)
    if default_file.is_file():
        sequence = load_sequence_file(default_file)
        logger.info(f"Using message sequence from {default_file}")
        return sequence

    logger.warning(f"{default_file} not found; using the default message sequence")
    return create_default_sequence()


class BaseApp:
    """
    An application that can be started and gracefully stopped by system signals.

    Subclasses implement ``start`` and ``stop``.
    """

    role: Role

    def __init__(self, config: ApplicationConfig):
        self.config = config
        self.is_shutting_down = False
        self._signals: List[signal.Signals] = []
        self._shutdown_task: Optional[asyncio.Task] = None

    @classmethod
    async def run(cls, config: ApplicationConfig) -> "BaseApp":
        """Create the application, wire the shutdown signals and start it.

        Returns the application once ``start`` returns, which for a stopped
        application is after ``stop`` has completed.
        """
        app = cls(config)
        app.install_signal_handlers()
        try:
            await app.start()
            if app._shutdown_task is not None:
                await app._shutdown_task
        finally:
            app.remove_signal_handlers()
        return app

    async def start(self) -> None:
        """Start the application."""

    async def stop(self) -> None:
        """Gracefully stop the application."""

    async def handle_shutdown(self) -> None:
        """Stop the application once, however many shutdown requests arrive."""
        if self.is_shutting_down:
            return

        self.is_shutting_down = True
        await self.stop()
        logger.debug(f"The {self.role.value} is stopped")

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for name in SHUTDOWN_SIGNALS:
            sig = getattr(signal, name, None)
            if sig is None:
                continue
            try:
                loop.add_signal_handler(sig, self._on_signal, sig)
            except (NotImplementedError, RuntimeError):
                # Not supported by this event loop (e.g. on Windows)
                logger.debug(f"Cannot install a handler for {name}")
                continue
            self._signals.append(sig)

    def remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in self._signals:
            loop.remove_signal_handler(sig)
        self._signals.clear()

    def _on_signal(self, sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}, shutting down")
        if self._shutdown_task is None:
            self._shutdown_task = asyncio.create_task(self.handle_shutdown())
