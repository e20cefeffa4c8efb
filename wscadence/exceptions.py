"""
Exception hierarchy for the timed message exchange harness.

Only startup problems (configuration, message sequence loading) and transport
close failures are exceptions. A failed verification is a logged outcome of a
single protocol run and never raises.
"""


class WscadenceError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(WscadenceError, ValueError):
    """A required environment value is missing or malformed."""


class SequenceLoadError(WscadenceError, ValueError):
    """The message sequence definition cannot be read, decoded or validated."""


class TransportError(WscadenceError):
    """The underlying connection failed while being closed."""
