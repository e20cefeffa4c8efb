"""
Constants and configuration values used throughout the application.

This module defines constants that are shared by the sender and receiver
sides of the harness, providing a single place for defaults and names.
"""

# Logger name used throughout the application
LOGGER_NAME = "wscadence"

# Network defaults
DEFAULT_PORT = 8080
DEFAULT_HOST = "0.0.0.0"

# Message sequence files, looked up in the working directory
DEFAULT_SENDER_PROTOCOL_FILENAME = "protocol-server.json"
DEFAULT_RECEIVER_PROTOCOL_FILENAME = "protocol-client.json"

# Allowed deviation (ms) of an arrival from its expected time, both directions
DEFAULT_TOLERANCE_MS = 300

# Env files, in priority order (first one to define a variable wins)
ENV_FILES = (".env.local", ".env")

# Upper bound (ms) for a message delay or the tolerance, about 24.8 days
MAX_DELAY_MS = 2**31 - 1
