"""
Configuration constants for botty

This module contains the tunable defaults used throughout the application.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Connection pipeline
DEFAULT_SERVER = os.getenv("BOTTY_SERVER", "irc.libera.chat:6667")
DEFAULT_PORT = _get_env_int("DEFAULT_PORT", 6667)  # Used when server has no :port
OUTBOUND_QUEUE_SIZE = _get_env_int(
    "OUTBOUND_QUEUE_SIZE", 100
)  # Pending outbound lines before send() applies backpressure
INBOUND_QUEUE_SIZE = _get_env_int(
    "INBOUND_QUEUE_SIZE", 100
)  # Received lines buffered ahead of the dispatch loop
CONNECT_TIMEOUT = _get_env_float("CONNECT_TIMEOUT", 30.0)  # Seconds
LINE_ENCODING = "utf-8"
LINE_TERMINATOR = "\r\n"

# Reconnection (startup glue)
RECONNECT_DELAY = _get_env_float(
    "RECONNECT_DELAY", 3.0
)  # Fixed delay between reconnect attempts

# Config
DEFAULT_CONF_FILE = "botty.conf"

# IRC numerics handled by the bundled handlers
RPL_NAMREPLY = 353
RPL_ENDOFMOTD = 376
ERR_NOMOTD = 422
