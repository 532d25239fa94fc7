"""Error hierarchy and reporting helpers."""

from .handling import classify_error, log_error
from .internal import (
    ConfigError,
    ConnectError,
    ConnectionLostError,
    InternalError,
    NetworkError,
    ParseError,
    SendError,
)

__all__ = [
    "InternalError",
    "ParseError",
    "NetworkError",
    "ConnectError",
    "SendError",
    "ConnectionLostError",
    "ConfigError",
    "classify_error",
    "log_error",
]
