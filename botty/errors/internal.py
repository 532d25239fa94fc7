"""Centralized internal error hierarchy.

These exceptions provide semantic categories for recovery logic in the run
loop and the reconnect policy. Raw ``OSError`` / ``asyncio.TimeoutError`` from
the socket layer are wrapped at the connection boundary and never surface to
handlers directly.

Classes:
  InternalError        – Base for all internal errors.
  ParseError           – A protocol line did not match any known shape.
  NetworkError         – Transport level failures.
  ConnectError         – Initial connection attempt failed.
  SendError            – Outbound queue rejected a line.
  ConnectionLostError  – The server side of an established stream closed.
  ConfigError          – Configuration file missing or invalid.

End of stream is not an error: ``IRCClient.receive`` returns ``None``.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ParseError(InternalError):
    """Raised when a raw line cannot be turned into a message.

    Attributes:
        line: The offending raw line.
    """

    def __init__(self, message: str, line: str) -> None:
        super().__init__(message, data={"line": line})
        self.line = line


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors."""


class ConnectError(NetworkError):
    """Exception raised when the socket connection cannot be established."""


class SendError(NetworkError):
    """Exception raised when an outbound line cannot be queued.

    This happens once the pipeline has been closed or its writer task has
    stopped after a write failure.
    """


class ConnectionLostError(NetworkError):
    """Raised by the runner when an established stream reaches its end."""


class ConfigError(InternalError):
    """Exception raised for unreadable or invalid configuration."""


__all__ = [
    "InternalError",
    "ParseError",
    "NetworkError",
    "ConnectError",
    "SendError",
    "ConnectionLostError",
    "ConfigError",
]
