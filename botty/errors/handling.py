from __future__ import annotations

import logging

from ..logs.logger import logger
from .internal import (
    ConfigError,
    InternalError,
    NetworkError,
    ParseError,
)


def classify_error(error: BaseException) -> str:
    """Return a short category label for an exception."""
    if isinstance(error, NetworkError | OSError | ConnectionError):
        return "network"
    if isinstance(error, ParseError):
        return "parsing"
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str, error: BaseException, context: dict[str, object] | None = None
) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    fields: dict[str, object] = dict(context or {})
    if isinstance(error, InternalError):
        for key, value in error.data.items():
            fields.setdefault(key, value)
    logger.log_event(
        "error",
        classify_error(error),
        level=logging.ERROR,
        human=f"{message}: {error}",
        error_type=type(error).__name__,
        **fields,
    )


__all__ = ["classify_error", "log_error"]
