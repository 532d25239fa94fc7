"""General utility helper functions."""

from __future__ import annotations

from datetime import datetime

__all__ = ["format_duration", "format_elapsed"]

_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
)


def format_duration(total_seconds: int | float | None) -> str:
    """Return a human-friendly Hh Mm Ss string for a duration in seconds.

    Examples:
      65 -> "1m 5s"
      3605 -> "1h 0m 5s"
      59 -> "59s"
    """
    if total_seconds is None:
        return "unknown"
    seconds = int(total_seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, sec = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {sec}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m {sec}s"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h {minutes}m {sec}s"


def format_elapsed(then: datetime, now: datetime | None = None) -> str:
    """Describe how long ago ``then`` was, using the largest whole unit.

    Examples:
      30 seconds -> "a few seconds"
      1 minute -> "a minute"
      3 hours -> "3 hours"
    """
    now = now or datetime.now(then.tzinfo)
    seconds = max(0, int((now - then).total_seconds()))
    for unit, size in _UNITS:
        count = seconds // size
        if count >= 1:
            if count == 1:
                return f"an {unit}" if unit == "hour" else f"a {unit}"
            return f"{count} {unit}s"
    return "a few seconds"
