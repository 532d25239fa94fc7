from .helpers import format_duration, format_elapsed

__all__ = ["format_duration", "format_elapsed"]
