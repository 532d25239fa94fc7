"""botty: a small asyncio IRC bot with a pluggable handler chain."""

__version__ = "0.1.0"
