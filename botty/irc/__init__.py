"""IRC subsystem package.

Contains the line grammar (models + parser) and the asyncio connection
pipeline.
"""

from .client import IRCClient, connect, split_address  # noqa: F401
from .models import (  # noqa: F401
    Command,
    Join,
    Msg,
    MsgMeta,
    Notice,
    Numeric,
    Other,
    Part,
    Ping,
    Privmsg,
    is_channel,
    nick_of,
    reply_target_for,
)
from .parser import parse_line  # noqa: F401

__all__ = [
    "IRCClient",
    "connect",
    "split_address",
    "Command",
    "Join",
    "Msg",
    "MsgMeta",
    "Notice",
    "Numeric",
    "Other",
    "Part",
    "Ping",
    "Privmsg",
    "is_channel",
    "nick_of",
    "reply_target_for",
    "parse_line",
]
