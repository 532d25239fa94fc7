"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

CHANNEL_PREFIXES = "#&+!"


@dataclass(frozen=True, slots=True)
class Ping:
    token: str | None = None


@dataclass(frozen=True, slots=True)
class Join:
    channel: str
    message: str | None = None


@dataclass(frozen=True, slots=True)
class Part:
    channel: str
    message: str | None = None


@dataclass(frozen=True, slots=True)
class Privmsg:
    target: str
    message: str = ""


@dataclass(frozen=True, slots=True)
class Notice:
    target: str
    message: str = ""


@dataclass(frozen=True, slots=True)
class Numeric:
    code: int
    args: tuple[str, ...] = ()
    trailing: str | None = None


@dataclass(frozen=True, slots=True)
class Other:
    pass


Command = Ping | Join | Part | Privmsg | Notice | Numeric | Other


@dataclass(frozen=True, slots=True)
class MsgMeta:
    raw: str
    timestamp: datetime


def nick_of(source: str | None) -> str | None:
    """Return the nick part of a ``nick!user@host`` source.

    A bare server name is returned whole. ``None`` is returned when there is
    no source or the nick part is empty.
    """
    if source is None:
        return None
    nick = source.split("!", 1)[0]
    return nick or None


def is_channel(target: str) -> bool:
    return bool(target) and target[0] in CHANNEL_PREFIXES


def reply_target_for(target: str, nick: str | None) -> str | None:
    return target if is_channel(target) else nick


@dataclass(frozen=True, slots=True)
class Msg:
    meta: MsgMeta
    source: str | None
    command: Command = field(default_factory=Other)

    def nick(self) -> str | None:
        return nick_of(self.source)

    def channel(self) -> str | None:
        command = self.command
        if isinstance(command, Privmsg | Notice):
            return command.target
        if isinstance(command, Join | Part):
            return command.channel
        return None
