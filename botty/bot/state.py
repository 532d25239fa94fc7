"""Process-lifetime state shared by all handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class SeenInfo:
    nick: str
    last_seen: datetime
    message: str


@dataclass
class SharedState:
    """Mutable bot state.

    Never touched without holding the lock of the owning
    :class:`~botty.bot.handler.Context`.

    Attributes:
        seen: Last message per nick.
        scores: Running ``nick++`` / ``nick--`` tally.
        channels: Ordered list of channels to auto-join.
        names: Nicks currently known in the joined channels.
    """

    seen: dict[str, SeenInfo] = field(default_factory=dict)
    scores: dict[str, int] = field(default_factory=dict)
    channels: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)

    def update_seen(self, nick: str, message: str, now: datetime) -> None:
        info = self.seen.get(nick)
        if info is None:
            self.seen[nick] = SeenInfo(nick=nick, last_seen=now, message=message)
            return
        info.last_seen = now
        info.message = message

    def add_to_score(self, nick: str, delta: int) -> int:
        score = self.scores.get(nick, 0) + delta
        self.scores[nick] = score
        return score

    def add_name(self, nick: str) -> bool:
        if nick in self.names:
            return False
        self.names.append(nick)
        return True

    def remove_name(self, nick: str) -> bool:
        try:
            self.names.remove(nick)
        except ValueError:
            return False
        return True

    def has_channel(self, channel: str) -> bool:
        lowered = channel.lower()
        return any(c.lower() == lowered for c in self.channels)
