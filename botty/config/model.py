from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import DEFAULT_SERVER, RECONNECT_DELAY
from ..irc.models import is_channel


def normalize_channels(channels: list[str] | Any) -> list[str]:
    """Normalize a list of channel names.

    Strips whitespace, adds ``#`` to names lacking a channel prefix and
    drops duplicates (case-insensitive) while keeping the configured order.
    """
    if not isinstance(channels, list):
        raise ValueError("channels must be a list")
    seen: set[str] = set()
    normalized: list[str] = []
    for ch in channels:
        if not isinstance(ch, str):
            continue
        name = ch.strip()
        if not name:
            continue
        if not is_channel(name):
            name = f"#{name}"
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        normalized.append(name)
    return normalized


class BotConfig(BaseModel):
    """Runtime configuration for one bot connection.

    Attributes:
        server: ``host[:port]`` of the IRC server.
        nick: Nickname to register with.
        user: Username sent in the USER line; defaults to the nick.
        channels: Channels joined after the MOTD, in order.
        reconnect_delay: Seconds to wait between reconnect attempts.
        max_reconnect_attempts: Stop after this many attempts; ``None`` retries forever.
        rumors_db: SQLite file for the rumors handler; ``None`` disables it.
        log_file: Optional path for a log file next to console output.
    """

    server: str = DEFAULT_SERVER
    nick: str = Field(min_length=1, max_length=30)
    user: str | None = None
    channels: list[str] = Field(default_factory=list)
    reconnect_delay: float = Field(default=RECONNECT_DELAY, ge=0)
    max_reconnect_attempts: int | None = Field(default=None, ge=1)
    rumors_db: str | None = None
    log_file: str | None = None

    @field_validator("nick", "user")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v or any(c in v for c in " \r\n:!@"):
            raise ValueError("must be a single word without : ! @")
        return v

    @field_validator("server")
    @classmethod
    def validate_server(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("server must not be empty")
        return v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        return normalize_channels(v)

    @property
    def username(self) -> str:
        return self.user or self.nick

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BotConfig:
        return cls.model_validate(dict(data))


__all__ = ["BotConfig", "normalize_channels"]
