"""Handler contract, dispatch context and the PRIVMSG adapter."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from ..errors.internal import SendError
from ..irc.models import Msg, Privmsg
from ..logs.logger import logger
from .state import SharedState

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.client import IRCClient

T = TypeVar("T")


class Flow(Enum):
    """Outcome of one handler call."""

    CONTINUE = "continue"
    BREAK = "break"


@dataclass(frozen=True)
class Context:
    """Read/write context passed to every handler call.

    The context itself never changes; ``client`` and ``state`` are the
    shared targets. ``state`` must only be read or written while ``lock``
    is held, and the lock must be released before any network call.
    """

    client: IRCClient
    state: SharedState
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def with_state(self, fn: Callable[[SharedState], T]) -> T:
        """Run ``fn`` against the state under the lock and return its result."""
        async with self.lock:
            return fn(self.state)

    @asynccontextmanager
    async def locked_state(self) -> AsyncIterator[SharedState]:
        async with self.lock:
            yield self.state

    async def reply(self, target: str, text: str) -> bool:
        """Best-effort PRIVMSG; a closed pipeline is logged, not raised."""
        try:
            await self.client.privmsg(target, text)
        except SendError as e:
            logger.log_event(
                "bot",
                "reply_dropped",
                level=logging.DEBUG,
                user=self.client.nick,
                channel=target,
                error=str(e),
            )
            return False
        return True


class Handler(ABC):
    """One link of the handler chain."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def handle(self, ctx: Context, msg: Msg) -> Flow:
        """Return ``Flow.BREAK`` to stop later handlers seeing ``msg``."""


class HandlerFn(Handler):
    """Adapts a plain ``async def fn(ctx, msg) -> Flow`` into a handler."""

    def __init__(self, fn: Callable[[Context, Msg], Awaitable[Flow]]) -> None:
        self.fn = fn

    @property
    def name(self) -> str:
        return getattr(self.fn, "__name__", type(self).__name__)

    async def handle(self, ctx: Context, msg: Msg) -> Flow:
        return await self.fn(ctx, msg)


class PrivmsgHandler(Handler):
    """Handler that only fires on chat messages with a known speaker."""

    @abstractmethod
    async def handle_privmsg(
        self, ctx: Context, nick: str, target: str, text: str
    ) -> Flow:
        """React to ``text`` said by ``nick`` to ``target`` (channel or our nick)."""

    async def handle(self, ctx: Context, msg: Msg) -> Flow:
        command = msg.command
        if not isinstance(command, Privmsg):
            return Flow.CONTINUE
        nick = msg.nick()
        if nick is None:
            return Flow.CONTINUE
        return await self.handle_privmsg(ctx, nick, command.target, command.message)


__all__ = ["Context", "Flow", "Handler", "HandlerFn", "PrivmsgHandler"]
