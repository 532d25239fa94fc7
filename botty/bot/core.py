"""Handler chain and dispatch run loop."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..errors.internal import ParseError
from ..irc.models import Msg, Privmsg
from ..logs.logger import logger
from .handler import Context, Flow, Handler
from .state import SharedState

if TYPE_CHECKING:  # pragma: no cover
    from ..irc.client import IRCClient


class Bot:
    """Runs messages from one client through an ordered handler list.

    Messages are dispatched one at a time; every handler finishes before the
    next one starts and before the next message is received.
    """

    def __init__(
        self,
        handlers: list[Handler],
        client: IRCClient,
        state: SharedState | None = None,
        lock: asyncio.Lock | None = None,
    ) -> None:
        self.handlers = list(handlers)
        self.client = client
        self.context = Context(
            client=client,
            state=state if state is not None else SharedState(),
            lock=lock if lock is not None else asyncio.Lock(),
        )
        self.dispatched = 0
        self.parse_failures = 0

    @property
    def state(self) -> SharedState:
        return self.context.state

    async def dispatch(self, msg: Msg) -> Handler | None:
        """Offer ``msg`` to each handler until one breaks.

        Returns:
            The handler that stopped the chain, or ``None`` if all continued.
        """
        self.dispatched += 1
        for handler in self.handlers:
            try:
                flow = await handler.handle(self.context, msg)
            except asyncio.CancelledError:
                raise
            except Exception as e:  # noqa: BLE001
                logger.log_event(
                    "bot",
                    "handler_error",
                    level=logging.ERROR,
                    user=self.client.nick,
                    handler=handler.name,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                continue
            if flow is Flow.BREAK:
                logger.log_event(
                    "bot",
                    "chain_break",
                    level=logging.DEBUG,
                    user=self.client.nick,
                    handler=handler.name,
                )
                return handler
        return None

    async def run(self) -> None:
        """Dispatch messages until the connection reaches end of stream."""
        logger.log_event(
            "bot", "run_start", user=self.client.nick, handlers=len(self.handlers)
        )
        while True:
            try:
                msg = await self.client.receive()
            except ParseError as e:
                self.parse_failures += 1
                logger.log_event(
                    "bot",
                    "parse_failed",
                    level=logging.WARNING,
                    user=self.client.nick,
                    error=str(e),
                    raw=e.line,
                )
                continue
            if msg is None:
                break
            if isinstance(msg.command, Privmsg):
                logger.log_event(
                    "irc",
                    "privmsg",
                    user=msg.nick(),
                    channel=msg.command.target,
                    message=msg.command.message,
                )
            await self.dispatch(msg)
        logger.log_event(
            "bot",
            "run_end",
            user=self.client.nick,
            dispatched=self.dispatched,
            parse_failures=self.parse_failures,
        )


class BotBuilder:
    def __init__(self) -> None:
        self.handlers: list[Handler] = []

    def with_handler(self, handler: Handler) -> BotBuilder:
        self.handlers.append(handler)
        return self

    def with_handlers(self, handlers: list[Handler]) -> BotBuilder:
        self.handlers.extend(handlers)
        return self

    def build(
        self,
        client: IRCClient,
        state: SharedState | None = None,
        lock: asyncio.Lock | None = None,
    ) -> Bot:
        return Bot(self.handlers, client, state=state, lock=lock)


__all__ = ["Bot", "BotBuilder"]
