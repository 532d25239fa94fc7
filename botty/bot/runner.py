"""Connection lifecycle: connect, run the chain, reconnect."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    stop_any,
    stop_never,
    wait_fixed,
)

from ..config.model import BotConfig
from ..config.watcher import ConfigWatcher
from ..errors.internal import ConnectError, ConnectionLostError, SendError
from ..handlers import RumorStore, default_handlers
from ..irc.client import IRCClient
from ..logs.logger import logger
from ..utils.helpers import format_duration
from .core import Bot, BotBuilder
from .handler import Handler
from .state import SharedState

Connector = Callable[[str, str, str], Awaitable[IRCClient]]
HandlerFactory = Callable[[BotConfig], list[Handler]]


async def _default_connector(server: str, nick: str, user: str) -> IRCClient:
    return await IRCClient.connect(server, nick, user)


class BotRunner:  # pylint: disable=too-many-instance-attributes
    """Owns the process-lifetime state and rebuilds the pipeline on failure.

    Connect failures are retried with a fixed delay, up to
    ``max_reconnect_attempts`` consecutive failures when configured. After an
    established session ends the runner waits the same delay and connects
    again until :meth:`stop` is called.
    """

    def __init__(
        self,
        config: BotConfig,
        handler_factory: HandlerFactory | None = None,
        *,
        connector: Connector = _default_connector,
    ) -> None:
        self.config = config
        self.state = SharedState(channels=list(config.channels))
        self.lock = asyncio.Lock()
        self.rumor_store: RumorStore | None = (
            RumorStore(config.rumors_db) if config.rumors_db else None
        )
        self.handler_factory: HandlerFactory = handler_factory or (
            lambda cfg: default_handlers(cfg, self.rumor_store)
        )
        self.connector = connector
        self.client: IRCClient | None = None
        self.bot: Bot | None = None
        self.sessions = 0
        self.watcher: ConfigWatcher | None = None
        self._stopping = False
        self._pending: set[asyncio.Task[None]] = set()

    # Connection -----------------------------------------------------------

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.log_event(
            "runner",
            "connect_retry",
            level=logging.WARNING,
            user=self.config.nick,
            attempt=retry_state.attempt_number,
            delay=self.config.reconnect_delay,
            error=str(error),
        )

    def _stop_requested(self, _retry_state: RetryCallState) -> bool:
        return self._stopping

    async def _attempt_connect(self) -> IRCClient:
        if self._stopping:
            raise ConnectError("runner is stopping", data={"server": self.config.server})
        return await self.connector(
            self.config.server, self.config.nick, self.config.username
        )

    async def connect(self) -> IRCClient:
        """Connect, retrying ``ConnectError`` with a fixed delay.

        Raises:
            ConnectError: once ``max_reconnect_attempts`` is exhausted or
                :meth:`stop` was called.
        """
        limit = self.config.max_reconnect_attempts
        retrying = AsyncRetrying(
            wait=wait_fixed(self.config.reconnect_delay),
            stop=stop_any(
                stop_after_attempt(limit) if limit else stop_never,
                self._stop_requested,
            ),
            retry=retry_if_exception_type(ConnectError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        return await retrying(self._attempt_connect)

    async def run_once(self) -> None:
        """Run one session from connect to end of stream.

        Raises:
            ConnectError: if connecting failed for good.
            ConnectionLostError: when the server closed the stream while the
                runner was not stopping.
        """
        client = await self.connect()
        if self._stopping:
            await client.close()
            return
        self.client = client
        self.sessions += 1
        started = time.monotonic()
        try:
            self.bot = (
                BotBuilder()
                .with_handlers(self.handler_factory(self.config))
                .build(client, state=self.state, lock=self.lock)
            )
            await self.bot.run()
        finally:
            self.client = None
            await client.close()
        uptime = format_duration(time.monotonic() - started)
        logger.log_event("runner", "session_end", user=self.config.nick, uptime=uptime)
        if not self._stopping:
            raise ConnectionLostError(
                "server closed the connection", data={"uptime": uptime}
            )

    async def run_forever(self) -> None:
        """Keep a session alive until :meth:`stop`; connect errors propagate."""
        while not self._stopping:
            try:
                await self.run_once()
            except ConnectError:
                if self._stopping:
                    return
                raise
            except ConnectionLostError:
                logger.log_event(
                    "runner",
                    "reconnect_scheduled",
                    level=logging.WARNING,
                    user=self.config.nick,
                    delay=self.config.reconnect_delay,
                )
                await asyncio.sleep(self.config.reconnect_delay)

    async def stop(self) -> None:
        self._stopping = True
        if self.client is not None:
            await self.client.close()

    async def close(self) -> None:
        await self.stop()
        if self.watcher is not None:
            self.watcher.stop()
            self.watcher = None
        if self.rumor_store is not None:
            await self.rumor_store.close()
            self.rumor_store = None

    # Live config ----------------------------------------------------------

    async def apply_config(self, config: BotConfig) -> list[str]:
        """Adopt a reloaded channel list and join channels that are new.

        Other fields only take effect on the next process start.

        Returns:
            The channels that were added.
        """
        async with self.lock:
            known = {c.lower() for c in self.state.channels}
            self.state.channels = list(config.channels)
        added = [c for c in config.channels if c.lower() not in known]
        self.config = self.config.model_copy(update={"channels": list(config.channels)})
        logger.log_event(
            "runner", "channels_updated", user=self.config.nick, added=len(added)
        )
        client = self.client
        if client is None:
            return added
        for channel in added:
            try:
                await client.join(channel)
            except SendError as e:
                logger.log_event(
                    "irc",
                    "join_failed",
                    level=logging.WARNING,
                    user=self.config.nick,
                    channel=channel,
                    error=str(e),
                )
                break
        return added

    def watch_config(
        self, config_file: str, overrides: dict[str, object] | None = None
    ) -> ConfigWatcher:
        """Start a file watcher feeding :meth:`apply_config` on this loop."""
        loop = asyncio.get_running_loop()

        def _schedule(config: BotConfig) -> None:
            task = loop.create_task(self.apply_config(config))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

        def _on_change(config: BotConfig) -> None:
            loop.call_soon_threadsafe(_schedule, config)

        watcher = ConfigWatcher(config_file, _on_change, overrides)
        watcher.start()
        self.watcher = watcher
        return watcher


__all__ = ["BotRunner", "Connector", "HandlerFactory"]
