"""Async IRC connection pipeline.

One reader task and one writer task bridge an asyncio stream pair to two
bounded queues. Application code only sees :meth:`IRCClient.send` and
:meth:`IRCClient.receive`.
"""

from __future__ import annotations

import asyncio
import logging
import re
from contextlib import suppress
from datetime import datetime

from ..constants import (
    CONNECT_TIMEOUT,
    DEFAULT_PORT,
    INBOUND_QUEUE_SIZE,
    LINE_ENCODING,
    LINE_TERMINATOR,
    OUTBOUND_QUEUE_SIZE,
)
from ..errors.internal import ConnectError, SendError
from ..logs.logger import logger
from .models import Msg
from .parser import parse_line

# End-of-stream marker on both queues.
_EOF = None
_LINE_BREAKS = re.compile(r"[\r\n]+")


def split_address(server: str, default_port: int = DEFAULT_PORT) -> tuple[str, int]:
    """Split ``host[:port]`` into its parts.

    Raises:
        ValueError: if the host is empty or the port is not a valid number.
    """
    host, sep, port_text = server.strip().rpartition(":")
    if not sep:
        host, port_text = port_text, ""
    if not host:
        raise ValueError(f"invalid server address {server!r}")
    if not port_text:
        return host, default_port
    port = int(port_text)
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in {server!r}")
    return host, port


class IRCClient:  # pylint: disable=too-many-instance-attributes
    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        nick: str,
        user: str,
        *,
        outbound_size: int = OUTBOUND_QUEUE_SIZE,
        inbound_size: int = INBOUND_QUEUE_SIZE,
    ) -> None:
        self.nick = nick
        self.user = user
        self._reader = reader
        self._writer = writer
        self._outbound: asyncio.Queue[str | None] = asyncio.Queue(maxsize=outbound_size)
        self._inbound: asyncio.Queue[str | None] = asyncio.Queue(maxsize=inbound_size)
        self._reader_task: asyncio.Task[None] | None = None
        self._writer_task: asyncio.Task[None] | None = None
        self._reader_done = False
        self._eof = False
        self._closed = False
        # Set once nothing will drain the outbound queue any more.
        self._writer_stopped = asyncio.Event()

    @classmethod
    async def connect(
        cls,
        server: str,
        nick: str,
        user: str,
        *,
        timeout: float = CONNECT_TIMEOUT,
    ) -> IRCClient:
        """Open the connection and start the reader and writer tasks.

        Registration (``NICK`` / ``USER``) is sent by the writer before any
        queued line.

        Raises:
            ConnectError: if the address is invalid or the socket cannot be
                opened within ``timeout`` seconds.
        """
        try:
            host, port = split_address(server)
        except ValueError as e:
            raise ConnectError(str(e), data={"server": server}) from e

        logger.log_event("irc", "connect_start", user=nick, server=host, port=port)
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port), timeout=timeout
            )
        except TimeoutError as e:
            logger.log_event(
                "irc", "connect_timeout", level=logging.ERROR, user=nick, timeout=timeout
            )
            raise ConnectError(
                f"timed out connecting to {host}:{port}",
                data={"server": host, "port": port},
            ) from e
        except OSError as e:
            logger.log_event(
                "irc",
                "connect_network_error",
                level=logging.ERROR,
                user=nick,
                error=str(e),
            )
            raise ConnectError(
                f"cannot connect to {host}:{port}: {e}",
                data={"server": host, "port": port},
            ) from e

        client = cls(reader, writer, nick, user)
        client.start()
        logger.log_event("irc", "connection_established", user=nick, server=host)
        return client

    def start(self) -> None:
        if self._reader_task is not None:
            return
        self._reader_task = asyncio.create_task(
            self._read_loop(), name=f"irc-reader-{self.nick}"
        )
        self._writer_task = asyncio.create_task(
            self._write_loop(), name=f"irc-writer-{self.nick}"
        )

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def writer_alive(self) -> bool:
        return self._writer_task is not None and not self._writer_task.done()

    # Outbound -------------------------------------------------------------

    async def send(self, line: str) -> None:
        """Queue one raw line; returns once the queue accepted it.

        Suspends while the outbound queue is full.

        Raises:
            SendError: if the pipeline is closed or the writer has stopped,
                including while this call was waiting for queue space.
        """
        if self._closed or self._writer_stopped.is_set() or not self.writer_alive:
            raise SendError("connection is closed", data={"line": line})
        try:
            self._outbound.put_nowait(line)
            return
        except asyncio.QueueFull:
            pass

        put = asyncio.ensure_future(self._outbound.put(line))
        stopped = asyncio.ensure_future(self._writer_stopped.wait())
        try:
            await asyncio.wait({put, stopped}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in (put, stopped):
                if not waiter.done():
                    waiter.cancel()
        if not (put.done() and not put.cancelled()):
            raise SendError("connection closed while sending", data={"line": line})

    async def pong(self, token: str | None = None) -> None:
        await self.send("PONG" if token is None else f"PONG :{token}")

    async def privmsg(self, target: str, text: str) -> None:
        await self.send(f"PRIVMSG {target} :{text}")

    async def join(self, channel: str) -> None:
        await self.send(f"JOIN {channel}")

    async def names(self, channel: str) -> None:
        await self.send(f"NAMES {channel}")

    async def _write_line(self, line: str) -> None:
        # Embedded line breaks would start a second protocol line.
        line = _LINE_BREAKS.sub(" ", line.rstrip("\r\n")) + LINE_TERMINATOR
        self._writer.write(line.encode(LINE_ENCODING))
        await self._writer.drain()
        logger.log_event(
            "irc", "send", level=logging.DEBUG, user=self.nick, raw=line.rstrip()
        )

    async def _write_loop(self) -> None:
        try:
            await self._write_line(f"NICK {self.nick}")
            await self._write_line(f"USER {self.user} 0 * :{self.user}")
            while True:
                line = await self._outbound.get()
                if line is _EOF:
                    break
                await self._write_line(line)
        except OSError as e:
            logger.log_event(
                "irc", "write_failed", level=logging.WARNING, user=self.nick, error=str(e)
            )
        finally:
            self._writer_stopped.set()
            logger.log_event("irc", "writer_stopped", level=logging.DEBUG, user=self.nick)

    # Inbound --------------------------------------------------------------

    async def receive(self) -> Msg | None:
        """Return the next parsed message, or ``None`` at end of stream.

        Raises:
            ParseError: if the next line is malformed. The line is consumed,
                so the following call moves on to the next one.
        """
        if self._eof:
            return None
        if self._reader_done and self._inbound.empty():
            self._eof = True
            return None
        line = await self._inbound.get()
        if line is _EOF:
            self._eof = True
            return None
        logger.log_event("irc", "raw", level=logging.DEBUG, user=self.nick, raw=line)
        return parse_line(line, datetime.now().astimezone())

    async def _read_loop(self) -> None:
        try:
            while True:
                data = await self._reader.readline()
                if not data:
                    logger.log_event("irc", "server_eof", level=logging.WARNING, user=self.nick)
                    break
                line = data.decode(LINE_ENCODING, errors="replace").rstrip("\r\n")
                await self._inbound.put(line)
        except (OSError, ValueError, asyncio.IncompleteReadError) as e:
            logger.log_event(
                "irc", "read_failed", level=logging.WARNING, user=self.nick, error=str(e)
            )
        finally:
            self._reader_done = True
            # A full queue still ends the stream: receive() checks _reader_done.
            with suppress(asyncio.QueueFull):
                self._inbound.put_nowait(_EOF)

    # Teardown -------------------------------------------------------------

    async def close(self) -> None:
        """Stop both tasks and close the transport. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._writer_stopped.set()
        for task in (self._writer_task, self._reader_task):
            if task is not None and not task.done():
                task.cancel()
        for task in (self._writer_task, self._reader_task):
            if task is not None:
                with suppress(asyncio.CancelledError):
                    await task
        self._writer.close()
        with suppress(OSError):
            await self._writer.wait_closed()
        logger.log_event("irc", "disconnected", level=logging.INFO, user=self.nick)


async def connect(server: str, nick: str, user: str) -> IRCClient:
    return await IRCClient.connect(server, nick, user)


__all__ = ["IRCClient", "connect", "split_address"]
