"""Rumor mill: remembers what people tell the bot and repeats it on request.

``botty, alice likes rust`` stores a rumor, ``botty, rust?`` answers with a
random stored rumor mentioning the first word of the question.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import time

import aiosqlite

from ..bot.handler import Context, Flow, PrivmsgHandler
from ..irc.models import reply_target_for
from ..logs.logger import logger

CANNED_PREFIXES = (
    "rumor has it",
    "i heard that",
    "they say",
    "word on the street is",
    "people are saying",
)
FALLBACK_PREFIX = "i may be broken but i know for sure that"
ACK = "Good to know!"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS rumors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nick TEXT NOT NULL,
    channel TEXT NOT NULL,
    message TEXT NOT NULL,
    ts INTEGER NOT NULL
)
"""


def strip_bot_prefix(bot_name: str, message: str) -> str | None:
    """Return the message without a leading ``<bot_name>,`` or ``<bot_name>:``."""
    lowered = message.lower()
    name = bot_name.lower()
    if lowered.startswith(f"{name},") or lowered.startswith(f"{name}:"):
        return message[len(bot_name) + 1 :].strip()
    return None


def extract_topic(message: str) -> str | None:
    """First word of a question (a message ending in ``?``), else ``None``."""
    trimmed = message.strip()
    if not trimmed.endswith("?"):
        return None
    words = trimmed.rstrip("?").split()
    return words[0] if words else None


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class RumorStore:
    """SQLite-backed rumor storage on one lazily opened aiosqlite connection."""

    def __init__(self, db_path: str = "rumors.db") -> None:
        self.db_path = db_path
        self.conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def open(self) -> aiosqlite.Connection:
        async with self._lock:
            if self.conn is None:
                conn = await aiosqlite.connect(self.db_path)
                try:
                    await conn.execute(_SCHEMA)
                    await conn.commit()
                except aiosqlite.Error:
                    await conn.close()
                    raise
                self.conn = conn
                logger.log_event("rumors", "db_open", level=logging.DEBUG, path=self.db_path)
            return self.conn

    async def store(self, nick: str, channel: str, rumor: str) -> None:
        conn = await self.open()
        await conn.execute(
            "INSERT INTO rumors (nick, channel, message, ts) VALUES (?, ?, ?, ?)",
            (nick, channel, rumor, int(time.time())),
        )
        await conn.commit()

    async def fetch_random(self, query: str) -> str | None:
        conn = await self.open()
        async with conn.execute(
            "SELECT message FROM rumors WHERE message LIKE ? ESCAPE '\\' "
            "ORDER BY RANDOM() LIMIT 1",
            (f"%{_escape_like(query)}%",),
        ) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else None

    async def close(self) -> None:
        async with self._lock:
            if self.conn is not None:
                await self.conn.close()
                self.conn = None


class RumorsHandler(PrivmsgHandler):
    def __init__(
        self,
        store: RumorStore,
        bot_name: str,
        prefixes: tuple[str, ...] = CANNED_PREFIXES,
    ) -> None:
        self.store = store
        self.bot_name = bot_name
        self.prefixes = prefixes
        self._random = secrets.SystemRandom()

    def random_prefix(self) -> str:
        if not self.prefixes:
            return FALLBACK_PREFIX
        return self._random.choice(self.prefixes)

    async def handle_privmsg(
        self, ctx: Context, nick: str, target: str, text: str
    ) -> Flow:
        stripped = strip_bot_prefix(self.bot_name, text)
        if stripped is None:
            return Flow.CONTINUE
        reply_to = reply_target_for(target, nick)

        topic = extract_topic(stripped)
        if topic is not None:
            try:
                rumor = await self.store.fetch_random(topic)
            except aiosqlite.Error as e:
                logger.log_event(
                    "rumors", "fetch_failed", level=logging.ERROR, user=nick, error=str(e)
                )
                return Flow.BREAK
            if rumor and reply_to:
                await ctx.reply(reply_to, f"{self.random_prefix()} {rumor}")
        elif stripped:
            try:
                await self.store.store(nick, target, stripped)
            except aiosqlite.Error as e:
                logger.log_event(
                    "rumors", "store_failed", level=logging.ERROR, user=nick, error=str(e)
                )
                return Flow.BREAK
            logger.log_event("rumors", "stored", level=logging.DEBUG, user=nick, channel=target)
            if reply_to:
                await ctx.reply(reply_to, ACK)
        return Flow.BREAK


__all__ = [
    "RumorStore",
    "RumorsHandler",
    "extract_topic",
    "strip_bot_prefix",
]
