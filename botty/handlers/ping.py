"""Answers server keepalives."""

from __future__ import annotations

import logging

from ..bot.handler import Context, Flow, Handler
from ..errors.internal import SendError
from ..irc.models import Msg, Ping
from ..logs.logger import logger


class PingHandler(Handler):
    async def handle(self, ctx: Context, msg: Msg) -> Flow:
        if not isinstance(msg.command, Ping):
            return Flow.CONTINUE
        try:
            await ctx.client.pong(msg.command.token)
        except SendError as e:
            logger.log_event(
                "irc", "pong_failed", level=logging.WARNING, user=ctx.client.nick, error=str(e)
            )
        return Flow.BREAK
