"""Joins the configured channels once the server has sent its MOTD."""

from __future__ import annotations

from ..bot.handler import Context, Flow, Handler
from ..constants import ERR_NOMOTD, RPL_ENDOFMOTD
from ..errors.internal import SendError
from ..irc.models import Msg, Numeric
from ..logs.logger import logger

WELCOME_CODES = frozenset({RPL_ENDOFMOTD, ERR_NOMOTD})


class WelcomeHandler(Handler):
    async def handle(self, ctx: Context, msg: Msg) -> Flow:
        command = msg.command
        if not isinstance(command, Numeric) or command.code not in WELCOME_CODES:
            return Flow.CONTINUE

        channels = await ctx.with_state(lambda state: list(state.channels))
        for channel in channels:
            try:
                await ctx.client.join(channel)
            except SendError:
                logger.log_event("irc", "join_failed", user=ctx.client.nick, channel=channel)
                break
            logger.log_event("irc", "join_sent", user=ctx.client.nick, channel=channel)
        return Flow.BREAK
