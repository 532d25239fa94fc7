"""Keeps the roster of nicks seen in joined channels."""

from __future__ import annotations

import logging

from ..bot.handler import Context, Flow, Handler
from ..constants import RPL_NAMREPLY
from ..irc.models import Join, Msg, Numeric, Part
from ..logs.logger import logger

# Channel membership prefixes that may precede a nick in a NAMES reply.
MODE_PREFIXES = "@+%&~"


def parse_names(trailing: str, own_nick: str) -> list[str]:
    names: list[str] = []
    for token in trailing.split():
        nick = token.lstrip(MODE_PREFIXES)
        if nick and nick != own_nick and nick not in names:
            names.append(nick)
    return names


class NamesHandler(Handler):
    async def handle(self, ctx: Context, msg: Msg) -> Flow:
        command = msg.command
        own_nick = ctx.client.nick
        if isinstance(command, Numeric):
            if command.code == RPL_NAMREPLY and command.trailing:
                names = parse_names(command.trailing, own_nick)
                async with ctx.locked_state() as state:
                    for nick in names:
                        state.add_name(nick)
                logger.log_event(
                    "names",
                    "reply",
                    level=logging.DEBUG,
                    user=own_nick,
                    count=len(names),
                )
            return Flow.CONTINUE

        nick = msg.nick()
        if nick is None or nick == own_nick:
            return Flow.CONTINUE
        if isinstance(command, Join):
            await ctx.with_state(lambda state: state.add_name(nick))
            logger.log_event("names", "joined", user=nick, channel=command.channel)
        elif isinstance(command, Part):
            await ctx.with_state(lambda state: state.remove_name(nick))
            logger.log_event("names", "left", user=nick, channel=command.channel)
        return Flow.CONTINUE
