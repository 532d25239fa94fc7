"""Responds when someone mentions the bot by name."""

from __future__ import annotations

from ..bot.handler import Context, Flow, PrivmsgHandler
from ..irc.models import reply_target_for


class ReplyHandler(PrivmsgHandler):
    async def handle_privmsg(
        self, ctx: Context, nick: str, target: str, text: str
    ) -> Flow:
        own = ctx.client.nick
        if nick == own or own.lower() not in text.lower():
            return Flow.CONTINUE
        reply_to = reply_target_for(target, nick)
        if reply_to:
            await ctx.reply(reply_to, f"where is {own}, where is {own}")
        return Flow.CONTINUE
