from __future__ import annotations

from ..bot.handler import Context, Flow, PrivmsgHandler
from ..irc.models import reply_target_for


class HelloHandler(PrivmsgHandler):
    async def handle_privmsg(
        self, ctx: Context, nick: str, target: str, text: str
    ) -> Flow:
        if text.strip() != "!hello":
            return Flow.CONTINUE
        reply_to = reply_target_for(target, nick)
        if reply_to:
            await ctx.reply(reply_to, f"Hello! You said: {text.strip()}")
        return Flow.BREAK
