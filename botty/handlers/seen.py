"""``!seen <nick>``: when a nick last spoke and what they said."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from ..bot.handler import Context, Flow, PrivmsgHandler
from ..bot.state import SharedState
from ..irc.models import reply_target_for
from ..utils.helpers import format_elapsed

COMMAND = "!seen"


def _local_now() -> datetime:
    return datetime.now().astimezone()


def format_seen_response(state: SharedState, target_nick: str, now: datetime) -> str:
    info = state.seen.get(target_nick)
    if info is None:
        return f"I have not seen {target_nick}"
    ago = format_elapsed(info.last_seen, now)
    return f"{target_nick} was last seen {ago} ago saying: {info.message}"


class SeenHandler(PrivmsgHandler):
    def __init__(self, clock: Callable[[], datetime] = _local_now) -> None:
        self.clock = clock

    async def handle_privmsg(
        self, ctx: Context, nick: str, target: str, text: str
    ) -> Flow:
        now = self.clock()
        parts = text.split()
        if len(parts) >= 2 and parts[0].lower() == COMMAND:
            target_nick = parts[1]
            response = await ctx.with_state(
                lambda state: format_seen_response(state, target_nick, now)
            )
            reply_to = reply_target_for(target, nick)
            if reply_to:
                await ctx.reply(reply_to, response)

        await ctx.with_state(lambda state: state.update_seen(nick, text, now))
        return Flow.CONTINUE
