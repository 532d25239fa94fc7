"""``nick++`` / ``nick--`` karma in the configured channels."""

from __future__ import annotations

from ..bot.handler import Context, Flow, PrivmsgHandler
from ..irc.parser import split_ascii_words


def parse_score_delta(message: str) -> tuple[str, int] | None:
    """Return ``(nick, +1/-1)`` for the first ``nick++`` or ``nick--`` token."""
    for token in split_ascii_words(message):
        for marker, delta in (("++", 1), ("--", -1)):
            nick, sep, _ = token.partition(marker)
            if sep and nick:
                return nick, delta
    return None


class ScoreHandler(PrivmsgHandler):
    async def handle_privmsg(
        self, ctx: Context, nick: str, target: str, text: str
    ) -> Flow:
        in_channel = await ctx.with_state(lambda state: state.has_channel(target))
        if not in_channel:
            return Flow.CONTINUE

        delta = parse_score_delta(text)
        if delta is None:
            return Flow.CONTINUE
        who, amount = delta
        new_score = await ctx.with_state(lambda state: state.add_to_score(who, amount))
        await ctx.reply(target, f"{who}'s score is now {new_score}")
        return Flow.BREAK
