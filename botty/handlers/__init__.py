"""Bundled bot personality handlers and the default chain."""

from __future__ import annotations

from ..bot.handler import Handler
from ..config.model import BotConfig
from .hello import HelloHandler
from .names import NamesHandler
from .ping import PingHandler
from .reply import ReplyHandler
from .rumors import RumorsHandler, RumorStore
from .score import ScoreHandler
from .seen import SeenHandler
from .welcome import WelcomeHandler


def default_handlers(
    config: BotConfig, rumor_store: RumorStore | None = None
) -> list[Handler]:
    """Build the standard chain in dispatch order.

    Seen runs before the handlers that break so every chat line is recorded.
    """
    handlers: list[Handler] = [
        PingHandler(),
        WelcomeHandler(),
        NamesHandler(),
        SeenHandler(),
        ScoreHandler(),
    ]
    if rumor_store is not None:
        handlers.append(RumorsHandler(rumor_store, config.nick))
    handlers.extend([ReplyHandler(), HelloHandler()])
    return handlers


__all__ = [
    "HelloHandler",
    "NamesHandler",
    "PingHandler",
    "ReplyHandler",
    "RumorStore",
    "RumorsHandler",
    "ScoreHandler",
    "SeenHandler",
    "WelcomeHandler",
    "default_handlers",
]
