"""Handler chain, dispatch context and shared state.

The runner lives in :mod:`botty.bot.runner` and is not re-exported here
because it depends on the bundled handlers, which depend on this package.
"""

from .core import Bot, BotBuilder  # noqa: F401
from .handler import Context, Flow, Handler, HandlerFn, PrivmsgHandler  # noqa: F401
from .state import SeenInfo, SharedState  # noqa: F401

__all__ = [
    "Bot",
    "BotBuilder",
    "Context",
    "Flow",
    "Handler",
    "HandlerFn",
    "PrivmsgHandler",
    "SeenInfo",
    "SharedState",
]
