#!/usr/bin/env python3
"""
Main entry point for botty
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from .bot.runner import BotRunner
from .config import config_path_from_env, load_config
from .errors.handling import log_error
from .errors.internal import ConfigError, ConnectError
from .logs.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="botty", description="Minimal IRC bot with a pluggable handler chain."
    )
    parser.add_argument("-n", "--nick", help="nickname to register")
    parser.add_argument("-u", "--user", help="username for the USER line")
    parser.add_argument("-s", "--server", help="server address as host:port")
    parser.add_argument(
        "-c",
        "--channel",
        dest="channels",
        action="append",
        help="channel to join after the MOTD (repeatable)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="JSON config file (default: $BOTTY_CONF_FILE or botty.conf)",
    )
    parser.add_argument(
        "--no-watch",
        action="store_true",
        help="do not reload the channel list when the config file changes",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log at DEBUG level"
    )
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "nick": args.nick,
        "user": args.user,
        "server": args.server,
        "channels": args.channels,
    }


async def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logger.set_level(logging.DEBUG)
    config_file = args.config or config_path_from_env()
    overrides = overrides_from_args(args)
    config = load_config(config_file, overrides)
    if config.log_file:
        logger.add_file_handler(config.log_file)

    logger.log_event(
        "app",
        "start",
        user=config.nick,
        server=config.server,
        channels=",".join(config.channels),
    )
    runner = BotRunner(config)
    try:
        if not args.no_watch and os.path.exists(config_file):
            runner.watch_config(config_file, overrides)
        await runner.run_forever()
    finally:
        await runner.close()
        logger.log_event("app", "shutdown", user=config.nick)


def run(argv: Sequence[str] | None = None) -> None:
    """Synchronous entry point for the application."""
    try:
        asyncio.run(main(argv))
    except KeyboardInterrupt:
        logging.getLogger("botty").info("Interrupted by user")
        sys.exit(0)
    except ConfigError as e:
        log_error("Configuration error", e)
        sys.exit(2)
    except ConnectError as e:
        log_error("Giving up connecting", e)
        sys.exit(1)


if __name__ == "__main__":
    run()
