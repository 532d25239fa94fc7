"""
Configuration file watcher for runtime config changes
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..errors.internal import ConfigError
from ..logs.logger import logger
from .loader import build_config, load_raw
from .model import BotConfig


class ConfigFileHandler(FileSystemEventHandler):
    """File system event handler for config file changes"""

    def __init__(self, config_file: str, watcher: ConfigWatcher) -> None:
        super().__init__()
        self.config_file = os.path.abspath(config_file)
        self.watcher = watcher
        self.last_modified = 0.0

    def _should_process(self) -> bool:
        """Check if the config file's mtime advanced since last processed."""
        try:
            mtime = os.path.getmtime(self.config_file)
        except FileNotFoundError:
            return False
        if mtime <= self.last_modified:
            return False
        self.last_modified = mtime
        return True

    def _handle_event(self, src_path: str | bytes) -> None:
        if isinstance(src_path, bytes):
            src_path = os.fsdecode(src_path)
        if os.path.abspath(src_path) != self.config_file:
            return
        if self._should_process():
            self.watcher.reload()

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle_event(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle_event(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # For moved events, prefer destination path
        dest = getattr(event, "dest_path", None) or event.src_path
        self._handle_event(dest)


class ConfigWatcher:
    """Watches the config file and hands each valid new config to a callback.

    The callback runs on the watchdog observer thread; callers that touch
    asyncio objects must hop back onto their loop themselves.
    """

    def __init__(
        self,
        config_file: str,
        on_change: Callable[[BotConfig], Any],
        overrides: Mapping[str, Any] | None = None,
    ) -> None:
        self.config_file = config_file
        self.on_change = on_change
        self.overrides = dict(overrides or {})
        self.observer: Any | None = None
        self.running = False

    def start(self) -> None:
        """Start watching the config file"""
        if self.running:
            return
        config_dir = os.path.dirname(os.path.abspath(self.config_file))
        if not os.path.isdir(config_dir):
            logger.log_event(
                "config_watch", "dir_missing", level=logging.WARNING, path=config_dir
            )
            return
        try:
            observer = Observer()
            observer.schedule(
                ConfigFileHandler(self.config_file, self), config_dir, recursive=False
            )
            observer.start()
        except OSError as e:
            logger.log_event(
                "config_watch", "start_failed", level=logging.ERROR, error=str(e)
            )
            return
        self.observer = observer
        self.running = True
        logger.log_event("config_watch", "start", path=self.config_file)

    def stop(self) -> None:
        """Stop watching the config file"""
        obs = self.observer
        if self.running and obs is not None:
            try:
                obs.stop()
                obs.join()
            finally:
                self.running = False
                self.observer = None
                logger.log_event("config_watch", "stopped")

    def reload(self) -> BotConfig | None:
        """Re-read the file; invalid content is logged and ignored."""
        try:
            config = build_config(load_raw(self.config_file), self.overrides)
        except ConfigError as e:
            logger.log_event(
                "config_watch", "invalid", level=logging.ERROR, error=str(e)
            )
            return None
        logger.log_event(
            "config_watch", "reloaded", channel_count=len(config.channels)
        )
        self.on_change(config)
        return config


__all__ = ["ConfigFileHandler", "ConfigWatcher"]
