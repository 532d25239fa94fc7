"""Configuration package exports."""

from .loader import build_config, config_path_from_env, load_config, load_raw
from .model import BotConfig, normalize_channels
from .watcher import ConfigWatcher

__all__ = [
    "BotConfig",
    "ConfigWatcher",
    "build_config",
    "config_path_from_env",
    "load_config",
    "load_raw",
    "normalize_channels",
]
