"""Configuration loading utilities."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..constants import DEFAULT_CONF_FILE
from ..errors.internal import ConfigError
from ..logs.logger import logger
from .model import BotConfig


def config_path_from_env() -> str:
    return os.environ.get("BOTTY_CONF_FILE", DEFAULT_CONF_FILE)


def load_raw(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read the JSON config file; a missing file yields an empty mapping.

    Raises:
        ConfigError: if the file exists but is not a JSON object.
    """
    p = Path(path)
    try:
        with p.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.log_event("config", "file_missing", level=logging.DEBUG, path=str(p))
        return {}
    except (OSError, ValueError) as e:
        raise ConfigError(f"cannot read {p}: {e}", data={"path": str(p)}) from e
    if not isinstance(data, dict):
        raise ConfigError(f"{p} must contain a JSON object", data={"path": str(p)})
    return data


def build_config(
    raw: Mapping[str, Any], overrides: Mapping[str, Any] | None = None
) -> BotConfig:
    """Merge ``overrides`` (``None`` values ignored) over ``raw`` and validate.

    Raises:
        ConfigError: on validation failure.
    """
    merged = dict(raw)
    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value
    try:
        return BotConfig.from_dict(merged)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e


def load_config(
    path: str | os.PathLike[str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> BotConfig:
    path = path or config_path_from_env()
    config = build_config(load_raw(path), overrides)
    logger.log_event(
        "config",
        "loaded",
        path=str(path),
        server=config.server,
        channel_count=len(config.channels),
    )
    return config


__all__ = ["build_config", "config_path_from_env", "load_config", "load_raw"]
