"""
Tests for configuration model, loading and file watching.
"""

import json
import os
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from botty.config import (
    BotConfig,
    ConfigWatcher,
    build_config,
    config_path_from_env,
    load_config,
    load_raw,
    normalize_channels,
)
from botty.config.watcher import ConfigFileHandler
from botty.constants import DEFAULT_CONF_FILE, DEFAULT_SERVER, RECONNECT_DELAY
from botty.errors import ConfigError


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestNormalizeChannels:
    def test_adds_prefix_and_strips(self):
        assert normalize_channels(["rust", " #python ", "&local"]) == [
            "#rust",
            "#python",
            "&local",
        ]

    def test_dedupes_case_insensitively_keeping_order(self):
        assert normalize_channels(["#B", "#a", "#b", "A"]) == ["#B", "#a"]

    def test_skips_blank_and_non_string(self):
        assert normalize_channels(["", "  ", 3, "#ok"]) == ["#ok"]

    def test_rejects_non_list(self):
        with pytest.raises(ValueError):
            normalize_channels("#a")


class TestBotConfig:
    def test_defaults(self):
        config = BotConfig(nick="botty")
        assert config.server == DEFAULT_SERVER
        assert config.channels == []
        assert config.reconnect_delay == RECONNECT_DELAY
        assert config.max_reconnect_attempts is None
        assert config.username == "botty"

    def test_user_overrides_username(self):
        assert BotConfig(nick="botty", user="bot").username == "bot"

    @pytest.mark.parametrize("nick", ["", "two words", "a:b", "a!b", "x" * 31])
    def test_invalid_nick(self, nick):
        with pytest.raises(ValidationError):
            BotConfig(nick=nick)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            BotConfig(nick="botty", reconnect_delay=-1)

    def test_from_dict(self):
        config = BotConfig.from_dict({"nick": "botty", "channels": ["rust"]})
        assert config.channels == ["#rust"]
        assert config.user is None


class TestLoader:
    def test_config_path_from_env(self, monkeypatch):
        monkeypatch.delenv("BOTTY_CONF_FILE", raising=False)
        assert config_path_from_env() == DEFAULT_CONF_FILE
        monkeypatch.setenv("BOTTY_CONF_FILE", "/etc/botty.json")
        assert config_path_from_env() == "/etc/botty.json"

    def test_missing_file_is_empty(self, tmp_path):
        assert load_raw(tmp_path / "absent.conf") == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "botty.conf"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_raw(path)
        assert exc_info.value.data["path"] == str(path)

    def test_non_object_json(self, tmp_path):
        with pytest.raises(ConfigError):
            load_raw(_write(tmp_path / "botty.conf", ["#a"]))

    def test_overrides_win_and_none_ignored(self):
        config = build_config(
            {"nick": "fromfile", "server": "irc.file:6667"},
            {"nick": "fromcli", "server": None},
        )
        assert config.nick == "fromcli"
        assert config.server == "irc.file:6667"

    def test_validation_error_wrapped(self):
        with pytest.raises(ConfigError):
            build_config({})

    def test_load_config_from_env_path(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "botty.conf", {"nick": "botty", "channels": ["a", "b"]})
        monkeypatch.setenv("BOTTY_CONF_FILE", str(path))
        config = load_config()
        assert config.channels == ["#a", "#b"]


class TestConfigWatcher:
    def test_reload_invokes_callback(self, tmp_path):
        path = _write(tmp_path / "botty.conf", {"nick": "botty", "channels": ["#a"]})
        on_change = Mock()
        watcher = ConfigWatcher(str(path), on_change, overrides={"server": "irc.test"})

        config = watcher.reload()

        on_change.assert_called_once_with(config)
        assert config.channels == ["#a"]
        assert config.server == "irc.test"

    def test_reload_ignores_invalid_content(self, tmp_path):
        path = tmp_path / "botty.conf"
        path.write_text("{broken", encoding="utf-8")
        on_change = Mock()

        assert ConfigWatcher(str(path), on_change).reload() is None
        on_change.assert_not_called()

    def test_start_and_stop(self, tmp_path, monkeypatch):
        observer = Mock()
        monkeypatch.setattr("botty.config.watcher.Observer", Mock(return_value=observer))
        watcher = ConfigWatcher(str(tmp_path / "botty.conf"), Mock())

        watcher.start()
        assert watcher.running
        observer.schedule.assert_called_once()
        assert observer.schedule.call_args.args[1] == str(tmp_path)
        observer.start.assert_called_once()

        watcher.stop()
        assert not watcher.running
        observer.stop.assert_called_once()
        observer.join.assert_called_once()

    def test_start_without_directory(self, tmp_path, monkeypatch):
        factory = Mock()
        monkeypatch.setattr("botty.config.watcher.Observer", factory)
        watcher = ConfigWatcher(str(tmp_path / "missing" / "botty.conf"), Mock())

        watcher.start()

        assert not watcher.running
        factory.assert_not_called()


class TestConfigFileHandler:
    def test_only_watched_file_triggers_reload(self, tmp_path):
        path = _write(tmp_path / "botty.conf", {"nick": "botty"})
        other = _write(tmp_path / "other.conf", {"nick": "x"})
        watcher = Mock()
        handler = ConfigFileHandler(str(path), watcher)

        handler.on_modified(Mock(src_path=str(other)))
        watcher.reload.assert_not_called()

        handler.on_modified(Mock(src_path=str(path)))
        watcher.reload.assert_called_once()

    def test_unchanged_mtime_is_skipped(self, tmp_path):
        path = _write(tmp_path / "botty.conf", {"nick": "botty"})
        watcher = Mock()
        handler = ConfigFileHandler(str(path), watcher)

        handler.on_modified(Mock(src_path=str(path)))
        handler.on_modified(Mock(src_path=str(path)))

        assert watcher.reload.call_count == 1

    def test_moved_uses_destination(self, tmp_path):
        path = _write(tmp_path / "botty.conf", {"nick": "botty"})
        watcher = Mock()
        handler = ConfigFileHandler(str(path), watcher)

        handler.on_moved(Mock(src_path=str(tmp_path / "tmp123"), dest_path=str(path)))

        watcher.reload.assert_called_once()

    def test_quick_successive_saves_each_reload(self, tmp_path):
        path = _write(tmp_path / "botty.conf", {"channels": ["#one"]})
        seen = []
        watcher = ConfigWatcher(str(path), lambda config: seen.append(config.channels))
        handler = ConfigFileHandler(str(path), watcher)
        base = os.path.getmtime(path)

        os.utime(path, (base + 1, base + 1))
        handler.on_modified(Mock(src_path=str(path)))

        _write(path, {"channels": ["#one", "#two"]})
        os.utime(path, (base + 1.01, base + 1.01))
        handler.on_modified(Mock(src_path=str(path)))

        assert seen == [["#one"], ["#one", "#two"]]
