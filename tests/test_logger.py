"""
Tests for the structured event logger and its template catalog.
"""

import logging

from botty.logs import EVENT_TEMPLATES, BotLogger, reload_event_templates, render_event
from botty.logs import logger as global_logger
from botty.logs.logger import SimpleFormatter


def _extract_fields(template: str) -> set[str]:
    fields: set[str] = set()
    buf = ""
    in_brace = False
    for ch in template:
        if ch == "{" and not in_brace:
            in_brace = True
            buf = ""
        elif ch == "}" and in_brace:
            in_brace = False
            core = buf.split(":", 1)[0].split(".", 1)[0]
            if core:
                fields.add(core)
        elif in_brace:
            buf += ch
    return fields


class TestSimpleFormatter:
    def test_plain_output(self):
        formatter = SimpleFormatter()
        formatter.enable_color = False
        record = logging.LogRecord("t", logging.WARNING, "", 0, "hello", (), None)
        assert formatter.format(record) == "WARNING  hello"

    def test_colored_output(self):
        formatter = SimpleFormatter()
        formatter.enable_color = True
        record = logging.LogRecord("t", logging.ERROR, "", 0, "boom", (), None)
        formatted = formatter.format(record)
        assert formatted.startswith("\x1b[31m")
        assert "boom" in formatted


class TestBotLogger:
    def test_template_rendered_with_prefix(self, caplog, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        caplog.set_level(logging.INFO)
        global_logger.log_event("app", "start", user="botty", server="irc.test:6667")
        assert any(
            "[botty" in r.message and "Starting botty on irc.test:6667" in r.message
            for r in caplog.records
        )

    def test_channel_in_prefix(self, caplog, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        caplog.set_level(logging.INFO)
        global_logger.log_event("names", "joined", user="alice", channel="#rust")
        assert any("[alice#rust" in r.message for r in caplog.records)

    def test_chat_lines_are_marked(self, caplog, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        caplog.set_level(logging.INFO)
        global_logger.log_event("irc", "privmsg", user="alice", channel="#c", message="hi")
        assert any(r.message.endswith("💬 hi") for r in caplog.records)

    def test_unknown_event_marks_derived(self, caplog):
        caplog.set_level(logging.INFO)
        global_logger.log_event("nonexistent_domain", "some_event", foo=1)
        assert any("nonexistent domain: some event" in r.message for r in caplog.records)

    def test_human_text_wins(self, caplog):
        caplog.set_level(logging.INFO)
        global_logger.log_event("app", "start", human="custom text", server="x")
        assert any("custom text" in r.message for r in caplog.records)

    def test_missing_template_field_falls_back_to_raw_template(self, caplog):
        caplog.set_level(logging.INFO)
        global_logger.log_event("app", "start")
        assert any("{server}" in r.message for r in caplog.records)

    def test_debug_mode_appends_fields(self, caplog, monkeypatch):
        monkeypatch.setenv("DEBUG", "1")
        caplog.set_level(logging.INFO)
        global_logger.log_event("runner", "session_end", uptime="5s", extra="yes")
        msgs = [r.message for r in caplog.records]
        assert any(m.startswith("runner_session_end") and "extra=yes" in m for m in msgs)

    def test_level_filtering(self, caplog):
        caplog.set_level(logging.DEBUG)
        quiet = BotLogger("botty.test_quiet")
        quiet.set_level(logging.WARNING)
        quiet.log_event("bot", "chain_break", level=logging.DEBUG, handler="X")
        assert not any("stopped the chain" in r.message for r in caplog.records)

    def test_file_handler(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DEBUG", raising=False)
        log_file = tmp_path / "botty.log"
        file_logger = BotLogger("botty.test_file", log_file=str(log_file))
        file_logger.log_event("app", "shutdown")
        for handler in file_logger.logger.handlers:
            handler.flush()
        assert "Application shutdown complete" in log_file.read_text(encoding="utf-8")
        for handler in list(file_logger.logger.handlers):
            handler.close()
            file_logger.logger.removeHandler(handler)

    def test_prefix_is_padded_and_truncated(self):
        assert BotLogger._build_prefix(None, None) == f"[{'system'.ljust(24)}]"
        assert BotLogger._build_prefix("x" * 40, None) == f"[{'x' * 24}]"


class TestEventCatalog:
    def test_templates_loaded(self):
        reload_event_templates()
        from botty.logs import event_catalog

        assert ("app", "start") in event_catalog.EVENT_TEMPLATES

    def test_render_event(self):
        assert render_event("runner", "session_end", {"uptime": "5s"}) == "Session ended after 5s"
        assert render_event("runner", "session_end", {}) == "Session ended after {uptime}"
        assert render_event("nope", "nothing", {}) is None

    def test_templates_renderable(self):
        failures = []
        for (domain, action), template in EVENT_TEMPLATES.items():
            dummy = dict.fromkeys(_extract_fields(template), "x")
            try:
                template.format(**dummy)
            except (KeyError, IndexError, ValueError) as e:
                failures.append((domain, action, str(e)))
        assert not failures

    def test_keys_lowercase(self):
        for domain, action in EVENT_TEMPLATES:
            assert domain == domain.lower()
            assert action == action.lower()
