# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for distillable.logging_config: structlog + stdlib bridge."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest
import structlog

from distillable.config import Settings
from distillable.logging_config import configure, configure_cli, resolve_level


@pytest.fixture(autouse=True)
def _reset_logging():
    """Ensure clean logging state before/after each test."""
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()


class TestConsoleRenderer:
    def test_single_stderr_handler(self):
        configure(json_output=False)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr

    def test_human_readable(self, capsys):
        configure(json_output=False)
        logging.getLogger("distillable.features").info("extracted features")
        captured = capsys.readouterr()
        assert "extracted features" in captured.err
        assert not captured.err.strip().startswith("{")

    def test_stdout_stays_clean(self, capsys):
        configure(json_output=False)
        logging.getLogger("distillable.capture").warning("capture slow")
        assert capsys.readouterr().out == ""


class TestJSONRenderer:
    def test_valid_json_with_logger_name(self, capsys):
        configure(json_output=True)
        logging.getLogger("distillable.paging").info("paging link found")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "paging link found"
        assert parsed["logger"] == "distillable.paging"
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_format_args_interpolated(self, capsys):
        configure(json_output=True)
        logging.getLogger("distillable.features").warning("Feature %s failed, using default", "mozScore")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "Feature mozScore failed, using default"

    def test_contextvars_in_output(self, capsys):
        configure(json_output=True)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(url="https://example.com/story")
        try:
            structlog.get_logger("distillable.cli").info("ctx test")
            parsed = json.loads(capsys.readouterr().err.strip())
            assert parsed["url"] == "https://example.com/story"
        finally:
            structlog.contextvars.clear_contextvars()


class TestLogLevel:
    def test_default_is_info(self):
        configure()
        assert logging.getLogger().level == logging.INFO

    def test_custom_level_case_insensitive(self):
        configure(level="debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_invalid_level_falls_back_to_info(self):
        configure(level="NONEXISTENT")
        assert logging.getLogger().level == logging.INFO

    def test_no_handler_stacking(self):
        configure(json_output=False)
        configure(json_output=True)
        configure(json_output=False)
        assert len(logging.getLogger().handlers) == 1

    @pytest.mark.parametrize(
        ("kwargs", "expected"),
        [
            ({}, logging.INFO),
            ({"fallback": "warning"}, logging.WARNING),
            ({"explicit": "error", "fallback": "warning"}, logging.ERROR),
            ({"verbose": True, "explicit": "error"}, logging.DEBUG),
            ({"explicit": "loud"}, logging.INFO),
            ({"explicit": "", "fallback": ""}, logging.INFO),
        ],
    )
    def test_resolve_level_precedence(self, kwargs, expected):
        assert resolve_level(**kwargs) == expected

    def test_numeric_level_accepted(self):
        configure(level=logging.WARNING)
        assert logging.getLogger().level == logging.WARNING


class TestStream:
    def test_custom_stream(self, capsys):
        buf = io.StringIO()
        configure(json_output=True, stream=buf)
        logging.getLogger("distillable.density").info("scored")
        assert json.loads(buf.getvalue().strip())["event"] == "scored"
        assert capsys.readouterr().err == ""


class TestConfigureCli:
    def test_settings_used_without_flags(self, capsys):
        level = configure_cli(Settings(log_level="WARNING", json_logs=True))
        assert level == logging.WARNING
        assert logging.getLogger().level == logging.WARNING
        logging.getLogger("distillable.cli").warning("from settings")
        assert json.loads(capsys.readouterr().err.strip())["event"] == "from settings"

    def test_flags_override_settings(self):
        assert configure_cli(Settings(log_level="ERROR"), log_level="info") == logging.INFO
        assert configure_cli(Settings(log_level="ERROR"), verbose=True) == logging.DEBUG
