# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the distillable CLI: in-process via main(argv), browser stubbed out."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from distillable import cli
from distillable.errors import BrowserError
from tests._dom_helpers import html, para


@pytest.fixture(autouse=True)
def _reset_logging():
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(
        html(
            para(300) + '<a href="/news/story-p2.html">Next</a>',
            head="<title>Static Story</title>",
        ),
        encoding="utf-8",
    )
    return path


class TestStatic:
    def test_prints_feature_json(self, page_file, capsys):
        cli.main(["features", "--html", str(page_file), "--static", "--base-url", "http://example.com/news/story.html"])
        out = json.loads(capsys.readouterr().out)
        assert out["title"] == "Static Story"
        assert out["numPPRE"] == 1
        assert out["mozScore"] == pytest.approx(160**0.5)
        assert out["nextPageLink"] == "http://example.com/news/story-p2.html"
        assert out["bodyWidth"] == 0

    def test_output_file(self, page_file, tmp_path, capsys):
        target = tmp_path / "features.json"
        cli.main(["features", "--html", str(page_file), "--static", "-o", str(target)])
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Features saved" in captured.err
        assert json.loads(target.read_text(encoding="utf-8"))["numPPRE"] == 1

    def test_static_requires_html(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["features", "--url", "https://example.com/", "--static"])
        assert exc_info.value.code == 1
        assert "--static requires --html" in capsys.readouterr().err

    def test_static_rejects_highlight(self, page_file, monkeypatch, capsys):
        called = []
        monkeypatch.setattr(cli, "_features_static", lambda *a: called.append(a))
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["features", "--html", str(page_file), "--static", "--highlight"])
        assert exc_info.value.code == 1
        assert "--highlight needs a rendered page" in capsys.readouterr().err
        assert called == []

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["features", "--html", str(tmp_path / "nope.html"), "--static"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_source_required(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["features"])
        assert exc_info.value.code == 2


class TestLive:
    def test_url_uses_browser(self, monkeypatch, capsys):
        calls = []

        async def fake_live(settings, *, url=None, html=None, headless=True):
            calls.append((settings.highlight, url, html, headless))
            return {"url": url, "numAnchors": 4}

        monkeypatch.setattr(cli, "_features_live", fake_live)
        cli.main(["features", "--url", "https://example.com/story", "--highlight"])
        out = json.loads(capsys.readouterr().out)
        assert out["url"] == "https://example.com/story"
        assert out["numAnchors"] == 4
        assert out["mozScore"] == 0.0
        assert calls == [(True, "https://example.com/story", None, True)]

    def test_highlight_from_environment(self, monkeypatch, capsys):
        seen = []

        async def fake_live(settings, *, url=None, html=None, headless=True):
            seen.append(settings.highlight)
            return {}

        monkeypatch.setenv("DISTILLABLE_HIGHLIGHT", "1")
        monkeypatch.setattr(cli, "_features_live", fake_live)
        cli.main(["features", "--url", "https://example.com/"])
        assert seen == [True]

    def test_html_file_rendered_headed(self, page_file, monkeypatch, capsys):
        seen = []

        async def fake_live(settings, *, url=None, html=None, headless=True):
            seen.append((url, "Static Story" in (html or ""), headless))
            return {}

        monkeypatch.setattr(cli, "_features_live", fake_live)
        cli.main(["features", "--html", str(page_file), "--headed"])
        assert seen == [(None, True, False)]

    def test_browser_error_exits_1(self, monkeypatch, capsys):
        async def fake_live(settings, **kwargs):
            raise BrowserError("Chromium is not installed. Please run: playwright install chromium")

        monkeypatch.setattr(cli, "_features_live", fake_live)
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["features", "--url", "https://example.com/"])
        assert exc_info.value.code == 1
        assert "playwright install chromium" in capsys.readouterr().err
