# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for text.py whitespace helpers."""

from __future__ import annotations

from distillable.text import collapse_whitespace, java_trim, utf16_length


class TestJavaTrim:
    def test_strips_spaces_and_control_chars(self):
        assert java_trim("\x00 \t/page/2 \r\n\x1f") == "/page/2"

    def test_keeps_no_break_space(self):
        assert java_trim(" next ") == " next "

    def test_interior_untouched(self):
        assert java_trim("  a  b  ") == "a  b"

    def test_empty(self):
        assert java_trim("") == ""


class TestCollapseWhitespace:
    def test_collapses_runs(self):
        assert collapse_whitespace("  Hello \t\n  world  ") == "Hello world"

    def test_no_break_space_is_not_whitespace(self):
        assert collapse_whitespace("a  b") == "a  b"

    def test_unicode_spaces_collapse(self):
        assert collapse_whitespace("a 　b") == "a b"

    def test_all_whitespace_becomes_empty(self):
        assert collapse_whitespace(" \n\t ") == ""


class TestUtf16Length:
    def test_bmp_text(self):
        assert utf16_length("héllo 中文") == 8

    def test_astral_counts_twice(self):
        assert utf16_length("a\U0001f600b") == 4

    def test_empty(self):
        assert utf16_length("") == 0
