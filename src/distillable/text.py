# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""String helpers shared by the scorers.

Whitespace follows Java's ``Character.isWhitespace`` ranges rather than
``str.isspace``: no-break spaces (U+00A0, U+2007, U+202F) are *not*
whitespace, so ``&nbsp;``-padded text keeps its length.
"""

from __future__ import annotations

import re

_WHITESPACE_RANGES: tuple[tuple[int, int], ...] = (
    (0x0009, 0x000D),
    (0x001C, 0x0020),
    (0x1680, 0x1680),
    (0x180E, 0x180E),
    (0x2000, 0x2006),
    (0x2028, 0x2029),
    (0x205F, 0x205F),
    (0x3000, 0x3000),
)

_WHITESPACE_CHARS = "".join(chr(c) for lo, hi in _WHITESPACE_RANGES for c in range(lo, hi + 1))
_WHITESPACE_RUN_RE = re.compile(f"[{re.escape(_WHITESPACE_CHARS)}]+")

# java.lang.String.trim(): every code point <= U+0020
_JAVA_TRIM_CHARS = "".join(chr(c) for c in range(0x21))


def utf16_length(s: str) -> int:
    """Length in UTF-16 code units, as DOM and Java strings report it."""
    return len(s) + sum(1 for ch in s if ord(ch) > 0xFFFF)


def java_trim(s: str) -> str:
    return s.strip(_JAVA_TRIM_CHARS)


def collapse_whitespace(s: str) -> str:
    """Collapse whitespace runs to single spaces and trim both ends."""
    return _WHITESPACE_RUN_RE.sub(" ", s).strip(_WHITESPACE_CHARS)
