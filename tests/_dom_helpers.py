# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared HTML builders for snapshot-based tests.

Underscore prefix prevents pytest collection.
Plain builder functions, not fixtures.
"""

from __future__ import annotations

from distillable.dom import ATTR_HEIGHT, ATTR_INDEX, ATTR_LEFT, ATTR_VISIBLE, ATTR_WIDTH, DocumentSnapshot


def html(body: str, head: str = "") -> str:
    """Build a complete HTML document from body (and optional head) content."""
    head_section = f"<head>{head}</head>" if head else ""
    return f"<html>{head_section}<body>{body}</body></html>"


def snap(body: str, head: str = "", **kwargs) -> DocumentSnapshot:
    """Parse body (and optional head) content into a DocumentSnapshot."""
    return DocumentSnapshot.from_html(html(body, head), **kwargs)


def layout(left: int = 0, width: int = 0, height: int = 0, *, visible: bool = True, index: int | None = None) -> str:
    """Annotation attributes as the capture script writes them."""
    attrs = (
        f' {ATTR_LEFT}="{left}" {ATTR_WIDTH}="{width}" {ATTR_HEIGHT}="{height}"'
        f' {ATTR_VISIBLE}="{"1" if visible else "0"}"'
    )
    if index is not None:
        attrs += f' {ATTR_INDEX}="{index}"'
    return attrs


def para(length: int, attrs: str = "", char: str = "x") -> str:
    """A <p> holding exactly ``length`` characters."""
    return f"<p{attrs}>{char * length}</p>"
