# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Rendered-page snapshot capture via Playwright.

One ``page.evaluate`` reads live layout and computed style for every
element and returns a serialized *clone* of the document carrying that
information as ``data-distillable-*`` attributes, plus page-level values
(scroll extent, title, URL, body text and markup). The live document is
left untouched.

``highlight_nodes`` is debug instrumentation only: it draws a red border
around given snapshot nodes in the live page.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from lxml import etree
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from .dom import ATTR_HEIGHT, ATTR_INDEX, ATTR_LEFT, ATTR_VISIBLE, ATTR_WIDTH, DocumentSnapshot
from .errors import SnapshotError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# JS snapshot IIFE: live elements and clone elements are paired by their
# position in querySelectorAll('*') (cloneNode preserves element order)
# ---------------------------------------------------------------------------

_SNAPSHOT_JS = f"""(() => {{
  const body = document.body;
  if (!body) return null;
  const live = document.querySelectorAll('*');
  const clone = document.documentElement.cloneNode(true);
  const cloned = [clone, ...clone.querySelectorAll('*')];
  const n = Math.min(live.length, cloned.length);
  for (let i = 0; i < n; i++) {{
    const el = live[i];
    const c = cloned[i];
    const rect = el.getBoundingClientRect();
    let visible = true;
    try {{
      const cs = window.getComputedStyle(el);
      visible = !(
        (el.offsetParent === null && el.offsetHeight === 0 && el.offsetWidth === 0) ||
        cs.display === 'none' ||
        cs.visibility === 'hidden' ||
        cs.opacity === '0'
      );
    }} catch (e) {{}}
    c.setAttribute('{ATTR_LEFT}', String(Math.round(rect.left)));
    c.setAttribute('{ATTR_WIDTH}', String(Math.round(rect.width)));
    c.setAttribute('{ATTR_HEIGHT}', String(Math.round(rect.height)));
    c.setAttribute('{ATTR_VISIBLE}', visible ? '1' : '0');
    c.setAttribute('{ATTR_INDEX}', String(i));
  }}
  return {{
    html: '<!DOCTYPE html>' + clone.outerHTML,
    url: document.location.href,
    title: document.title || '',
    scrollWidth: body.scrollWidth,
    scrollHeight: body.scrollHeight,
    innerText: body.innerText || '',
    textContent: body.textContent || '',
    innerHTML: body.innerHTML,
  }};
}})()"""

_HIGHLIGHT_JS = """(indices) => {
  const all = document.querySelectorAll('*');
  let marked = 0;
  for (const i of indices) {
    const el = all[i];
    if (el && el.style) {
      el.style.border = '1px red solid';
      marked++;
    }
  }
  return marked;
}"""


def _as_int(value: Any) -> int:
    try:
        return max(0, round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return 0


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def snapshot_from_payload(payload: Any, *, url: str = "") -> DocumentSnapshot:
    """Build a DocumentSnapshot from the capture script's return value."""
    if not isinstance(payload, dict) or not isinstance(payload.get("html"), str):
        raise SnapshotError("Snapshot capture returned no document", url=url)
    return DocumentSnapshot.from_html(
        payload["html"],
        url=_as_str(payload.get("url")) or url,
        title=_as_str(payload.get("title")),
        scroll_width=_as_int(payload.get("scrollWidth")),
        scroll_height=_as_int(payload.get("scrollHeight")),
        inner_text=_as_str(payload.get("innerText")),
        text_content=_as_str(payload.get("textContent")),
        inner_html=_as_str(payload.get("innerHTML")),
    )


async def capture_snapshot(page: Page) -> DocumentSnapshot:
    """Capture an annotated snapshot of the page's current document."""
    try:
        payload = await page.evaluate(_SNAPSHOT_JS)
    except PlaywrightError as exc:
        raise SnapshotError(f"Snapshot capture failed: {exc}", url=page.url) from exc
    snapshot = snapshot_from_payload(payload, url=page.url)
    logger.debug(
        "Captured snapshot of %s (%dx%d, layout=%s)",
        snapshot.url,
        snapshot.scroll_width,
        snapshot.scroll_height,
        snapshot.has_layout,
    )
    return snapshot


async def highlight_nodes(page: Page, snapshot: DocumentSnapshot, nodes: Iterable[etree._Element]) -> int:
    """Draw a red border around ``nodes`` in the live page. Returns the number marked.

    Nodes from a static (unannotated) snapshot cannot be located and are skipped.
    """
    indices = [i for i in (snapshot.node_index(node) for node in nodes) if i is not None]
    if not indices:
        return 0
    try:
        marked = await page.evaluate(_HIGHLIGHT_JS, indices)
    except PlaywrightError:
        logger.warning("Highlighting %d nodes failed", len(indices), exc_info=True)
        return 0
    return marked if isinstance(marked, int) else 0
