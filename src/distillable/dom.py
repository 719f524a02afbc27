# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Read-only document snapshot over an lxml tree.

A snapshot is either *annotated* (captured from a rendered page by
``capture.capture_snapshot``: every element carries rounded layout geometry
and a computed visibility flag in ``data-distillable-*`` attributes) or
*static* (plain HTML: geometry is zero and visibility is inferred from
inline styles and the ``hidden`` attribute).

All walks are bounded at the body root and by ``_MAX_DEPTH``; elements whose
ancestor chain does not reach the root are reported as detached.
"""

from __future__ import annotations

import copy
import dataclasses
import functools
import logging
import re
from dataclasses import dataclass

import lxml.html
from lxml import etree

from .errors import SnapshotError
from .text import collapse_whitespace

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Annotation attributes written by capture.py on the serialized clone
# ---------------------------------------------------------------------------

ATTR_LEFT = "data-distillable-left"
ATTR_WIDTH = "data-distillable-width"
ATTR_HEIGHT = "data-distillable-height"
ATTR_VISIBLE = "data-distillable-visible"
ATTR_INDEX = "data-distillable-index"

ANNOTATION_ATTRS: tuple[str, ...] = (ATTR_LEFT, ATTR_WIDTH, ATTR_HEIGHT, ATTR_VISIBLE, ATTR_INDEX)

_MAX_DEPTH = 1024

# ---------------------------------------------------------------------------
# Static visibility inference
# ---------------------------------------------------------------------------

_NEVER_RENDERED_TAGS = frozenset({"head", "script", "style", "template", "noscript", "title", "meta", "link"})
# A scripting browser keeps their content as raw text or in a detached
# fragment; the HTML parser builds real elements from it.
_INERT_CONTAINER_TAGS = ("noscript", "template")
_DISPLAY_NONE_RE = re.compile(r"(?<![-\w])display\s*:\s*none", re.IGNORECASE)
_VISIBILITY_RE = re.compile(r"(?<![-\w])visibility\s*:\s*([a-z]+)", re.IGNORECASE)
_OPACITY_ZERO_RE = re.compile(r"(?<![-\w])opacity\s*:\s*0(?:\.0+)?(?:\s*[;!]|\s*$)", re.IGNORECASE)

# Tags that start a new line in rendered text
_BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "dd",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "tr",
        "ul",
    }
)


@dataclass(frozen=True, slots=True)
class Box:
    """Integer layout box in CSS pixels."""

    left: int = 0
    width: int = 0
    height: int = 0

    @property
    def area(self) -> int:
        return self.width * self.height


def _to_int(value: str | None) -> int:
    if value is None:
        return 0
    try:
        return round(float(value))
    except (ValueError, OverflowError):
        return 0


def _tag(el: etree._Element) -> str:
    return el.tag.lower() if isinstance(el.tag, str) else ""


def _parse_document(html: str | bytes, url: str) -> lxml.html.HtmlElement:
    try:
        return lxml.html.document_fromstring(html)
    except ValueError as exc:
        # lxml refuses str input that carries an XML encoding declaration
        if isinstance(html, str):
            return _parse_document(html.encode("utf-8"), url)
        raise SnapshotError(f"Unparseable HTML document: {exc}", url=url) from exc
    except etree.ParserError as exc:
        raise SnapshotError(f"Unparseable HTML document: {exc}", url=url) from exc


@dataclass(frozen=True)
class DocumentSnapshot:
    """Immutable view of one document, body element as the root."""

    document: lxml.html.HtmlElement
    body: lxml.html.HtmlElement
    url: str = ""
    title: str = ""
    scroll_width: int = 0
    scroll_height: int = 0
    inner_text: str = ""
    text_content: str = ""
    inner_html: str = ""
    has_layout: bool = False

    @classmethod
    def from_html(
        cls,
        html: str | bytes,
        *,
        url: str = "",
        title: str | None = None,
        scroll_width: int = 0,
        scroll_height: int = 0,
        inner_text: str | None = None,
        text_content: str | None = None,
        inner_html: str | None = None,
    ) -> DocumentSnapshot:
        """Parse HTML into a snapshot.

        Page-level values that a rendered capture reports directly
        (``inner_text``, ``text_content``, ``inner_html``) are derived from the
        tree when not supplied.
        """
        if not html or not html.strip():
            raise SnapshotError("Empty HTML document", url=url)
        document = _parse_document(html, url)
        bodies = document.xpath("//body")
        body = bodies[0] if bodies else document
        if title is None:
            title = (document.findtext(".//title") or "").strip()
        has_layout = bool(body.xpath(f"boolean(descendant-or-self::*[@{ATTR_VISIBLE}])"))
        snapshot = cls(
            document=document,
            body=body,
            url=url,
            title=title,
            scroll_width=max(0, scroll_width),
            scroll_height=max(0, scroll_height),
            has_layout=has_layout,
        )
        return dataclasses.replace(
            snapshot,
            inner_text=inner_text if inner_text is not None else snapshot.inner_text_of(body),
            text_content=text_content if text_content is not None else snapshot.text_content_of(body),
            inner_html=inner_html if inner_html is not None else snapshot._serialize_children(body),
        )

    # ---- selection -------------------------------------------------------

    @functools.cached_property
    def _inert(self) -> frozenset[etree._Element]:
        """Elements parsed out of ``<noscript>``/``<template>`` content."""
        return frozenset(
            el
            for container in self.document.iter(*_INERT_CONTAINER_TAGS)
            for el in container.iterdescendants(etree.Element)
        )

    def select(self, *tags: str) -> list[lxml.html.HtmlElement]:
        """Descendants of the root with any of ``tags``, in document order."""
        inert = self._inert
        return [el for el in self.body.iterdescendants(*tags) if el not in inert]

    def select_all(self) -> list[lxml.html.HtmlElement]:
        inert = self._inert
        return [el for el in self.body.iterdescendants(etree.Element) if el not in inert]

    def select_xpath(self, expr: str, node: etree._Element | None = None) -> list[lxml.html.HtmlElement]:
        """Elements matched by an XPath expression (``.//...``) under ``node``."""
        context = self.body if node is None else node
        inert = self._inert
        return [
            el
            for el in context.xpath(expr)
            if isinstance(el, etree._Element) and isinstance(el.tag, str) and el not in inert
        ]

    def select_leaf(self, expr: str) -> list[lxml.html.HtmlElement]:
        """Matches of ``expr`` that contain no further match of ``expr``."""
        return [el for el in self.select_xpath(expr) if not self.select_xpath(expr, el)]

    def select_head_meta(self) -> list[lxml.html.HtmlElement]:
        heads = self.document.xpath("//head")
        if not heads:
            return []
        inert = self._inert
        return [el for el in heads[0].iterdescendants("meta") if el not in inert]

    # ---- per-node accessors ---------------------------------------------

    @staticmethod
    def tag_name(el: etree._Element) -> str:
        """Upper-case tag name, as DOM ``tagName`` reports it for HTML."""
        return el.tag.upper() if isinstance(el.tag, str) else ""

    @staticmethod
    def node_id(el: etree._Element) -> str:
        return el.get("id") or ""

    @staticmethod
    def class_name(el: etree._Element) -> str:
        return el.get("class") or ""

    @staticmethod
    def class_tokens(el: etree._Element) -> list[str]:
        # DOMTokenList semantics: ordered, duplicates dropped
        return list(dict.fromkeys((el.get("class") or "").split()))

    @staticmethod
    def attribute(el: etree._Element, name: str, default: str = "") -> str:
        value = el.get(name)
        return default if value is None else value

    @staticmethod
    def text_content_of(el: etree._Element) -> str:
        return str(el.text_content())

    @staticmethod
    def box(el: etree._Element) -> Box:
        return Box(
            left=_to_int(el.get(ATTR_LEFT)),
            width=_to_int(el.get(ATTR_WIDTH)),
            height=_to_int(el.get(ATTR_HEIGHT)),
        )

    @staticmethod
    def parent(el: etree._Element) -> etree._Element | None:
        return el.getparent()

    @staticmethod
    def node_index(el: etree._Element) -> int | None:
        raw = el.get(ATTR_INDEX)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def ancestry(self, el: etree._Element) -> list[etree._Element] | None:
        """``el`` and its ancestors up to, not including, the root.

        Returns None when the root is not reachable (detached subtree or a
        chain deeper than ``_MAX_DEPTH``). The root itself yields ``[]``.
        """
        chain: list[etree._Element] = []
        node = el
        for _ in range(_MAX_DEPTH):
            if node is None:
                return None
            if node is self.body:
                return chain
            chain.append(node)
            node = node.getparent()
        return None

    def is_inside(self, el: etree._Element, tag: str) -> bool:
        """True when a proper ancestor of ``el`` has tag ``tag``."""
        tag = tag.lower()
        node = el.getparent()
        for _ in range(_MAX_DEPTH):
            if node is None:
                return False
            if _tag(node) == tag:
                return True
            node = node.getparent()
        return False

    # ---- visibility -----------------------------------------------------

    def is_visible(self, el: etree._Element) -> bool:
        flag = el.get(ATTR_VISIBLE)
        if flag is not None:
            return flag == "1"
        return self._inferred_visible(el)

    @staticmethod
    def _inferred_visible(el: etree._Element) -> bool:
        if _OPACITY_ZERO_RE.search(el.get("style") or ""):
            return False
        if _tag(el) == "input" and (el.get("type") or "").lower() == "hidden":
            return False
        visibility_known = False
        node = el
        for _ in range(_MAX_DEPTH):
            if node is None:
                break
            if _tag(node) in _NEVER_RENDERED_TAGS or node.get("hidden") is not None:
                return False
            style = node.get("style") or ""
            if style:
                if _DISPLAY_NONE_RE.search(style):
                    return False
                if not visibility_known:
                    m = _VISIBILITY_RE.search(style)
                    if m:
                        if m.group(1).lower() in ("hidden", "collapse"):
                            return False
                        visibility_known = True
            node = node.getparent()
        return True

    # ---- text and markup ------------------------------------------------

    def inner_text_of(self, el: etree._Element) -> str:
        """Approximate rendered text: visible text only, one line per block."""
        segments: list[str | None] = []
        self._collect_visible_text(el, segments, 0)
        lines: list[str] = []
        run: list[str] = []
        for seg in [*segments, None]:
            if seg is not None:
                run.append(seg)
                continue
            line = collapse_whitespace("".join(run))
            if line:
                lines.append(line)
            run = []
        return "\n".join(lines)

    def _collect_visible_text(self, el: etree._Element, segments: list[str | None], depth: int) -> None:
        if depth > _MAX_DEPTH:
            return
        tag = _tag(el)
        visible = self.is_visible(el)
        if tag in _BLOCK_TAGS or tag == "br":
            segments.append(None)
        if visible and el.text:
            segments.append(el.text)
        for child in el:
            if isinstance(child.tag, str):
                self._collect_visible_text(child, segments, depth + 1)
            if visible and child.tail:
                segments.append(child.tail)
        if tag in _BLOCK_TAGS:
            segments.append(None)

    def _serialize_children(self, el: etree._Element) -> str:
        if self.has_layout:
            el = copy.deepcopy(el)
            etree.strip_attributes(el, *ANNOTATION_ATTRS)
        parts = [el.text or ""]
        parts.extend(lxml.html.tostring(child, encoding="unicode") for child in el)
        return "".join(parts)
