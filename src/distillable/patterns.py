# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Readability-style candidate patterns over an element's ancestry.

Two keyword classes are matched against a composed identity string per
ancestor (``id``, optionally ``TAGNAME``, and the class attribute when the
element has at most ``_MAX_CLASS_TOKENS`` tokens). A node is rejected as a
scoring candidate only when some ancestor looks like boilerplate and no
ancestor looks like content.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from lxml import etree

from .dom import DocumentSnapshot

# Utility-class-heavy markup (Tailwind etc.) matches everything; skip it.
_MAX_CLASS_TOKENS = 5


@dataclass(frozen=True, slots=True)
class KeywordClass:
    """A named list of keyword patterns compiled into one case-insensitive regex."""

    name: str
    keywords: tuple[str, ...]
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "regex", re.compile("|".join(self.keywords), re.IGNORECASE))

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None


UNLIKELY_CANDIDATES = KeywordClass(
    "unlikely",
    (
        "aside",
        "banner",
        "combx",
        "comment",
        "community",
        "disqus",
        "extra",
        "foot",
        "header",
        "menu",
        "nav",
        "related",
        "remark",
        "rss",
        "share",
        "shoutbox",
        "sidebar",
        "skyscraper",
        "sponsor",
        "ad-break",
        "agegate",
        "pagination",
        "pager",
        "popup",
    ),
)

MAYBE_CANDIDATE = KeywordClass(
    "maybe-candidate",
    ("and", "article", "body", "column", "main", "shadow"),
)


def identity_string(snapshot: DocumentSnapshot, node: etree._Element, check_tag_name: bool) -> str:
    """``id [TAGNAME] [class]`` as matched by the keyword classes."""
    text = snapshot.node_id(node)
    if check_tag_name:
        text += " " + snapshot.tag_name(node)
    if len(snapshot.class_tokens(node)) <= _MAX_CLASS_TOKENS:
        text += " " + snapshot.class_name(node)
    return text


def match_score(
    snapshot: DocumentSnapshot,
    node: etree._Element,
    keyword_class: KeywordClass,
    check_parents: bool,
    check_tag_name: bool,
) -> int:
    """Count elements on the path node → root (root excluded) matching ``keyword_class``.

    With ``check_parents`` False only ``node`` itself is examined. A node
    whose ancestry never reaches the root carries no signal and scores 0.
    """
    chain = snapshot.ancestry(node)
    if not chain:
        return 0
    if not check_parents:
        chain = chain[:1]
    return sum(1 for el in chain if keyword_class.matches(identity_string(snapshot, el, check_tag_name)))


def is_candidate_eligible(
    snapshot: DocumentSnapshot,
    node: etree._Element,
    check_parents: bool,
    check_tag_name: bool,
    *,
    unlikely: KeywordClass = UNLIKELY_CANDIDATES,
    likely: KeywordClass = MAYBE_CANDIDATE,
) -> bool:
    """Any content signal overrides boilerplate signals."""
    if match_score(snapshot, node, unlikely, check_parents, check_tag_name) == 0:
        return True
    return match_score(snapshot, node, likely, check_parents, check_tag_name) > 0
