# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Next/previous page link detection (readability paging heuristics).

Every same-host anchor is scored on its text, class, id, href and
ancestors' class/id for paging hints; the best link scoring at least
``_MIN_SCORE`` wins. A page with a confident next link is usually one
page of a multi-page article.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin, urlsplit

from lxml import etree

from .dom import DocumentSnapshot
from .text import java_trim, utf16_length

logger = logging.getLogger(__name__)

_MIN_SCORE = 50
_MAX_LINK_TEXT = 25
_LONG_LINK_TEXT = 10
_MAX_ANCESTOR_WALK = 1024

# next, continue, >, >>, » but not >| or »| (those usually mean "last")
_NEXT_LINK_RE = re.compile(r"(next|weiter|continue|>([^|]|$)|»([^|]|$))", re.IGNORECASE)
_PREV_LINK_RE = re.compile(r"(prev|early|old|new|<|«)", re.IGNORECASE)
_POSITIVE_RE = re.compile(r"article|body|content|entry|hentry|main|page|pagination|post|text|blog|story", re.IGNORECASE)
_NEGATIVE_RE = re.compile(
    r"combx|comment|com-|contact|foot|footer|footnote|masthead|media|meta"
    r"|outbrain|promo|related|shoutbox|sidebar|sponsor|shopping|tags"
    r"|tool|widget",
    re.IGNORECASE,
)
_EXTRANEOUS_RE = re.compile(
    r"print|archive|comment|discuss|e[\-]?mail|share|reply|all|login|sign|single|as one|article",
    re.IGNORECASE,
)
_PAGINATION_RE = re.compile(r"pag(e|ing|inat)", re.IGNORECASE)
_LINK_PAGINATION_RE = re.compile(r"p(a|g|ag)?(e|ing|ination)?(=|/)[0-9]{1,2}$", re.IGNORECASE)
_FIRST_LAST_RE = re.compile(r"(first|last)", re.IGNORECASE)
# "_p3", "-pg3", "p3", "_1", "-12-2" match; "_p3 ", "p", "p123" do not
_PAGE_NUMBER_RE = re.compile(r"((_|-)?p[a-z]*|(_|-))[0-9]{1,2}$", re.IGNORECASE)
_HREF_CLEANER_RE = re.compile(r"/?(#.*)?$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")
_DIGIT_RE = re.compile(r"[0-9]")


class PageLink(enum.Enum):
    NEXT = "next"
    PREV = "prev"


@dataclass
class _Candidate:
    index: int
    href: str
    text: str
    score: int = 0


def _split_url(url: str) -> tuple[str, str, str] | None:
    """(scheme, host[:port], path) for http(s) URLs, else None."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return None
    scheme, _, rest = url.partition("://")
    host, _, path = rest.partition("/")
    return scheme, host, path


def _split_dropping_trailing(s: str, sep: str) -> list[str]:
    """``str.split`` minus trailing empty strings (java.lang.String.split)."""
    parts = s.split(sep)
    while len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return parts


def find_base_url(url: str) -> str:
    """Strip page-number-looking segments off the URL path.

    ``http://example.com/news/story-p2.html`` → ``http://example.com/news/story``.
    """
    url = re.sub(r"\?.*$", "", url)
    scheme, _, rest = url.partition("://")
    segments = _split_dropping_trailing(rest, "/")
    segments.reverse()

    cleaned: list[str] = []
    for i, segment in enumerate(segments[:-1]):
        if "." in segment:
            pieces = _split_dropping_trailing(segment, ".")
            possible_type = pieces[1] if len(pieces) > 1 else ""
            if not re.search(r"[^a-zA-Z]", possible_type):
                segment = pieces[0]

        # EW-CMS style ",00" suffixes
        segment = segment.replace(",00", "")

        if i < 2:
            segment = _PAGE_NUMBER_RE.sub("", segment)
        if not segment:
            continue
        if i < 2 and re.fullmatch(r"[0-9]{1,2}", segment):
            continue
        if i == 0 and segment.lower() == "index":
            continue
        if i < 2 and len(segment) < 3 and not re.search(r"[a-z]", segments[0], re.IGNORECASE):
            continue
        cleaned.append(segment)

    return f"{scheme}://{segments[-1]}/" + "/".join(reversed(cleaned))


def _leading_int(text: str) -> int | None:
    m = _LEADING_INT_RE.match(text)
    return int(m.group(1)) if m else None


def _ancestor_adjustment(snapshot: DocumentSnapshot, link: etree._Element) -> int:
    """+25 for the first paging-ish ancestor, -25 for the first purely negative one."""
    adjustment = 0
    positive = negative = False
    parent = snapshot.parent(link)
    for _ in range(_MAX_ANCESTOR_WALK):
        if parent is None or (positive and negative):
            break
        class_and_id = f"{snapshot.class_name(parent)} {snapshot.node_id(parent)}"
        if not positive and _PAGINATION_RE.search(class_and_id):
            adjustment += 25
            positive = True
        # "footer" is negative, "body-and-footer" is left alone
        if not negative and _NEGATIVE_RE.search(class_and_id) and not _POSITIVE_RE.search(class_and_id):
            adjustment -= 25
            negative = True
        parent = snapshot.parent(parent)
    return adjustment


def find_paging_link(snapshot: DocumentSnapshot, url: str, page_link: PageLink) -> str | None:
    """Best next- or previous-page href for ``url``, trailing slash removed; None when unsure."""
    split = _split_url(url)
    if split is None:
        return None
    scheme, host, _path = split
    is_next = page_link is PageLink.NEXT
    direction_re = _NEXT_LINK_RE if is_next else _PREV_LINK_RE
    opposite_re = _PREV_LINK_RE if is_next else _NEXT_LINK_RE

    base_url = find_base_url(url)
    current = re.sub(r"/$", "", url)
    allowed_prefix = f"{scheme}://{host}/"
    candidates: dict[str, _Candidate] = {}

    for index, link in enumerate(snapshot.select("a")):
        raw_href = link.get("href")
        if raw_href is None:
            continue
        try:
            href = urljoin(url, java_trim(raw_href))
        except ValueError:
            # malformed authority such as "http://[broken"
            continue
        if href[: len(allowed_prefix)].lower() != allowed_prefix.lower():
            continue
        if is_next and not _DIGIT_RE.search(href[len(allowed_prefix) :]):
            continue

        box = snapshot.box(link)
        if snapshot.has_layout and (box.width == 0 or box.height == 0):
            continue
        if not snapshot.is_visible(link):
            continue

        href = _HREF_CLEANER_RE.sub("", href, count=1)
        # The first page of a series often lives at the base URL, so only
        # next links skip it.
        if href.lower() == current.lower() or (is_next and href.lower() == base_url.lower()):
            continue

        text = snapshot.inner_text_of(link)
        if _EXTRANEOUS_RE.search(text) or utf16_length(text) > _MAX_LINK_TEXT:
            continue
        if is_next and not _DIGIT_RE.search(re.sub(re.escape(base_url), "", href, flags=re.IGNORECASE)):
            continue

        candidate = candidates.get(href)
        if candidate is None:
            candidate = candidates[href] = _Candidate(index=index, href=href, text=text)
        else:
            candidate.text += " | " + text

        if not href.startswith(base_url):
            candidate.score -= 25

        link_data = f"{text} {snapshot.class_name(link)} {snapshot.node_id(link)}"
        if direction_re.search(link_data):
            candidate.score += 50
        if _PAGINATION_RE.search(link_data):
            candidate.score += 25
        # -65 cancels the bonus of a bare ">" or "»" in a "last" link
        if _FIRST_LAST_RE.search(link_data) and not direction_re.search(candidate.text):
            candidate.score -= 65
        if _NEGATIVE_RE.search(link_data) or _EXTRANEOUS_RE.search(link_data):
            candidate.score -= 50
        if opposite_re.search(link_data):
            candidate.score -= 200

        candidate.score += _ancestor_adjustment(snapshot, link)

        # /page/2/, /pagenum/2, ?p=3, ?page=11, ?pagination=34
        if _LINK_PAGINATION_RE.search(href) or _PAGINATION_RE.search(href):
            candidate.score += 25
        if _EXTRANEOUS_RE.search(href):
            candidate.score -= 15
        if utf16_length(text) > _LONG_LINK_TEXT:
            candidate.score -= utf16_length(text)

        number = _leading_int(text)
        if number is not None and number > 0:
            # Page 1 is where we are or behind us
            candidate.score += -10 if number == 1 else max(0, 10 - number)

    top: _Candidate | None = None
    for candidate in candidates.values():
        if candidate.score >= _MIN_SCORE and (top is None or top.score < candidate.score):
            top = candidate

    if top is None:
        return None
    logger.debug("Paging %s link: score=%d text=%r href=%s", page_link.value, top.score, top.text, top.href)
    return re.sub(r"/$", "", top.href)


def find_next(snapshot: DocumentSnapshot, url: str) -> str | None:
    return find_paging_link(snapshot, url, PageLink.NEXT)


def find_previous(snapshot: DocumentSnapshot, url: str) -> str | None:
    return find_paging_link(snapshot, url, PageLink.PREV)


def paging_features(snapshot: DocumentSnapshot) -> dict[str, Any]:
    next_link = find_next(snapshot, snapshot.url) or ""
    prev_link = find_previous(snapshot, snapshot.url) or ""
    return {
        "nextPageLink": next_link,
        "prevPageLink": prev_link,
        "hasNextPage": bool(next_link),
        "hasPrevPage": bool(prev_link),
    }
