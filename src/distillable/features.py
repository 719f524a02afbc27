# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Feature assembly: one flat map per document snapshot.

``extract_features`` runs every signal once and merges the results. Each
feature (or group of features sharing one computation) is computed under
a guard: a failure is logged and that feature falls back to its entry in
``FEATURE_DEFAULTS``, so the returned map always carries every key of
``FEATURE_KEYS``.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable
from typing import Any

from playwright.async_api import Page

from .capture import capture_snapshot, highlight_nodes
from .density import DENSITY_PRESETS, MOZ_SCORE_CLUSTERED, density_score, score_density
from .dom import DocumentSnapshot
from .metadata import (
    has_og_article,
    schema_org_features,
    schema_org_types,
    twitter_card_type,
    twitter_features,
)
from .paging import paging_features
from .structure import CATEGORIES, NO_CONTAINER_RATIO, category_features

logger = logging.getLogger(__name__)


def _category_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for category in CATEGORIES:
        num, num_leaf, num_parents, num_tags, area, ratio = category.keys
        defaults.update({num: 0, num_leaf: 0, num_parents: 0, num_tags: 0})
        defaults.update({area: NO_CONTAINER_RATIO, ratio: NO_CONTAINER_RATIO})
    return defaults


FEATURE_DEFAULTS: dict[str, Any] = {
    "opengraph": False,
    "schemaOrgTypes": {},
    "schemaOrgArticle": False,
    "schemaOrgNews": False,
    "schemaOrgBlog": False,
    "schemaOrgPosting": False,
    "schemaOrgAllArticle": False,
    "schemaOrgPerson": False,
    "schemaOrgImage": False,
    "schemaOrgOrg": False,
    "schemaOrgCount": 0,
    "schemaOrgLength": 0,
    "twitterType": "",
    "twitterSummary": False,
    "twitterApp": False,
    "url": "",
    "title": "",
    "numElements": 0,
    "numAnchors": 0,
    "numForms": 0,
    "numTextInput": 0,
    "numPasswordInput": 0,
    "numPPRE": 0,
    "numBr": 0,
    **_category_defaults(),
    "numH1": 0,
    "numH2": 0,
    "numH3": 0,
    "numH4": 0,
    "innerText": "",
    "textContent": "",
    "innerHTML": "",
    **{name: 0.0 for name in DENSITY_PRESETS},
    "visibleElements": 0,
    "visibleAnchors": 0,
    "visiblePPRE": 0,
    "bodyWidth": 0,
    "bodyHeight": 0,
    "nextPageLink": "",
    "prevPageLink": "",
    "hasNextPage": False,
    "hasPrevPage": False,
}

FEATURE_KEYS: tuple[str, ...] = tuple(FEATURE_DEFAULTS)

# (feature, tags) pairs counted over the body
_TAG_COUNTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("numAnchors", ("a",)),
    ("numForms", ("form",)),
    ("numPPRE", ("p", "pre")),
    ("numBr", ("br",)),
    ("numH1", ("h1",)),
    ("numH2", ("h2",)),
    ("numH3", ("h3",)),
    ("numH4", ("h4",)),
)


def _collect_one(features: dict[str, Any], key: str, fn: Callable[..., Any], *args: Any) -> None:
    try:
        features[key] = fn(*args)
    except Exception:
        logger.warning("Feature %s failed, using default", key, exc_info=True)


def _collect_many(features: dict[str, Any], group: str, fn: Callable[..., dict[str, Any]], *args: Any) -> None:
    try:
        features.update(fn(*args))
    except Exception:
        logger.warning("Feature group %s failed, using defaults", group, exc_info=True)


def _count_input_type(snapshot: DocumentSnapshot, input_type: str) -> int:
    return sum(1 for el in snapshot.select("input") if (el.get("type") or "").lower() == input_type)


def _count_visible(snapshot: DocumentSnapshot, nodes: list) -> int:
    return sum(1 for node in nodes if snapshot.is_visible(node))


def _schema_org(snapshot: DocumentSnapshot) -> dict[str, Any]:
    return schema_org_features(schema_org_types(snapshot))


def _twitter(snapshot: DocumentSnapshot) -> dict[str, Any]:
    return twitter_features(twitter_card_type(snapshot))


def _page(snapshot: DocumentSnapshot) -> dict[str, Any]:
    return {
        "url": snapshot.url,
        "title": snapshot.title,
        "innerText": snapshot.inner_text,
        "textContent": snapshot.text_content,
        "innerHTML": snapshot.inner_html,
        "bodyWidth": snapshot.scroll_width,
        "bodyHeight": snapshot.scroll_height,
    }


def extract_features(snapshot: DocumentSnapshot) -> dict[str, Any]:
    """Compute the full feature map of ``snapshot``. Never raises for a parsed snapshot."""
    start = time.perf_counter()
    features: dict[str, Any] = {}

    _collect_one(features, "opengraph", has_og_article, snapshot)
    _collect_many(features, "schemaOrg", _schema_org, snapshot)
    _collect_many(features, "twitter", _twitter, snapshot)
    _collect_many(features, "page", _page, snapshot)

    _collect_one(features, "numElements", lambda: len(snapshot.select_all()))
    for key, tags in _TAG_COUNTS:
        _collect_one(features, key, lambda t=tags: len(snapshot.select(*t)))
    _collect_one(features, "numTextInput", _count_input_type, snapshot, "text")
    _collect_one(features, "numPasswordInput", _count_input_type, snapshot, "password")

    for category in CATEGORIES:
        _collect_many(features, category.count_key, category_features, snapshot, category)

    for name, config in DENSITY_PRESETS.items():
        _collect_one(features, name, density_score, snapshot, config)

    _collect_one(features, "visibleElements", lambda: _count_visible(snapshot, snapshot.select_all()))
    _collect_one(features, "visibleAnchors", lambda: _count_visible(snapshot, snapshot.select("a")))
    _collect_one(features, "visiblePPRE", lambda: _count_visible(snapshot, snapshot.select("p", "pre")))

    _collect_many(features, "paging", paging_features, snapshot)

    result = {key: features[key] if key in features else copy.copy(FEATURE_DEFAULTS[key]) for key in FEATURE_KEYS}
    logger.debug(
        "Extracted %d features for %s in %.1f ms",
        len(result),
        snapshot.url or "<static>",
        (time.perf_counter() - start) * 1000,
    )
    return result


async def extract_features_from_page(page: Page, *, highlight: bool = False) -> dict[str, Any]:
    """Capture ``page`` and extract its features.

    With ``highlight`` the peak text column of the clustered density score
    is outlined in the live page (debug only; the returned map is the same).
    """
    snapshot = await capture_snapshot(page)
    features = extract_features(snapshot)
    if highlight:
        peak = score_density(snapshot, MOZ_SCORE_CLUSTERED).peak
        marked = await highlight_nodes(page, snapshot, peak)
        logger.info("Highlighted %d peak nodes", marked)
    return features
