# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structured-data signals: schema.org microdata types, Twitter Card, Open Graph.

Absent or empty markup is "no signal" (empty tally, empty card type),
never an error.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Any

from .dom import DocumentSnapshot

logger = logging.getLogger(__name__)

# Matched case-sensitively against the comma-joined distinct type names
_SCHEMA_ORG_FLAGS: dict[str, re.Pattern[str]] = {
    "schemaOrgArticle": re.compile(r"Article"),
    "schemaOrgNews": re.compile(r"News"),
    "schemaOrgBlog": re.compile(r"Blog"),
    "schemaOrgPosting": re.compile(r"Posting"),
    "schemaOrgAllArticle": re.compile(r"Article|Blog|Report|Posting"),
    "schemaOrgPerson": re.compile(r"Person"),
    "schemaOrgImage": re.compile(r"Image"),
    "schemaOrgOrg": re.compile(r"Organization"),
}

_OG_TYPE = "og:type"
_TWITTER_CARD = "twitter:card"


def schema_org_types(snapshot: DocumentSnapshot) -> Counter[str]:
    """Tally of microdata ``itemtype`` names (last ``/`` segment) on ``[itemscope][itemtype]``."""
    types: Counter[str] = Counter()
    for el in snapshot.select_xpath("//*[@itemscope][@itemtype]", snapshot.document):
        name = (el.get("itemtype") or "").split("/")[-1]
        types[name] += 1
    return types


def schema_org_features(types: Counter[str]) -> dict[str, Any]:
    joined = ",".join(types)
    features: dict[str, Any] = {"schemaOrgTypes": dict(types)}
    for key, pattern in _SCHEMA_ORG_FLAGS.items():
        features[key] = pattern.search(joined) is not None
    features["schemaOrgCount"] = sum(types.values())
    features["schemaOrgLength"] = len(types)
    return features


def twitter_card_type(snapshot: DocumentSnapshot) -> str:
    """Content of the first ``meta[name="twitter:card"]`` in head, "" when absent."""
    for meta in snapshot.select_head_meta():
        if meta.get("name") == _TWITTER_CARD:
            return meta.get("content") or ""
    return ""


def twitter_features(card_type: str) -> dict[str, Any]:
    return {
        "twitterType": card_type,
        "twitterSummary": "summary" in card_type,
        "twitterApp": "app" in card_type,
    }


def has_og_article(snapshot: DocumentSnapshot) -> bool:
    """True when any ``og:type`` meta (``property`` or ``name``) says "article"."""
    for meta in snapshot.select_head_meta():
        if meta.get("property") != _OG_TYPE and meta.get("name") != _OG_TYPE:
            continue
        content = meta.get("content") or ""
        if content.upper() == "ARTICLE":
            return True
    return False
