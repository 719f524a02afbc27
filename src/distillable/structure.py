# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Counts and area ratios over structural containers.

Three categories are measured: ``<section>``, ``<article>`` and "entries"
(any element whose class or id contains ``post``, ``article`` or ``news``).
Leaf containers are counted separately from raw matches, so an outer
wrapper and the repeated block nested inside it register once in the
leaf-based features (eligible counts, area ratios).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lxml import etree

from .dom import DocumentSnapshot
from .patterns import is_candidate_eligible

# Outside [0, 1]: "no containers" must not look like "one container
# covering everything" or "a container of zero size".
NO_CONTAINER_RATIO = 2


@dataclass(frozen=True, slots=True)
class StructuralCategory:
    """A container category and the feature names it produces."""

    count_key: str
    area_key: str
    xpath: str

    @property
    def keys(self) -> tuple[str, ...]:
        return (
            self.count_key,
            f"{self.count_key}Leaf",
            f"{self.count_key}2",
            f"{self.count_key}3",
            self.area_key,
            f"{self.area_key}Ratio",
        )


def _attr_contains(*needles: str) -> str:
    clauses = [f"contains(@{attr}, '{needle}')" for attr in ("class", "id") for needle in needles]
    return f".//*[{' or '.join(clauses)}]"


SECTIONS = StructuralCategory("numSection", "largestSection", ".//section")
ARTICLES = StructuralCategory("numArticle", "largestArticle", ".//article")
ENTRIES = StructuralCategory("numEntries", "largestEntry", _attr_contains("post", "article", "news"))

CATEGORIES: tuple[StructuralCategory, ...] = (SECTIONS, ARTICLES, ENTRIES)


def count_eligible(
    snapshot: DocumentSnapshot,
    nodes: list[etree._Element],
    check_parents: bool,
    check_tag_name: bool,
) -> int:
    return sum(1 for node in nodes if is_candidate_eligible(snapshot, node, check_parents, check_tag_name))


def largest_area(snapshot: DocumentSnapshot, nodes: list[etree._Element]) -> float:
    """Largest container area as a fraction of the page area; 0 for a zero-size page."""
    if not nodes:
        return NO_CONTAINER_RATIO
    page_area = snapshot.scroll_width * snapshot.scroll_height
    if page_area <= 0:
        return 0.0
    return max(snapshot.box(node).area for node in nodes) / page_area


def largest_area_ratio(snapshot: DocumentSnapshot, nodes: list[etree._Element]) -> float:
    """Largest container area over the summed area of all containers."""
    if not nodes:
        return NO_CONTAINER_RATIO
    areas = [snapshot.box(node).area for node in nodes]
    total = sum(areas)
    if total <= 0:
        return NO_CONTAINER_RATIO
    return max(areas) / total


def category_features(snapshot: DocumentSnapshot, category: StructuralCategory) -> dict[str, Any]:
    """Raw count, leaf count, eligible leaf counts and area ratios for one category.

    The eligible counts use the same candidate test as density scoring:
    ancestry walk without (``2``) and with (``3``) tag names.
    """
    matches = snapshot.select_xpath(category.xpath)
    leaves = snapshot.select_leaf(category.xpath)
    num, num_leaf, num_parents, num_tags, area, ratio = category.keys
    return {
        num: len(matches),
        num_leaf: len(leaves),
        num_parents: count_eligible(snapshot, leaves, True, False),
        num_tags: count_eligible(snapshot, leaves, True, True),
        area: largest_area(snapshot, leaves),
        ratio: largest_area_ratio(snapshot, leaves),
    }
