# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Text density scoring ("mozScore") over paragraph-like leaf blocks.

Every visible, candidate-eligible ``<p>``/``<pre>`` whose text length
reaches ``min_length`` contributes ``(length - min_length) ** power``, with
length saturated at ``length_saturation_cap``. With geometry clustering on,
blocks are first bucketed by their ``(left, width)`` box and only the
fullest bucket (the main text column) is scored.

Named presets are plain ``DensityConfig`` constants; ``DENSITY_PRESETS``
maps feature names to them in output order.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from lxml import etree

from .dom import DocumentSnapshot
from .patterns import is_candidate_eligible
from .text import utf16_length

logger = logging.getLogger(__name__)

_TEXT_BLOCK_TAGS = ("p", "pre")

_DEFAULT_CUT = 140
_DEFAULT_CAP = 1000
# A page scores at most as much as this many saturated blocks.
_MAX_SATURATED_BLOCKS = 6


@dataclass(frozen=True, slots=True)
class DensityConfig:
    """Knobs for one density score variant."""

    trim_whitespace: bool = False
    power: float = 0.5
    min_length: int = _DEFAULT_CUT
    exclude_list_paragraphs: bool = True
    check_parents: bool = False
    check_tag_name: bool = False
    cluster_by_geometry: bool = False
    length_saturation_cap: int = _DEFAULT_CAP
    upper_bound: float = math.inf


@dataclass(frozen=True, slots=True)
class DensityResult:
    score: float
    peak: tuple[etree._Element, ...] = field(default=(), repr=False)


GeometryKey = tuple[int, int]


def _contribution(length: int, config: DensityConfig) -> float:
    return max(0, length - config.min_length) ** config.power


def _text_length(snapshot: DocumentSnapshot, node: etree._Element, config: DensityConfig) -> int:
    text = snapshot.text_content_of(node)
    if config.trim_whitespace:
        text = text.strip()
    return min(config.length_saturation_cap, utf16_length(text))


def _admissible(snapshot: DocumentSnapshot, node: etree._Element, config: DensityConfig) -> bool:
    if not snapshot.is_visible(node):
        return False
    if not is_candidate_eligible(snapshot, node, config.check_parents, config.check_tag_name):
        return False
    return not (config.exclude_list_paragraphs and node.tag == "p" and snapshot.is_inside(node, "li"))


def peak_bucket(histogram: dict[GeometryKey, list]) -> list:
    """Fullest bucket; the first one inserted wins ties. Empty histogram → []."""
    peak: list = []
    for bucket in histogram.values():
        if len(bucket) > len(peak):
            peak = bucket
    return peak


def score_density(snapshot: DocumentSnapshot, config: DensityConfig) -> DensityResult:
    """Score ``snapshot`` under ``config``; the result is clamped to ``config.upper_bound``.

    Scoring has no side effects. ``DensityResult.peak`` lists the nodes of
    the selected bucket (empty without geometry clustering) for callers that
    want to highlight them.
    """
    score = 0.0
    histogram: dict[GeometryKey, list[tuple[etree._Element, int]]] = {}

    for node in snapshot.select(*_TEXT_BLOCK_TAGS):
        if not _admissible(snapshot, node, config):
            continue
        length = _text_length(snapshot, node, config)
        if length < config.min_length:
            continue
        if config.cluster_by_geometry:
            box = snapshot.box(node)
            histogram.setdefault((box.left, box.width), []).append((node, length))
            continue
        score += _contribution(length, config)

    peak: tuple[etree._Element, ...] = ()
    if config.cluster_by_geometry:
        chosen = peak_bucket(histogram)
        logger.debug("Geometry histogram: %d buckets, peak size %d", len(histogram), len(chosen))
        for _node, length in chosen:
            score += _contribution(length, config)
        peak = tuple(node for node, _length in chosen)

    return DensityResult(score=min(config.upper_bound, score), peak=peak)


def density_score(snapshot: DocumentSnapshot, config: DensityConfig) -> float:
    return score_density(snapshot, config).score


def _bound(cut: int, power: float) -> float:
    """Upper bound for a preset: ``_MAX_SATURATED_BLOCKS`` saturated blocks."""
    if power == 1:
        return float(_MAX_SATURATED_BLOCKS * _DEFAULT_CAP)
    return _MAX_SATURATED_BLOCKS * (_DEFAULT_CAP - cut) ** power


MOZ_SCORE = DensityConfig(power=0.5, min_length=_DEFAULT_CUT, upper_bound=_bound(_DEFAULT_CUT, 0.5))
MOZ_SCORE_LINEAR = DensityConfig(power=1, min_length=_DEFAULT_CUT, upper_bound=_bound(_DEFAULT_CUT, 1))
MOZ_SCORE_ALL_SQRT = DensityConfig(power=0.5, min_length=0, upper_bound=_bound(0, 0.5))
MOZ_SCORE_ALL_LINEAR = DensityConfig(power=1, min_length=0, upper_bound=_bound(0, 1))
MOZ_SCORE_PARENTS = DensityConfig(
    power=0.5,
    min_length=_DEFAULT_CUT,
    check_parents=True,
    upper_bound=_bound(_DEFAULT_CUT, 0.5),
)
MOZ_SCORE_PARENTS_TAGS = DensityConfig(
    power=0.5,
    min_length=_DEFAULT_CUT,
    check_parents=True,
    check_tag_name=True,
    upper_bound=_bound(_DEFAULT_CUT, 0.5),
)
MOZ_SCORE_CLUSTERED = DensityConfig(
    power=0.5,
    min_length=_DEFAULT_CUT,
    check_parents=True,
    check_tag_name=True,
    cluster_by_geometry=True,
    upper_bound=_bound(_DEFAULT_CUT, 0.5),
)

DENSITY_PRESETS: dict[str, DensityConfig] = {
    "mozScore": MOZ_SCORE,
    "mozScoreLinear": MOZ_SCORE_LINEAR,
    "mozScoreAllSqrt": MOZ_SCORE_ALL_SQRT,
    "mozScoreAllLinear": MOZ_SCORE_ALL_LINEAR,
    "mozScore2": MOZ_SCORE_PARENTS,
    "mozScore3": MOZ_SCORE_PARENTS_TAGS,
    "mozScore4": MOZ_SCORE_CLUSTERED,
}
