# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Property-based fuzz tests using Hypothesis.

Verifies invariants of density scoring, candidate eligibility, base URL
cleanup and the assembled feature map for arbitrary generated pages.
"""

from __future__ import annotations

try:
    from hypothesis import HealthCheck, given, settings
    from hypothesis import strategies as st
except ImportError:
    import pytest

    pytest.skip("hypothesis not installed", allow_module_level=True)

import pytest

from distillable.density import DENSITY_PRESETS, density_score
from distillable.features import FEATURE_KEYS, extract_features
from distillable.paging import find_base_url
from distillable.patterns import MAYBE_CANDIDATE, UNLIKELY_CANDIDATES, is_candidate_eligible, match_score
from tests._dom_helpers import layout, snap

# ---------------------------------------------------------------------------
# Module-level strategies
# ---------------------------------------------------------------------------

CLASS_WORDS = st.sampled_from(
    ["", "sidebar", "article", "nav", "main", "content", "comment", "story", "footer", "x y z", "brand"]
)

BLOCK = st.tuples(
    st.sampled_from(["p", "pre"]),
    st.integers(min_value=0, max_value=1500),
    CLASS_WORDS,
    st.booleans(),
    st.sampled_from([(0, 600), (100, 600), (800, 200)]),
)

WRAPPERS = st.lists(st.sampled_from(["div", "section", "aside", "nav", "li", "main", "article"]), max_size=4)

URL_PATH = st.lists(
    st.from_regex(r"[a-z0-9_\-,.]{1,12}", fullmatch=True),
    min_size=0,
    max_size=5,
)

FUZZ_SETTINGS = settings(max_examples=60, deadline=None, suppress_health_check=[HealthCheck.too_slow])


def _page(blocks, annotated: bool) -> str:
    parts = []
    for tag, length, cls, visible, (left, width) in blocks:
        attrs = f' class="{cls}"' if cls else ""
        if annotated:
            attrs += layout(left, width, 20, visible=visible)
        elif not visible:
            attrs += ' style="display:none"'
        parts.append(f"<div{attrs}><{tag}>{'x' * length}</{tag}></div>")
    return "".join(parts) or "<div></div>"


def _nest(wrappers, inner: str) -> str:
    for tag in reversed(wrappers):
        inner = f"<{tag}>{inner}</{tag}>"
    return inner


# ---------------------------------------------------------------------------
# Density
# ---------------------------------------------------------------------------


@pytest.mark.fuzz
class TestDensityProperties:
    @FUZZ_SETTINGS
    @given(blocks=st.lists(BLOCK, max_size=12), annotated=st.booleans())
    def test_scores_within_bounds(self, blocks, annotated):
        s = snap(_page(blocks, annotated))
        for config in DENSITY_PRESETS.values():
            score = density_score(s, config)
            assert 0.0 <= score <= config.upper_bound

    @FUZZ_SETTINGS
    @given(blocks=st.lists(BLOCK, max_size=12), annotated=st.booleans())
    def test_clustered_never_exceeds_unclustered(self, blocks, annotated):
        s = snap(_page(blocks, annotated))
        assert density_score(s, DENSITY_PRESETS["mozScore4"]) <= density_score(s, DENSITY_PRESETS["mozScore3"]) + 1e-9

    @FUZZ_SETTINGS
    @given(blocks=st.lists(BLOCK, max_size=8))
    def test_parent_check_only_removes(self, blocks):
        s = snap(_page(blocks, annotated=False))
        assert density_score(s, DENSITY_PRESETS["mozScore2"]) <= density_score(s, DENSITY_PRESETS["mozScore"]) + 1e-9


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------


@pytest.mark.fuzz
class TestEligibilityProperties:
    @FUZZ_SETTINGS
    @given(
        wrappers=WRAPPERS,
        cls=CLASS_WORDS,
        check_parents=st.booleans(),
        check_tag_name=st.booleans(),
    )
    def test_matches_definition(self, wrappers, cls, check_parents, check_tag_name):
        attrs = f' class="{cls}"' if cls else ""
        s = snap(_nest(wrappers, f"<div{attrs}><p>text</p></div>"))
        p = s.select("p")[0]
        negative = match_score(s, p, UNLIKELY_CANDIDATES, check_parents, check_tag_name)
        positive = match_score(s, p, MAYBE_CANDIDATE, check_parents, check_tag_name)
        expected = negative == 0 or positive > 0
        assert is_candidate_eligible(s, p, check_parents, check_tag_name) is expected

    @FUZZ_SETTINGS
    @given(wrappers=WRAPPERS, cls=CLASS_WORDS)
    def test_parent_count_bounded_by_depth(self, wrappers, cls):
        attrs = f' class="{cls}"' if cls else ""
        s = snap(_nest(wrappers, f"<div{attrs}><p>text</p></div>"))
        p = s.select("p")[0]
        depth = len(s.ancestry(p))
        assert 0 <= match_score(s, p, UNLIKELY_CANDIDATES, True, True) <= depth


# ---------------------------------------------------------------------------
# Paging / assembly
# ---------------------------------------------------------------------------


@pytest.mark.fuzz
class TestAssemblyProperties:
    @FUZZ_SETTINGS
    @given(segments=URL_PATH)
    def test_base_url_keeps_host(self, segments):
        url = "http://example.com/" + "/".join(segments)
        assert find_base_url(url).startswith("http://example.com/")

    @FUZZ_SETTINGS
    @given(blocks=st.lists(BLOCK, max_size=6), annotated=st.booleans())
    def test_feature_map_complete_and_stable(self, blocks, annotated):
        s = snap(_page(blocks, annotated), scroll_width=1280, scroll_height=2000)
        first = extract_features(s)
        assert tuple(first) == FEATURE_KEYS
        assert extract_features(s) == first
