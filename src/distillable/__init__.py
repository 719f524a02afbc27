# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Distillable: article-likeness features of rendered web pages.

Computes one flat feature map per page for a downstream classifier:
- text density scores over paragraph blocks (readability-style)
- structural container counts and area ratios
- schema.org / Open Graph / Twitter Card signals
- paging-link detection
"""

from __future__ import annotations

from .density import DENSITY_PRESETS, DensityConfig, DensityResult, density_score, score_density
from .dom import Box, DocumentSnapshot
from .errors import BrowserError, DistillableError, SnapshotError
from .features import FEATURE_DEFAULTS, FEATURE_KEYS, extract_features, extract_features_from_page

__all__ = [
    "Box",
    "BrowserError",
    "DENSITY_PRESETS",
    "DensityConfig",
    "DensityResult",
    "DistillableError",
    "DocumentSnapshot",
    "FEATURE_DEFAULTS",
    "FEATURE_KEYS",
    "SnapshotError",
    "density_score",
    "extract_features",
    "extract_features_from_page",
    "score_density",
]
