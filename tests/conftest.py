# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration."""

try:
    import distillable  # noqa: F401
except ImportError:
    raise ImportError("distillable is not installed. Run: pip install -e '.[dev]'") from None
