# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Distillable exception hierarchy.

The scoring core never raises for a well-formed snapshot; these errors
belong to the outer layers (snapshot capture, browser control, CLI).
Callers can catch DistillableError for any failure or a subclass for
targeted handling.
"""

from __future__ import annotations


class DistillableError(Exception):
    """Base exception for all distillable errors."""


class SnapshotError(DistillableError):
    """Document snapshot could not be captured or parsed."""

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class BrowserError(DistillableError):
    """Browser session launch, navigation, or evaluation failure."""
