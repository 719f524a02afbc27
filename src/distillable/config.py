# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Environment-driven settings for capture and the CLI.

All variables are optional:

    DISTILLABLE_HIGHLIGHT        "1"/"true" draws debug borders on the peak column
    DISTILLABLE_LOG_LEVEL        root logger level (default INFO)
    DISTILLABLE_JSON_LOGS        "1"/"true" for JSON log lines
    DISTILLABLE_TIMEOUT_MS       navigation timeout (default 30000)
    DISTILLABLE_VIEWPORT_WIDTH   browser viewport width (default 1280)
    DISTILLABLE_VIEWPORT_HEIGHT  browser viewport height (default 800)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved runtime settings."""

    highlight: bool = False
    log_level: str = "INFO"
    json_logs: bool = False
    timeout_ms: int = 30000
    viewport_width: int = 1280
    viewport_height: int = 800


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUE_VALUES


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%d, using %d", name, value, default)
        return default
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables (``os.environ`` by default)."""
    if env is None:
        env = os.environ
    defaults = Settings()
    return Settings(
        highlight=_env_bool(env, "DISTILLABLE_HIGHLIGHT", defaults.highlight),
        log_level=env.get("DISTILLABLE_LOG_LEVEL", "").strip().upper() or defaults.log_level,
        json_logs=_env_bool(env, "DISTILLABLE_JSON_LOGS", defaults.json_logs),
        timeout_ms=_env_int(env, "DISTILLABLE_TIMEOUT_MS", defaults.timeout_ms),
        viewport_width=_env_int(env, "DISTILLABLE_VIEWPORT_WIDTH", defaults.viewport_width),
        viewport_height=_env_int(env, "DISTILLABLE_VIEWPORT_HEIGHT", defaults.viewport_height),
    )
