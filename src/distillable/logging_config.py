# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Log setup for the distillable CLI.

stdlib ``logging`` records from every ``distillable.*`` module are rendered
by structlog: ConsoleRenderer by default, JSONRenderer under ``--json-logs``
or ``DISTILLABLE_JSON_LOGS``. Output goes to stderr because stdout carries
the feature JSON.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from .config import Settings

DEFAULT_LEVEL = "INFO"


def resolve_level(*, verbose: bool = False, explicit: str | None = None, fallback: str = DEFAULT_LEVEL) -> int:
    """Numeric root level: ``-v`` beats ``--log-level`` beats settings.

    Unknown names fall back to INFO.
    """
    if verbose:
        return logging.DEBUG
    name = (explicit or fallback or DEFAULT_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _shared_processors() -> list:
    # Run for structlog loggers and, via foreign_pre_chain, for stdlib records
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure(*, json_output: bool = False, level: str | int = DEFAULT_LEVEL, stream: TextIO | None = None) -> None:
    """Install one structlog-formatted handler on the root logger.

    Args:
        json_output: JSON lines instead of console output.
        level: Level name (case-insensitive) or number.
        stream: Destination, stderr when None. Calling again replaces the handler.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_output)],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level if isinstance(level, int) else resolve_level(explicit=level))


def configure_cli(
    settings: Settings,
    *,
    verbose: bool = False,
    json_logs: bool = False,
    log_level: str | None = None,
) -> int:
    """Apply command-line flags over ``settings`` and configure logging.

    Returns the numeric level that was installed.
    """
    level = resolve_level(verbose=verbose, explicit=log_level, fallback=settings.log_level)
    configure(json_output=json_logs or settings.json_logs, level=level)
    return level
