# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Distillable CLI: extract article-likeness features from a page.

Usage:
    distillable features --url URL [--highlight] [-o out.json]
    distillable features --html page.html [--static] [-o out.json]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from .browser_session import BrowserConfig, BrowserSession
from .config import Settings, load_settings
from .dom import DocumentSnapshot
from .errors import DistillableError
from .features import extract_features, extract_features_from_page
from .logging_config import configure_cli
from .schemas import PageFeatures

logger = logging.getLogger(__name__)


async def _features_live(
    settings: Settings,
    *,
    url: str | None = None,
    html: str | None = None,
    headless: bool = True,
) -> dict[str, Any]:
    config = replace(BrowserConfig.from_settings(settings), headless=headless)
    async with BrowserSession(config) as session:
        if url:
            status = await session.navigate(url)
            logger.info("Loaded %s (status=%s)", url, status)
        else:
            await session.load_html(html or "")
        return await extract_features_from_page(session.page, highlight=settings.highlight)


def _features_static(html: str, url: str) -> dict[str, Any]:
    snapshot = DocumentSnapshot.from_html(html, url=url)
    return extract_features(snapshot)


def _render(features: dict[str, Any]) -> str:
    return PageFeatures.model_validate(features).model_dump_json(by_alias=True, indent=2)


def cmd_features(args: argparse.Namespace, settings: Settings) -> None:
    """Extract features from a URL or an HTML file."""
    if args.static and not args.html:
        print("Error: --static requires --html.", file=sys.stderr)
        sys.exit(1)
    if args.static and args.highlight:
        print("Error: --highlight needs a rendered page; drop --static.", file=sys.stderr)
        sys.exit(1)

    if args.html:
        html = Path(args.html).read_text(encoding="utf-8", errors="replace")
        if args.static:
            features = _features_static(html, args.base_url or "")
        else:
            features = asyncio.run(_features_live(settings, html=html, headless=not args.headed))
    else:
        features = asyncio.run(_features_live(settings, url=args.url, headless=not args.headed))

    output = _render(features)
    if args.output:
        Path(args.output).write_text(output + "\n", encoding="utf-8")
        print(f"Features saved to {args.output}", file=sys.stderr)
    else:
        print(output)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Article-likeness feature extraction",
        prog="distillable",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines on stderr")
    parser.add_argument("--log-level", type=str, metavar="LEVEL", help="Root log level (default INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_features = subparsers.add_parser(
        "features",
        help="Extract the feature map of a page",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s --url https://example.com/story           Rendered page in headless Chromium
  %(prog)s --url https://example.com --highlight     Outline the main text column
  %(prog)s --html page.html --static                 Parse only (no layout features)
  %(prog)s --html page.html -o features.json         Save to file""",
    )
    source = p_features.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", type=str, metavar="URL", help="Page to load")
    source.add_argument("--html", type=str, metavar="PATH", help="Local HTML file to load")
    p_features.add_argument("--static", action="store_true", help="Skip the browser; geometry features are 0")
    p_features.add_argument("--base-url", type=str, metavar="URL", help="Document URL for --static (paging links)")
    p_features.add_argument("--highlight", action="store_true", help="Debug: draw borders on the peak text column")
    p_features.add_argument("--headed", action="store_true", help="Show the browser window")
    p_features.add_argument("-o", "--output", type=str, metavar="PATH", help="Write JSON to PATH instead of stdout")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.highlight:
        settings = replace(settings, highlight=True)
    configure_cli(settings, verbose=args.verbose, json_logs=args.json_logs, log_level=args.log_level)

    commands = {"features": cmd_features}
    try:
        commands[args.command](args, settings)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except (DistillableError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
