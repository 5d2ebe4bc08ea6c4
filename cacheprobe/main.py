"""Command-line entry point.

Wiring only: read settings from the environment, pick patterns, run the
harness, print the report, and turn the tally into an exit status.

Usage:
    python -m cacheprobe [--pattern N ...] [--json]
    python -m cacheprobe --client glide --connection-type cluster
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from pydantic import ValidationError

from cacheprobe.application.services.harness import (
    DEFAULT_PATTERNS,
    PatternDefinition,
    run_patterns,
)
from cacheprobe.application.services.probe_runner import FlexibleProbeSettings
from cacheprobe.application.services.report_renderer import render, render_json, rule, tally
from cacheprobe.application.services.spec_builder import CLIENT_ALIASES, TOPOLOGY_ALIASES
from cacheprobe.core.config import Settings, get_settings
from cacheprobe.shared.telemetry.logging import get_logger, setup_logging
from cacheprobe.shared.utils.datetime import format_timestamp

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cacheprobe",
        description="Verify Redis/Valkey connectivity across client x topology patterns.",
    )
    parser.add_argument(
        "--pattern",
        type=int,
        action="append",
        metavar="N",
        help=f"Run only pattern N (1-{len(DEFAULT_PATTERNS)}); repeatable.",
    )
    parser.add_argument(
        "--client",
        choices=sorted(CLIENT_ALIASES),
        help="Run a single ad-hoc pattern with this client (needs --connection-type).",
    )
    parser.add_argument(
        "--connection-type",
        choices=sorted(TOPOLOGY_ALIASES),
        help="Topology for the ad-hoc pattern (needs --client).",
    )
    parser.add_argument("--namespace", help="Key prefix for probe keys (overrides REDIS_PREFIX).")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON.")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging.")
    return parser


def select_patterns(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> list[PatternDefinition]:
    """Resolve CLI arguments to the ordered list of patterns to run."""
    if (args.client is None) != (args.connection_type is None):
        parser.error("--client and --connection-type must be given together")
    if args.client is not None:
        if args.pattern:
            parser.error("--pattern cannot be combined with --client/--connection-type")
        name = f"Custom: {args.client} + {args.connection_type}"
        return [PatternDefinition(name, args.client, args.connection_type)]
    if not args.pattern:
        return list(DEFAULT_PATTERNS)
    selected: list[PatternDefinition] = []
    for number in args.pattern:
        if not 1 <= number <= len(DEFAULT_PATTERNS):
            parser.error(f"--pattern must be between 1 and {len(DEFAULT_PATTERNS)}, got {number}")
        selected.append(DEFAULT_PATTERNS[number - 1])
    return selected


def print_header(settings: Settings) -> None:
    print(rule())
    print(f"=== {settings.app_name}: Valkey/Redis connection pattern test ===")
    print(f"Endpoint: {settings.redis_host}")
    print(f"Port: {settings.redis_port}")
    print(f"Timestamp: {format_timestamp()}")
    print(rule())


def main(argv: Sequence[str] | None = None) -> int:
    """Run the harness; return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_USAGE
    # JSON goes to stdout on its own; logs move to stderr.
    setup_logging(debug=args.debug or settings.debug, stream=sys.stderr if args.json else None)
    patterns = select_patterns(parser, args)

    options = settings.to_options()
    if args.namespace:
        options["prefix"] = args.namespace
    flexible_settings = FlexibleProbeSettings.from_settings(settings)

    if not args.json:
        print_header(settings)
    results = asyncio.run(
        run_patterns(patterns, options, flexible_settings=flexible_settings)
    )
    print(render_json(results) if args.json else render(results))

    counts = tally(results)
    logger.debug("Tally: %s/%s", counts.succeeded, counts.total)
    return EXIT_OK if counts.all_passed else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
