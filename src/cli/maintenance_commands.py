"""Storage maintenance command wiring for Quill CLI."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from core.report_lines import (
    analysis_lines,
    compaction_lines,
    optimization_lines,
    reclaim_lines,
    stats_lines,
)
from store.storage_sdk import QuillClient


def add_maintenance_commands(subparsers: Any) -> None:
    """Register analysis, compaction, expiration, and clear subcommands."""
    subparsers.add_parser("analyze", help="Report entry counts and sizes without writing")
    stats_parser = subparsers.add_parser("stats", help="Report usage against the capacity budget")
    stats_parser.add_argument(
        "--optimized",
        action="store_true",
        help="Measure usage from the storage analysis instead of raw serialization",
    )
    subparsers.add_parser("compact", help="Compact every oversized entry")
    subparsers.add_parser("reclaim", help="Delete entries past the retention window")
    subparsers.add_parser("optimize", help="Reclaim expired entries, then compact")
    clear_parser = subparsers.add_parser("clear", help="Delete every entry in the store")
    clear_parser.add_argument(
        "--yes",
        action="store_true",
        help="Confirm deletion; nothing is removed without it",
    )


def run_analyze_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Print the storage analysis."""
    _print_lines(analysis_lines(client.analyze()))
    return 0


def run_stats_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Print usage figures."""
    stats = client.optimized_stats() if args.optimized else client.stats()
    _print_lines(stats_lines(stats))
    return 0


def run_compact_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Run a store-wide compaction pass."""
    _print_lines(compaction_lines(client.compact()))
    return 0


def run_reclaim_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Run an expiration pass."""
    _print_lines(reclaim_lines(client.reclaim()))
    return 0


def run_optimize_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Run reclamation followed by compaction."""
    _print_lines(optimization_lines(client.optimize()))
    return 0


def run_clear_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Delete every entry after explicit confirmation."""
    if not args.yes:
        print("error=refusing to clear without --yes; this cannot be undone", file=sys.stderr)
        return 1
    client.clear()
    print("cleared=true")
    return 0


def _print_lines(lines: tuple[str, ...]) -> None:
    for line in lines:
        print(line)
