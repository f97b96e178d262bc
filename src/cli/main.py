"""Quill CLI entry points.
This module exposes storage maintenance and project snapshot commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.maintenance_commands import (
    add_maintenance_commands,
    run_analyze_command,
    run_clear_command,
    run_compact_command,
    run_optimize_command,
    run_reclaim_command,
    run_stats_command,
)
from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from cli.snapshot_commands import (
    add_snapshot_commands,
    run_backup_command,
    run_export_command,
    run_export_txt_command,
    run_import_command,
    run_restore_command,
)
from core.config import QuillConfig
from core.constants import DEFAULT_LOG_LEVEL
from core.errors import QuillError
from core.logging_config import configure_logging
from store.storage_sdk import QuillClient

_COMMAND_HANDLERS = {
    "analyze": run_analyze_command,
    "stats": run_stats_command,
    "compact": run_compact_command,
    "reclaim": run_reclaim_command,
    "optimize": run_optimize_command,
    "clear": run_clear_command,
    "export": run_export_command,
    "import": run_import_command,
    "backup": run_backup_command,
    "restore": run_restore_command,
    "export-txt": run_export_txt_command,
    "run-spec": run_run_spec_command,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="quill", description="Quill project storage CLI")
    parser.add_argument("--data-file", help="Override QUILL_DATA_FILE for this command")
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Structured log level written to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_get_command(subparsers)
    _add_set_command(subparsers)
    add_maintenance_commands(subparsers)
    add_snapshot_commands(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Quill CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        client = _build_client(args.data_file)
        if args.command == "get":
            return _run_get_command(client, args)
        if args.command == "set":
            return _run_set_command(client, args)
        handler = _COMMAND_HANDLERS.get(args.command)
        if handler is not None:
            return handler(client, args)
    except QuillError as error:
        print(f"error={error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_file: str | None) -> QuillClient:
    """Build SDK client with optional data-file override.

    Args:
        data_file: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = QuillConfig.from_env()
    if data_file:
        config = replace(config, data_file=Path(data_file).expanduser().resolve())
    return QuillClient(config)


def _run_get_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Handle get command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code; 1 when the key holds no value.
    """
    value = client.load(args.key)
    if value is None:
        print(f"missing={args.key}", file=sys.stderr)
        return 1
    print(value)
    return 0


def _run_set_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Handle set command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    value = args.value
    if args.from_file:
        try:
            value = Path(args.from_file).read_text(encoding="utf-8")
        except OSError as error:
            print(f"error={error}", file=sys.stderr)
            return 1
    if value is None:
        print("error=provide a value or --from-file", file=sys.stderr)
        return 2
    client.save(args.key, value)
    print(f"saved={args.key}")
    return 0


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Print a logical value")
    parser.add_argument("key", help="Logical key")


def _add_set_command(subparsers: Any) -> None:
    """Register set subcommand."""
    parser = subparsers.add_parser(
        "set",
        help="Save a logical value, chunking it when oversized",
    )
    parser.add_argument("key", help="Logical key")
    parser.add_argument("value", nargs="?", help="Value to store")
    parser.add_argument("--from-file", help="Read the value from a UTF-8 text file")
