"""Project snapshot command wiring for Quill CLI."""

from __future__ import annotations

import argparse
import sys
from typing import Any

from store.storage_sdk import QuillClient


def add_snapshot_commands(subparsers: Any) -> None:
    """Register export, import, backup, restore, and export-txt subcommands."""
    export_parser = subparsers.add_parser("export", help="Export the project as JSON")
    export_parser.add_argument("--output", help="Write to this file instead of stdout")
    import_parser = subparsers.add_parser("import", help="Import a project JSON document")
    import_parser.add_argument("input_file", help="Project document path")
    subparsers.add_parser("backup", help="Store a project snapshot under the backup key")
    subparsers.add_parser("restore", help="Apply the stored backup")
    txt_parser = subparsers.add_parser(
        "export-txt",
        help="Export outlines and chapters as a ZIP of text files",
    )
    txt_parser.add_argument("--output", required=True, help="Destination .zip path")


def run_export_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Print or write the project document."""
    if args.output:
        print(client.write_project_export(args.output))
    else:
        print(client.export_project())
    return 0


def run_import_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Apply a project document from disk."""
    if not client.import_project_file(args.input_file):
        print(f"error=project document at {args.input_file} is malformed", file=sys.stderr)
        return 1
    print("imported=true")
    return 0


def run_backup_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Store a backup snapshot."""
    document = client.backup()
    print(f"backup_size={len(document)}")
    return 0


def run_restore_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Apply the stored backup."""
    if not client.restore():
        print("error=no valid backup to restore", file=sys.stderr)
        return 1
    print("restored=true")
    return 0


def run_export_txt_command(client: QuillClient, args: argparse.Namespace) -> int:
    """Write the text archive."""
    archive_path = client.write_text_archive(args.output)
    if archive_path is None:
        print("error=no outline or manuscript content to export", file=sys.stderr)
        return 1
    print(archive_path)
    return 0
