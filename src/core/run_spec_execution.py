"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec steps to client operations so different
entry points can execute one declarative maintenance plan without drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from core.errors import QuillRunSpecError, QuillSnapshotError
from core.report_lines import (
    analysis_lines,
    compaction_lines,
    optimization_lines,
    reclaim_lines,
    stats_lines,
)
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.types import (
    CompactionResult,
    OptimizationReport,
    OptimizedStorageStats,
    ReclaimResult,
    StorageAnalysis,
    StorageStats,
)


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    def with_data_file(self, data_file: str) -> Any: ...

    def analyze(self) -> StorageAnalysis: ...

    def stats(self) -> StorageStats: ...

    def optimized_stats(self) -> OptimizedStorageStats: ...

    def compact(self) -> CompactionResult: ...

    def reclaim(self) -> ReclaimResult: ...

    def optimize(self) -> OptimizationReport: ...

    def backup(self) -> str: ...

    def restore(self) -> bool: ...

    def write_project_export(self, output_path: str) -> Path: ...

    def import_project_file(self, input_path: str) -> bool: ...

    def write_text_archive(self, output_path: str) -> Path | None: ...


@dataclass(frozen=True)
class RunSpecExecutionContext:
    """In-memory context used to execute run-spec steps."""

    client: RunSpecClient


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a parsed run-spec object and return output lines."""
    execution_client = (
        client.with_data_file(spec.defaults.data_file) if spec.defaults.data_file else client
    )
    context = RunSpecExecutionContext(client=execution_client)
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(context, step))
    return tuple(output_lines)


def _execute_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    client = context.client
    if step.command == "analyze":
        return analysis_lines(client.analyze())
    if step.command == "stats":
        if step.flag("optimized"):
            return stats_lines(client.optimized_stats())
        return stats_lines(client.stats())
    if step.command == "compact":
        return compaction_lines(client.compact())
    if step.command == "reclaim":
        return reclaim_lines(client.reclaim())
    if step.command == "optimize":
        return optimization_lines(client.optimize())
    if step.command == "backup":
        return (f"backup_size={len(client.backup())}",)
    if step.command == "restore":
        return _execute_restore_step(context)
    if step.command == "export":
        return (_execute_export_step(context, step),)
    if step.command == "import":
        return _execute_import_step(context, step)
    if step.command == "export-txt":
        return (_execute_export_txt_step(context, step),)
    raise QuillRunSpecError(f"Unsupported run-spec command '{step.command}'.")


def _execute_restore_step(context: RunSpecExecutionContext) -> tuple[str, ...]:
    if not context.client.restore():
        raise QuillSnapshotError(
            "Run-spec restore failed: no backup exists or it is malformed. "
            "Add a 'backup' step before 'restore'."
        )
    return ("restored=true",)


def _execute_export_step(context: RunSpecExecutionContext, step: RunSpecStep) -> str:
    return str(context.client.write_project_export(step.text("output")))


def _execute_import_step(
    context: RunSpecExecutionContext,
    step: RunSpecStep,
) -> tuple[str, ...]:
    input_path = step.text("input")
    if not context.client.import_project_file(input_path):
        raise QuillSnapshotError(
            f"Project document at {input_path} is not a valid snapshot. "
            "Export a fresh document and retry."
        )
    return ("imported=true",)


def _execute_export_txt_step(context: RunSpecExecutionContext, step: RunSpecStep) -> str:
    archive_path = context.client.write_text_archive(step.text("output"))
    return str(archive_path) if archive_path is not None else "-"
