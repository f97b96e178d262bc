"""Printable ``name=value`` lines for storage results.

CLI commands and run-spec steps render results through these helpers
so both entry points print identical output.
"""

from __future__ import annotations

from dataclasses import asdict

from core.types import (
    CompactionResult,
    OptimizationReport,
    OptimizedStorageStats,
    ReclaimResult,
    StorageAnalysis,
    StorageStats,
)


def analysis_lines(analysis: StorageAnalysis, prefix: str = "") -> tuple[str, ...]:
    """Render every analysis field on its own line."""
    return tuple(f"{prefix}{name}={value}" for name, value in asdict(analysis).items())


def stats_lines(stats: StorageStats | OptimizedStorageStats) -> tuple[str, ...]:
    """Render usage figures, followed by the analysis when present."""
    lines = (
        f"used={stats.used}",
        f"total={stats.total}",
        f"percentage={stats.percentage:.2f}",
    )
    if isinstance(stats, OptimizedStorageStats):
        return lines + analysis_lines(stats.analysis)
    return lines


def compaction_lines(result: CompactionResult) -> tuple[str, ...]:
    return (f"compacted={result.compacted}", f"saved_bytes={result.saved_bytes}")


def reclaim_lines(result: ReclaimResult) -> tuple[str, ...]:
    return (f"reclaimed={result.reclaimed}", f"freed_bytes={result.freed_bytes}")


def optimization_lines(report: OptimizationReport) -> tuple[str, ...]:
    """Render pass counts plus before/after analyses."""
    return (
        (
            f"reclaimed={report.reclaimed}",
            f"compacted={report.compacted}",
            f"saved_bytes={report.saved_bytes}",
        )
        + analysis_lines(report.analysis_before, prefix="before.")
        + analysis_lines(report.analysis_after, prefix="after.")
    )
