"""Shared typed models.

This module defines immutable result models returned by the storage
engines, the snapshot protocol, and the SDK so interfaces stay explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CompactionResult:
    """Outcome of one store-wide compaction pass.

    Attributes:
        compacted: Number of entries rewritten in compacted form.
        saved_bytes: Characters saved across rewritten entries.
    """

    compacted: int = 0
    saved_bytes: int = 0


@dataclass(frozen=True)
class ReclaimResult:
    """Outcome of one expiration pass.

    Attributes:
        reclaimed: Number of logical entries removed.
        freed_bytes: Characters freed by primary values and their chunks.
    """

    reclaimed: int = 0
    freed_bytes: int = 0


@dataclass(frozen=True)
class StorageAnalysis:
    """Aggregate counts and sizes from one read-only store pass.

    Attributes:
        total_keys: Number of entries holding a non-empty value.
        total_size: Characters held by those entries.
        compressed_keys: Entries whose key carries a compaction marker.
        compressed_size: Characters held by compacted entries.
        large_keys: Entries longer than the compaction threshold.
        large_size: Characters held by large entries.
        expired_keys: Entries past the retention window.
        expired_size: Characters held by expired entries.
        compression_opportunities: Entries the next compaction pass would rewrite.
        potential_savings: Characters that pass would save.
    """

    total_keys: int = 0
    total_size: int = 0
    compressed_keys: int = 0
    compressed_size: int = 0
    large_keys: int = 0
    large_size: int = 0
    expired_keys: int = 0
    expired_size: int = 0
    compression_opportunities: int = 0
    potential_savings: int = 0


@dataclass(frozen=True)
class StorageStats:
    """Store usage against the configured capacity budget."""

    used: int
    total: int
    percentage: float


@dataclass(frozen=True)
class OptimizedStorageStats:
    """Usage figures derived from a storage analysis."""

    used: int
    total: int
    percentage: float
    analysis: StorageAnalysis


@dataclass(frozen=True)
class OptimizationReport:
    """Combined outcome of reclamation followed by compaction.

    Attributes:
        reclaimed: Logical entries removed by expiration.
        compacted: Entries rewritten by compaction.
        saved_bytes: Characters freed by both passes.
        analysis_before: Analysis taken before any mutation.
        analysis_after: Analysis taken after both passes.
    """

    reclaimed: int
    compacted: int
    saved_bytes: int
    analysis_before: StorageAnalysis
    analysis_after: StorageAnalysis


@dataclass(frozen=True)
class ModuleData:
    """Persisted input and output of one editor module.

    Attributes:
        input: Parsed JSON input payload, or None when unset.
        output: Plain-text output, or None when unset.
    """

    input: Any
    output: str | None

    @property
    def has_data(self) -> bool:
        """Return whether either side holds a value."""
        return bool(self.input) or bool(self.output)
