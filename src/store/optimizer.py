"""One-shot storage optimization.

This module chains reclamation and compaction between two analyses.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import OptimizationReport
from store.analysis import analyze_storage
from store.compaction import compact_store
from store.context import StorageContext
from store.expiration import reclaim_expired

_LOGGER = get_logger(__name__)


def optimize(context: StorageContext) -> OptimizationReport:
    """Reclaim expired entries, then compact what remains.

    Args:
        context: Storage context.

    Returns:
        Counts from both passes with analyses before and after.
    """
    analysis_before = analyze_storage(context)
    reclaim_result = reclaim_expired(context)
    compaction_result = compact_store(context)
    report = OptimizationReport(
        reclaimed=reclaim_result.reclaimed,
        compacted=compaction_result.compacted,
        saved_bytes=reclaim_result.freed_bytes + compaction_result.saved_bytes,
        analysis_before=analysis_before,
        analysis_after=analyze_storage(context),
    )
    _LOGGER.info(
        "storage_optimized",
        reclaimed=report.reclaimed,
        compacted=report.compacted,
        saved_bytes=report.saved_bytes,
    )
    return report
