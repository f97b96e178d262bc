"""Read-only usage analysis and capacity reporting.

This module walks the store once and aggregates entry counts and sizes
for totals, compacted, oversized, and expired entries, along with the
savings the next compaction pass would achieve. It never writes.
"""

from __future__ import annotations

import json
from datetime import datetime

from core.logging_config import get_logger
from core.storage_keys import (
    is_last_modified_key,
    last_modified_key,
    parse_chunk_key,
)
from core.types import OptimizedStorageStats, StorageAnalysis, StorageStats
from store.backends import snapshot_keys
from store.compaction import compaction_candidate, is_compacted
from store.context import StorageContext
from store.expiration import is_expired

_LOGGER = get_logger(__name__)


def analyze_storage(context: StorageContext) -> StorageAnalysis:
    """Aggregate usage figures in a single pass.

    Chunk entries count as expired when the logical key owning them is
    expired, so the expired size matches what reclamation would free.

    Args:
        context: Storage context.

    Returns:
        Usage analysis.
    """
    backend = context.backend
    now = context.now()
    expiry_cache: dict[str, bool] = {}
    totals = dict.fromkeys(
        (
            "total_keys",
            "total_size",
            "compressed_keys",
            "compressed_size",
            "large_keys",
            "large_size",
            "expired_keys",
            "expired_size",
            "compression_opportunities",
            "potential_savings",
        ),
        0,
    )
    for key in snapshot_keys(backend):
        value = backend.get(key)
        if not value:
            continue
        size = len(value)
        totals["total_keys"] += 1
        totals["total_size"] += size
        if is_compacted(context, key):
            totals["compressed_keys"] += 1
            totals["compressed_size"] += size
        if size > context.compaction_threshold:
            totals["large_keys"] += 1
            totals["large_size"] += size
        compacted_value = compaction_candidate(context, key, value)
        if compacted_value is not None:
            totals["compression_opportunities"] += 1
            totals["potential_savings"] += size - len(compacted_value)
        if _owner_expired(context, _expiry_owner(key), now, expiry_cache):
            totals["expired_keys"] += 1
            totals["expired_size"] += size
    return StorageAnalysis(**totals)


def storage_stats(context: StorageContext) -> StorageStats:
    """Measure raw usage as the serialized length of every entry.

    Args:
        context: Storage context.

    Returns:
        Used characters, capacity budget, and usage percentage.
    """
    backend = context.backend
    entries = {key: backend.get(key) for key in snapshot_keys(backend)}
    used = len(json.dumps(entries, ensure_ascii=False, separators=(",", ":")))
    return StorageStats(
        used=used,
        total=context.capacity_bytes,
        percentage=_percentage(used, context.capacity_bytes),
    )


def optimized_storage_stats(context: StorageContext) -> OptimizedStorageStats:
    """Report usage derived from a storage analysis.

    Args:
        context: Storage context.

    Returns:
        Usage figures together with the analysis they came from.
    """
    analysis = analyze_storage(context)
    used = analysis.total_size
    return OptimizedStorageStats(
        used=used,
        total=context.capacity_bytes,
        percentage=_percentage(used, context.capacity_bytes),
        analysis=analysis,
    )


def _expiry_owner(key: str) -> str:
    """Return the logical key whose stamp governs expiry of an entry."""
    parsed = parse_chunk_key(key)
    if parsed is not None:
        return parsed[0]
    return key


def _owner_expired(
    context: StorageContext,
    owner_key: str,
    now: datetime,
    cache: dict[str, bool],
) -> bool:
    if owner_key in cache:
        return cache[owner_key]
    expired = False
    if not is_last_modified_key(owner_key):
        raw_marker = context.backend.get(last_modified_key(owner_key))
        if raw_marker:
            try:
                expired = is_expired(context, raw_marker, now)
            except ValueError:
                _LOGGER.warning("last_modified_malformed", key=owner_key, value=raw_marker)
    cache[owner_key] = expired
    return expired


def _percentage(used: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return used / total * 100
