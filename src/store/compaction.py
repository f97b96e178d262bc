"""Store-wide compaction pass.

This module rewrites oversized entries in compacted form and marks
them so later passes leave them alone.
"""

from __future__ import annotations

from core.constants import COMPRESSED_MARKER
from core.errors import QuillStoreError
from core.logging_config import get_logger
from core.storage_keys import compressed_key, is_metadata_key, last_modified_key
from core.timestamps import to_epoch_millis
from core.types import CompactionResult
from store.backends import snapshot_keys
from store.chunking import store_chunked
from store.context import StorageContext
from transforms.whitespace_compaction import compact

_LOGGER = get_logger(__name__)


def is_compacted(context: StorageContext, key: str) -> bool:
    """Return whether key carries a compaction marker."""
    return context.backend.get(compressed_key(key)) == COMPRESSED_MARKER


def compaction_candidate(context: StorageContext, key: str, value: str | None) -> str | None:
    """Return the compacted form of an entry the compaction pass would rewrite.

    Args:
        context: Storage context.
        key: Entry key.
        value: Current entry value.

    Returns:
        Strictly shorter compacted value, or None when the entry is not eligible.
    """
    if is_metadata_key(key) or value is None:
        return None
    if len(value) < context.compaction_threshold:
        return None
    if is_compacted(context, key):
        return None
    compacted_value = compact(value)
    if len(compacted_value) >= len(value):
        return None
    return compacted_value


def compact_store(context: StorageContext) -> CompactionResult:
    """Compact every eligible entry in the store.

    Entries whose compacted form still exceeds the chunk size are moved
    into a chunk family. Every rewritten entry gets a fresh
    last-modified stamp. A second pass finds nothing to do.

    Args:
        context: Storage context.

    Returns:
        Entry count rewritten and characters saved.
    """
    backend = context.backend
    compacted = 0
    saved_bytes = 0
    for key in snapshot_keys(backend):
        value = backend.get(key)
        compacted_value = compaction_candidate(context, key, value)
        if compacted_value is None or value is None:
            continue
        try:
            if len(compacted_value) > context.chunk_size:
                store_chunked(context, key, compacted_value)
            else:
                backend.set(key, compacted_value)
                backend.set(compressed_key(key), COMPRESSED_MARKER)
            backend.set(last_modified_key(key), to_epoch_millis(context.now()))
        except QuillStoreError as error:
            _LOGGER.warning("compaction_entry_failed", key=key, error=str(error))
            continue
        compacted += 1
        saved_bytes += len(value) - len(compacted_value)
    _LOGGER.info("store_compacted", compacted=compacted, saved_bytes=saved_bytes)
    return CompactionResult(compacted=compacted, saved_bytes=saved_bytes)
