"""Size-aware save and load of logical values.

Long values go to a chunk family; short ones are written plainly. Loads
read whichever representation is present.
"""

from __future__ import annotations

from core.storage_keys import last_modified_key
from core.timestamps import to_epoch_millis
from store.chunking import discard_chunk_family, is_chunked, load_chunked, store_chunked
from store.compaction import is_compacted
from store.context import StorageContext
from transforms.whitespace_compaction import decompact, should_compact


def smart_save(context: StorageContext, key: str, value: str) -> None:
    """Save a logical value and stamp its last-modified time.

    Args:
        context: Storage context.
        key: Logical key.
        value: Value to persist.
    """
    if should_compact(value, context.compaction_threshold):
        store_chunked(context, key, value)
    else:
        write_plain(context, key, value)
    context.backend.set(last_modified_key(key), to_epoch_millis(context.now()))


def smart_load(context: StorageContext, key: str) -> str | None:
    """Load a logical value from chunks or the plain entry.

    Args:
        context: Storage context.
        key: Logical key.

    Returns:
        Logical value, or None when nothing is stored.
    """
    if is_chunked(context, key):
        return load_chunked(context, key)
    value = context.backend.get(key)
    if not value:
        return None
    if is_compacted(context, key):
        return decompact(value)
    return value


def write_plain(context: StorageContext, key: str, value: str) -> None:
    """Write an uncompacted plain value, dropping any chunk family of key."""
    drop_stale_family(context, key)
    context.backend.set(key, value)


def drop_stale_family(context: StorageContext, key: str) -> None:
    """Remove chunks and the compaction marker before a plain overwrite."""
    if is_chunked(context, key) or is_compacted(context, key):
        discard_chunk_family(context, key)
