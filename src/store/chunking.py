"""Chunked storage for oversized values.

This module splits one logical value into fixed-size segments stored
under derived keys and reassembles them in split order on read.
"""

from __future__ import annotations

import math
from typing import Iterable

from core.constants import COMPRESSED_MARKER
from core.errors import QuillConfigError
from core.logging_config import get_logger
from core.storage_keys import chunk_key, chunks_key, compressed_key, parse_chunk_key
from store.backends import snapshot_keys
from store.context import StorageContext
from transforms.whitespace_compaction import compact, decompact

_LOGGER = get_logger(__name__)


def store_chunked(
    context: StorageContext,
    key: str,
    value: str,
    chunk_size: int | None = None,
) -> int:
    """Store a value as a chunk family.

    Each segment is compacted on its own before being written; segments
    shorter than the compaction threshold are stored verbatim. Any plain
    value at ``key`` and any chunk left over from a longer earlier value
    are removed, so the chunk family is the only copy.

    Args:
        context: Storage context.
        key: Logical key.
        value: Value to split.
        chunk_size: Segment length; the context chunk size when omitted.

    Returns:
        Number of chunks written.

    Raises:
        QuillConfigError: If chunk size is not positive.
    """
    size = chunk_size if chunk_size is not None else context.chunk_size
    if size < 1:
        raise QuillConfigError(
            f"Invalid chunk size {size}: expected value >= 1. "
            "Set QUILL_CHUNK_SIZE to a positive integer."
        )
    backend = context.backend
    previous_count = _read_chunk_count(context, key)
    chunk_count = math.ceil(len(value) / size)
    backend.set(chunks_key(key), str(chunk_count))
    backend.set(compressed_key(key), COMPRESSED_MARKER)
    for index in range(chunk_count):
        segment = value[index * size : (index + 1) * size]
        backend.set(chunk_key(key, index), compact(segment, context.compaction_threshold))
    for index in range(chunk_count, previous_count or 0):
        backend.remove(chunk_key(key, index))
    backend.remove(key)
    _LOGGER.debug("value_chunked", key=key, chunk_count=chunk_count, chunk_size=size)
    return chunk_count


def load_chunked(context: StorageContext, key: str) -> str | None:
    """Reassemble a chunked value.

    Missing segments contribute nothing and are reported as warnings.

    Args:
        context: Storage context.
        key: Logical key.

    Returns:
        Reassembled value, or None when key has no valid chunk family.
    """
    chunk_count = _read_chunk_count(context, key)
    if chunk_count is None:
        return None
    backend = context.backend
    is_compacted = backend.get(compressed_key(key)) == COMPRESSED_MARKER
    segments: list[str] = []
    for index in range(chunk_count):
        segment = backend.get(chunk_key(key, index))
        if segment is None:
            _LOGGER.warning("chunk_missing", key=key, index=index, chunk_count=chunk_count)
            continue
        segments.append(decompact(segment) if is_compacted else segment)
    return "".join(segments)


def is_chunked(context: StorageContext, key: str) -> bool:
    """Return whether key currently stores its value as chunks."""
    return context.backend.get(chunks_key(key)) is not None


def discard_chunk_family(
    context: StorageContext,
    key: str,
    known_keys: Iterable[str] | None = None,
) -> int:
    """Remove the chunk count, compaction marker, and every chunk of a key.

    Chunks are located by the stored count and by matching key names, so
    chunks beyond a stale or malformed count are removed too.

    Args:
        context: Storage context.
        key: Logical key.
        known_keys: Key enumeration to search; the live store when omitted.

    Returns:
        Characters held by the removed chunks.
    """
    backend = context.backend
    chunk_count = _read_chunk_count(context, key) or 0
    chunk_keys = {chunk_key(key, index) for index in range(chunk_count)}
    candidates = known_keys if known_keys is not None else snapshot_keys(backend)
    for candidate in candidates:
        parsed = parse_chunk_key(candidate)
        if parsed is not None and parsed[0] == key:
            chunk_keys.add(candidate)
    freed_bytes = 0
    for segment_key in sorted(chunk_keys):
        segment = backend.get(segment_key)
        if segment is None:
            continue
        freed_bytes += len(segment)
        backend.remove(segment_key)
    backend.remove(chunks_key(key))
    backend.remove(compressed_key(key))
    return freed_bytes


def _read_chunk_count(context: StorageContext, key: str) -> int | None:
    """Read the chunk count of a key.

    Args:
        context: Storage context.
        key: Logical key.

    Returns:
        Chunk count, or None when unset or malformed.
    """
    raw_count = context.backend.get(chunks_key(key))
    if raw_count is None:
        return None
    try:
        chunk_count = int(raw_count)
    except ValueError:
        _LOGGER.warning("chunk_count_malformed", key=key, value=raw_count)
        return None
    if chunk_count < 0:
        _LOGGER.warning("chunk_count_malformed", key=key, value=raw_count)
        return None
    return chunk_count
