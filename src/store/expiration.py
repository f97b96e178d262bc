"""Retention-window reclamation.

This module deletes entries whose last-modified stamp is older than the
retention window, together with their marker and chunk family.
"""

from __future__ import annotations

from datetime import datetime

from core.errors import QuillStoreError
from core.logging_config import get_logger
from core.storage_keys import base_key_of_last_modified, is_last_modified_key
from core.timestamps import parse_marker
from core.types import ReclaimResult
from store.backends import snapshot_keys
from store.chunking import discard_chunk_family
from store.context import StorageContext

_LOGGER = get_logger(__name__)


def is_expired(context: StorageContext, raw_marker: str, now: datetime) -> bool:
    """Return whether a last-modified marker lies past the retention window.

    Raises:
        ValueError: If the marker cannot be parsed.
    """
    return now - parse_marker(raw_marker) > context.retention


def reclaim_expired(context: StorageContext) -> ReclaimResult:
    """Delete every entry past the retention window.

    Malformed markers are reported and skipped; the scan always finishes.

    Args:
        context: Storage context.

    Returns:
        Logical entries reclaimed and characters freed. Freed characters
        include the primary value and every chunk of the family.
    """
    backend = context.backend
    now = context.now()
    keys = snapshot_keys(backend)
    reclaimed = 0
    freed_bytes = 0
    for key in keys:
        if not is_last_modified_key(key):
            continue
        raw_marker = backend.get(key)
        if not raw_marker:
            continue
        try:
            expired = is_expired(context, raw_marker, now)
        except ValueError:
            _LOGGER.warning("last_modified_malformed", key=key, value=raw_marker)
            continue
        if not expired:
            continue
        data_key = base_key_of_last_modified(key)
        try:
            entry_bytes = _reclaim_family(context, data_key, key, keys)
        except QuillStoreError as error:
            _LOGGER.warning("reclaim_entry_failed", key=data_key, error=str(error))
            continue
        reclaimed += 1
        freed_bytes += entry_bytes
        _LOGGER.debug("expired_entry_reclaimed", key=data_key, freed_bytes=entry_bytes)
    _LOGGER.info("expired_entries_reclaimed", reclaimed=reclaimed, freed_bytes=freed_bytes)
    return ReclaimResult(reclaimed=reclaimed, freed_bytes=freed_bytes)


def _reclaim_family(
    context: StorageContext,
    data_key: str,
    marker_key: str,
    known_keys: list[str],
) -> int:
    """Remove one logical entry and its metadata.

    Returns:
        Characters held by the primary value and its chunks.
    """
    backend = context.backend
    primary_value = backend.get(data_key)
    freed_bytes = len(primary_value) if primary_value else 0
    backend.remove(marker_key)
    backend.remove(data_key)
    freed_bytes += discard_chunk_family(context, data_key, known_keys)
    return freed_bytes
