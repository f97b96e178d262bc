"""Explicit storage state threaded through every core operation.

The context bundles the backend with thresholds, the retention window,
and a clock, so engines never read ambient process state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from core.config import QuillConfig
from core.constants import (
    DEFAULT_CAPACITY_BYTES,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_COMPACTION_THRESHOLD,
    DEFAULT_RETENTION_DAYS,
)
from core.timestamps import utc_now
from store.backends import JsonFileBackend, KeyValueBackend


@dataclass(frozen=True)
class StorageContext:
    """Backend reference plus storage tuning.

    Attributes:
        backend: Store holding every entry.
        compaction_threshold: Value length above which compaction applies.
        chunk_size: Maximum characters per chunk entry.
        retention: Age after which stamped entries expire.
        capacity_bytes: Budget used for usage percentage reports.
        clock: Returns the current aware UTC time.
    """

    backend: KeyValueBackend
    compaction_threshold: int = DEFAULT_COMPACTION_THRESHOLD
    chunk_size: int = DEFAULT_CHUNK_SIZE
    retention: timedelta = timedelta(days=DEFAULT_RETENTION_DAYS)
    capacity_bytes: int = DEFAULT_CAPACITY_BYTES
    clock: Callable[[], datetime] = field(default=utc_now)

    def now(self) -> datetime:
        """Return the current time from the context clock."""
        return self.clock()


def build_storage_context(
    config: QuillConfig,
    backend: KeyValueBackend | None = None,
) -> StorageContext:
    """Build a storage context from runtime config.

    Args:
        config: Runtime configuration.
        backend: Optional backend; a JSON file backend at
            ``config.data_file`` is opened when omitted.

    Returns:
        Storage context.
    """
    resolved_backend = backend if backend is not None else JsonFileBackend(config.data_file)
    return StorageContext(
        backend=resolved_backend,
        compaction_threshold=config.compaction_threshold,
        chunk_size=config.chunk_size,
        retention=timedelta(days=config.retention_days),
        capacity_bytes=config.capacity_bytes,
    )
