"""Key-value backends behind the storage core.

This module defines the synchronous string store contract the core relies
on, plus an in-memory backend and a JSON-file backend for CLI sessions.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from core.errors import QuillQuotaError, QuillStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class KeyValueBackend(Protocol):
    """Synchronous string key-value store with stable enumeration."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def key_count(self) -> int: ...

    def key_at(self, index: int) -> str | None: ...

    def clear(self) -> None: ...


class MemoryBackend:
    """Insertion-ordered in-process store.

    Usage is measured as the summed length of keys and values. When a
    capacity is given, writes that would exceed it are refused.
    """

    def __init__(
        self,
        entries: dict[str, str] | None = None,
        capacity_bytes: int | None = None,
    ) -> None:
        self._entries: dict[str, str] = dict(entries or {})
        self._capacity_bytes = capacity_bytes
        self._key_order: tuple[str, ...] | None = None

    def get(self, key: str) -> str | None:
        """Return the value for key, or None when unset."""
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        """Write one entry.

        Raises:
            QuillQuotaError: If the write would exceed capacity.
        """
        if self._capacity_bytes is not None:
            projected = self.used_bytes() - _entry_size(key, self._entries.get(key))
            projected += _entry_size(key, value)
            if projected > self._capacity_bytes:
                raise QuillQuotaError(
                    f"Writing '{key}' needs {projected} bytes but capacity is "
                    f"{self._capacity_bytes}. Reclaim or compact entries and retry."
                )
        if key not in self._entries:
            self._key_order = None
        self._entries[key] = value
        self._after_write()

    def remove(self, key: str) -> None:
        """Delete key when present."""
        if key in self._entries:
            del self._entries[key]
            self._key_order = None
            self._after_write()

    def key_count(self) -> int:
        """Return the number of stored entries."""
        return len(self._entries)

    def key_at(self, index: int) -> str | None:
        """Return the key at an enumeration index, or None when out of range."""
        if self._key_order is None:
            self._key_order = tuple(self._entries)
        if 0 <= index < len(self._key_order):
            return self._key_order[index]
        return None

    def clear(self) -> None:
        """Delete every entry."""
        self._entries.clear()
        self._key_order = None
        self._after_write()

    def used_bytes(self) -> int:
        """Return summed key and value lengths."""
        return sum(_entry_size(key, value) for key, value in self._entries.items())

    def to_dict(self) -> dict[str, str]:
        """Return a copy of all entries."""
        return dict(self._entries)

    def _after_write(self) -> None:
        """Hook run after every mutation."""


class JsonFileBackend(MemoryBackend):
    """Memory backend persisted to one JSON object file.

    Each mutation rewrites the file before returning.
    """

    def __init__(self, path: Path, capacity_bytes: int | None = None) -> None:
        """Open or create a file-backed store.

        Args:
            path: JSON file holding the entries.
            capacity_bytes: Optional hard write limit.

        Raises:
            QuillStoreError: If the file exists but is unreadable.
        """
        self._path = path
        super().__init__(_read_entries_file(path), capacity_bytes=capacity_bytes)

    @property
    def path(self) -> Path:
        """Return the backing file path."""
        return self._path

    def _after_write(self) -> None:
        payload = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(payload + "\n", encoding="utf-8")
        except OSError as error:
            raise QuillStoreError(
                f"Failed to write store file at {self._path}: {error}. "
                "Check file permissions and free disk space."
            ) from error


def snapshot_keys(backend: KeyValueBackend) -> list[str]:
    """Copy the key enumeration so a scan can mutate the store safely.

    Args:
        backend: Store to enumerate.

    Returns:
        Keys in enumeration order.
    """
    keys: list[str] = []
    for index in range(backend.key_count()):
        key = backend.key_at(index)
        if key is not None:
            keys.append(key)
    return keys


def _entry_size(key: str, value: str | None) -> int:
    if value is None:
        return 0
    return len(key) + len(value)


def _read_entries_file(path: Path) -> dict[str, str]:
    """Read persisted entries.

    Args:
        path: JSON store file.

    Returns:
        Entry mapping, empty when the file does not exist yet.

    Raises:
        QuillStoreError: If file content is not a JSON object of strings.
    """
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise QuillStoreError(
            f"Failed to parse store file at {path}: {error.msg}. "
            "Restore the file from a backup or remove it to start empty."
        ) from error
    except OSError as error:
        raise QuillStoreError(
            f"Failed to read store file at {path}: {error}. Check file permissions and retry."
        ) from error
    if not isinstance(payload, dict):
        raise QuillStoreError(
            f"Failed to parse store file at {path}: expected JSON object at top level."
        )
    entries = {str(key): value for key, value in payload.items() if isinstance(value, str)}
    if len(entries) != len(payload):
        _LOGGER.warning(
            "store_file_non_string_values_dropped",
            path=str(path),
            dropped=len(payload) - len(entries),
        )
    return entries
