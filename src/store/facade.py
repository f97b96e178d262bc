"""Typed key-value facade over the storage backend.

This module provides string and JSON reads and writes, and keeps the
project-wide last-save timestamp current after every user-level write.
"""

from __future__ import annotations

import functools
import json
from typing import Any, Callable, TypeVar

from core.constants import LAST_SAVE_TIME_KEY
from core.logging_config import get_logger
from core.timestamps import to_iso
from store.context import StorageContext

_LOGGER = get_logger(__name__)

_Result = TypeVar("_Result")


class KeyValueFacade:
    """Read/write/delete operations with last-save bookkeeping."""

    def __init__(self, context: StorageContext) -> None:
        self._context = context

    @property
    def context(self) -> StorageContext:
        """Return the storage context this facade writes through."""
        return self._context

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when unset."""
        return self._context.backend.get(key)

    def set(self, key: str, value: str, *, touch: bool = True) -> None:
        """Write one value.

        Writes to the last-save key itself store the given timestamp and
        never trigger a refresh.

        Args:
            key: Entry key.
            value: String value.
            touch: Refresh the last-save timestamp after the write.
        """
        if key == LAST_SAVE_TIME_KEY:
            self.set_last_save_time(value)
            return
        self._context.backend.set(key, value)
        if touch:
            self.set_last_save_time()

    def remove(self, key: str) -> None:
        """Delete one entry when present."""
        self._context.backend.remove(key)

    def get_json(self, key: str) -> Any | None:
        """Return a decoded JSON value.

        Args:
            key: Entry key.

        Returns:
            Decoded payload, or None when unset, empty, or malformed.
        """
        raw_value = self.get(key)
        if not raw_value:
            return None
        try:
            return json.loads(raw_value)
        except json.JSONDecodeError:
            _LOGGER.debug("json_value_malformed", key=key)
            return None

    def set_json(self, key: str, value: Any) -> None:
        """Encode value as compact JSON and write it."""
        self.set(key, encode_json(value))

    def last_save_time(self) -> str | None:
        """Return the ISO-8601 time of the last user-level write."""
        return self.get(LAST_SAVE_TIME_KEY)

    def set_last_save_time(self, value: str | None = None) -> None:
        """Write the last-save timestamp without refreshing it again.

        Args:
            value: ISO-8601 timestamp; the context clock is used when omitted.
        """
        timestamp = value if value is not None else to_iso(self._context.now())
        self._context.backend.set(LAST_SAVE_TIME_KEY, timestamp)

    def clear_all(self) -> None:
        """Delete every entry in the store."""
        self._context.backend.clear()
        _LOGGER.info("store_cleared")


def encode_json(value: Any) -> str:
    """Encode a JSON payload in the compact form stored by the editor."""
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def auto_save(
    facade: KeyValueFacade, key: str
) -> Callable[[Callable[..., _Result]], Callable[..., _Result]]:
    """Persist a function's return value as JSON after every call.

    Args:
        facade: Facade used for the write.
        key: Entry key receiving the encoded result.

    Returns:
        Decorator wrapping the target function.
    """

    def decorator(function: Callable[..., _Result]) -> Callable[..., _Result]:
        @functools.wraps(function)
        def wrapper(*args: Any, **kwargs: Any) -> _Result:
            result = function(*args, **kwargs)
            facade.set_json(key, result)
            return result

        return wrapper

    return decorator
