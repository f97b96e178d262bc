"""Reserved key namespace and metadata key helpers.

Every logical key may own a family of metadata entries. This module
builds those derived keys and classifies keys found during store scans.
"""

from __future__ import annotations

import re

from core.constants import (
    CHUNK_SUFFIX_PREFIX,
    CHUNKS_SUFFIX,
    COMPRESSED_SUFFIX,
    KEY_PREFIX,
    LAST_MODIFIED_SUFFIX,
)

_CHUNK_KEY_PATTERN = re.compile(r"^(?P<base>.+)_chunk_(?P<index>\d+)$")


def module_input_key(module_id: str) -> str:
    """Return the key holding a module's JSON input."""
    return f"{KEY_PREFIX}_{module_id}_input"


def module_output_key(module_id: str) -> str:
    """Return the key holding a module's text output."""
    return f"{KEY_PREFIX}_{module_id}_output"


def last_modified_key(key: str) -> str:
    """Return the last-modified marker key for a logical key."""
    return f"{key}{LAST_MODIFIED_SUFFIX}"


def compressed_key(key: str) -> str:
    """Return the compaction marker key for a logical key."""
    return f"{key}{COMPRESSED_SUFFIX}"


def chunks_key(key: str) -> str:
    """Return the chunk-count key for a logical key."""
    return f"{key}{CHUNKS_SUFFIX}"


def chunk_key(key: str, index: int) -> str:
    """Return the key of one chunk segment."""
    return f"{key}{CHUNK_SUFFIX_PREFIX}{index}"


def is_last_modified_key(key: str) -> bool:
    """Return whether key is a last-modified marker."""
    return key.endswith(LAST_MODIFIED_SUFFIX) and len(key) > len(LAST_MODIFIED_SUFFIX)


def base_key_of_last_modified(key: str) -> str:
    """Strip the last-modified suffix from a marker key."""
    return key[: -len(LAST_MODIFIED_SUFFIX)]


def parse_chunk_key(key: str) -> tuple[str, int] | None:
    """Split a chunk key into its logical key and segment index.

    Args:
        key: Candidate chunk key.

    Returns:
        ``(base_key, index)`` pair, or None when key is not a chunk key.
    """
    match = _CHUNK_KEY_PATTERN.match(key)
    if match is None:
        return None
    return match.group("base"), int(match.group("index"))


def is_metadata_key(key: str) -> bool:
    """Return whether key belongs to another key's metadata family."""
    if key.endswith((LAST_MODIFIED_SUFFIX, COMPRESSED_SUFFIX, CHUNKS_SUFFIX)):
        return True
    return parse_chunk_key(key) is not None
