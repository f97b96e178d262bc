"""Whitespace compaction transform.

This module shrinks prose-like text by normalizing whitespace. The
transform is lossy for exact whitespace, and compacted text is treated
as the canonical value from then on.
"""

from __future__ import annotations

import re

from core.constants import DEFAULT_COMPACTION_THRESHOLD

_WHITESPACE_RUN = re.compile(r"\s+")
_LINE_EDGE_WHITESPACE = re.compile(r"^\s+|\s+$", re.MULTILINE)
_BLANK_LINES = re.compile(r"\n\s*\n")


def should_compact(value: str | None, threshold: int = DEFAULT_COMPACTION_THRESHOLD) -> bool:
    """Return whether a value is long enough to compact.

    Args:
        value: Candidate value.
        threshold: Length that must be exceeded.

    Returns:
        True when the value is longer than threshold.
    """
    return bool(value) and len(value or "") > threshold


def compact(value: str, threshold: int = 0) -> str:
    """Normalize whitespace in text.

    Whitespace runs collapse to one space, line edges are stripped,
    blank lines collapse, and the result is trimmed. Applying the
    transform twice yields the same text as applying it once.

    Args:
        value: Text to compact.
        threshold: Values shorter than this are returned unchanged.

    Returns:
        Compacted text.
    """
    if not value or len(value) < threshold:
        return value
    collapsed = _WHITESPACE_RUN.sub(" ", value)
    collapsed = _LINE_EDGE_WHITESPACE.sub("", collapsed)
    collapsed = _BLANK_LINES.sub("\n", collapsed)
    return collapsed.strip()


def decompact(value: str) -> str:
    """Return the readable form of a compacted value (identity)."""
    return value
