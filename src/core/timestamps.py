"""Timestamp encoding for last-modified and last-save markers.

Last-modified markers are epoch milliseconds. Markers written by other
tools may be ISO-8601 strings, so parsing accepts both forms.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current aware UTC time."""
    return datetime.now(timezone.utc)


def to_epoch_millis(moment: datetime) -> str:
    """Encode a datetime as an epoch-milliseconds string."""
    return str(int(moment.timestamp() * 1000))


def to_iso(moment: datetime) -> str:
    """Encode a datetime as an ISO-8601 string with millisecond precision."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def parse_marker(raw_value: str) -> datetime:
    """Parse a stored timestamp marker.

    Args:
        raw_value: Epoch milliseconds or ISO-8601 text.

    Returns:
        Aware UTC datetime.

    Raises:
        ValueError: If the marker is in neither form.
    """
    stripped = raw_value.strip()
    if stripped.isdigit():
        try:
            return datetime.fromtimestamp(int(stripped) / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as error:
            raise ValueError(f"Epoch marker out of range: {stripped}") from error
    parsed = datetime.fromisoformat(stripped.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
