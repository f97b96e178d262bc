"""Runtime configuration model for Quill.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CAPACITY_BYTES,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_COMPACTION_THRESHOLD,
    DEFAULT_DATA_FILE,
    DEFAULT_RETENTION_DAYS,
)
from core.errors import QuillConfigError


@dataclass(frozen=True)
class QuillConfig:
    """Validated runtime configuration.

    Attributes:
        data_file: JSON file backing the persistent key-value store.
        compaction_threshold: Value length above which compaction applies.
        chunk_size: Maximum characters stored per chunk entry.
        retention_days: Days after which stamped entries expire.
        capacity_bytes: Store budget used for usage percentage reports.
    """

    data_file: Path
    compaction_threshold: int = DEFAULT_COMPACTION_THRESHOLD
    chunk_size: int = DEFAULT_CHUNK_SIZE
    retention_days: int = DEFAULT_RETENTION_DAYS
    capacity_bytes: int = DEFAULT_CAPACITY_BYTES

    @classmethod
    def from_env(cls) -> "QuillConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            QuillConfigError: If environment values are invalid.
        """
        data_file_value = os.getenv("QUILL_DATA_FILE", str(DEFAULT_DATA_FILE))
        return cls(
            data_file=Path(data_file_value).expanduser().resolve(),
            compaction_threshold=_read_positive_int(
                "QUILL_COMPACTION_THRESHOLD", DEFAULT_COMPACTION_THRESHOLD
            ),
            chunk_size=_read_positive_int("QUILL_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            retention_days=_read_positive_int("QUILL_RETENTION_DAYS", DEFAULT_RETENTION_DAYS),
            capacity_bytes=_read_positive_int("QUILL_CAPACITY_BYTES", DEFAULT_CAPACITY_BYTES),
        )


def _read_positive_int(variable_name: str, default_value: int) -> int:
    """Read and validate a positive integer environment value.

    Args:
        variable_name: Environment variable name.
        default_value: Value used when the variable is unset.

    Returns:
        Parsed positive integer.

    Raises:
        QuillConfigError: If value is not a positive integer.
    """
    raw_value = os.getenv(variable_name)
    if raw_value is None or not raw_value.strip():
        return default_value
    try:
        parsed_value = int(raw_value)
    except ValueError as error:
        raise QuillConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if parsed_value < 1:
        raise QuillConfigError(
            f"Invalid {variable_name} value: expected value >= 1, got {parsed_value}. "
            f"Set {variable_name} to a positive integer."
        )
    return parsed_value
