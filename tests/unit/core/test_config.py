"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import QuillConfig
from core.constants import DEFAULT_CHUNK_SIZE, DEFAULT_COMPACTION_THRESHOLD
from core.errors import QuillConfigError


def test_from_env_reads_data_file(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve the store file from environment."""
    monkeypatch.setenv("QUILL_DATA_FILE", "./.tmp-quill/store.json")

    config = QuillConfig.from_env()

    assert config.data_file.name == "store.json" and config.data_file.is_absolute()


def test_from_env_uses_defaults_when_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset tuning variables should fall back to storage defaults."""
    monkeypatch.delenv("QUILL_COMPACTION_THRESHOLD", raising=False)
    monkeypatch.delenv("QUILL_CHUNK_SIZE", raising=False)

    config = QuillConfig.from_env()

    assert (config.compaction_threshold, config.chunk_size) == (
        DEFAULT_COMPACTION_THRESHOLD,
        DEFAULT_CHUNK_SIZE,
    )


def test_from_env_reads_retention_days(monkeypatch: pytest.MonkeyPatch) -> None:
    """Retention window should be overridable from environment."""
    monkeypatch.setenv("QUILL_RETENTION_DAYS", "7")

    assert QuillConfig.from_env().retention_days == 7


def test_from_env_raises_for_non_numeric_chunk_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric chunk size."""
    monkeypatch.setenv("QUILL_CHUNK_SIZE", "not-a-number")

    with pytest.raises(QuillConfigError):
        QuillConfig.from_env()


def test_from_env_raises_for_zero_threshold(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject non-positive compaction thresholds."""
    monkeypatch.setenv("QUILL_COMPACTION_THRESHOLD", "0")

    with pytest.raises(QuillConfigError):
        QuillConfig.from_env()
