"""Unit tests for the store-wide compaction pass."""

from __future__ import annotations

from core.types import CompactionResult
from store.chunking import is_chunked
from store.compaction import compact_store
from tests.storage_fixtures import memory_context, millis_days_ago

_LOOSE_TEXT = "word   " * 300


def test_compact_store_rewrites_oversized_entry() -> None:
    """Oversized whitespace-heavy entries should be compacted and marked."""
    context = memory_context({"chapter": _LOOSE_TEXT, "note": "short   note"})
    result = compact_store(context)
    backend = context.backend

    assert (
        result,
        backend.get("chapter"),
        backend.get("chapter_compressed"),
        backend.get("note"),
    ) == (
        CompactionResult(compacted=1, saved_bytes=2100 - 1499),
        " ".join(["word"] * 300),
        "true",
        "short   note",
    )


def test_compact_store_stamps_last_modified() -> None:
    """Rewritten entries should carry a fresh last-modified stamp."""
    context = memory_context({"chapter": _LOOSE_TEXT, "chapter_last_modified": millis_days_ago(10)})
    compact_store(context)

    assert context.backend.get("chapter_last_modified") == millis_days_ago(0)


def test_compact_store_second_pass_finds_nothing() -> None:
    """Compaction should be idempotent across passes."""
    context = memory_context({"chapter": _LOOSE_TEXT})
    compact_store(context)

    assert compact_store(context) == CompactionResult(compacted=0, saved_bytes=0)


def test_compact_store_skips_entries_that_would_not_shrink() -> None:
    """Entries without whitespace to remove should stay unmarked."""
    context = memory_context({"token_dump": "x" * 2000})

    result = compact_store(context)

    assert result.compacted == 0 and context.backend.get("token_dump_compressed") is None


def test_compact_store_skips_metadata_keys() -> None:
    """Chunk segments belong to their owner and are never compacted directly."""
    context = memory_context({"draft_chunks": "1", "draft_chunk_0": _LOOSE_TEXT})

    assert compact_store(context).compacted == 0


def test_compact_store_chunks_values_above_chunk_size() -> None:
    """A compacted value longer than the chunk size should move into chunks."""
    context = memory_context({"chapter": _LOOSE_TEXT}, chunk_size=500)
    result = compact_store(context)

    assert (
        result.compacted,
        is_chunked(context, "chapter"),
        context.backend.get("chapter"),
        context.backend.get("chapter_chunks"),
    ) == (1, True, None, "3")


def test_compact_store_includes_entry_at_threshold() -> None:
    """An entry exactly as long as the threshold should be compacted."""
    context = memory_context({"scene": "ab   " * 200})
    result = compact_store(context)

    assert (result.compacted, context.backend.get("scene")) == (1, ("ab " * 200).strip())
