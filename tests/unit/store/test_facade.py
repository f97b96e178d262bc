"""Unit tests for the key-value facade."""

from __future__ import annotations

from core.constants import LAST_SAVE_TIME_KEY
from store.facade import KeyValueFacade, auto_save
from tests.storage_fixtures import memory_context


def test_set_refreshes_last_save_time() -> None:
    """User-level writes should stamp the last-save time."""
    facade = KeyValueFacade(memory_context())
    facade.set("novel_writer_rag_model", "m-large")

    assert facade.last_save_time() == "2026-03-01T00:00:00.000Z"


def test_set_without_touch_leaves_last_save_time_unset() -> None:
    """Internal writes may skip the last-save refresh."""
    facade = KeyValueFacade(memory_context())
    facade.set("novel_writer_rag_model", "m-large", touch=False)

    assert facade.last_save_time() is None


def test_set_last_save_time_accepts_explicit_value() -> None:
    """An explicit last-save value should be stored as given."""
    facade = KeyValueFacade(memory_context())
    facade.set_last_save_time("2025-12-31T23:59:59.000Z")

    assert facade.get(LAST_SAVE_TIME_KEY) == "2025-12-31T23:59:59.000Z"


def test_get_json_returns_none_for_malformed_value() -> None:
    """Malformed JSON should read as absent."""
    facade = KeyValueFacade(memory_context({"settings": "{not json"}))

    assert (facade.get_json("settings"), facade.get_json("missing")) == (None, None)


def test_set_json_writes_compact_unescaped_text() -> None:
    """JSON values should be stored compactly with raw unicode."""
    facade = KeyValueFacade(memory_context())
    facade.set_json("novel_writer_module1_input", {"title": "潮汐", "chapters": 12})

    assert facade.get("novel_writer_module1_input") == '{"title":"潮汐","chapters":12}'


def test_auto_save_persists_return_value() -> None:
    """Decorated functions should have their results saved."""
    facade = KeyValueFacade(memory_context())

    @auto_save(facade, "novel_writer_module5_input")
    def build_input(genre: str) -> dict[str, str]:
        return {"genre": genre}

    result = build_input("mystery")

    assert facade.get_json("novel_writer_module5_input") == result == {"genre": "mystery"}


def test_clear_all_removes_every_entry() -> None:
    """Clearing should leave an empty store."""
    context = memory_context({"a": "1", "b": "2"})
    KeyValueFacade(context).clear_all()

    assert context.backend.key_count() == 0


def test_set_on_last_save_key_keeps_given_timestamp() -> None:
    """Writing the last-save key directly should store that value, not the clock time."""
    facade = KeyValueFacade(memory_context())
    facade.set(LAST_SAVE_TIME_KEY, "2020-01-01T00:00:00.000Z")

    assert facade.last_save_time() == "2020-01-01T00:00:00.000Z"
