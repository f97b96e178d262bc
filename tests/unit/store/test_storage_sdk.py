"""Unit tests for the SDK client."""

from __future__ import annotations

from pathlib import Path

from core.config import QuillConfig
from store.backends import MemoryBackend
from store.storage_sdk import QuillClient


def _memory_client() -> QuillClient:
    return QuillClient(QuillConfig(data_file=Path("unused.json")), backend=MemoryBackend())


def test_client_save_and_load_round_trip() -> None:
    """Values saved through the client should load back unchanged."""
    client = _memory_client()
    client.save("note", "short note")

    assert client.load("note") == "short note"


def test_client_with_data_file_targets_new_store(tmp_path: Path) -> None:
    """Cloning with a data file should bind the clone to that file."""
    clone = _memory_client().with_data_file(str(tmp_path / "other.json"))
    clone.save("note", "hello")

    assert (tmp_path / "other.json").exists()


def test_client_has_any_data_tracks_content() -> None:
    """The client should report whether the project holds data."""
    client = _memory_client()
    empty = client.has_any_data()
    client.facade.set("novel_writer_module7_content", "draft")

    assert (empty, client.has_any_data()) == (False, True)


def test_client_backup_and_restore() -> None:
    """Backups taken through the client should restore."""
    client = _memory_client()
    client.facade.set("novel_writer_module7_content", "draft v1")
    client.backup()
    client.facade.set("novel_writer_module7_content", "draft v2")

    assert client.restore() and client.load("novel_writer_module7_content") == "draft v1"


def test_client_run_spec_executes_plan(tmp_path: Path) -> None:
    """The SDK should execute a YAML plan against the plan's store."""
    plan_file = tmp_path / "plan.yaml"
    plan_file.write_text(
        f"version: 1\ndefaults:\n  data_file: {tmp_path / 'store.json'}\n"
        "steps:\n  - command: reclaim\n",
        encoding="utf-8",
    )

    assert _memory_client().run_spec(str(plan_file)) == ("reclaimed=0", "freed_bytes=0")
