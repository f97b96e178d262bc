"""Integration test for a full storage maintenance cycle on disk."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

from core.config import QuillConfig
from core.storage_keys import module_output_key
from store.backends import JsonFileBackend
from store.context import build_storage_context
from store.storage_sdk import QuillClient
from tests.storage_fixtures import FIXED_NOW, millis_days_ago


def _client(store_file: Path) -> QuillClient:
    config = replace(QuillConfig.from_env(), data_file=store_file, chunk_size=1024)
    context = replace(build_storage_context(config), clock=lambda: FIXED_NOW)
    return QuillClient(config, context=context)


def test_save_age_optimize_and_reload(tmp_path: Path) -> None:
    """Stale entries should vanish and long chapters survive across reopen."""
    store_file = tmp_path / "store.json"
    client = _client(store_file)
    chapter = "潮" * 4000
    client.save(module_output_key("module4"), chapter)
    client.save("scratch", "throwaway notes")
    client.context.backend.set("scratch_last_modified", millis_days_ago(40))

    report = client.optimize()
    reopened = _client(store_file)

    assert (
        report.reclaimed,
        reopened.load("scratch"),
        reopened.load(module_output_key("module4")),
    ) == (1, None, chapter)


def test_export_into_fresh_store_then_text_archive(tmp_path: Path) -> None:
    """A project moved between stores should still export its manuscript."""
    source = _client(tmp_path / "source.json")
    source.save(module_output_key("module2"), "Outline of the drowned town")
    source.save(module_output_key("module3"), "第一章 归乡\n雾还没散。")
    export_file = source.write_project_export(str(tmp_path / "project.json"))

    target = _client(tmp_path / "target.json")
    imported = target.import_project_file(str(export_file))
    archive_path = target.write_text_archive(str(tmp_path / "novel.zip"))

    assert imported and archive_path is not None and archive_path.exists()


def test_clear_empties_backing_file(tmp_path: Path) -> None:
    """Clearing through the client should empty the file on disk."""
    store_file = tmp_path / "store.json"
    client = _client(store_file)
    client.save("note", "hello")

    client.clear()

    assert json.loads(store_file.read_text(encoding="utf-8")) == {} and (
        JsonFileBackend(store_file).key_count() == 0
    )
