"""Project snapshot export, import, backup, and restore.

This module serializes every setting, module input/output pair, and
content field into one JSON document and applies such documents back.
Import never half-applies a malformed document: parse failures leave
the store untouched.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from core.constants import (
    MODULE7_CONTENT_KEY,
    MODULE7_SUGGESTION_KEY,
    MODULE_IDS,
    PROJECT_BACKUP_KEY,
    RAG_API_KEY_KEY,
    SETTING_KEYS,
    SNAPSHOT_FORMAT_VERSION,
    SNAPSHOT_JSON_INDENT,
    WRITING_API_KEY_KEY,
)
from core.errors import QuillSnapshotError, QuillStoreError
from core.logging_config import get_logger
from core.storage_keys import module_input_key, module_output_key
from core.timestamps import to_iso
from core.types import ModuleData
from store.context import StorageContext
from store.facade import KeyValueFacade, encode_json
from store.smart_io import drop_stale_family, smart_load

_LOGGER = get_logger(__name__)


def get_settings(context: StorageContext) -> dict[str, str]:
    """Return every reserved setting, empty string when unset."""
    facade = KeyValueFacade(context)
    return {key: facade.get(key) or "" for key in SETTING_KEYS}


def get_all_modules_data(context: StorageContext) -> dict[str, ModuleData]:
    """Return input/output pairs of modules that hold any data.

    Args:
        context: Storage context.

    Returns:
        Mapping of module id to its persisted data.
    """
    modules: dict[str, ModuleData] = {}
    for module_id in MODULE_IDS:
        module_data = ModuleData(
            input=_load_json(context, module_input_key(module_id)),
            output=smart_load(context, module_output_key(module_id)),
        )
        if module_data.has_data:
            modules[module_id] = module_data
    return modules


def has_any_data(context: StorageContext) -> bool:
    """Return whether the project holds modules, content, or API keys."""
    if get_all_modules_data(context):
        return True
    facade = KeyValueFacade(context)
    return bool(
        smart_load(context, MODULE7_CONTENT_KEY)
        or facade.get(RAG_API_KEY_KEY)
        or facade.get(WRITING_API_KEY_KEY)
    )


def build_project_document(context: StorageContext) -> dict[str, Any]:
    """Assemble the snapshot document as a JSON-ready mapping."""
    modules = get_all_modules_data(context)
    return {
        "version": SNAPSHOT_FORMAT_VERSION,
        "exportTime": to_iso(context.now()),
        "settings": get_settings(context),
        "modules": {
            module_id: {
                "input": module_data.input,
                "output": module_data.output,
                "hasData": True,
            }
            for module_id, module_data in modules.items()
        },
        "module7Content": smart_load(context, MODULE7_CONTENT_KEY),
        "module7Suggestion": smart_load(context, MODULE7_SUGGESTION_KEY),
    }


def export_project(context: StorageContext) -> str:
    """Serialize the whole project into a pretty-printed JSON document.

    Args:
        context: Storage context.

    Returns:
        Snapshot document text.
    """
    document = json.dumps(
        build_project_document(context),
        ensure_ascii=False,
        indent=SNAPSHOT_JSON_INDENT,
    )
    _LOGGER.info("project_exported", size=len(document))
    return document


def import_project(context: StorageContext, document: str) -> bool:
    """Apply a snapshot document to the store.

    Each present, truthy field is written independently; absent fields
    leave existing values untouched. Field types are not validated.

    Args:
        context: Storage context.
        document: Snapshot document text.

    Returns:
        True when applied; False when the document is not a JSON object
        or the store refused a write.
    """
    try:
        payload = json.loads(document)
    except (json.JSONDecodeError, TypeError) as error:
        _LOGGER.warning("project_import_malformed", error=str(error))
        return False
    if not isinstance(payload, dict):
        _LOGGER.warning("project_import_malformed", error="expected JSON object at top level")
        return False
    facade = KeyValueFacade(context)
    try:
        written = _apply_document(context, facade, payload)
    except QuillStoreError as error:
        _LOGGER.error("project_import_failed", error=str(error))
        return False
    facade.set_last_save_time()
    _LOGGER.info("project_imported", written=written)
    return True


def create_backup(context: StorageContext) -> str:
    """Export the project and store it under the backup key.

    A previous backup is overwritten.

    Args:
        context: Storage context.

    Returns:
        Stored snapshot document.
    """
    document = export_project(context)
    _write_logical(context, KeyValueFacade(context), PROJECT_BACKUP_KEY, document)
    _LOGGER.info("backup_created", size=len(document))
    return document


def restore_backup(context: StorageContext) -> bool:
    """Import the stored backup.

    Args:
        context: Storage context.

    Returns:
        False when no backup exists or it cannot be applied.
    """
    document = smart_load(context, PROJECT_BACKUP_KEY)
    if not document:
        _LOGGER.warning("backup_missing", key=PROJECT_BACKUP_KEY)
        return False
    return import_project(context, document)


def _apply_document(
    context: StorageContext,
    facade: KeyValueFacade,
    payload: Mapping[str, Any],
) -> int:
    """Write every present field of a parsed document.

    Returns:
        Number of entries written.
    """
    written = 0
    settings = payload.get("settings")
    if isinstance(settings, Mapping):
        for key, value in settings.items():
            if value:
                facade.set(str(key), _as_text(value))
                written += 1
    modules = payload.get("modules")
    if isinstance(modules, Mapping):
        for module_id, module_data in modules.items():
            if not isinstance(module_data, Mapping):
                continue
            if module_data.get("input"):
                input_key = module_input_key(str(module_id))
                _write_logical(context, facade, input_key, encode_json(module_data["input"]))
                written += 1
            if module_data.get("output"):
                output_key = module_output_key(str(module_id))
                _write_logical(context, facade, output_key, _as_text(module_data["output"]))
                written += 1
    for field_name, key in (
        ("module7Content", MODULE7_CONTENT_KEY),
        ("module7Suggestion", MODULE7_SUGGESTION_KEY),
    ):
        if payload.get(field_name):
            _write_logical(context, facade, key, _as_text(payload[field_name]))
            written += 1
    return written


def _write_logical(
    context: StorageContext,
    facade: KeyValueFacade,
    key: str,
    value: str,
) -> None:
    """Write a plain value through the facade, dropping stale chunks first."""
    drop_stale_family(context, key)
    facade.set(key, value)


def _load_json(context: StorageContext, key: str) -> Any | None:
    """Decode a JSON value stored plainly or as a chunk family.

    Returns:
        Decoded payload, or None when unset, empty, or malformed.
    """
    raw_value = smart_load(context, key)
    if not raw_value:
        return None
    try:
        return json.loads(raw_value)
    except json.JSONDecodeError:
        _LOGGER.warning("module_input_malformed", key=key)
        return None


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def write_project_export(context: StorageContext, output_path: str) -> Path:
    """Export the project into a JSON file.

    Args:
        context: Storage context.
        output_path: Destination file path.

    Returns:
        Written file path.

    Raises:
        QuillSnapshotError: If the file cannot be written.
    """
    destination = Path(output_path).expanduser().resolve()
    document = export_project(context)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(document + "\n", encoding="utf-8")
    except OSError as error:
        raise QuillSnapshotError(
            f"Failed to write project export to {destination}: {error}. "
            "Choose a writable output path and retry."
        ) from error
    return destination


def import_project_file(context: StorageContext, input_path: str) -> bool:
    """Apply a snapshot document read from a file.

    Args:
        context: Storage context.
        input_path: Snapshot document path.

    Returns:
        Result of ``import_project``.

    Raises:
        QuillSnapshotError: If the file cannot be read.
    """
    source = Path(input_path).expanduser().resolve()
    try:
        document = source.read_text(encoding="utf-8")
    except OSError as error:
        raise QuillSnapshotError(
            f"Failed to read project document at {source}: {error}. "
            "Check the input path and retry."
        ) from error
    return import_project(context, document)
