"""Plain-text archive export of manuscript content.

This module packs outlines and manuscript text into a ZIP archive,
splitting manuscript sources into one file per chapter heading.
"""

from __future__ import annotations

import io
import re
import zipfile
from pathlib import Path

from core.constants import (
    ARCHIVE_CHAPTER_DIR,
    ARCHIVE_DETAILED_OUTLINE_PATH,
    ARCHIVE_FRAGMENT_PREFIX,
    ARCHIVE_OUTLINE_PATH,
    MODULE7_CONTENT_KEY,
)
from core.errors import QuillSnapshotError
from core.logging_config import get_logger
from core.storage_keys import module_output_key
from store.context import StorageContext
from store.smart_io import smart_load

_LOGGER = get_logger(__name__)

_CHAPTER_HEADING = re.compile(
    r"(?:^|\n)(?:#{1,6}\s+)?"
    r"(第[一二三四五六七八九十百千万\d]+章|Chapter\s+\d+|第[一二三四五六七八九十百千万\d]+节)",
    re.IGNORECASE,
)
_ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')

_MANUSCRIPT_SOURCES = (
    ("开篇", module_output_key("module3")),
    ("章节批量", module_output_key("module4")),
    ("AI辅助写作", MODULE7_CONTENT_KEY),
)


def build_archive_files(context: StorageContext) -> dict[str, str]:
    """Collect archive member paths and their text.

    Args:
        context: Storage context.

    Returns:
        Ordered mapping of archive path to file content. Later chapters
        with the same title replace earlier ones.
    """
    files: dict[str, str] = {}
    outline = smart_load(context, module_output_key("module2"))
    if outline:
        files[ARCHIVE_OUTLINE_PATH] = outline
    detailed_outline = smart_load(context, module_output_key("module2_5"))
    if detailed_outline:
        files[ARCHIVE_DETAILED_OUTLINE_PATH] = detailed_outline
    fragment_count = 0
    for source_name, key in _MANUSCRIPT_SOURCES:
        content = smart_load(context, key)
        if not content:
            continue
        parts = _CHAPTER_HEADING.split(content)
        if len(parts) == 1:
            files[f"{ARCHIVE_CHAPTER_DIR}/{source_name}.txt"] = content
            continue
        preface = parts[0].strip()
        if preface:
            fragment_count += 1
            files[f"{ARCHIVE_CHAPTER_DIR}/{ARCHIVE_FRAGMENT_PREFIX}_{fragment_count}.txt"] = preface
        for index in range(1, len(parts), 2):
            title = parts[index].strip()
            body = parts[index + 1].strip() if index + 1 < len(parts) else ""
            file_name = _ILLEGAL_FILENAME_CHARS.sub("_", title) + ".txt"
            files[f"{ARCHIVE_CHAPTER_DIR}/{file_name}"] = body
    return files


def export_text_archive(context: StorageContext) -> bytes | None:
    """Build a ZIP archive of outlines and chapters.

    Args:
        context: Storage context.

    Returns:
        Archive bytes, or None when there is nothing to export.
    """
    files = build_archive_files(context)
    if not files:
        return None
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for member_path, content in files.items():
            archive.writestr(member_path, content)
    _LOGGER.info("text_archive_built", file_count=len(files))
    return buffer.getvalue()


def write_text_archive(context: StorageContext, output_path: str) -> Path | None:
    """Write the text archive to disk.

    Args:
        context: Storage context.
        output_path: Destination ``.zip`` path.

    Returns:
        Written archive path, or None when there is nothing to export.

    Raises:
        QuillSnapshotError: If the archive cannot be written.
    """
    archive_bytes = export_text_archive(context)
    if archive_bytes is None:
        return None
    destination = Path(output_path).expanduser().resolve()
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(archive_bytes)
    except OSError as error:
        raise QuillSnapshotError(
            f"Failed to write text archive to {destination}: {error}. "
            "Choose a writable output path and retry."
        ) from error
    return destination
