"""Core constants used across Quill modules.

This module centralizes storage limits, reserved key names, and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_FILE = Path(".quill") / "storage.json"
DEFAULT_COMPACTION_THRESHOLD = 1000
DEFAULT_CHUNK_SIZE = 1024 * 50
DEFAULT_RETENTION_DAYS = 30
DEFAULT_CAPACITY_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_LEVEL = "WARNING"

LAST_MODIFIED_SUFFIX = "_last_modified"
COMPRESSED_SUFFIX = "_compressed"
CHUNKS_SUFFIX = "_chunks"
CHUNK_SUFFIX_PREFIX = "_chunk_"
COMPRESSED_MARKER = "true"

KEY_PREFIX = "novel_writer"
RAG_PROVIDER_KEY = "novel_writer_rag_provider"
RAG_API_KEY_KEY = "novel_writer_rag_api_key"
RAG_BASE_URL_KEY = "novel_writer_rag_base_url"
RAG_MODEL_KEY = "novel_writer_rag_model"
WRITING_PROVIDER_KEY = "novel_writer_writing_provider"
WRITING_API_KEY_KEY = "novel_writer_writing_api_key"
WRITING_BASE_URL_KEY = "novel_writer_writing_base_url"
WRITING_MODEL_KEY = "novel_writer_writing_model"
SETTING_KEYS = (
    RAG_PROVIDER_KEY,
    RAG_API_KEY_KEY,
    RAG_BASE_URL_KEY,
    RAG_MODEL_KEY,
    WRITING_PROVIDER_KEY,
    WRITING_API_KEY_KEY,
    WRITING_BASE_URL_KEY,
    WRITING_MODEL_KEY,
)
MODULE7_CONTENT_KEY = "novel_writer_module7_content"
MODULE7_SUGGESTION_KEY = "novel_writer_module7_suggestion"
PROJECT_BACKUP_KEY = "novel_writer_project_backup"
LAST_SAVE_TIME_KEY = "novel_writer_last_save_time"
MODULE_IDS = (
    "module1",
    "module2",
    "module2_5",
    "module3",
    "module4",
    "module5",
    "module6",
    "module7",
)

SNAPSHOT_FORMAT_VERSION = "1.0"
SNAPSHOT_JSON_INDENT = 2

ARCHIVE_OUTLINE_PATH = "大纲/outline.txt"
ARCHIVE_DETAILED_OUTLINE_PATH = "细纲/detailed_outline.txt"
ARCHIVE_CHAPTER_DIR = "正文"
ARCHIVE_FRAGMENT_PREFIX = "未命名片段"
