"""Public SDK surface for Quill.

This module provides a stable import path for library users.
It re-exports the primary client, storage backends, and result models.
"""

from __future__ import annotations

from core.config import QuillConfig
from core.types import (
    CompactionResult,
    ModuleData,
    OptimizationReport,
    OptimizedStorageStats,
    ReclaimResult,
    StorageAnalysis,
    StorageStats,
)
from store.analysis import analyze_storage, optimized_storage_stats, storage_stats
from store.backends import JsonFileBackend, KeyValueBackend, MemoryBackend
from store.compaction import compact_store
from store.context import StorageContext, build_storage_context
from store.expiration import reclaim_expired
from store.facade import KeyValueFacade, auto_save
from store.optimizer import optimize
from store.project_snapshot import create_backup, export_project, import_project, restore_backup
from store.smart_io import smart_load, smart_save
from store.storage_sdk import QuillClient

__all__ = [
    "CompactionResult",
    "JsonFileBackend",
    "KeyValueBackend",
    "KeyValueFacade",
    "MemoryBackend",
    "ModuleData",
    "OptimizationReport",
    "OptimizedStorageStats",
    "QuillClient",
    "QuillConfig",
    "ReclaimResult",
    "StorageAnalysis",
    "StorageContext",
    "StorageStats",
    "analyze_storage",
    "auto_save",
    "build_storage_context",
    "compact_store",
    "create_backup",
    "export_project",
    "import_project",
    "optimize",
    "optimized_storage_stats",
    "reclaim_expired",
    "restore_backup",
    "smart_load",
    "smart_save",
    "storage_stats",
]
