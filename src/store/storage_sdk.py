"""Python SDK for project storage operations.

This module exposes one client object over the storage engines and the
snapshot protocol, bound to a single storage context.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import QuillConfig
from core.run_spec_execution import execute_run_spec_file
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
from store.backends import KeyValueBackend
from store.compaction import compact_store
from store.context import StorageContext, build_storage_context
from store.expiration import reclaim_expired
from store.facade import KeyValueFacade
from store.optimizer import optimize
from store.project_snapshot import (
    create_backup,
    export_project,
    get_all_modules_data,
    get_settings,
    has_any_data,
    import_project,
    import_project_file,
    restore_backup,
    write_project_export,
)
from store.smart_io import smart_load, smart_save
from store.text_archive_export import export_text_archive, write_text_archive


class QuillClient:
    """Primary SDK entry point for storage workflows."""

    def __init__(
        self,
        config: QuillConfig | None = None,
        backend: KeyValueBackend | None = None,
        context: StorageContext | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            backend: Optional store; a JSON file backend is opened when omitted.
            context: Optional prebuilt context; overrides config and backend.
        """
        self._config = config or QuillConfig.from_env()
        self._context = context or build_storage_context(self._config, backend)
        self._facade = KeyValueFacade(self._context)

    @property
    def context(self) -> StorageContext:
        """Return the storage context."""
        return self._context

    @property
    def facade(self) -> KeyValueFacade:
        """Return the key-value facade."""
        return self._facade

    def with_data_file(self, data_file: str) -> "QuillClient":
        """Clone the client with a different store file.

        Args:
            data_file: New JSON store path.

        Returns:
            New SDK client instance.
        """
        resolved_file = Path(data_file).expanduser().resolve()
        return QuillClient(replace(self._config, data_file=resolved_file))

    def load(self, key: str) -> str | None:
        """Load a logical value, chunked or plain."""
        return smart_load(self._context, key)

    def save(self, key: str, value: str) -> None:
        """Save a logical value, chunking it when oversized."""
        smart_save(self._context, key, value)

    def analyze(self) -> StorageAnalysis:
        """Run a read-only usage analysis."""
        return analyze_storage(self._context)

    def stats(self) -> StorageStats:
        """Return raw usage against the capacity budget."""
        return storage_stats(self._context)

    def optimized_stats(self) -> OptimizedStorageStats:
        """Return analysis-based usage against the capacity budget."""
        return optimized_storage_stats(self._context)

    def compact(self) -> CompactionResult:
        """Compact every eligible entry."""
        return compact_store(self._context)

    def reclaim(self) -> ReclaimResult:
        """Reclaim entries past the retention window."""
        return reclaim_expired(self._context)

    def optimize(self) -> OptimizationReport:
        """Reclaim, then compact."""
        return optimize(self._context)

    def settings(self) -> dict[str, str]:
        """Return every reserved setting."""
        return get_settings(self._context)

    def modules(self) -> dict[str, ModuleData]:
        """Return modules holding data."""
        return get_all_modules_data(self._context)

    def has_any_data(self) -> bool:
        """Return whether the project holds any user data."""
        return has_any_data(self._context)

    def export_project(self) -> str:
        """Serialize the project to a snapshot document."""
        return export_project(self._context)

    def import_project(self, document: str) -> bool:
        """Apply a snapshot document."""
        return import_project(self._context, document)

    def write_project_export(self, output_path: str) -> Path:
        """Export the project into a JSON file."""
        return write_project_export(self._context, output_path)

    def import_project_file(self, input_path: str) -> bool:
        """Apply a snapshot document read from a file."""
        return import_project_file(self._context, input_path)

    def backup(self) -> str:
        """Store a snapshot under the backup key."""
        return create_backup(self._context)

    def restore(self) -> bool:
        """Apply the stored backup."""
        return restore_backup(self._context)

    def export_text_archive(self) -> bytes | None:
        """Build a ZIP archive of outlines and chapters."""
        return export_text_archive(self._context)

    def write_text_archive(self, output_path: str) -> Path | None:
        """Write the ZIP archive of outlines and chapters to disk."""
        return write_text_archive(self._context, output_path)

    def last_save_time(self) -> str | None:
        """Return the last user-level write time."""
        return self._facade.last_save_time()

    def clear(self) -> None:
        """Delete every entry."""
        self._facade.clear_all()

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered command output lines.
        """
        return execute_run_spec_file(self, spec_file)
