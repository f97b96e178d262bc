"""Quill exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class QuillError(Exception):
    """Base exception for all Quill failures."""


class QuillConfigError(QuillError):
    """Raised for invalid runtime configuration."""


class QuillStoreError(QuillError):
    """Raised for key-value backend read and write failures."""


class QuillQuotaError(QuillStoreError):
    """Raised by a backend when a write would exceed its capacity."""


class QuillSnapshotError(QuillError):
    """Raised for project snapshot and text archive export failures."""


class QuillRunSpecError(QuillError):
    """Raised for invalid or unsupported run-spec configuration."""
