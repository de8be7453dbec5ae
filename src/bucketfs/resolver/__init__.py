"""Path resolution exports for bucketfs."""

from __future__ import annotations

from .file_info_resolver import FileInfoResolver

__all__ = ["FileInfoResolver"]
