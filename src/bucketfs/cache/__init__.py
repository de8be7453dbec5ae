"""Metadata cache exports for bucketfs."""

from __future__ import annotations

from .metadata_cache import MetadataCache

__all__ = ["MetadataCache"]
