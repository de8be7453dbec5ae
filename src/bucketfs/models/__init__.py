"""Public model exports for bucketfs."""

from __future__ import annotations

from .file_info import FileInfo
from .item_info import StorageItemInfo
from .listing import ObjectListing
from .resource_id import ResourceId

__all__ = [
    "ResourceId",
    "StorageItemInfo",
    "FileInfo",
    "ObjectListing",
]
