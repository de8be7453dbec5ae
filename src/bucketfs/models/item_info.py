"""Native item metadata reported by the backing object store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .resource_id import ResourceId


@dataclass(slots=True, frozen=True)
class StorageItemInfo:
    """
    Metadata of a root, bucket, or object as seen by the object store.

    Notes:
        - creation_time is epoch milliseconds; 0 when absent or unknown.
        - inferred=True marks a directory whose existence came from a listing
          probe (descendants exist) rather than from a marker object.
    """

    resource_id: ResourceId
    exists: bool = False
    creation_time: int = 0
    size: int = 0

    content_type: Optional[str] = None
    generation: Optional[int] = None
    md5_hash: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    inferred: bool = False

    @classmethod
    def root(cls) -> StorageItemInfo:
        return cls(resource_id=ResourceId.ROOT, exists=True)

    @classmethod
    def not_found(cls, resource_id: ResourceId) -> StorageItemInfo:
        return cls(resource_id=resource_id, exists=False)

    @classmethod
    def inferred_directory(cls, resource_id: ResourceId) -> StorageItemInfo:
        return cls(resource_id=resource_id, exists=True, inferred=True)

    @property
    def is_directory(self) -> bool:
        return self.resource_id.is_directory
