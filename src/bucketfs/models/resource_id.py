"""Identifier of a location in the bucket namespace."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from bucketfs.util.keys import (
    is_directory_key,
    parent_key,
    to_directory_key,
    to_leaf_key,
)


@dataclass(slots=True, frozen=True)
class ResourceId:
    """
    Identifies the global root, a bucket, or an object within a bucket.

    Notes:
        - Global root: bucket_name and object_name are both None.
        - Bucket: bucket_name only.
        - Storage object: both; a directory-like object's name ends with "/".
    """

    ROOT: ClassVar["ResourceId"]

    bucket_name: Optional[str] = None
    object_name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.bucket_name is not None and not self.bucket_name:
            raise ValueError("bucket_name must be None or a non-empty string")
        if self.object_name is not None:
            if self.bucket_name is None:
                raise ValueError("object_name requires a bucket_name")
            if not self.object_name:
                raise ValueError("object_name must be None or a non-empty string")

    @property
    def is_root(self) -> bool:
        return self.bucket_name is None

    @property
    def is_bucket(self) -> bool:
        return self.bucket_name is not None and self.object_name is None

    @property
    def is_storage_object(self) -> bool:
        return self.object_name is not None

    @property
    def is_directory(self) -> bool:
        """Root and buckets are directories; objects are if their name ends with '/'."""
        if self.object_name is None:
            return True
        return is_directory_key(self.object_name)

    @property
    def key_prefix(self) -> str:
        """Listing prefix for the children of this id ('' for a bucket)."""
        if self.object_name is None:
            return ""
        return to_directory_key(self.object_name)

    def to_directory_id(self) -> ResourceId:
        if self.object_name is None or self.is_directory:
            return self
        return ResourceId(self.bucket_name, to_directory_key(self.object_name))

    def to_leaf_id(self) -> ResourceId:
        if self.object_name is None or not self.is_directory:
            return self
        return ResourceId(self.bucket_name, to_leaf_key(self.object_name))

    def parent(self) -> ResourceId:
        """Return the containing directory, bucket, or root (root's parent is root)."""
        if self.is_root:
            return self
        if self.object_name is None:
            return ResourceId.ROOT
        parent = parent_key(self.object_name)
        if not parent:
            return ResourceId(self.bucket_name)
        return ResourceId(self.bucket_name, parent)

    def ancestors(self) -> list[ResourceId]:
        """Return every ancestor up to and including root, nearest first."""
        chain: list[ResourceId] = []
        cur = self
        while not cur.is_root:
            cur = cur.parent()
            chain.append(cur)
        return chain

    def child(self, name: str, *, directory: bool = False) -> ResourceId:
        """Return the id of an immediate child of this bucket/directory."""
        if self.is_root:
            return ResourceId(name.rstrip("/"))
        key = self.key_prefix + name
        if directory:
            key = to_directory_key(key)
        return ResourceId(self.bucket_name, key)

    def contains(self, other: ResourceId) -> bool:
        """True if other is strictly below this id in the hierarchy."""
        if self.is_root:
            return not other.is_root
        if other.bucket_name != self.bucket_name or other.object_name is None:
            return False
        prefix = self.key_prefix
        return other.object_name.startswith(prefix) and other.object_name != prefix

    def __str__(self) -> str:
        if self.is_root:
            return "<root>"
        if self.object_name is None:
            return f"{self.bucket_name}/"
        return f"{self.bucket_name}/{self.object_name}"


ResourceId.ROOT = ResourceId()
