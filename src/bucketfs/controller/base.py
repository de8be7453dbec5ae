"""Flat object-store capability consumed by the namespace emulation core."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from bucketfs.models import ObjectListing, StorageItemInfo


@runtime_checkable
class ObjectStoreClient(Protocol):
    """
    Minimal flat surface of an object store.

    Implementations carry their own retry/backoff and raise the bucketfs
    error taxonomy (NotFoundError, FileAlreadyExistsError, StorageIOError, ...).
    """

    def get_object_metadata(self, bucket: str, key: str) -> Optional[StorageItemInfo]:
        """Return the object's metadata, or None if it does not exist."""
        ...

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> ObjectListing:
        """List keys under prefix; with a delimiter, only immediate children."""
        ...

    def create_object(
        self,
        bucket: str,
        key: str,
        data: bytes = b"",
        *,
        overwrite: bool = True,
    ) -> StorageItemInfo:
        ...

    def read_object(
        self,
        bucket: str,
        key: str,
        offset: int = 0,
        length: Optional[int] = None,
    ) -> bytes:
        ...

    def copy_object(
        self,
        src_bucket: str,
        src_key: str,
        dst_bucket: str,
        dst_key: str,
    ) -> StorageItemInfo:
        ...

    def delete_object(self, bucket: str, key: str) -> None:
        ...

    def bucket_exists(self, bucket: str) -> bool:
        ...

    def get_bucket_metadata(self, bucket: str) -> Optional[StorageItemInfo]:
        ...

    def list_buckets(self) -> list[StorageItemInfo]:
        ...

    def create_bucket(self, bucket: str) -> StorageItemInfo:
        ...

    def delete_bucket(self, bucket: str) -> None:
        ...

    def close(self) -> None:
        ...
