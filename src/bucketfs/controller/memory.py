"""In-memory object store with Cloud Storage listing semantics."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from bucketfs.errors import (
    DirectoryNotEmptyError,
    FileAlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
)
from bucketfs.models import ObjectListing, ResourceId, StorageItemInfo
from bucketfs.path import validate_bucket_name
from bucketfs.util.time import now_millis


@dataclass(slots=True)
class _StoredObject:
    data: bytes
    creation_time: int
    generation: int


@dataclass(slots=True)
class _StoredBucket:
    creation_time: int
    objects: dict[str, _StoredObject] = field(default_factory=dict)


class InMemoryObjectStore:
    """
    Flat bucket/key store kept in plain dicts.

    Every call holds a single lock, so each call is atomic on its own; a
    sequence of calls is not. Listings are returned in lexicographic key
    order, like Cloud Storage.
    """

    def __init__(self, *, clock: Callable[[], int] = now_millis) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._buckets: dict[str, _StoredBucket] = {}
        self._generation = 0

    # ----------------------------
    # Objects
    # ----------------------------
    def get_object_metadata(self, bucket: str, key: str) -> Optional[StorageItemInfo]:
        with self._lock:
            b = self._buckets.get(bucket)
            if b is None:
                return None
            obj = b.objects.get(key)
            if obj is None:
                return None
            return _object_info(bucket, key, obj)

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> ObjectListing:
        with self._lock:
            b = self._require_bucket(bucket)
            keys = sorted(k for k in b.objects if k.startswith(prefix))

            objects: list[StorageItemInfo] = []
            prefixes: list[str] = []
            for key in keys:
                if max_results is not None and len(objects) + len(prefixes) >= max_results:
                    break
                rest = key[len(prefix):]
                if delimiter:
                    idx = rest.find(delimiter)
                    if idx >= 0:
                        common = prefix + rest[: idx + len(delimiter)]
                        if not prefixes or prefixes[-1] != common:
                            prefixes.append(common)
                        continue
                objects.append(_object_info(bucket, key, b.objects[key]))

            return ObjectListing(objects=objects, prefixes=prefixes)

    def create_object(
        self,
        bucket: str,
        key: str,
        data: bytes = b"",
        *,
        overwrite: bool = True,
    ) -> StorageItemInfo:
        if not key:
            raise InvalidArgumentError("key must be a non-empty string")
        with self._lock:
            b = self._require_bucket(bucket)
            if not overwrite and key in b.objects:
                raise FileAlreadyExistsError(
                    "Object already exists",
                    details={"bucket": bucket, "key": key},
                )
            obj = _StoredObject(
                data=bytes(data),
                creation_time=self._clock(),
                generation=self._next_generation(),
            )
            b.objects[key] = obj
            return _object_info(bucket, key, obj)

    def read_object(
        self,
        bucket: str,
        key: str,
        offset: int = 0,
        length: Optional[int] = None,
    ) -> bytes:
        with self._lock:
            obj = self._require_object(bucket, key)
            if length is None:
                return obj.data[offset:]
            return obj.data[offset: offset + length]

    def copy_object(
        self,
        src_bucket: str,
        src_key: str,
        dst_bucket: str,
        dst_key: str,
    ) -> StorageItemInfo:
        with self._lock:
            src = self._require_object(src_bucket, src_key)
            dst = self._require_bucket(dst_bucket)
            obj = _StoredObject(
                data=src.data,
                creation_time=self._clock(),
                generation=self._next_generation(),
            )
            dst.objects[dst_key] = obj
            return _object_info(dst_bucket, dst_key, obj)

    def delete_object(self, bucket: str, key: str) -> None:
        with self._lock:
            self._require_object(bucket, key)
            del self._buckets[bucket].objects[key]

    # ----------------------------
    # Buckets
    # ----------------------------
    def bucket_exists(self, bucket: str) -> bool:
        with self._lock:
            return bucket in self._buckets

    def get_bucket_metadata(self, bucket: str) -> Optional[StorageItemInfo]:
        with self._lock:
            b = self._buckets.get(bucket)
            if b is None:
                return None
            return _bucket_info(bucket, b)

    def list_buckets(self) -> list[StorageItemInfo]:
        with self._lock:
            return [_bucket_info(name, b) for name, b in sorted(self._buckets.items())]

    def create_bucket(self, bucket: str) -> StorageItemInfo:
        validate_bucket_name(bucket)
        with self._lock:
            if bucket in self._buckets:
                raise FileAlreadyExistsError(
                    "Bucket already exists",
                    details={"bucket": bucket},
                )
            b = _StoredBucket(creation_time=self._clock())
            self._buckets[bucket] = b
            return _bucket_info(bucket, b)

    def delete_bucket(self, bucket: str) -> None:
        with self._lock:
            b = self._require_bucket(bucket)
            if b.objects:
                raise DirectoryNotEmptyError(
                    "Bucket is not empty",
                    details={"bucket": bucket, "objects": len(b.objects)},
                )
            del self._buckets[bucket]

    def close(self) -> None:
        return None

    # ----------------------------
    # Internals (caller holds the lock)
    # ----------------------------
    def _require_bucket(self, bucket: str) -> _StoredBucket:
        b = self._buckets.get(bucket)
        if b is None:
            raise NotFoundError("Bucket not found", details={"bucket": bucket})
        return b

    def _require_object(self, bucket: str, key: str) -> _StoredObject:
        obj = self._require_bucket(bucket).objects.get(key)
        if obj is None:
            raise NotFoundError("Object not found", details={"bucket": bucket, "key": key})
        return obj

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation


def _object_info(bucket: str, key: str, obj: _StoredObject) -> StorageItemInfo:
    return StorageItemInfo(
        resource_id=ResourceId(bucket, key),
        exists=True,
        creation_time=obj.creation_time,
        size=len(obj.data),
        content_type="application/octet-stream",
        generation=obj.generation,
    )


def _bucket_info(bucket: str, b: _StoredBucket) -> StorageItemInfo:
    return StorageItemInfo(
        resource_id=ResourceId(bucket),
        exists=True,
        creation_time=b.creation_time,
    )
