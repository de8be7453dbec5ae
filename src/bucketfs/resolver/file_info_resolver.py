"""Existence and metadata resolution for hierarchical paths."""

from __future__ import annotations

import logging
from functools import partial
from typing import Optional

from bucketfs.cache import MetadataCache
from bucketfs.controller.base import ObjectStoreClient
from bucketfs.emulator.batch import BatchExecutor
from bucketfs.emulator.policy import DEFAULT_POLICY, BehaviorPolicy
from bucketfs.errors import NotFoundError, store_errors
from bucketfs.models import FileInfo, ResourceId, StorageItemInfo
from bucketfs.path import PATH_DELIMITER, PathCodec

logger = logging.getLogger(__name__)


class FileInfoResolver:
    """
    Resolves paths to FileInfo against an ObjectStoreClient.

    Absence is never an error here: an unknown path resolves to a FileInfo
    with exists=False. Only list_file_info() raises for a missing path.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        codec: PathCodec,
        cache: Optional[MetadataCache] = None,
        policy: BehaviorPolicy = DEFAULT_POLICY,
        batch: Optional[BatchExecutor] = None,
    ) -> None:
        self._client = client
        self._codec = codec
        self._cache = cache
        self._policy = policy
        self._batch = batch

    @property
    def codec(self) -> PathCodec:
        return self._codec

    # ----------------------------
    # Item level
    # ----------------------------
    def get_item_info(self, resource_id: ResourceId) -> StorageItemInfo:
        """Return the store's view of exactly resource_id (no leaf/dir conversion)."""
        if resource_id.is_root:
            return StorageItemInfo.root()

        if self._cache is not None:
            cached = self._cache.get_item(resource_id)
            if cached is not None:
                return cached
            token = self._cache.begin()

        with store_errors("get_item_info", resource=str(resource_id)):
            item = self._fetch_item_info(resource_id)

        if self._cache is not None:
            self._cache.put_item(resource_id, item, token)
        return item

    def _fetch_item_info(self, rid: ResourceId) -> StorageItemInfo:
        bucket = rid.bucket_name
        if rid.object_name is None:
            info = self._client.get_bucket_metadata(bucket)
            return info if info is not None else StorageItemInfo.not_found(rid)

        info = self._client.get_object_metadata(bucket, rid.object_name)
        if info is not None:
            return info
        if not rid.is_directory or not self._policy.infer_implicit_directories:
            return StorageItemInfo.not_found(rid)

        # No marker: the directory exists only if something lives under it.
        try:
            listing = self._client.list_objects(bucket, prefix=rid.object_name, max_results=1)
        except NotFoundError:
            return StorageItemInfo.not_found(rid)
        if listing.objects or listing.prefixes:
            return StorageItemInfo.inferred_directory(rid)
        return StorageItemInfo.not_found(rid)

    # ----------------------------
    # FileInfo level
    # ----------------------------
    def get_file_info(self, path: str) -> FileInfo:
        """
        Resolve path; "gs://b/d0" resolves to "gs://b/d0/" when only the directory exists.
        """
        rid = self._codec.to_resource_id(path, allow_empty_object_name=True)
        item = self.get_item_info(rid)

        if not item.exists and rid.is_storage_object and not rid.is_directory:
            dir_item = self.get_item_info(rid.to_directory_id())
            if dir_item.exists:
                item = dir_item

        return FileInfo.from_item_info(self._codec.to_path(item.resource_id), item)

    def get_file_infos(self, paths: list[str]) -> list[FileInfo]:
        """Resolve every path; the result is one-to-one with, and in the order of, paths."""
        for path in paths:
            self._codec.to_resource_id(path, allow_empty_object_name=True)

        if self._batch is None or len(paths) < 2:
            return [self.get_file_info(p) for p in paths]
        return self._batch.run(
            "get_file_infos",
            [(p, partial(self.get_file_info, p)) for p in paths],
        )

    def exists(self, path: str) -> bool:
        return self.get_file_info(path).exists

    # ----------------------------
    # Listing
    # ----------------------------
    def list_file_info(self, path: str) -> list[FileInfo]:
        """
        List immediate children of a directory, or [self] for a leaf.

        Raises:
            NotFoundError: if path does not exist.
        """
        info = self.get_file_info(path)
        if not info.exists:
            raise NotFoundError("Path not found", details={"path": info.path})
        if not info.is_directory:
            return [info]
        return self._to_file_infos(self.list_children(info.resource_id))

    def list_file_names(self, file_info: FileInfo) -> list[str]:
        """
        Child paths of an existing directory, or [path] for a leaf.

        A missing leaf yields [path] and a missing directory yields [];
        neither is an error.
        """
        if not file_info.is_directory:
            return [file_info.path]
        if not file_info.exists:
            return []
        return [f.path for f in self._to_file_infos(self.list_children(file_info.resource_id))]

    def list_children(self, directory: ResourceId) -> list[StorageItemInfo]:
        """Immediate children of root (buckets), a bucket, or a directory."""
        if self._cache is not None:
            cached = self._cache.get_listing(directory)
            if cached is not None:
                return list(cached)
            token = self._cache.begin()

        with store_errors("list_children", resource=str(directory)):
            if directory.is_root:
                children = list(self._client.list_buckets())
            else:
                children = self._list_directory(directory)

        if self._cache is not None:
            self._cache.put_listing(directory, children, token)
        return children

    def _list_directory(self, directory: ResourceId) -> list[StorageItemInfo]:
        bucket = directory.bucket_name
        prefix = directory.key_prefix
        listing = self._client.list_objects(bucket, prefix=prefix, delimiter=PATH_DELIMITER)

        children = [
            obj for obj in listing.objects
            if obj.resource_id.object_name != prefix
        ]
        markers = self._marker_infos(bucket, listing.prefixes)
        for sub_prefix, marker in zip(listing.prefixes, markers):
            if marker is not None:
                children.append(marker)
            elif self._policy.infer_implicit_directories:
                children.append(StorageItemInfo.inferred_directory(ResourceId(bucket, sub_prefix)))
            else:
                logger.debug("Skipping implicit directory %s/%s", bucket, sub_prefix)
        return children

    def _marker_infos(self, bucket: str, prefixes: list[str]) -> list[Optional[StorageItemInfo]]:
        if self._batch is None or len(prefixes) < 2:
            return [self._client.get_object_metadata(bucket, p) for p in prefixes]
        return self._batch.run(
            "list.markers",
            [(p, partial(self._client.get_object_metadata, bucket, p)) for p in prefixes],
        )

    def _to_file_infos(self, items: list[StorageItemInfo]) -> list[FileInfo]:
        return [FileInfo.from_item_info(self._codec.to_path(i.resource_id), i) for i in items]
