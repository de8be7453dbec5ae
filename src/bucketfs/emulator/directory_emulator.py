"""Directory semantics emulated over flat object operations."""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Callable, Optional

from bucketfs.cache import MetadataCache
from bucketfs.controller.base import ObjectStoreClient
from bucketfs.errors import (
    BucketFsError,
    DirectoryNotEmptyError,
    FileAlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
    OperationInterruptedError,
    StorageIOError,
    TypeMismatchError,
    store_errors,
)
from bucketfs.models import FileInfo, ResourceId
from bucketfs.path import PATH_DELIMITER, PathCodec, item_name, replace_prefix, sub_dirs, to_leaf_key

from .batch import BatchExecutor
from .ordering import group_keys_deep_first
from .policy import DEFAULT_POLICY, BehaviorPolicy
from .validators import (
    validate_destination_free,
    validate_exists,
    validate_not_inside,
    validate_not_root,
    validate_range,
)

if TYPE_CHECKING:
    from bucketfs.resolver import FileInfoResolver

logger = logging.getLogger(__name__)


class DirectoryEmulator:
    """
    Implements mkdirs/delete/rename/create/read on top of an ObjectStoreClient.

    Notes:
        - Every precondition is checked before the first mutation.
        - Multi-object steps run as batches on the BatchExecutor; a directory
          marker is always deleted after every key below it.
        - The cache is invalidated after each mutation, including partial ones.
    """

    def __init__(
        self,
        client: ObjectStoreClient,
        resolver: FileInfoResolver,
        codec: PathCodec,
        batch: BatchExecutor,
        *,
        cache: Optional[MetadataCache] = None,
        policy: BehaviorPolicy = DEFAULT_POLICY,
    ) -> None:
        self._client = client
        self._resolver = resolver
        self._codec = codec
        self._batch = batch
        self._cache = cache
        self._policy = policy

    # ----------------------------
    # mkdirs
    # ----------------------------
    def mkdirs(self, path: str) -> None:
        """Create path and all missing ancestors as directories (idempotent)."""
        rid = self._codec.to_resource_id(path, allow_empty_object_name=True)
        if rid.is_root:
            if not self._policy.mkdirs_root_is_noop:
                raise InvalidArgumentError("Cannot mkdirs the root", details={"path": path})
            return

        rid = rid.to_directory_id()
        dirs = sub_dirs(rid.object_name) if rid.object_name else []
        logger.debug("mkdirs %s (%d levels)", rid, len(dirs))
        try:
            self._mkdirs(rid.bucket_name, dirs)
        finally:
            self._invalidate(rid)

    def _mkdirs(self, bucket: str, dirs: list[str]) -> None:
        bucket_info = self._resolver.get_item_info(ResourceId(bucket))
        if bucket_info.exists:
            leaf_ids = [ResourceId(bucket, to_leaf_key(d)) for d in dirs]
            probes = self._run(
                "mkdirs.probe",
                [(str(lid), partial(self._resolver.get_item_info, lid)) for lid in leaf_ids],
            )
            for leaf in probes:
                if leaf.exists:
                    raise FileAlreadyExistsError(
                        "A file with that name exists",
                        details={"path": self._codec.to_path(leaf.resource_id)},
                    )
        else:
            with store_errors("mkdirs.create_bucket", bucket=bucket):
                try:
                    self._client.create_bucket(bucket)
                except FileAlreadyExistsError:
                    logger.debug("Bucket %s created concurrently", bucket)

        for d in dirs:
            with store_errors("mkdirs.marker", bucket=bucket, key=d):
                if self._client.get_object_metadata(bucket, d) is None:
                    self._create_marker(bucket, d)

    # ----------------------------
    # delete
    # ----------------------------
    def delete(self, path: str, recursive: bool) -> None:
        """
        Delete a leaf, a directory, or a bucket.

        Raises:
            InvalidArgumentError: path is the global root.
            NotFoundError: path does not exist.
            DirectoryNotEmptyError: non-recursive delete of a non-empty directory.
        """
        validate_not_root(self._codec.to_resource_id(path, allow_empty_object_name=True), "delete")
        info = self._resolver.get_file_info(path)
        validate_exists(info, "Path")

        rid = info.resource_id
        logger.debug("delete %s (recursive=%s)", rid, recursive)
        try:
            if not rid.is_directory:
                with store_errors("delete", bucket=rid.bucket_name, key=rid.object_name):
                    self._client.delete_object(rid.bucket_name, rid.object_name)
            else:
                self._delete_directory(rid, recursive)
            if rid.is_storage_object:
                self._preserve_parent(rid)
        finally:
            self._invalidate_tree(rid)

    def _delete_directory(self, rid: ResourceId, recursive: bool) -> None:
        bucket = rid.bucket_name
        prefix = rid.key_prefix

        if not recursive:
            with store_errors("delete.check_empty", bucket=bucket, prefix=prefix):
                listing = self._client.list_objects(
                    bucket, prefix=prefix, delimiter=PATH_DELIMITER, max_results=2
                )
            children = [
                o for o in listing.objects if o.resource_id.object_name != prefix
            ] + listing.prefixes
            if children:
                raise DirectoryNotEmptyError(
                    "Directory is not empty",
                    details={"path": self._codec.to_path(rid)},
                )
            keys = [rid.object_name] if rid.object_name else []
        else:
            keys = self._list_all_keys(bucket, prefix)

        self._delete_keys(bucket, keys, "delete")

        if rid.is_bucket:
            with store_errors("delete.bucket", bucket=bucket):
                self._client.delete_bucket(bucket)

    # ----------------------------
    # rename
    # ----------------------------
    def rename(self, src: str, dst: str) -> None:
        """
        Move src to dst (into dst if dst is an existing directory or bucket).

        Directory renames copy every object first and delete sources only
        once all copies have succeeded.
        """
        src_rid = self._codec.to_resource_id(src, allow_empty_object_name=True)
        dst_rid = self._codec.to_resource_id(dst, allow_empty_object_name=True)

        validate_not_root(src_rid, "rename", self._policy.root_rename_error)

        src_info = self._resolver.get_file_info(src)
        validate_exists(src_info, "Source")
        src_rid = src_info.resource_id
        if src_rid.is_bucket:
            raise StorageIOError("Bucket rename is not supported", details={"src": src_info.path})
        validate_not_root(dst_rid, "rename into", self._policy.rename_into_root_error)

        dst_info = self._resolver.get_file_info(dst)
        if dst_info.exists and not dst_info.is_directory:
            if not src_info.is_directory:
                raise StorageIOError("Destination exists", details={"dst": dst_info.path})
            raise TypeMismatchError(
                "Cannot replace a file with a directory",
                details={"src": src_info.path, "dst": dst_info.path},
            )

        effective = self._effective_destination(src_rid, dst_rid, dst_info)

        if effective == src_rid:
            logger.debug("rename %s onto itself, nothing to do", src_rid)
            return
        validate_not_inside(src_rid, effective)

        other_form = effective.to_leaf_id() if effective.is_directory else effective.to_directory_id()
        validate_destination_free(
            effective,
            self._resolver.get_item_info(effective),
            self._resolver.get_item_info(other_form),
        )

        parent = effective.parent()
        create_parents = False
        if not self._resolver.get_item_info(parent).exists:
            if not self._policy.create_missing_destination_parents:
                raise NotFoundError(
                    "Destination parent does not exist",
                    details={"path": self._codec.to_path(parent)},
                )
            create_parents = True

        logger.debug("rename %s -> %s", src_rid, effective)
        try:
            if create_parents:
                self.mkdirs(self._codec.to_path(parent))
            if src_rid.is_directory:
                self._rename_directory(src_rid, effective)
            else:
                self._rename_leaf(src_rid, effective)
            self._preserve_parent(src_rid)
        finally:
            self._invalidate_tree(src_rid)
            self._invalidate_tree(effective)

    def _effective_destination(
        self,
        src: ResourceId,
        dst: ResourceId,
        dst_info: FileInfo,
    ) -> ResourceId:
        if dst_info.exists:
            return dst_info.resource_id.child(item_name(src.object_name))
        if dst.is_bucket:
            raise NotFoundError("Destination bucket does not exist", details={"dst": dst_info.path})
        if src.is_directory:
            return dst.to_directory_id()
        return dst.to_leaf_id()

    def _rename_leaf(self, src: ResourceId, dst: ResourceId) -> None:
        with store_errors("rename.copy", src=str(src), dst=str(dst)):
            self._client.copy_object(src.bucket_name, src.object_name, dst.bucket_name, dst.object_name)
        with store_errors("rename.delete", src=str(src)):
            self._client.delete_object(src.bucket_name, src.object_name)

    def _rename_directory(self, src: ResourceId, dst: ResourceId) -> None:
        src_prefix = src.key_prefix
        dst_prefix = dst.key_prefix
        keys = self._list_all_keys(src.bucket_name, src_prefix)

        tasks: list[tuple[str, Callable[[], object]]] = [
            (
                key,
                partial(
                    self._client.copy_object,
                    src.bucket_name,
                    key,
                    dst.bucket_name,
                    replace_prefix(key, src_prefix, dst_prefix),
                ),
            )
            for key in keys
        ]
        if src_prefix not in keys:
            tasks.append((dst_prefix, partial(self._create_marker, dst.bucket_name, dst_prefix)))

        try:
            self._run("rename.copy", tasks)
        except OperationInterruptedError:
            raise
        except BucketFsError as exc:
            logger.warning("rename %s -> %s: copy phase failed, sources left intact", src, dst)
            raise StorageIOError(
                f"Failed to copy {src} to {dst}",
                details={**exc.details, "step": "rename.copy", "src": str(src), "dst": str(dst)},
                cause=exc,
            ) from exc

        self._delete_keys(src.bucket_name, keys, "rename.delete")

    # ----------------------------
    # create / read
    # ----------------------------
    def create(self, path: str, data: bytes = b"", overwrite: bool = True) -> FileInfo:
        """Write data to a leaf object, creating parent directories first."""
        rid = self._codec.to_resource_id(path, allow_empty_object_name=True)
        validate_not_root(rid, "create")
        if rid.is_directory:
            raise InvalidArgumentError("create requires an object path", details={"path": path})

        if self._resolver.get_item_info(rid.to_directory_id()).exists:
            raise FileAlreadyExistsError(
                "A directory with that name exists",
                details={"path": self._codec.to_path(rid.to_directory_id())},
            )
        if not overwrite and self._resolver.get_item_info(rid).exists:
            raise FileAlreadyExistsError("Object already exists", details={"path": path})

        logger.debug("create %s (%d bytes)", rid, len(data))
        try:
            self.mkdirs(self._codec.to_path(rid.parent()))
            with store_errors("create", bucket=rid.bucket_name, key=rid.object_name):
                item = self._client.create_object(
                    rid.bucket_name, rid.object_name, data, overwrite=overwrite
                )
        finally:
            self._invalidate(rid)
        return FileInfo.from_item_info(self._codec.to_path(rid), item)

    def read(self, path: str, offset: int = 0, length: Optional[int] = None) -> bytes:
        validate_range(offset, length)
        info = self._resolver.get_file_info(path)
        validate_exists(info, "Path")
        if info.is_directory:
            raise InvalidArgumentError("Cannot read a directory", details={"path": info.path})

        rid = info.resource_id
        with store_errors("read", bucket=rid.bucket_name, key=rid.object_name):
            return self._client.read_object(rid.bucket_name, rid.object_name, offset, length)

    # ----------------------------
    # Internals
    # ----------------------------
    def _list_all_keys(self, bucket: str, prefix: str) -> list[str]:
        with store_errors("list_all", bucket=bucket, prefix=prefix):
            listing = self._client.list_objects(bucket, prefix=prefix)
        return [o.resource_id.object_name for o in listing.objects]

    def _delete_keys(self, bucket: str, keys: list[str], step: str) -> None:
        for group in group_keys_deep_first(keys):
            self._run(step, [(key, partial(self._delete_if_present, bucket, key)) for key in group])

    def _delete_if_present(self, bucket: str, key: str) -> None:
        try:
            self._client.delete_object(bucket, key)
        except NotFoundError:
            logger.warning("Object %s/%s vanished before delete; treating as deleted", bucket, key)

    def _create_marker(self, bucket: str, key: str) -> None:
        try:
            self._client.create_object(bucket, key, b"", overwrite=False)
        except FileAlreadyExistsError:
            logger.debug("Marker %s/%s created concurrently", bucket, key)

    def _preserve_parent(self, rid: ResourceId) -> None:
        """Recreate the parent's marker if removing rid made the parent disappear."""
        if not self._policy.preserve_parent_directories:
            return
        parent = rid.parent()
        if not parent.is_storage_object:
            return

        bucket, key = parent.bucket_name, parent.object_name
        with store_errors("preserve_parent", bucket=bucket, key=key):
            if self._client.get_object_metadata(bucket, key) is not None:
                return
            if self._policy.infer_implicit_directories:
                listing = self._client.list_objects(bucket, prefix=key, max_results=1)
                if listing.objects or listing.prefixes:
                    return
            logger.debug("Preserving parent directory %s", parent)
            self._create_marker(bucket, key)

    def _run(self, step: str, tasks: list[tuple[str, Callable[[], object]]]) -> list:
        return self._batch.run(step, tasks)

    def _invalidate(self, rid: ResourceId) -> None:
        if self._cache is not None:
            self._cache.invalidate(rid)

    def _invalidate_tree(self, rid: ResourceId) -> None:
        if self._cache is not None:
            self._cache.invalidate_tree(rid)
