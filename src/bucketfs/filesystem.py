"""BucketFileSystem: hierarchical file system facade over an object store."""

from __future__ import annotations

import logging
import threading
from typing import Optional, Sequence

from bucketfs.auth import AuthInfo
from bucketfs.cache import MetadataCache
from bucketfs.controller import CloudStorageController, ObjectStoreClient
from bucketfs.emulator import BatchExecutor, DirectoryEmulator
from bucketfs.errors import InvalidStateError
from bucketfs.models import FileInfo
from bucketfs.options import FileSystemOptions
from bucketfs.path import PathCodec
from bucketfs.resolver import FileInfoResolver

logger = logging.getLogger(__name__)


class BucketFileSystem:
    """
    High-level entry point: directories, nested paths, rename and recursive
    delete over a flat bucket/key object store.

    Owns the metadata cache, the batch executor and the client handle.
    Safe to share between threads; no operation is serialized against another.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        project_id: Optional[str] = None,
        scopes: Optional[Sequence[str]] = None,
        options: Optional[FileSystemOptions] = None,
    ) -> None:
        client = CloudStorageController(auth_info, project_id=project_id, scopes=scopes)
        self._setup(client, options or FileSystemOptions())

    @classmethod
    def from_client(
        cls,
        client: ObjectStoreClient,
        options: Optional[FileSystemOptions] = None,
    ) -> "BucketFileSystem":
        """Create a file system over an injected client (useful for tests)."""
        obj = cls.__new__(cls)
        obj._setup(client, options or FileSystemOptions())
        return obj

    def _setup(self, client: ObjectStoreClient, options: FileSystemOptions) -> None:
        self._client = client
        self._options = options
        self._codec = PathCodec(options.scheme)
        self._cache: Optional[MetadataCache] = None
        if options.enable_metadata_cache:
            self._cache = MetadataCache(options.cache_ttl_sec, options.cache_max_entries)
        self._batch = BatchExecutor(options.max_batch_workers)
        self._resolver = FileInfoResolver(
            client,
            self._codec,
            cache=self._cache,
            policy=options.policy,
            batch=self._batch,
        )
        self._emulator = DirectoryEmulator(
            client,
            self._resolver,
            self._codec,
            self._batch,
            cache=self._cache,
            policy=options.policy,
        )
        self._closed = False
        self._close_lock = threading.Lock()

    @property
    def options(self) -> FileSystemOptions:
        return self._options

    @property
    def codec(self) -> PathCodec:
        return self._codec

    @property
    def closed(self) -> bool:
        return self._closed

    # ----------------------------
    # Resolution / listing
    # ----------------------------
    def get_file_info(self, path: str) -> FileInfo:
        self._ensure_open()
        return self._resolver.get_file_info(path)

    def get_file_infos(self, paths: list[str]) -> list[FileInfo]:
        self._ensure_open()
        return self._resolver.get_file_infos(paths)

    def list_file_info(self, path: str) -> list[FileInfo]:
        self._ensure_open()
        return self._resolver.list_file_info(path)

    def list_file_names(self, file_info: FileInfo) -> list[str]:
        self._ensure_open()
        return self._resolver.list_file_names(file_info)

    def exists(self, path: str) -> bool:
        self._ensure_open()
        return self._resolver.exists(path)

    # ----------------------------
    # Mutations
    # ----------------------------
    def mkdirs(self, path: str) -> None:
        self._ensure_open()
        self._emulator.mkdirs(path)

    def delete(self, path: str, recursive: bool = False) -> None:
        self._ensure_open()
        self._emulator.delete(path, recursive)

    def rename(self, src: str, dst: str) -> None:
        self._ensure_open()
        self._emulator.rename(src, dst)

    def create(self, path: str, data: bytes = b"", overwrite: bool = True) -> FileInfo:
        self._ensure_open()
        return self._emulator.create(path, data, overwrite)

    def read(self, path: str, offset: int = 0, length: Optional[int] = None) -> bytes:
        self._ensure_open()
        return self._emulator.read(path, offset, length)

    # ----------------------------
    # Lifecycle
    # ----------------------------
    def close(self) -> None:
        """Release the batch executor, cache and client. Idempotent."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        logger.debug("Closing BucketFileSystem")
        self._batch.shutdown()
        if self._cache is not None:
            self._cache.clear()
        self._client.close()

    def __enter__(self) -> "BucketFileSystem":
        self._ensure_open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise InvalidStateError("BucketFileSystem is closed")
