"""bucketfs public API."""

from __future__ import annotations

import logging

from bucketfs.auth import AuthInfo, OAuthClient
from bucketfs.cache import MetadataCache
from bucketfs.controller import CloudStorageController, InMemoryObjectStore, ObjectStoreClient
from bucketfs.emulator import DEFAULT_POLICY, BatchExecutor, BehaviorPolicy, DirectoryEmulator
from bucketfs.errors import (
    AuthError,
    BucketFsError,
    DirectoryNotEmptyError,
    FileAlreadyExistsError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    OperationInterruptedError,
    PermissionDeniedError,
    RateLimitError,
    StorageIOError,
    TypeMismatchError,
    map_http_error,
)
from bucketfs.filesystem import BucketFileSystem
from bucketfs.models import FileInfo, ObjectListing, ResourceId, StorageItemInfo
from bucketfs.options import FileSystemOptions
from bucketfs.path import PathCodec
from bucketfs.resolver import FileInfoResolver

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # High-level
    "BucketFileSystem",
    "FileSystemOptions",
    "BehaviorPolicy",
    "DEFAULT_POLICY",
    # Auth
    "AuthInfo",
    "OAuthClient",
    # Clients
    "ObjectStoreClient",
    "CloudStorageController",
    "InMemoryObjectStore",
    # Building blocks
    "PathCodec",
    "FileInfoResolver",
    "DirectoryEmulator",
    "BatchExecutor",
    "MetadataCache",
    # Models
    "ResourceId",
    "StorageItemInfo",
    "FileInfo",
    "ObjectListing",
    # Errors
    "BucketFsError",
    "InvalidArgumentError",
    "InvalidStateError",
    "NotFoundError",
    "FileAlreadyExistsError",
    "DirectoryNotEmptyError",
    "StorageIOError",
    "TypeMismatchError",
    "AuthError",
    "PermissionDeniedError",
    "RateLimitError",
    "NetworkError",
    "OperationInterruptedError",
    "HttpErrorInfo",
    "map_http_error",
]
