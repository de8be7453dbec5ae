"""Public error exports for bucketfs."""

from __future__ import annotations

from .exceptions import (
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
from .wrapping import store_errors

__all__ = [
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
    "store_errors",
]
