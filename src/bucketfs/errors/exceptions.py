"""Exception hierarchy and HTTP error mapping for bucketfs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class BucketFsError(Exception):
    """
    Base exception for bucketfs.

    Attributes:
        details: Optional structured information (e.g., path, step, HTTP status).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(BucketFsError):
    """Raised for a malformed path or a disallowed operation target."""


class InvalidStateError(BucketFsError):
    """Raised when the library is used in an invalid state (e.g., after close)."""


class NotFoundError(BucketFsError):
    """Raised when a resolved path or a required ancestor is absent."""


class FileAlreadyExistsError(BucketFsError):
    """Raised when a leaf object occupies a name that must be created."""


class DirectoryNotEmptyError(BucketFsError):
    """Raised on non-recursive delete of a non-empty directory or bucket."""


class StorageIOError(BucketFsError):
    """Raised for backing-store failures and disallowed structural renames."""


class TypeMismatchError(StorageIOError):
    """Raised when a rename destination type conflicts with the source type."""


class AuthError(StorageIOError):
    """Raised when credential loading/refresh fails (HTTP 401)."""


class PermissionDeniedError(StorageIOError):
    """Raised when access is denied (HTTP 403)."""


class RateLimitError(StorageIOError):
    """Raised when rate-limited (HTTP 429)."""


class NetworkError(StorageIOError):
    """Raised when network/timeout issues prevent the request."""


class OperationInterruptedError(BucketFsError):
    """Raised when an operation is aborted while waiting on a batched sub-step."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to bucketfs exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> BucketFsError:
    """
    Map a Cloud Storage JSON API error to a bucketfs exception.

    Policy:
        - 400 -> InvalidArgumentError
        - 401 -> AuthError
        - 403 -> PermissionDeniedError
        - 404 -> NotFoundError
        - 409/412 -> FileAlreadyExistsError
        - 429 -> RateLimitError
        - otherwise (5xx included) -> StorageIOError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code == 400:
        return InvalidArgumentError(message, details=details, cause=cause)
    if info.status_code == 401:
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 403:
        return PermissionDeniedError(message, details=details, cause=cause)
    if info.status_code == 404:
        return NotFoundError(message, details=details, cause=cause)
    if info.status_code in (409, 412):
        return FileAlreadyExistsError(message, details=details, cause=cause)
    if info.status_code == 429:
        return RateLimitError(message, details=details, cause=cause)

    return StorageIOError(message, details=details, cause=cause)
