"""Fail-fast precondition checks for namespace mutations."""

from __future__ import annotations

from typing import Optional

from bucketfs.errors import (
    BucketFsError,
    InvalidArgumentError,
    NotFoundError,
    StorageIOError,
    TypeMismatchError,
)
from bucketfs.models import FileInfo, ResourceId, StorageItemInfo


def validate_not_root(
    resource_id: ResourceId,
    action: str,
    error_cls: type[BucketFsError] = InvalidArgumentError,
) -> None:
    if resource_id.is_root:
        raise error_cls(f"Root is protected: cannot {action} root", details={"action": action})


def validate_exists(info: FileInfo, what: str) -> None:
    if not info.exists:
        raise NotFoundError(f"{what} does not exist: {info.path}", details={"path": info.path})


def validate_range(offset: int, length: Optional[int]) -> None:
    if offset < 0:
        raise InvalidArgumentError("offset must be >= 0", details={"offset": offset})
    if length is not None and length < 0:
        raise InvalidArgumentError("length must be >= 0", details={"length": length})


def validate_not_inside(src: ResourceId, dst: ResourceId) -> None:
    """Reject moving a directory into its own subtree."""
    if src.contains(dst):
        raise InvalidArgumentError(
            "Cannot rename a directory into itself",
            details={"src": str(src), "dst": str(dst)},
        )


def validate_destination_free(
    dst: ResourceId,
    same_kind: StorageItemInfo,
    other_kind: StorageItemInfo,
) -> None:
    """
    Reject an occupied destination.

    same_kind is dst itself; other_kind is dst with the opposite leaf/directory
    form ("x" for "x/" and vice versa).
    """
    if same_kind.exists:
        raise StorageIOError("Destination exists", details={"dst": str(dst)})
    if other_kind.exists:
        raise TypeMismatchError(
            "Destination exists with a different type",
            details={"dst": str(dst), "existing": str(other_kind.resource_id)},
        )
