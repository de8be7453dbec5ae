"""Resolved view of a path at a point in time."""

from __future__ import annotations

from dataclasses import dataclass

from .item_info import StorageItemInfo
from .resource_id import ResourceId


@dataclass(slots=True, frozen=True)
class FileInfo:
    """
    Represents a path resolved against the object store.

    Notes:
        - size is meaningful only for an existing leaf object (0 otherwise).
        - creation_time is epoch milliseconds, 0 if the path does not exist.
        - A FileInfo is never updated; a new resolution replaces it.
    """

    path: str
    exists: bool
    is_directory: bool
    size: int
    creation_time: int
    item_info: StorageItemInfo

    @classmethod
    def from_item_info(cls, path: str, item_info: StorageItemInfo) -> FileInfo:
        is_directory = item_info.is_directory
        exists = item_info.exists
        return cls(
            path=path,
            exists=exists,
            is_directory=is_directory,
            size=item_info.size if exists and not is_directory else 0,
            creation_time=item_info.creation_time if exists else 0,
            item_info=item_info,
        )

    @property
    def resource_id(self) -> ResourceId:
        return self.item_info.resource_id

    @property
    def is_global_root(self) -> bool:
        return self.item_info.resource_id.is_root
