"""Outcome policy for edge cases where object-store filesystems diverge."""

from __future__ import annotations

from dataclasses import dataclass

from bucketfs.errors import BucketFsError, InvalidArgumentError, StorageIOError


@dataclass(slots=True, frozen=True)
class BehaviorPolicy:
    """
    Per-edge-case outcomes injected into the resolver and emulator.

    Attributes:
        root_rename_error: raised when the rename source is the global root.
        rename_into_root_error: raised when the rename destination is the global root.
        mkdirs_root_is_noop: if False, mkdirs on the global root raises
            InvalidArgumentError instead of succeeding.
        create_missing_destination_parents: if True, rename creates a missing
            destination parent chain instead of raising NotFoundError.
        infer_implicit_directories: treat a directory key with descendants
            but no marker object as an existing directory.
        preserve_parent_directories: after removing an entry, write the
            parent's marker if the parent would otherwise stop existing.
    """

    root_rename_error: type[BucketFsError] = InvalidArgumentError
    rename_into_root_error: type[BucketFsError] = StorageIOError
    mkdirs_root_is_noop: bool = True
    create_missing_destination_parents: bool = False
    infer_implicit_directories: bool = True
    preserve_parent_directories: bool = True


DEFAULT_POLICY = BehaviorPolicy()
