"""Public path codec exports for bucketfs."""

from __future__ import annotations

from bucketfs.util.keys import (
    PATH_DELIMITER,
    is_directory_key,
    item_name,
    key_depth,
    parent_key,
    replace_prefix,
    sub_dirs,
    to_directory_key,
    to_leaf_key,
)

from .codec import PathCodec, validate_bucket_name

__all__ = [
    "PathCodec",
    "validate_bucket_name",
    "PATH_DELIMITER",
    "is_directory_key",
    "to_directory_key",
    "to_leaf_key",
    "parent_key",
    "item_name",
    "sub_dirs",
    "key_depth",
    "replace_prefix",
]
