from .keys import (
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
from .time import now_millis, now_utc, normalize_dt, parse_rfc3339, to_epoch_millis, to_rfc3339

__all__ = [
    "PATH_DELIMITER",
    "is_directory_key",
    "to_directory_key",
    "to_leaf_key",
    "parent_key",
    "item_name",
    "sub_dirs",
    "key_depth",
    "replace_prefix",
    "now_utc",
    "now_millis",
    "parse_rfc3339",
    "to_rfc3339",
    "to_epoch_millis",
    "normalize_dt",
]
