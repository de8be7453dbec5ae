"""Prefix arithmetic on flat object keys.

The directory hierarchy is never stored: every parent, child and ancestor
relationship is computed from key strings on demand.
"""

from __future__ import annotations

PATH_DELIMITER: str = "/"


def is_directory_key(key: str) -> bool:
    return key.endswith(PATH_DELIMITER)


def to_directory_key(key: str) -> str:
    """Return key with exactly one trailing delimiter appended if missing."""
    if not key or is_directory_key(key):
        return key
    return key + PATH_DELIMITER


def to_leaf_key(key: str) -> str:
    """Return key without its trailing delimiter."""
    if is_directory_key(key):
        return key[:-1]
    return key


def parent_key(key: str) -> str:
    """
    Return the key of the directory containing key.

    An empty string means the bucket itself:
        - "a/b/c"  -> "a/b/"
        - "a/b/"   -> "a/"
        - "a"      -> ""
    """
    trimmed = to_leaf_key(key)
    idx = trimmed.rfind(PATH_DELIMITER)
    if idx < 0:
        return ""
    return trimmed[: idx + 1]


def item_name(key: str) -> str:
    """
    Return the last path component of key, keeping a directory's delimiter.

        - "a/b/c"  -> "c"
        - "a/b/"   -> "b/"
    """
    parent = parent_key(key)
    return key[len(parent):]


def sub_dirs(key: str) -> list[str]:
    """
    Return the ancestor directory chain of key, root-to-leaf.

    A directory key is included in its own chain:
        - "a/b/c"  -> ["a/", "a/b/"]
        - "a/b/c/" -> ["a/", "a/b/", "a/b/c/"]
    """
    dirs: list[str] = []
    idx = key.find(PATH_DELIMITER)
    while idx >= 0:
        dirs.append(key[: idx + 1])
        idx = key.find(PATH_DELIMITER, idx + 1)
    return dirs


def key_depth(key: str) -> int:
    """Number of ancestor directories of key within its bucket."""
    return to_leaf_key(key).count(PATH_DELIMITER)


def replace_prefix(key: str, old_prefix: str, new_prefix: str) -> str:
    if not key.startswith(old_prefix):
        raise ValueError(f"key {key!r} does not start with {old_prefix!r}")
    return new_prefix + key[len(old_prefix):]
