"""Delete ordering rules for multi-object removals."""

from __future__ import annotations

from bucketfs.util.keys import key_depth


def group_keys_deep_first(keys: list[str]) -> list[list[str]]:
    """
    Group keys by depth, deepest group first.

    Rules:
        - Keys of the same depth never contain one another, so a group can be
          deleted concurrently.
        - Every descendant of a directory marker is strictly deeper than the
          marker, so deleting group by group removes a marker only after all
          of its descendants.
        - Within a group, keys keep lexicographic order.
    """
    by_depth: dict[int, list[str]] = {}
    for key in keys:
        by_depth.setdefault(key_depth(key), []).append(key)

    return [sorted(by_depth[depth]) for depth in sorted(by_depth, reverse=True)]
