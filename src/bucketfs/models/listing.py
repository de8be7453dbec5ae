"""Result model for flat listing calls."""

from __future__ import annotations

from dataclasses import dataclass, field

from .item_info import StorageItemInfo


@dataclass(slots=True, frozen=True)
class ObjectListing:
    """
    Objects and common prefixes returned by one prefix listing.

    With a delimiter, objects are the immediate children and prefixes are the
    child directories; without one, objects are every key under the prefix
    and prefixes is empty.
    """

    objects: list[StorageItemInfo] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
