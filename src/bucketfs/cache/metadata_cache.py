"""Time and size bounded cache of resolved item metadata and listings."""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional

from bucketfs.models import ResourceId, StorageItemInfo

logger = logging.getLogger(__name__)

_ITEM = "item"
_LISTING = "listing"


@dataclass(slots=True)
class _CacheEntry:
    value: Any
    expires_at: float


class MetadataCache:
    """
    Read-through cache keyed by ResourceId.

    Two kinds of entries are kept:
        - item: StorageItemInfo of one id
        - listing: immediate children (tuple of StorageItemInfo) of a directory id

    Stale-read protection:
        A reader takes a token with begin() before going to the store and
        hands it back to put_item()/put_listing(). If any invalidation ran in
        between, the put is dropped, so a result fetched before a mutation is
        never cached after it.
    """

    def __init__(
        self,
        ttl_sec: float = 5.0,
        max_entries: int = 10_000,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl_sec = ttl_sec
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[tuple[str, ResourceId], _CacheEntry] = OrderedDict()
        self._epoch = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def begin(self) -> int:
        """Return a token to pass to the next put_* call."""
        with self._lock:
            return self._epoch

    # ----------------------------
    # Items
    # ----------------------------
    def get_item(self, resource_id: ResourceId) -> Optional[StorageItemInfo]:
        return self._get((_ITEM, resource_id))

    def put_item(self, resource_id: ResourceId, item: StorageItemInfo, token: int) -> bool:
        return self._put((_ITEM, resource_id), item, token)

    # ----------------------------
    # Listings
    # ----------------------------
    def get_listing(self, resource_id: ResourceId) -> Optional[tuple[StorageItemInfo, ...]]:
        return self._get((_LISTING, resource_id))

    def put_listing(
        self,
        resource_id: ResourceId,
        children: list[StorageItemInfo],
        token: int,
    ) -> bool:
        return self._put((_LISTING, resource_id), tuple(children), token)

    # ----------------------------
    # Invalidation
    # ----------------------------
    def invalidate(self, resource_id: ResourceId) -> None:
        """Drop the id (leaf and directory form), its listing, and all ancestors."""
        ids = {resource_id, resource_id.to_directory_id(), resource_id.to_leaf_id()}
        ids.update(resource_id.ancestors())
        with self._lock:
            self._epoch += 1
            for rid in ids:
                self._entries.pop((_ITEM, rid), None)
                self._entries.pop((_LISTING, rid), None)

    def invalidate_tree(self, resource_id: ResourceId) -> None:
        """invalidate() plus every entry located under resource_id."""
        self.invalidate(resource_id)
        directory = resource_id.to_directory_id()
        with self._lock:
            self._epoch += 1
            doomed = [key for key in self._entries if directory.contains(key[1])]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.debug("Invalidated %d cached entries under %s", len(doomed), directory)

    def clear(self) -> None:
        with self._lock:
            self._epoch += 1
            self._entries.clear()

    # ----------------------------
    # Internals
    # ----------------------------
    def _get(self, key: tuple[str, Hashable]) -> Any:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= now:
                del self._entries[key]
                return None
            return entry.value

    def _put(self, key: tuple[str, ResourceId], value: Any, token: int) -> bool:
        expires_at = self._clock() + self._ttl_sec
        with self._lock:
            if token != self._epoch:
                return False
            self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
            return True
