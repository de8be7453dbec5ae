"""Object-store client exports for bucketfs."""

from __future__ import annotations

from .base import ObjectStoreClient
from .memory import InMemoryObjectStore
from .storage_controller import CloudStorageController

__all__ = ["ObjectStoreClient", "CloudStorageController", "InMemoryObjectStore"]
