"""Directory emulation exports for bucketfs."""

from __future__ import annotations

from .batch import BatchExecutor
from .directory_emulator import DirectoryEmulator
from .ordering import group_keys_deep_first
from .policy import DEFAULT_POLICY, BehaviorPolicy

__all__ = [
    "BatchExecutor",
    "DirectoryEmulator",
    "BehaviorPolicy",
    "DEFAULT_POLICY",
    "group_keys_deep_first",
]
