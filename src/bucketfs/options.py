"""Runtime options for BucketFileSystem."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from bucketfs.emulator.policy import BehaviorPolicy
from bucketfs.errors import InvalidArgumentError

_ENV_PREFIX = "BUCKETFS_"
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class FileSystemOptions:
    """
    Options for a BucketFileSystem.

    Attributes:
        scheme: path scheme ("gs" -> "gs://bucket/key").
        enable_metadata_cache: cache item metadata and listings in memory.
        cache_ttl_sec: lifetime of a cache entry.
        cache_max_entries: cache size bound; oldest entries are evicted first.
        max_batch_workers: thread pool size for copy/delete/lookup batches.
        policy: edge-case outcomes.
    """

    scheme: str = "gs"
    enable_metadata_cache: bool = False
    cache_ttl_sec: float = 5.0
    cache_max_entries: int = 10_000
    max_batch_workers: int = 16
    policy: BehaviorPolicy = field(default_factory=BehaviorPolicy)

    def __post_init__(self) -> None:
        if self.cache_ttl_sec <= 0:
            raise InvalidArgumentError(
                "cache_ttl_sec must be positive",
                details={"cache_ttl_sec": self.cache_ttl_sec},
            )
        if self.cache_max_entries < 1:
            raise InvalidArgumentError(
                "cache_max_entries must be >= 1",
                details={"cache_max_entries": self.cache_max_entries},
            )
        if self.max_batch_workers < 1:
            raise InvalidArgumentError(
                "max_batch_workers must be >= 1",
                details={"max_batch_workers": self.max_batch_workers},
            )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        policy: Optional[BehaviorPolicy] = None,
    ) -> FileSystemOptions:
        """
        Build options from BUCKETFS_* environment variables.

        Unset variables keep their defaults.

        Raises:
            InvalidArgumentError: if a variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        scheme = env.get(_ENV_PREFIX + "SCHEME")
        if scheme:
            kwargs["scheme"] = scheme
        if (raw := env.get(_ENV_PREFIX + "ENABLE_METADATA_CACHE")) is not None:
            kwargs["enable_metadata_cache"] = _parse_bool("ENABLE_METADATA_CACHE", raw)
        if (raw := env.get(_ENV_PREFIX + "CACHE_TTL_SEC")) is not None:
            kwargs["cache_ttl_sec"] = _parse_number("CACHE_TTL_SEC", raw, float)
        if (raw := env.get(_ENV_PREFIX + "CACHE_MAX_ENTRIES")) is not None:
            kwargs["cache_max_entries"] = _parse_number("CACHE_MAX_ENTRIES", raw, int)
        if (raw := env.get(_ENV_PREFIX + "MAX_BATCH_WORKERS")) is not None:
            kwargs["max_batch_workers"] = _parse_number("MAX_BATCH_WORKERS", raw, int)
        if policy is not None:
            kwargs["policy"] = policy

        return cls(**kwargs)  # type: ignore[arg-type]


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise InvalidArgumentError(
        f"{_ENV_PREFIX}{name} must be a boolean",
        details={"name": _ENV_PREFIX + name, "value": raw},
    )


def _parse_number(name: str, raw: str, kind: type) -> object:
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise InvalidArgumentError(
            f"{_ENV_PREFIX}{name} must be a {kind.__name__}",
            details={"name": _ENV_PREFIX + name, "value": raw},
            cause=exc,
        ) from exc
