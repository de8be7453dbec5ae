"""Wrapping of foreign object-store failures into the bucketfs taxonomy."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from .exceptions import BucketFsError, StorageIOError


@contextmanager
def store_errors(step: str, **details: Any) -> Iterator[None]:
    """
    Re-raise any non-bucketfs exception from an object-store call as StorageIOError.

    bucketfs errors pass through untouched; the step name and details identify
    which sub-step of a multi-step operation failed.
    """
    try:
        yield
    except BucketFsError:
        raise
    except Exception as exc:
        raise StorageIOError(
            f"Object store failure during {step}",
            details={"step": step, **details},
            cause=exc,
        ) from exc
