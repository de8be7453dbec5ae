"""Concurrent execution of independent object-store sub-steps."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Sequence, TypeVar

from bucketfs.errors import (
    BucketFsError,
    InvalidStateError,
    OperationInterruptedError,
    StorageIOError,
)

T = TypeVar("T")

logger = logging.getLogger(__name__)

BatchTask = tuple[str, Callable[[], T]]


class BatchExecutor:
    """
    Runs a batch of labelled tasks on a shared thread pool and waits for all.

    Every task of a batch runs to completion even if a sibling fails, so the
    caller learns the full set of failed labels. A batch whose futures are
    cancelled (shutdown while waiting) raises OperationInterruptedError.
    """

    def __init__(self, max_workers: int = 16) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._max_workers = max_workers
        self._pool: ThreadPoolExecutor | None = None
        self._pool_lock = threading.Lock()
        self._closed = False

    def run(self, step: str, tasks: Sequence[BatchTask]) -> list:
        """
        Run tasks concurrently and return their results in input order.

        Raises:
            OperationInterruptedError: if any task was cancelled.
            BucketFsError: the first failure's kind (StorageIOError for a
                foreign exception), with details["failed"] listing every
                failed label.
        """
        if not tasks:
            return []

        pool = self._get_pool()
        futures: list[Future] = []
        try:
            for _label, func in tasks:
                futures.append(pool.submit(func))
        except RuntimeError as exc:
            for f in futures:
                f.cancel()
            raise OperationInterruptedError(
                f"Batch '{step}' interrupted: executor is shut down",
                details={"step": step},
                cause=exc,
            ) from exc

        wait(futures)

        if any(f.cancelled() for f in futures):
            raise OperationInterruptedError(
                f"Batch '{step}' interrupted before all sub-steps completed",
                details={
                    "step": step,
                    "cancelled": [label for (label, _), f in zip(tasks, futures) if f.cancelled()],
                },
            )

        failures: list[tuple[str, BaseException]] = []
        for (label, _), f in zip(tasks, futures):
            exc = f.exception()
            if exc is not None:
                failures.append((label, exc))

        if failures:
            logger.warning(
                "Batch '%s': %d of %d sub-steps failed", step, len(failures), len(tasks)
            )
            raise _batch_error(step, failures, total=len(tasks))

        logger.debug("Batch '%s' completed %d sub-steps", step, len(tasks))
        return [f.result() for f in futures]

    def shutdown(self) -> None:
        """Stop accepting work and cancel queued tasks; running ones finish."""
        with self._pool_lock:
            self._closed = True
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=False, cancel_futures=True)

    def _get_pool(self) -> ThreadPoolExecutor:
        with self._pool_lock:
            if self._closed:
                raise InvalidStateError("BatchExecutor is shut down")
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="bucketfs-batch",
                )
            return self._pool


def _batch_error(
    step: str,
    failures: list[tuple[str, BaseException]],
    *,
    total: int,
) -> BucketFsError:
    first_label, first = failures[0]
    details = {
        "step": step,
        "failed": [label for label, _ in failures],
        "total": total,
    }
    message = f"Batch '{step}' failed for {len(failures)} of {total} sub-steps (first: {first_label})"
    if isinstance(first, BucketFsError):
        return type(first)(message, details={**first.details, **details}, cause=first)
    return StorageIOError(message, details=details, cause=first)
