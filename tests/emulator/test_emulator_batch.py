import threading
import unittest

from bucketfs.emulator import BatchExecutor
from bucketfs.errors import (
    InvalidStateError,
    NotFoundError,
    OperationInterruptedError,
    StorageIOError,
)


class TestBatchExecutor(unittest.TestCase):
    def setUp(self) -> None:
        self.batch = BatchExecutor(max_workers=4)

    def tearDown(self) -> None:
        self.batch.shutdown()

    def test_results_keep_input_order(self) -> None:
        tasks = [(str(i), (lambda i=i: i * i)) for i in range(20)]
        self.assertEqual(self.batch.run("square", tasks), [i * i for i in range(20)])

    def test_empty_batch(self) -> None:
        self.assertEqual(self.batch.run("noop", []), [])

    def test_all_tasks_run_even_if_one_fails(self) -> None:
        ran: list[str] = []
        lock = threading.Lock()

        def ok(label: str) -> None:
            with lock:
                ran.append(label)

        def fail() -> None:
            raise NotFoundError("gone", details={"key": "b"})

        tasks = [("a", lambda: ok("a")), ("b", fail), ("c", lambda: ok("c"))]
        with self.assertRaises(NotFoundError) as ctx:
            self.batch.run("copy", tasks)

        self.assertEqual(sorted(ran), ["a", "c"])
        self.assertEqual(ctx.exception.details["step"], "copy")
        self.assertEqual(ctx.exception.details["failed"], ["b"])
        self.assertEqual(ctx.exception.details["key"], "b")

    def test_foreign_failure_becomes_storage_io_error(self) -> None:
        def boom() -> None:
            raise ValueError("bad")

        with self.assertRaises(StorageIOError) as ctx:
            self.batch.run("delete", [("x", boom), ("y", boom)])
        self.assertEqual(ctx.exception.details["failed"], ["x", "y"])
        self.assertIsInstance(ctx.exception.cause, ValueError)

    def test_cancelled_tasks_raise_interrupted(self) -> None:
        batch = BatchExecutor(max_workers=1)
        started = threading.Event()
        release = threading.Event()

        def blocker() -> None:
            started.set()
            release.wait(5)

        result: dict[str, BaseException] = {}

        def runner() -> None:
            try:
                batch.run("slow", [("first", blocker), ("second", lambda: None)])
            except Exception as exc:
                result["exc"] = exc

        t = threading.Thread(target=runner)
        t.start()
        self.assertTrue(started.wait(5))
        batch.shutdown()
        release.set()
        t.join(5)

        self.assertIsInstance(result.get("exc"), OperationInterruptedError)
        self.assertEqual(result["exc"].details["step"], "slow")

    def test_run_after_shutdown(self) -> None:
        self.batch.shutdown()
        with self.assertRaises(InvalidStateError):
            self.batch.run("late", [("a", lambda: None)])

    def test_invalid_worker_count(self) -> None:
        with self.assertRaises(ValueError):
            BatchExecutor(max_workers=0)


if __name__ == "__main__":
    unittest.main()
