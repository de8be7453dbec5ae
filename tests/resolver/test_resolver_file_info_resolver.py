import unittest

from bucketfs.cache import MetadataCache
from bucketfs.controller import InMemoryObjectStore
from bucketfs.emulator import BatchExecutor, BehaviorPolicy
from bucketfs.errors import InvalidArgumentError, NotFoundError
from bucketfs.path import PathCodec
from bucketfs.resolver import FileInfoResolver

_SCENARIO = ("o1", "o2", "d0/", "d1/o11", "d1/o12", "d1/d10/", "d1/d11/o111")


class _CountingStore(InMemoryObjectStore):
    def __init__(self) -> None:
        super().__init__()
        self.metadata_calls = 0

    def get_object_metadata(self, bucket, key):
        self.metadata_calls += 1
        return super().get_object_metadata(bucket, key)


class TestFileInfoResolver(unittest.TestCase):
    def setUp(self) -> None:
        self.store = _CountingStore()
        self.store.create_bucket("bkt")
        for key in _SCENARIO:
            self.store.create_object("bkt", key, b"data")
        self.batch = BatchExecutor(max_workers=4)
        self.resolver = FileInfoResolver(self.store, PathCodec(), batch=self.batch)

    def tearDown(self) -> None:
        self.batch.shutdown()

    def _names(self, infos) -> set[str]:
        return {i.path for i in infos}

    def test_root_always_exists(self) -> None:
        info = self.resolver.get_file_info("gs:/")
        self.assertTrue(info.exists)
        self.assertTrue(info.is_directory)
        self.assertTrue(info.is_global_root)

    def test_bucket(self) -> None:
        self.assertTrue(self.resolver.get_file_info("gs://bkt").exists)
        info = self.resolver.get_file_info("gs://missing-bkt/")
        self.assertFalse(info.exists)
        self.assertEqual(info.path, "gs://missing-bkt/")

    def test_leaf(self) -> None:
        info = self.resolver.get_file_info("gs://bkt/d1/o11")
        self.assertTrue(info.exists)
        self.assertFalse(info.is_directory)
        self.assertEqual(info.size, 4)
        self.assertGreater(info.creation_time, 0)

    def test_auto_directory_conversion(self) -> None:
        info = self.resolver.get_file_info("gs://bkt/d0")
        self.assertTrue(info.exists)
        self.assertTrue(info.is_directory)
        self.assertEqual(info.path, "gs://bkt/d0/")

    def test_implicit_directory_is_inferred(self) -> None:
        info = self.resolver.get_file_info("gs://bkt/d1/d11/")
        self.assertTrue(info.exists)
        self.assertTrue(info.item_info.inferred)
        self.assertEqual(info.creation_time, 0)

    def test_implicit_directory_hidden_when_inference_disabled(self) -> None:
        resolver = FileInfoResolver(
            self.store, PathCodec(), policy=BehaviorPolicy(infer_implicit_directories=False)
        )
        self.assertFalse(resolver.get_file_info("gs://bkt/d1/d11/").exists)
        self.assertTrue(resolver.get_file_info("gs://bkt/d0/").exists)

    def test_not_found_keeps_given_form(self) -> None:
        info = self.resolver.get_file_info("gs://bkt/nope")
        self.assertFalse(info.exists)
        self.assertFalse(info.is_directory)
        self.assertEqual(info.path, "gs://bkt/nope")
        self.assertEqual(info.creation_time, 0)

    def test_invalid_path_raises(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.resolver.get_file_info("s3://bkt/x")

    def test_listing_scenario(self) -> None:
        self.assertEqual(
            self._names(self.resolver.list_file_info("gs://bkt/")),
            {"gs://bkt/o1", "gs://bkt/o2", "gs://bkt/d0/", "gs://bkt/d1/"},
        )
        self.assertEqual(self.resolver.list_file_info("gs://bkt/d0/"), [])
        self.assertEqual(
            self._names(self.resolver.list_file_info("gs://bkt/d1/")),
            {"gs://bkt/d1/o11", "gs://bkt/d1/o12", "gs://bkt/d1/d10/", "gs://bkt/d1/d11/"},
        )
        self.assertEqual(
            self._names(self.resolver.list_file_info("gs://bkt/d1/d11")),
            {"gs://bkt/d1/d11/o111"},
        )

    def test_listing_children_are_directories_with_markers(self) -> None:
        children = {i.path: i for i in self.resolver.list_file_info("gs://bkt/d1/")}
        self.assertFalse(children["gs://bkt/d1/d10/"].item_info.inferred)
        self.assertGreater(children["gs://bkt/d1/d10/"].creation_time, 0)
        self.assertTrue(children["gs://bkt/d1/d11/"].item_info.inferred)
        self.assertTrue(children["gs://bkt/d1/d11/"].is_directory)

    def test_list_leaf_returns_itself(self) -> None:
        infos = self.resolver.list_file_info("gs://bkt/o1")
        self.assertEqual([i.path for i in infos], ["gs://bkt/o1"])

    def test_list_root_returns_buckets(self) -> None:
        self.store.create_bucket("second")
        self.assertEqual(
            self._names(self.resolver.list_file_info("gs:/")),
            {"gs://bkt/", "gs://second/"},
        )

    def test_list_missing_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            self.resolver.list_file_info("gs://bkt/nope/")

    def test_list_file_names_contract(self) -> None:
        leaf = self.resolver.get_file_info("gs://bkt/o1")
        self.assertEqual(self.resolver.list_file_names(leaf), ["gs://bkt/o1"])

        missing_leaf = self.resolver.get_file_info("gs://bkt/nope")
        self.assertEqual(self.resolver.list_file_names(missing_leaf), ["gs://bkt/nope"])

        missing_dir = self.resolver.get_file_info("gs://bkt/nope/")
        self.assertEqual(self.resolver.list_file_names(missing_dir), [])

        d1 = self.resolver.get_file_info("gs://bkt/d1/")
        self.assertEqual(
            set(self.resolver.list_file_names(d1)),
            {"gs://bkt/d1/o11", "gs://bkt/d1/o12", "gs://bkt/d1/d10/", "gs://bkt/d1/d11/"},
        )

    def test_get_file_infos_preserves_order(self) -> None:
        paths = ["gs://bkt/o2", "gs://bkt/nope", "gs://bkt/d1", "gs:/", "gs://bkt/o1"]
        infos = self.resolver.get_file_infos(paths)
        self.assertEqual(
            [i.path for i in infos],
            ["gs://bkt/o2", "gs://bkt/nope", "gs://bkt/d1/", "gs:/", "gs://bkt/o1"],
        )
        self.assertEqual([i.exists for i in infos], [True, False, True, True, True])

    def test_exists(self) -> None:
        self.assertTrue(self.resolver.exists("gs://bkt/d1/d11"))
        self.assertFalse(self.resolver.exists("gs://bkt/d1/d12"))

    def test_cache_serves_repeated_lookups(self) -> None:
        cache = MetadataCache(ttl_sec=60.0)
        resolver = FileInfoResolver(self.store, PathCodec(), cache=cache)

        resolver.get_file_info("gs://bkt/o1")
        calls = self.store.metadata_calls
        resolver.get_file_info("gs://bkt/o1")
        self.assertEqual(self.store.metadata_calls, calls)

        cache.invalidate(resolver.codec.to_resource_id("gs://bkt/o1"))
        resolver.get_file_info("gs://bkt/o1")
        self.assertEqual(self.store.metadata_calls, calls + 1)


if __name__ == "__main__":
    unittest.main()
