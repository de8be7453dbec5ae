import unittest

from bucketfs.controller import InMemoryObjectStore
from bucketfs.emulator import BatchExecutor, BehaviorPolicy, DirectoryEmulator
from bucketfs.errors import (
    DirectoryNotEmptyError,
    InvalidArgumentError,
    NotFoundError,
)
from bucketfs.models import ObjectListing, ResourceId, StorageItemInfo
from bucketfs.path import PathCodec
from bucketfs.resolver import FileInfoResolver

_SCENARIO = ("o1", "d0/", "d1/", "d1/o11", "d1/d10/", "d1/d11/o111", "d2/f")


class _RecordingStore(InMemoryObjectStore):
    def __init__(self) -> None:
        super().__init__()
        self.deleted: list[str] = []

    def delete_object(self, bucket: str, key: str) -> None:
        super().delete_object(bucket, key)
        self.deleted.append(key)


class _VanishingStore(InMemoryObjectStore):
    """Lists one key more than it actually holds."""

    def list_objects(self, bucket, prefix="", delimiter=None, max_results=None) -> ObjectListing:
        listing = super().list_objects(bucket, prefix, delimiter, max_results)
        if delimiter is None and max_results is None and listing.objects:
            ghost = StorageItemInfo(resource_id=ResourceId(bucket, prefix + "ghost"), exists=True)
            return ObjectListing(objects=listing.objects + [ghost], prefixes=listing.prefixes)
        return listing


class TestDelete(unittest.TestCase):
    def setUp(self) -> None:
        self.store = _RecordingStore()
        self._fill(self.store)
        self.batch = BatchExecutor(max_workers=4)
        self.emulator = self._make_emulator(self.store)

    def tearDown(self) -> None:
        self.batch.shutdown()

    def _fill(self, store: InMemoryObjectStore) -> None:
        store.create_bucket("bkt")
        for key in _SCENARIO:
            store.create_object("bkt", key, b"x")

    def _make_emulator(self, store, policy: BehaviorPolicy = BehaviorPolicy()) -> DirectoryEmulator:
        codec = PathCodec()
        resolver = FileInfoResolver(store, codec, policy=policy, batch=self.batch)
        return DirectoryEmulator(store, resolver, codec, self.batch, policy=policy)

    def _keys(self) -> list[str]:
        return [o.resource_id.object_name for o in self.store.list_objects("bkt").objects]

    def test_delete_leaf(self) -> None:
        self.emulator.delete("gs://bkt/o1", recursive=False)
        self.assertNotIn("o1", self._keys())

    def test_delete_missing(self) -> None:
        with self.assertRaises(NotFoundError):
            self.emulator.delete("gs://bkt/nope", recursive=True)

    def test_delete_root(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.emulator.delete("gs:/", recursive=True)

    def test_non_recursive_non_empty_leaves_contents(self) -> None:
        before = self._keys()
        with self.assertRaises(DirectoryNotEmptyError):
            self.emulator.delete("gs://bkt/d1/", recursive=False)
        self.assertEqual(self._keys(), before)

    def test_non_recursive_empty_directory(self) -> None:
        self.emulator.delete("gs://bkt/d0", recursive=False)
        self.assertNotIn("d0/", self._keys())

    def test_recursive_deletes_deepest_first(self) -> None:
        self.emulator.delete("gs://bkt/d1/", recursive=True)

        self.assertFalse([k for k in self._keys() if k.startswith("d1/")])
        self.assertEqual(self.store.deleted[-1], "d1/")
        self.assertEqual(self.store.deleted[0], "d1/d11/o111")
        self.assertLess(self.store.deleted.index("d1/d10/"), self.store.deleted.index("d1/"))

    def test_delete_last_child_preserves_parent(self) -> None:
        self.emulator.delete("gs://bkt/d2/f", recursive=False)
        self.assertIn("d2/", self._keys())

    def test_parent_not_preserved_when_disabled(self) -> None:
        emulator = self._make_emulator(
            self.store, BehaviorPolicy(preserve_parent_directories=False)
        )
        emulator.delete("gs://bkt/d2/f", recursive=False)
        self.assertNotIn("d2/", self._keys())

    def test_delete_bucket(self) -> None:
        with self.assertRaises(DirectoryNotEmptyError):
            self.emulator.delete("gs://bkt", recursive=False)
        self.emulator.delete("gs://bkt/", recursive=True)
        self.assertFalse(self.store.bucket_exists("bkt"))

    def test_vanished_child_is_treated_as_deleted(self) -> None:
        store = _VanishingStore()
        self._fill(store)
        emulator = self._make_emulator(store)

        with self.assertLogs("bucketfs.emulator.directory_emulator", level="WARNING"):
            emulator.delete("gs://bkt/d1/", recursive=True)

        self.assertIsNone(store.get_object_metadata("bkt", "d1/"))


if __name__ == "__main__":
    unittest.main()
