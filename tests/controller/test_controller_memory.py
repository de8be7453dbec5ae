import unittest

from bucketfs.controller import InMemoryObjectStore, ObjectStoreClient
from bucketfs.errors import (
    DirectoryNotEmptyError,
    FileAlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
)


class TestInMemoryObjectStore(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryObjectStore(clock=lambda: 1234)
        self.store.create_bucket("bkt")
        for key in ("o1", "o2", "d0/", "d1/o11", "d1/o12", "d1/d10/", "d1/d11/o111"):
            self.store.create_object("bkt", key, b"x")

    def test_satisfies_protocol(self) -> None:
        self.assertIsInstance(self.store, ObjectStoreClient)

    def test_delimiter_listing(self) -> None:
        listing = self.store.list_objects("bkt", prefix="", delimiter="/")
        self.assertEqual([o.resource_id.object_name for o in listing.objects], ["o1", "o2"])
        self.assertEqual(listing.prefixes, ["d0/", "d1/"])

        listing = self.store.list_objects("bkt", prefix="d1/", delimiter="/")
        self.assertEqual(
            [o.resource_id.object_name for o in listing.objects], ["d1/o11", "d1/o12"]
        )
        self.assertEqual(listing.prefixes, ["d1/d10/", "d1/d11/"])

    def test_marker_is_listed_as_object_under_its_own_prefix(self) -> None:
        listing = self.store.list_objects("bkt", prefix="d0/", delimiter="/")
        self.assertEqual([o.resource_id.object_name for o in listing.objects], ["d0/"])
        self.assertEqual(listing.prefixes, [])

    def test_full_listing_and_max_results(self) -> None:
        listing = self.store.list_objects("bkt", prefix="d1/")
        self.assertEqual(len(listing.objects), 4)
        self.assertEqual(listing.prefixes, [])

        listing = self.store.list_objects("bkt", prefix="d1/", delimiter="/", max_results=1)
        self.assertEqual(len(listing.objects) + len(listing.prefixes), 1)

    def test_metadata(self) -> None:
        info = self.store.get_object_metadata("bkt", "d1/o11")
        self.assertTrue(info.exists)
        self.assertEqual(info.size, 1)
        self.assertEqual(info.creation_time, 1234)
        self.assertIsNone(self.store.get_object_metadata("bkt", "nope"))
        self.assertIsNone(self.store.get_object_metadata("missing-bucket", "o1"))

    def test_create_without_overwrite(self) -> None:
        with self.assertRaises(FileAlreadyExistsError):
            self.store.create_object("bkt", "o1", b"y", overwrite=False)
        self.store.create_object("bkt", "o1", b"yy")
        self.assertEqual(self.store.read_object("bkt", "o1"), b"yy")
        with self.assertRaises(InvalidArgumentError):
            self.store.create_object("bkt", "", b"")

    def test_partial_read(self) -> None:
        self.store.create_object("bkt", "hello", b"Hello, World!")
        self.assertEqual(self.store.read_object("bkt", "hello", 7), b"World!")
        self.assertEqual(self.store.read_object("bkt", "hello", 0, 5), b"Hello")

    def test_copy_and_delete(self) -> None:
        self.store.copy_object("bkt", "o1", "bkt", "copy/o1")
        self.assertIsNotNone(self.store.get_object_metadata("bkt", "copy/o1"))
        self.store.delete_object("bkt", "o1")
        with self.assertRaises(NotFoundError):
            self.store.delete_object("bkt", "o1")
        with self.assertRaises(NotFoundError):
            self.store.copy_object("bkt", "o1", "bkt", "again")

    def test_buckets(self) -> None:
        self.assertTrue(self.store.bucket_exists("bkt"))
        self.store.create_bucket("other")
        self.assertEqual(
            [b.resource_id.bucket_name for b in self.store.list_buckets()], ["bkt", "other"]
        )
        with self.assertRaises(FileAlreadyExistsError):
            self.store.create_bucket("other")
        with self.assertRaises(DirectoryNotEmptyError):
            self.store.delete_bucket("bkt")
        self.store.delete_bucket("other")
        self.assertIsNone(self.store.get_bucket_metadata("other"))
        with self.assertRaises(NotFoundError):
            self.store.list_objects("other")
        with self.assertRaises(InvalidArgumentError):
            self.store.create_bucket("Bad_Name")


if __name__ == "__main__":
    unittest.main()
