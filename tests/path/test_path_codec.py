import unittest

from bucketfs.errors import InvalidArgumentError
from bucketfs.models import ResourceId
from bucketfs.path import PathCodec, validate_bucket_name


class TestPathCodec(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = PathCodec()

    def test_root_forms(self) -> None:
        self.assertEqual(self.codec.to_resource_id("gs:/"), ResourceId.ROOT)
        self.assertEqual(self.codec.to_resource_id("gs://"), ResourceId.ROOT)
        self.assertEqual(self.codec.to_path(ResourceId.ROOT), "gs:/")

    def test_bucket_forms(self) -> None:
        for path in ("gs://bucket-1", "gs://bucket-1/"):
            rid = self.codec.to_resource_id(path, allow_empty_object_name=True)
            self.assertTrue(rid.is_bucket)
            self.assertEqual(rid.bucket_name, "bucket-1")
        self.assertEqual(self.codec.to_path(ResourceId("bucket-1")), "gs://bucket-1/")

    def test_bucket_rejected_when_object_required(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.codec.to_resource_id("gs://bucket-1/")

    def test_object_key_is_opaque(self) -> None:
        rid = self.codec.to_resource_id("gs://bucket-1/a/./b//c")
        self.assertEqual(rid.object_name, "a/./b//c")
        self.assertEqual(self.codec.to_path(rid), "gs://bucket-1/a/./b//c")

    def test_directory_and_leaf_are_distinct(self) -> None:
        leaf = self.codec.to_resource_id("gs://bucket-1/d0")
        directory = self.codec.to_resource_id("gs://bucket-1/d0/")
        self.assertNotEqual(leaf, directory)
        self.assertFalse(leaf.is_directory)
        self.assertTrue(directory.is_directory)

    def test_round_trip_normalizes(self) -> None:
        cases = {
            "gs:/": "gs:/",
            "gs://": "gs:/",
            "gs://bkt": "gs://bkt/",
            "gs://bkt/": "gs://bkt/",
            "gs://bkt/a/b": "gs://bkt/a/b",
            "gs://bkt/a/b/": "gs://bkt/a/b/",
        }
        for path, expected in cases.items():
            with self.subTest(path=path):
                self.assertEqual(self.codec.normalize(path), expected)

    def test_invalid_paths(self) -> None:
        bad = [
            "",
            "s3://bkt/a",
            "gs:bkt/a",
            "gs:/bkt/a",
            "gs://Bad_Bucket/a",
            "gs://ab/a",
            "gs://-bkt/a",
        ]
        for path in bad:
            with self.subTest(path=path):
                with self.assertRaises(InvalidArgumentError):
                    self.codec.to_resource_id(path, allow_empty_object_name=True)

    def test_custom_scheme(self) -> None:
        codec = PathCodec("mem")
        rid = codec.to_resource_id("mem://bkt/x")
        self.assertEqual(codec.to_path(rid), "mem://bkt/x")
        with self.assertRaises(InvalidArgumentError):
            codec.to_resource_id("gs://bkt/x")

    def test_item_name_and_parent_path(self) -> None:
        self.assertEqual(self.codec.item_name("gs://bkt/a/b/"), "b/")
        self.assertEqual(self.codec.item_name("gs://bkt/a/c"), "c")
        self.assertEqual(self.codec.item_name("gs://bkt/"), "bkt")
        self.assertEqual(self.codec.parent_path("gs://bkt/a/c"), "gs://bkt/a/")
        self.assertEqual(self.codec.parent_path("gs://bkt/a"), "gs://bkt/")
        self.assertEqual(self.codec.parent_path("gs://bkt/"), "gs:/")

    def test_validate_bucket_name(self) -> None:
        validate_bucket_name("my.bucket-01")
        with self.assertRaises(InvalidArgumentError):
            validate_bucket_name("UPPER")


if __name__ == "__main__":
    unittest.main()
