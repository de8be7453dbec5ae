import unittest

import bucketfs


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(bucketfs, "BucketFileSystem"))
        self.assertTrue(hasattr(bucketfs, "FileSystemOptions"))
        self.assertTrue(hasattr(bucketfs, "AuthInfo"))
        self.assertTrue(hasattr(bucketfs, "InMemoryObjectStore"))

        self.assertTrue(hasattr(bucketfs, "FileInfo"))
        self.assertTrue(hasattr(bucketfs, "ResourceId"))

        self.assertTrue(hasattr(bucketfs, "BucketFsError"))
        self.assertTrue(hasattr(bucketfs, "InvalidStateError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(bucketfs, "__all__"))
        self.assertIn("BucketFileSystem", bucketfs.__all__)
        self.assertIn("BucketFsError", bucketfs.__all__)
        for name in bucketfs.__all__:
            self.assertTrue(hasattr(bucketfs, name), name)


if __name__ == "__main__":
    unittest.main()
