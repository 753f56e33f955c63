import os
import shutil
import tempfile
import unittest

from zoopredict.utils import resolve_resource, ResourceNotFound


class ResourceTestCase(unittest.TestCase):
    def setUp(self):
        self.base_dir = tempfile.mkdtemp()
        os.makedirs(os.path.join(self.base_dir, "datasets", "vgg"))
        with open(os.path.join(self.base_dir, "datasets", "vgg", "image1.jpg"), "wb") as f:
            f.write(b"\xff\xd8")

    def tearDown(self):
        shutil.rmtree(self.base_dir)

    def test_resolve_existing(self):
        path = resolve_resource(self.base_dir, "datasets/vgg/image1.jpg")
        self.assertTrue(os.path.isabs(path))
        self.assertTrue(os.path.isfile(path))

    def test_missing_names_file(self):
        with self.assertRaises(ResourceNotFound) as ctx:
            resolve_resource(self.base_dir, "datasets/vgg/image9999.jpg")
        self.assertIn("datasets/vgg/image9999.jpg", str(ctx.exception))
        self.assertEqual(ctx.exception.name, "datasets/vgg/image9999.jpg")
        self.assertIsInstance(ctx.exception, FileNotFoundError)

    def test_directory_is_not_a_resource(self):
        with self.assertRaises(ResourceNotFound):
            resolve_resource(self.base_dir, "datasets/vgg")


if __name__ == '__main__':
    unittest.main()
