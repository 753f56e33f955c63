import os
import shutil
import tempfile
import unittest

from zoopredict.bin.main import _get_augment_parser, build_config
from zoopredict.config import ImageFeatureConfig, InferConfig, ModelZooConfig, RunnerConfig
from zoopredict.runner import Runner
from zoopredict.utils import ResourceNotFound
from tiny_vgg import TINY_LABELS, tiny_config, write_cache, write_image


class RunnerTestCase(unittest.TestCase):
    def setUp(self):
        self.work_dir = tempfile.mkdtemp()
        self.cache_dir = os.path.join(self.work_dir, "cache", "pretrainedModels")
        write_cache(self.cache_dir)
        for i in range(1, 9):
            write_image(os.path.join(self.work_dir, "datasets", "vgg", "image%d.jpg" % i),
                        color_bgr=(30 * i, 255 - 20 * i, 7 * i), size=(20 + 3 * i, 24))
        self.lines = []

    def tearDown(self):
        shutil.rmtree(self.work_dir)

    def _runner(self, **infer_kwargs):
        config = RunnerConfig(
            zoo_config=ModelZooConfig(cache_dir=self.cache_dir, download=False),
            feature_config=ImageFeatureConfig(image_shape=(16, 16, 3)),
            infer_config=InferConfig(resource_dir=self.work_dir, **infer_kwargs),
        )
        return Runner(config, model_config=tiny_config(), printer=self.lines.append)

    def test_run(self):
        results = self._runner().run()
        self.assertEqual(len(results), 8)
        self.assertEqual(len(self.lines), 16)
        for i, result in enumerate(results, start=1):
            self.assertEqual(result.image_name, "image%d.jpg" % i)
            self.assertTrue(0 <= result.class_index < len(TINY_LABELS))
            self.assertEqual(result.label, TINY_LABELS[result.class_index])
            self.assertEqual(len(result.top_k), 5)
            confidences = [c for _, c in result.top_k]
            self.assertEqual(confidences, sorted(confidences, reverse=True))
            self.assertEqual(result.top_k[0][0], result.label)
            self.assertEqual(self.lines[2 * (i - 1)], "Predicted object for image%d.jpg is %s" % (i, result.label))
            self.assertTrue(self.lines[2 * (i - 1) + 1].startswith("[(" + result.label + ", "))

    def test_rerun_is_identical(self):
        self._runner().run()
        first = list(self.lines)
        self.lines.clear()
        self._runner().run()
        self.assertEqual(first, self.lines)

    def test_missing_image_aborts(self):
        os.remove(os.path.join(self.work_dir, "datasets", "vgg", "image3.jpg"))
        runner = self._runner()
        with self.assertRaises(ResourceNotFound) as ctx:
            runner.run()
        self.assertIn("datasets/vgg/image3.jpg", str(ctx.exception))
        self.assertEqual(len(self.lines), 4)

    def test_top_k_and_count(self):
        results = self._runner(num_images=2, top_k=3).run()
        self.assertEqual(len(results), 2)
        self.assertTrue(all(len(r.top_k) == 3 for r in results))

    def test_model_loads_before_labels(self):
        runner = self._runner(num_images=1)
        model_zoo = runner.model_zoo
        calls = []
        load_model, load_class_labels = model_zoo.load_model, model_zoo.load_class_labels

        def recording(name, method):
            def wrapper():
                calls.append(name)
                return method()
            return wrapper

        model_zoo.load_model = recording("model", load_model)
        model_zoo.load_class_labels = recording("labels", load_class_labels)
        runner.run()
        self.assertEqual(calls, ["model", "labels"])

    def test_missing_labels_aborts(self):
        os.remove(os.path.join(self.cache_dir, "imagenet_class_index.json"))
        with self.assertRaises(ResourceNotFound) as ctx:
            self._runner().run()
        self.assertIn("imagenet_class_index.json", str(ctx.exception))
        self.assertEqual(self.lines, [])


class MainTestCase(unittest.TestCase):
    def test_defaults(self):
        args = _get_augment_parser().parse_args([])
        config = build_config(args)
        self.assertEqual(config.zoo_config.model_type, "VGG-16")
        self.assertEqual(config.zoo_config.cache_dir, "cache/pretrainedModels")
        self.assertEqual(config.infer_config.num_images, 8)
        self.assertEqual(config.infer_config.top_k, 5)

    def test_overrides(self):
        args = _get_augment_parser().parse_args(
            ["--model", "VGG-19", "--cache_dir", "/tmp/zoo", "--resource_dir", "res", "--num_images", "3",
             "--top_k", "2", "--no_download"])
        config = build_config(args)
        self.assertEqual(config.zoo_config.model_type, "VGG-19")
        self.assertEqual(config.zoo_config.cache_dir, "/tmp/zoo")
        self.assertFalse(config.zoo_config.download)
        self.assertEqual(config.infer_config.resource_dir, "res")
        self.assertEqual(config.infer_config.num_images, 3)
        self.assertEqual(config.infer_config.top_k, 2)

    def test_out_of_range_overrides(self):
        parser = _get_augment_parser()
        for argv in (["--num_images", "0"], ["--num_images", "-2"], ["--top_k", "0"], ["--top_k", "-1"]):
            with self.assertRaises(ValueError):
                build_config(parser.parse_args(argv))

    def test_saved_config(self):
        save_dir = tempfile.mkdtemp()
        try:
            RunnerConfig(infer_config=InferConfig(num_images=4)).save_pretrained(save_dir)
            config = build_config(_get_augment_parser().parse_args(["--config", save_dir]))
            self.assertEqual(config.infer_config.num_images, 4)
        finally:
            shutil.rmtree(save_dir)


if __name__ == '__main__':
    unittest.main()
