import json
import os
import shutil
import tempfile
import unittest

from zoopredict.config import (BaseModelConfig, CompileConfig, ImageFeatureConfig, InferConfig, ModelZooConfig,
                               RunnerConfig)
from zoopredict.models.vgg import VGGFeature, VGGModelConfig
from zoopredict.feature import BaseFeature


class ConfigTestCase(unittest.TestCase):
    def setUp(self):
        self.save_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.save_dir)

    def test_feature_config(self):
        image_feat_config = ImageFeatureConfig(color_mode="bgr")
        self.assertEqual(image_feat_config.color_mode, "BGR")
        self.assertEqual(image_feat_config.image_shape, (224, 224, 3))

        image_feat_config.save_pretrained(self.save_dir)
        image_feat_config2 = ImageFeatureConfig.from_pretrained(self.save_dir)
        self.assertEqual(image_feat_config, image_feat_config2)

    def test_feature_config_rejects_bad_shape(self):
        with self.assertRaises(ValueError):
            ImageFeatureConfig(image_shape=(224, 224))

    def test_feature_save_pretrained(self):
        vgg_feature = VGGFeature(ImageFeatureConfig(image_shape=(32, 32, 3)))
        vgg_feature.save_pretrained(self.save_dir)
        vgg_feature2 = BaseFeature.from_pretrained(self.save_dir)
        self.assertIsInstance(vgg_feature2, VGGFeature)
        self.assertEqual(vgg_feature.config, vgg_feature2.config)

    def test_model_config_dispatch(self):
        config = VGGModelConfig(layer_type="vgg19", include_top=False)
        config.save_pretrained(self.save_dir)
        config2 = BaseModelConfig.from_pretrained(self.save_dir)
        self.assertIsInstance(config2, VGGModelConfig)
        self.assertEqual(config, config2)
        self.assertEqual(config2.get_feature_map_shape(), (7, 7, 512))

    def test_model_config_unknown_layer_type(self):
        with self.assertRaises(ValueError):
            VGGModelConfig(layer_type="vgg15")

    def test_wrong_config_type(self):
        ModelZooConfig().save_pretrained(self.save_dir)
        with self.assertRaises(ValueError):
            InferConfig.from_pretrained(os.path.join(self.save_dir, "zoo_config.json"))

    def test_missing_config_file(self):
        with self.assertRaises(FileNotFoundError):
            CompileConfig.from_pretrained(self.save_dir)

    def test_runner_config(self):
        runner_config = RunnerConfig(
            zoo_config=ModelZooConfig(model_type="VGG-19", cache_dir="somewhere"),
            infer_config=InferConfig(num_images=3, top_k=2),
        )
        config_path = runner_config.save_pretrained(self.save_dir)
        for name in ("zoo_config.json", "feature_config.json", "compile_config.json", "infer_config.json"):
            self.assertTrue(os.path.isfile(os.path.join(self.save_dir, name)))

        with open(config_path) as f:
            saved = json.load(f)
        self.assertEqual(saved["zoo_config_path"], "zoo_config.json")
        self.assertNotIn("zoo_config", saved)

        runner_config2 = RunnerConfig.from_pretrained(self.save_dir)
        self.assertEqual(runner_config, runner_config2)
        self.assertEqual(runner_config2.zoo_config.model_type, "VGG-19")
        self.assertEqual(runner_config2.infer_config.top_k, 2)

    def test_runner_config_requires_path(self):
        with self.assertRaises(ValueError):
            RunnerConfig.from_pretrained(None)

    def test_image_names(self):
        names = InferConfig().image_names()
        self.assertEqual(len(names), 8)
        self.assertEqual(names[0], "datasets/vgg/image1.jpg")
        self.assertEqual(names[-1], "datasets/vgg/image8.jpg")

    def test_infer_config_bounds(self):
        with self.assertRaises(ValueError):
            InferConfig(num_images=0)
        with self.assertRaises(ValueError):
            InferConfig(top_k=0)

    def test_compile_defaults(self):
        config = CompileConfig()
        self.assertEqual(config.optimizer, "Adam")
        self.assertEqual(config.loss, "absolute_difference_error")
        self.assertEqual(config.metric, "Accuracy")
        self.assertEqual(config.optimizer_args, {"lr": 0.001})


if __name__ == '__main__':
    unittest.main()
