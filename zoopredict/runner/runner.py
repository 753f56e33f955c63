from tensorlayerx import logging

from ..config import RunnerConfig
from ..feature.feature import Preprocessing
from ..task.task import top_k_labels
from ..utils.output import PredictionResult
from ..utils.resources import resolve_resource
from ..zoo.model_zoo import ModelZoo


class Runner(object):
    """
    Pretrained prediction over a fixed list of sample images.

    - Model, weights and labels come from the ModelZoo.
    - Images are loaded in the channel order the model was trained with and
      mean subtracted the same way.
    - No training, no new layers.
    """

    def __init__(self, config=None, model_config=None, resolve=resolve_resource, printer=print):
        self.config = config if config is not None else RunnerConfig()
        self.resolve = resolve
        self.printer = printer

        zoo_config = self.config.zoo_config
        self.model_zoo = ModelZoo(common_model_directory=zoo_config.cache_dir, model_type=zoo_config.model_type,
                                  model_config=model_config, download=zoo_config.download)

    def run(self):
        infer_config = self.config.infer_config
        model_zoo = self.model_zoo

        model = model_zoo.load_model()

        results = []
        with model:
            labels = model_zoo.load_class_labels()
            model.compile_from_config(self.config.compile_config)
            model.summary()

            model.load_weights(model_zoo.load_weights())

            for image_name in infer_config.image_names():
                result = self.predict_image(model, labels, image_name, infer_config.top_k)
                self.printer(f"Predicted object for {result.image_name} is {result.label}")
                self.printer(result.format_top_k())
                results.append(result)

        logging.info(f"Predicted {len(results)} images with {model_zoo.descriptor.name}")
        return results

    def predict_image(self, model, labels, image_name, top_k=5):
        path = self.resolve(self.config.infer_config.resource_dir, image_name)
        preprocessing = Preprocessing.from_config(path, self.config.feature_config,
                                                  default_color_mode=self.model_zoo.color_order)
        image, _ = preprocessing()
        inputs = self.model_zoo.preprocess_input(image, model.input_shape)

        # one forward pass serves both the top-1 and the top-k answer
        probabilities = model.predict_soft(inputs)
        ranked = top_k_labels(probabilities, labels, top_k)
        class_index = int(probabilities.argmax())

        return PredictionResult(image_name=image_name.rsplit("/", 1)[-1], class_index=class_index,
                                label=labels[class_index], top_k=ranked)


def vgg16_prediction(config=None):
    return Runner(config).run()
