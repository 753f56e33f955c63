from ...feature.feature import BaseImageFeature, ColorOrder, check_image_shape
from ...config.config import ImageFeatureConfig
import numpy as np
from ...utils.registry import Registers


@Registers.features.register
class VGGFeature(BaseImageFeature):
    """Turns decoded images into a float32 batch of the configured shape."""
    config_class = ImageFeatureConfig

    def __init__(
            self,
            config=None,
            **kwargs
    ):
        if config is None:
            config = self.config_class()
        self.config = config

        image_shape = kwargs.pop("image_shape", None)
        if image_shape is not None:
            self.config.image_shape = tuple(image_shape)

        mean = kwargs.pop("mean", None)
        if mean is not None:
            self.config.mean = list(mean)

        std = kwargs.pop("std", None)
        if std is not None:
            self.config.std = std

        self.image_shape = self.config.image_shape
        self.mean = self.config.mean
        self.std = self.config.std

        super(VGGFeature, self).__init__(config, **kwargs)

    def __call__(self, images, input_color_mode=ColorOrder.BGR, *args, **kwargs):
        if not isinstance(images, (list, tuple)):
            images = [images]

        images = [image.astype('float32') for image in images]

        if self.config.color_mode is not None and ColorOrder.of(self.config.color_mode) is not ColorOrder.of(
                input_color_mode):
            images = [np.ascontiguousarray(image[..., ::-1]) for image in images]

        if self.config.do_resize:
            images = [self.resize(image=image, size=self.image_shape[:2]) for image in images]

        if self.config.do_normalize:
            images = [self.normalize(image=image, mean=self.mean, std=self.std) for image in images]

        images = [check_image_shape(image, self.image_shape) for image in images]
        return np.array(images, dtype=np.float32)
