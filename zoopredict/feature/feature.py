from collections import namedtuple
from enum import Enum
import os

import cv2
import numpy as np
from tensorlayerx import logging

from ..config import ImageFeatureConfig
from ..utils.errors import ResourceNotFound, ShapeMismatchError
from ..utils.registry import Registers


ImageShape = namedtuple("ImageShape", ["height", "width", "channels"])


class ColorOrder(Enum):
    RGB = "RGB"
    BGR = "BGR"

    @classmethod
    def of(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"color mode must be one of {[c.value for c in cls]}, get {value}") from None


def check_image_shape(image, image_shape):
    """Raise ShapeMismatchError unless ``image`` is exactly ``image_shape``."""
    if tuple(image.shape) != tuple(image_shape):
        raise ShapeMismatchError(f"Expected image of shape {tuple(image_shape)}, get {tuple(image.shape)}")
    return image


def load_image(path_to_data, image_shape=ImageShape(224, 224, 3), color_mode=ColorOrder.BGR, do_resize=True):
    """
    Decode an image file into a float32 HxWxC array.

    :param path_to_data: str
        Path of a file OpenCV can decode.
    :param image_shape: tuple
        Target (height, width, channels). Only 3 channels are supported.
    :param color_mode: ColorOrder or str
        Channel order of the returned array.
    :param do_resize: boolean
        Whether to resize to ``image_shape``. Without resizing the decoded
        size must already match.
    """
    image_shape = ImageShape(*image_shape)
    if image_shape.channels != 3:
        raise ShapeMismatchError(f"Only 3 channel images are supported, get {image_shape.channels}")

    if not os.path.isfile(path_to_data):
        raise ResourceNotFound(path_to_data)

    # cv2 decodes to BGR
    image = cv2.imread(path_to_data, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"Can't decode image {path_to_data}")

    if ColorOrder.of(color_mode) is ColorOrder.RGB:
        image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)

    if do_resize:
        image = resize(image, (image_shape.height, image_shape.width))

    return check_image_shape(image.astype(np.float32), image_shape)


def resize(image, size):
    """Resize to ``size`` given as (height, width) or a single int."""
    if isinstance(size, int):
        size = (size, size)
    height, width = size
    if image.shape[:2] == (height, width):
        return image
    # cv2 takes (width, height)
    return cv2.resize(image, (width, height), interpolation=cv2.INTER_LINEAR)


def normalize(image, mean, std):
    if isinstance(mean, (list, tuple)):
        mean = np.array(mean, dtype=np.float32).reshape([1, 1, -1])

    if isinstance(std, (list, tuple)):
        std = np.array(std, dtype=np.float32).reshape([1, 1, -1])

    if mean is not None:
        image = image - mean

    if std is not None:
        image = image / std

    return image


class BaseFeature(object):
    def __init__(
            self,
            config,
            **kwargs
    ):
        self.config = config
        self.config.feature_class = self.__class__.__name__

    @classmethod
    def from_pretrained(
            cls, pretrained_path, **kwargs
    ):
        config = ImageFeatureConfig.from_pretrained(pretrained_path, **kwargs)

        return cls.from_config(config)

    def save_pretrained(self, save_path):
        self.config.save_pretrained(save_path)

    @classmethod
    def from_config(cls, config):
        feature_class = getattr(config, "feature_class", cls.__name__)
        return Registers.features[feature_class](config)


class BaseImageFeature(BaseFeature):
    def resize(self, image, size):
        return resize(image, size)

    def normalize(self, image, mean, std):
        return normalize(image, mean, std)


class Preprocessing(object):
    """
    Declarative image loading pipeline.

    Example
    -------
    >>> preprocessing = Preprocessing(path_to_data="datasets/vgg/image1.jpg",
    ...                               image_shape=ImageShape(224, 224, 3),
    ...                               color_mode=ColorOrder.BGR)
    >>> tensor, shape = preprocessing()

    Calling the pipeline twice on the same file gives the same tensor.
    """

    def __init__(self, path_to_data, image_shape=ImageShape(224, 224, 3), color_mode=ColorOrder.BGR,
                 do_resize=True, transforms=None):
        self.path_to_data = path_to_data
        self.image_shape = ImageShape(*image_shape)
        self.color_mode = ColorOrder.of(color_mode)
        self.do_resize = do_resize
        self.transforms = list(transforms) if transforms else []

    @classmethod
    def from_config(cls, path_to_data, config, default_color_mode=ColorOrder.BGR, transforms=None):
        color_mode = config.color_mode if config.color_mode is not None else default_color_mode
        if config.do_normalize:
            transforms = [lambda image: normalize(image, config.mean, config.std)] + list(transforms or [])
        return cls(path_to_data, image_shape=config.image_shape, color_mode=color_mode,
                   do_resize=config.do_resize, transforms=transforms)

    def __call__(self):
        logging.debug(f"Loading {self.path_to_data} as {self.color_mode.value} {tuple(self.image_shape)}")
        image = load_image(self.path_to_data, self.image_shape, self.color_mode, self.do_resize)
        for transform in self.transforms:
            image = transform(image)
        return check_image_shape(image, self.image_shape), self.image_shape
