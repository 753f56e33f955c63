"""Model zoo: resolves architecture names to networks, pretrained weights and labels.

Weights and labels are downloaded once into ``common_model_directory`` and
read from there afterwards.
"""

from dataclasses import dataclass, replace
from enum import Enum
import json
import os
import re

import numpy as np
from tensorlayerx import logging
from tensorlayerx.files import maybe_download_and_extract

from ..feature.feature import ColorOrder, ImageShape, normalize
from ..models.vgg import VGG, VGGModelConfig
from ..task.task import ModelInstance, WeightBlob
from ..utils import DEFAULT_CACHE_DIR
from ..utils.errors import LabelIndexError, ResourceNotFound, ShapeMismatchError, UnsupportedModelError

IMAGENET_LABELS_URL = "https://storage.googleapis.com/download.tensorflow.org/data/"
IMAGENET_LABELS_NAME = "imagenet_class_index.json"

# ImageNet channel means, RGB
IMAGENET_MEAN_RGB = (123.68, 116.779, 103.939)


class ModelType(Enum):
    VGG_16 = "VGG-16"
    VGG_19 = "VGG-19"


@dataclass(frozen=True)
class ModelDescriptor:
    name: str
    layer_type: str
    cache_dir: str
    weights_url: str
    weights_name: str
    labels_url: str = IMAGENET_LABELS_URL
    labels_name: str = IMAGENET_LABELS_NAME
    input_shape: tuple = (224, 224, 3)
    color_order: ColorOrder = ColorOrder.RGB

    @property
    def mean(self):
        if self.color_order is ColorOrder.BGR:
            return tuple(reversed(IMAGENET_MEAN_RGB))
        return IMAGENET_MEAN_RGB

    @property
    def weights_path(self):
        return os.path.join(self.cache_dir, self.weights_name)

    @property
    def labels_path(self):
        return os.path.join(self.cache_dir, self.labels_name)


_descriptors = {
    ModelType.VGG_16: dict(
        layer_type="vgg16",
        weights_url="http://www.cs.toronto.edu/~frossard/vgg16/",
        weights_name="vgg16_weights.npz",
        color_order=ColorOrder.RGB,
    ),
    ModelType.VGG_19: dict(
        layer_type="vgg19",
        weights_url="https://media.githubusercontent.com/media/tensorlayer/pretrained-models/master/models/",
        weights_name="vgg19.npy",
        color_order=ColorOrder.BGR,
    ),
}


def _normalize_name(name):
    return re.sub(r"[^0-9a-z]", "", str(name).lower())


def resolve_model_type(name):
    if isinstance(name, ModelType):
        return name
    key = _normalize_name(name)
    for model_type in ModelType:
        if key in (_normalize_name(model_type.value), _normalize_name(model_type.name)):
            return model_type
    raise UnsupportedModelError(f"Unknown model {name}, supported: {[m.value for m in ModelType]}")


def resolve_model(name, cache_dir=DEFAULT_CACHE_DIR):
    """Return the ModelDescriptor of the architecture called ``name``, e.g. ``"VGG-16"``."""
    model_type = resolve_model_type(name)
    return ModelDescriptor(name=model_type.value, cache_dir=cache_dir, **_descriptors[model_type])


class LabelTable(object):
    """Read-only class names, indexed by class id."""

    def __init__(self, labels):
        self._labels = tuple(str(label) for label in labels)

    @classmethod
    def from_class_index(cls, class_index):
        """Build from ``{"0": ["n01440764", "tench"], ...}``."""
        ids = sorted(int(k) for k in class_index)
        if ids != list(range(len(ids))):
            raise ValueError("class index ids must be consecutive and start at 0")
        labels = []
        for i in ids:
            entry = class_index[str(i)]
            labels.append(entry[-1] if isinstance(entry, (list, tuple)) else entry)
        return cls(labels)

    def label(self, class_index):
        if isinstance(class_index, bool) or not isinstance(class_index, (int, np.integer)):
            raise TypeError(f"class index must be int, get {type(class_index)}")
        if not 0 <= class_index < len(self._labels):
            raise LabelIndexError(f"class index {class_index} out of range [0, {len(self._labels)})")
        return self._labels[class_index]

    def __getitem__(self, class_index):
        return self.label(class_index)

    def __len__(self):
        return len(self._labels)

    def __iter__(self):
        return iter(self._labels)

    def __eq__(self, other):
        if not isinstance(other, LabelTable):
            return NotImplemented
        return self._labels == other._labels


def read_weight_file(path):
    """
    Read pretrained arrays in assignment order.

    ``.npz`` files hold one array per key (``conv1_1_W``, ``conv1_1_b``, ...)
    and are read in key order. ``.npy`` files hold a pickled dict of
    ``layer -> [W, b]`` and are read in layer name order.
    """
    if path.endswith(".npz"):
        with np.load(path, allow_pickle=True) as npz:
            return [(key, npz[key]) for key in sorted(npz.files)]
    if path.endswith(".npy"):
        params = np.load(path, encoding="latin1", allow_pickle=True).item()
        arrays = []
        for layer in sorted(params):
            weight, bias = params[layer]
            arrays.append((layer + "_W", np.asarray(weight)))
            arrays.append((layer + "_b", np.asarray(bias)))
        return arrays
    raise ValueError(f"Unsupported weight file format {path}")


class ModelZoo(object):
    """
    Pretrained models by name.

    :param common_model_directory: str
        Cache directory for weight and label files.
    :param model_type: ModelType or str
    :param model_config: VGGModelConfig
        Override the network configuration, e.g. for a network without top.
    :param download: boolean
        Whether missing files may be downloaded.
    """

    def __init__(self, common_model_directory=DEFAULT_CACHE_DIR, model_type=ModelType.VGG_16, model_config=None,
                 download=True):
        self.descriptor = resolve_model(model_type, cache_dir=common_model_directory)
        if model_config is None:
            model_config = VGGModelConfig(layer_type=self.descriptor.layer_type,
                                          input_shape=self.descriptor.input_shape)
        else:
            self.descriptor = replace(self.descriptor, input_shape=tuple(model_config.input_shape))
        self.model_config = model_config
        self.download = download

    @property
    def common_model_directory(self):
        return self.descriptor.cache_dir

    @property
    def input_shape(self):
        return ImageShape(*self.descriptor.input_shape)

    @property
    def color_order(self):
        return self.descriptor.color_order

    def load_model(self):
        """Build the network and wrap it in a ModelInstance. No weights are loaded."""
        network = VGG.from_config(self.model_config, name=self.descriptor.layer_type)
        if not isinstance(network, VGG):
            raise UnsupportedModelError(
                f"{self.descriptor.name} built {type(network).__name__}, expected {VGG.__name__}")
        logging.info(f"Built {self.descriptor.name} network")
        return ModelInstance(network, self.descriptor.input_shape, name=self.descriptor.name)

    def load_weights(self):
        path = self._fetch(self.descriptor.weights_path, self.descriptor.weights_url)
        logging.info(f"Restore pre-trained weights from {path}")
        return WeightBlob(name=self.descriptor.weights_name, arrays=read_weight_file(path))

    def load_class_labels(self):
        path = self._fetch(self.descriptor.labels_path, self.descriptor.labels_url)
        with open(path, encoding="utf-8") as f:
            labels = LabelTable.from_class_index(json.load(f))
        logging.info(f"Loaded {len(labels)} class labels from {path}")
        return labels

    def preprocess_input(self, image, input_shape=None):
        """Subtract the ImageNet channel means in the model's channel order."""
        input_shape = tuple(input_shape or self.descriptor.input_shape)
        image = np.asarray(image, dtype=np.float32)
        if tuple(image.shape) != input_shape:
            raise ShapeMismatchError(f"{self.descriptor.name} expects {input_shape}, get {tuple(image.shape)}")
        return normalize(image, list(self.descriptor.mean), None).astype(np.float32)

    def _fetch(self, path, url):
        if os.path.isfile(path):
            return path
        directory, name = os.path.split(path)
        if not self.download:
            raise ResourceNotFound(name, f"file not found! {name} is not in {directory}")
        try:
            return maybe_download_and_extract(name, directory, url)
        except OSError as err:
            raise ResourceNotFound(name, f"file not found! {name} could not be downloaded from {url}: {err}") \
                from err
