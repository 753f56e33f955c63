MODEL_CONFIG = "model_config.json"
FEATURE_CONFIG = "feature_config.json"
ZOO_CONFIG = "zoo_config.json"
COMPILE_CONFIG = "compile_config.json"
INFER_CONFIG = "infer_config.json"
RUNNER_CONFIG = "runner_config.json"

DEFAULT_CACHE_DIR = "cache/pretrainedModels"
DEFAULT_IMAGE_PATTERN = "datasets/vgg/image{index}.jpg"

from .errors import (ZooError,
                     ResourceNotFound,
                     UnsupportedModelError,
                     ShapeMismatchError,
                     WeightMismatchError,
                     LabelIndexError,
                     ModelClosedError)
from .resources import resolve_resource
from .output import PredictionResult
from .registry import Registers
