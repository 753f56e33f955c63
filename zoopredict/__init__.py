import os

# pretrained weights are stored channels last
os.environ.setdefault("TL_BACKEND", "tensorflow")

from .version import __version__
from .config import RunnerConfig
from .feature import Preprocessing, ImageShape, ColorOrder
from .task import ModelInstance
from .zoo import ModelZoo, ModelType, resolve_model
from .runner import Runner, vgg16_prediction

from .models import *
