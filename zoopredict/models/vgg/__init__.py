from .vgg import VGG
from .config_vgg import VGGModelConfig
from .feature_vgg import VGGFeature
