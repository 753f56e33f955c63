from tensorlayerx import logging
import json
import os
import copy
from ..utils.registry import Registers
from ..utils import MODEL_CONFIG, FEATURE_CONFIG, ZOO_CONFIG, COMPILE_CONFIG, INFER_CONFIG, RUNNER_CONFIG, \
    DEFAULT_CACHE_DIR, DEFAULT_IMAGE_PATTERN

_config_type_name = {"": "",
                     "model": MODEL_CONFIG,
                     "feature": FEATURE_CONFIG,
                     "zoo": ZOO_CONFIG,
                     "compile": COMPILE_CONFIG,
                     "infer": INFER_CONFIG,
                     "runner": RUNNER_CONFIG
                     }

_reserved_keys = ("config_type", "config_class")


class BaseConfig(object):
    config_type = ""

    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            try:
                setattr(self, key, value)
            except AttributeError as err:
                logging.error(f"Can't set {key} with value {value} for {self}")
                raise err

    @classmethod
    def _from_dict(cls, config_dict, base_path=None):
        return cls(**config_dict)

    @classmethod
    def from_dict(cls, config_dict, base_path=None):
        config_dict = {k: v for k, v in config_dict.items() if k not in _reserved_keys}
        return cls._from_dict(config_dict, base_path=base_path)

    @classmethod
    def get_config_dict_from_path(cls, path):
        if not os.path.isfile(path):
            raise FileNotFoundError(f"config file {path} does not exist.")
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    @classmethod
    def from_pretrained(cls, config_path, **kwargs):
        if config_path is None:
            return cls(**kwargs)

        if os.path.isdir(config_path):
            config_path = os.path.join(config_path, _config_type_name[cls.config_type])

        config_dict = cls.get_config_dict_from_path(config_path)
        if config_dict.get("config_type") != cls.config_type:
            raise ValueError(f'{config_dict.get("config_type")} is not same as {cls.config_type}')

        config_dict.update(kwargs)
        base_path = os.path.dirname(config_path)

        config_class = config_dict.get("config_class")
        if config_class is not None and config_class != cls.__name__:
            return Registers.configs[config_class].from_dict(config_dict, base_path=base_path)

        return cls.from_dict(config_dict, base_path=base_path)

    def save_pretrained(self, save_directory):
        os.makedirs(save_directory, exist_ok=True)
        self._save_sub_pretrained(save_directory)

        _dict = self.to_dict()
        config_file_path = os.path.join(save_directory, _config_type_name[self.config_type])
        with open(config_file_path, "w", encoding="utf-8") as f:
            json.dump(_dict, f, indent=4)
        logging.info(f"Saved {self.__class__.__name__} to {config_file_path}")
        return config_file_path

    def _save_sub_pretrained(self, save_directory):
        ...

    def _post_dict(self, _dict):
        return _dict

    def to_dict(self):
        output = copy.deepcopy(self.__dict__)
        output["config_type"] = self.config_type
        output["config_class"] = self.__class__.__name__
        return self._post_dict(output)

    def __eq__(self, other):
        if not isinstance(other, BaseConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{self.__class__.__name__}({self.to_dict()})"


@Registers.configs.register
class BaseModelConfig(BaseConfig):
    """Base of network configs, saved as model_config.json."""
    config_type = "model"


@Registers.configs.register
class ImageFeatureConfig(BaseConfig):
    """
    Image loading options.

    ``color_mode`` of None means the channel order the pretrained model was
    trained with. ``mean`` and ``std`` are only applied when
    ``do_normalize`` is set.
    """
    config_type = "feature"

    def __init__(self, image_shape=(224, 224, 3),
                 color_mode=None,
                 do_resize=True,
                 do_normalize=False,
                 mean=None,
                 std=None,
                 **kwargs):
        self.image_shape = tuple(image_shape)
        if len(self.image_shape) != 3:
            raise ValueError(f"image_shape must be (height, width, channels), get {image_shape}")
        self.color_mode = color_mode.upper() if color_mode is not None else None
        self.do_resize = do_resize
        self.do_normalize = do_normalize
        self.mean = list(mean) if mean is not None else None
        self.std = list(std) if isinstance(std, (list, tuple)) else std
        super(ImageFeatureConfig, self).__init__(**kwargs)


@Registers.configs.register
class ModelZooConfig(BaseConfig):
    config_type = "zoo"

    def __init__(self, model_type="VGG-16", cache_dir=DEFAULT_CACHE_DIR, download=True, **kwargs):
        self.model_type = model_type
        self.cache_dir = cache_dir
        self.download = download
        super(ModelZooConfig, self).__init__(**kwargs)


@Registers.configs.register
class CompileConfig(BaseConfig):
    config_type = "compile"

    def __init__(self,
                 optimizer="Adam",
                 optimizer_args=None,
                 loss="absolute_difference_error",
                 metric="Accuracy",
                 **kwargs):
        self.optimizer = optimizer
        self.optimizer_args = dict(optimizer_args) if optimizer_args is not None else {"lr": 0.001}
        self.loss = loss
        self.metric = metric
        super(CompileConfig, self).__init__(**kwargs)


@Registers.configs.register
class InferConfig(BaseConfig):
    config_type = "infer"

    def __init__(self,
                 resource_dir=".",
                 image_pattern=DEFAULT_IMAGE_PATTERN,
                 num_images=8,
                 top_k=5,
                 **kwargs):
        if num_images < 1:
            raise ValueError(f"num_images must be positive, get {num_images}")
        if top_k < 1:
            raise ValueError(f"top_k must be positive, get {top_k}")
        self.resource_dir = resource_dir
        self.image_pattern = image_pattern
        self.num_images = num_images
        self.top_k = top_k
        super(InferConfig, self).__init__(**kwargs)

    def image_names(self):
        return [self.image_pattern.format(index=i) for i in range(1, self.num_images + 1)]


@Registers.configs.register
class RunnerConfig(BaseConfig):
    config_type = "runner"

    def __init__(self,
                 zoo_config: ModelZooConfig = None,
                 feature_config: ImageFeatureConfig = None,
                 compile_config: CompileConfig = None,
                 infer_config: InferConfig = None,
                 **kwargs
                 ):
        self.zoo_config = zoo_config if zoo_config is not None else ModelZooConfig()
        self.feature_config = feature_config if feature_config is not None else ImageFeatureConfig()
        self.compile_config = compile_config if compile_config is not None else CompileConfig()
        self.infer_config = infer_config if infer_config is not None else InferConfig()
        super(RunnerConfig, self).__init__(**kwargs)

    def __eq__(self, other):
        if not isinstance(other, RunnerConfig):
            return NotImplemented
        return (super(RunnerConfig, self).__eq__(other)
                and self.zoo_config == other.zoo_config
                and self.feature_config == other.feature_config
                and self.compile_config == other.compile_config
                and self.infer_config == other.infer_config)

    @classmethod
    def from_pretrained(cls, config_path, **kwargs):
        if config_path is None:
            raise ValueError("config path is None")
        return super(RunnerConfig, cls).from_pretrained(config_path, **kwargs)

    def _save_sub_pretrained(self, save_directory):
        self.zoo_config.save_pretrained(save_directory)
        self.feature_config.save_pretrained(save_directory)
        self.compile_config.save_pretrained(save_directory)
        self.infer_config.save_pretrained(save_directory)

    def _post_dict(self, _dict):
        for name in ("zoo_config", "feature_config", "compile_config", "infer_config"):
            sub_config = _dict.pop(name)
            _dict[name + "_path"] = _config_type_name[sub_config.config_type]
        return _dict

    @classmethod
    def _from_dict(cls, config_dict, base_path=None):
        base_path = base_path or "."

        def _load(config_cls, key):
            path = config_dict.pop(key, _config_type_name[config_cls.config_type])
            return config_cls.from_pretrained(os.path.join(base_path, path))

        zoo_config = _load(ModelZooConfig, "zoo_config_path")
        feature_config = _load(ImageFeatureConfig, "feature_config_path")
        compile_config = _load(CompileConfig, "compile_config_path")
        infer_config = _load(InferConfig, "infer_config_path")

        return cls(zoo_config=zoo_config, feature_config=feature_config, compile_config=compile_config,
                   infer_config=infer_config, **config_dict)
