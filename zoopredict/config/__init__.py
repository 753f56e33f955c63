from .config import (BaseConfig,
                     BaseModelConfig,
                     ImageFeatureConfig,
                     ModelZooConfig,
                     CompileConfig,
                     InferConfig,
                     RunnerConfig)
