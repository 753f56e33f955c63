from .model_zoo import (ModelZoo,
                        ModelType,
                        ModelDescriptor,
                        LabelTable,
                        resolve_model,
                        read_weight_file)
