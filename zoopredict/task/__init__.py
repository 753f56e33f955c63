from .task import ModelInstance, WeightBlob, softmax, top_k_labels
