from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np
import tensorlayerx as tlx
from tensorlayerx import logging
from tensorlayerx.files import assign_weights

from ..config import CompileConfig
from ..utils.errors import ModelClosedError, ShapeMismatchError, WeightMismatchError


def get_loss_from_config(config):
    return _get_from(tlx.losses, config.loss, "loss")


def get_optimizer_from_config(config):
    return _get_from(tlx.optimizers, config.optimizer, "optimizer")(**config.optimizer_args)


def get_metric_from_config(config):
    return _get_from(tlx.metrics, config.metric, "metric")()


def _get_from(module, name, kind):
    try:
        return getattr(module, name)
    except AttributeError:
        raise ValueError(f"Unknown {kind} {name} in {module.__name__}") from None


def softmax(logits):
    logits = np.asarray(logits, dtype=np.float64)
    shifted = logits - np.max(logits, axis=-1, keepdims=True)
    exp = np.exp(shifted)
    return (exp / np.sum(exp, axis=-1, keepdims=True)).astype(np.float32)


def top_k_labels(probabilities, labels, k=5):
    """
    Rank class probabilities.

    :return: list of exactly ``k`` (label, confidence) pairs, highest first.
        Ties keep the lower class index first.
    """
    probabilities = np.asarray(probabilities).reshape(-1)
    if len(labels) != probabilities.shape[0]:
        raise ShapeMismatchError(
            f"{probabilities.shape[0]} class probabilities for a label table of size {len(labels)}")
    if not 1 <= k <= len(labels):
        raise ValueError(f"k must be in [1, {len(labels)}], get {k}")
    order = np.argsort(-probabilities, kind="stable")[:k]
    return [(labels[int(i)], float(probabilities[i])) for i in order]


@dataclass
class WeightBlob:
    """Pretrained arrays in the order they are assigned to a network."""
    name: str
    arrays: List[Tuple[str, np.ndarray]] = field(default_factory=list)

    def __len__(self):
        return len(self.arrays)

    def values(self):
        return [array for _, array in self.arrays]


class ModelInstance(object):
    """
    A loaded classification network.

    Use it as a context manager so the network is released exactly once:

    >>> with model_zoo.load_model() as model:
    ...     model.compile()
    ...     model.load_weights(model_zoo.load_weights())
    ...     class_index = model.predict(image)
    """

    def __init__(self, network, input_shape, name=None):
        self._network = network
        self.input_shape = tuple(input_shape)
        self.name = name or network.__class__.__name__
        self.trainer = None

    @property
    def network(self):
        if self._network is None:
            raise ModelClosedError(f"Model {self.name} is already closed.")
        return self._network

    @property
    def closed(self):
        return self._network is None

    def compile(self, optimizer="Adam", loss="absolute_difference_error", metric="Accuracy", optimizer_args=None):
        return self.compile_from_config(CompileConfig(optimizer=optimizer, optimizer_args=optimizer_args,
                                                      loss=loss, metric=metric))

    def compile_from_config(self, config):
        loss_fn = get_loss_from_config(config)
        optimizer = get_optimizer_from_config(config)
        metric = get_metric_from_config(config)
        self.trainer = tlx.model.Model(network=self.network, loss_fn=loss_fn, optimizer=optimizer, metrics=metric)
        logging.info(f"Compiled {self.name} with optimizer={config.optimizer}, loss={config.loss}, "
                     f"metric={config.metric}")
        return self

    def load_weights(self, weights):
        """
        Assign pretrained arrays to the network weights in order.

        Extra trailing arrays are ignored, so a network built without its
        top can take the full pretrained file.
        """
        if isinstance(weights, WeightBlob):
            named = weights.arrays
        else:
            named = [(str(idx), array) for idx, array in enumerate(weights)]

        all_weights = self.network.all_weights
        if len(named) < len(all_weights):
            raise WeightMismatchError(
                f"{self.name} has {len(all_weights)} weights, but only {len(named)} arrays were given")

        arrays = []
        for param, (key, array) in zip(all_weights, named):
            expected = tuple(tlx.get_tensor_shape(param))
            if tuple(array.shape) != expected:
                raise WeightMismatchError(
                    f"Shape of {key} is {tuple(array.shape)}, but {param.name} expects {expected}")
            logging.debug("  Loading weights %s in %s" % (str(array.shape), key))
            arrays.append(array)

        assign_weights(arrays, self.network)
        logging.info(f"Loaded {len(arrays)} weight arrays into {self.name}")
        return self

    def _to_batch(self, inputs):
        inputs = np.asarray(inputs, dtype=np.float32)
        single = inputs.ndim == len(self.input_shape)
        if single:
            inputs = inputs[np.newaxis, ...]
        if tuple(inputs.shape[1:]) != self.input_shape:
            raise ShapeMismatchError(f"{self.name} expects input of shape {self.input_shape}, "
                                     f"get {tuple(inputs.shape[1:])}")
        return inputs, single

    def predict_logits(self, inputs):
        batch, single = self._to_batch(inputs)
        network = self.network
        network.set_eval()
        logits = tlx.convert_to_numpy(network(tlx.convert_to_tensor(batch)))
        return logits[0] if single else logits

    def predict_soft(self, inputs):
        """Softmax class probabilities for one image (HxWxC) or a batch."""
        return softmax(self.predict_logits(inputs))

    def predict(self, inputs):
        """Index of the most probable class, a list of indices for a batch."""
        logits = self.predict_logits(inputs)
        indices = np.argmax(logits, axis=-1)
        if np.ndim(indices) == 0:
            return int(indices)
        return [int(i) for i in indices]

    def predict_top_k(self, inputs, labels, k=5):
        return top_k_labels(self.predict_soft(inputs), labels, k)

    def summary(self):
        lines = [f"Model: {self.name}", "%-40s %-24s %s" % ("Weight", "Shape", "Param #")]
        total = 0
        for param in self.network.all_weights:
            shape = tuple(tlx.get_tensor_shape(param))
            count = int(np.prod(shape))
            total += count
            lines.append("%-40s %-24s %d" % (param.name, shape, count))
        lines.append(f"Total params: {total}")
        text = "\n".join(lines)
        logging.info(text)
        return text

    def close(self):
        if self._network is None:
            return
        logging.info(f"Releasing {self.name}")
        self.trainer = None
        self._network = None

    def __enter__(self):
        # raises on a closed model
        self.network
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
