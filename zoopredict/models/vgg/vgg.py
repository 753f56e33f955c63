"""
VGG for ImageNet.
Introduction
----------------
VGG is a convolutional neural network model proposed by K. Simonyan and A. Zisserman
from the University of Oxford in the paper "Very Deep Convolutional Networks for
Large-Scale Image Recognition"  . The model achieves 92.7% top-5 test accuracy in ImageNet,
which is a dataset of over 14 million images belonging to 1000 classes.
Pre-trained Model
----------------------------
- vgg16_weights.npz : http://www.cs.toronto.edu/~frossard/post/vgg16/
- vgg19.npy : https://media.githubusercontent.com/media/tensorlayer/pretrained-models/master/models/
Note
------
Weights are assigned in layer order, so the network built here must keep
the conv -> fc1_relu -> fc2_relu -> outputs order of the pretrained files
and must not contain BatchNorm when loading them.
"""

import tensorlayerx as tlx
from tensorlayerx.nn import (BatchNorm, Conv2d, Linear, Flatten, Sequential, MaxPool2d, Dropout, Module)

from ...utils.registry import Registers
from .config_vgg import VGGModelConfig

__all__ = ['VGG']


def make_layers(layer_config, batch_norm=False, in_channels=3):
    """Convolution groups are named conv{block}_{i}, poolings pool{n}, both counted from 1."""
    layer_list = []
    block = 0
    pool = 0
    for layer_group in layer_config:
        if isinstance(layer_group, list):
            block += 1
            for idx, n_filter in enumerate(layer_group, start=1):
                layer_list.append(
                    Conv2d(
                        out_channels=n_filter, kernel_size=(3, 3), stride=(1, 1), act=tlx.ReLU, padding='SAME',
                        in_channels=in_channels, name=f"conv{block}_{idx}"
                    )
                )
                if batch_norm:
                    layer_list.append(BatchNorm(num_features=n_filter, gamma_init="ones", moving_var_init="ones"))
                in_channels = n_filter
        elif layer_group == 'M':
            pool += 1
            layer_list.append(MaxPool2d(kernel_size=(2, 2), stride=(2, 2), padding='SAME', name=f"pool{pool}"))
        else:
            raise ValueError(f"Unknown layer group {layer_group!r}")
    return Sequential(layer_list)


@Registers.models.register
class VGG(Module):
    config_class = VGGModelConfig

    def __init__(self, config=None, name=None, **kwargs):
        if config is None:
            config = self.config_class(**kwargs)
        super(VGG, self).__init__(name=name)

        self.config = config
        self.config.model_class = self.__class__.__name__
        self.input_shape = config.input_shape
        self.include_top = config.include_top

        self.features = make_layers(config.layers, config.batch_norm, in_channels=config.input_shape[-1])
        self.flatten = Flatten()

        if self.include_top:
            height, width, channels = config.get_feature_map_shape()
            self.classifier = Sequential([
                Linear(config.fc1_units, in_features=height * width * channels, act=tlx.ReLU, name='fc1_relu'),
                Dropout(p=config.dropout),
                Linear(config.fc2_units, in_features=config.fc1_units, act=tlx.ReLU, name='fc2_relu'),
                Dropout(p=config.dropout),
                Linear(config.num_labels, in_features=config.fc2_units, name='outputs'),
            ])

    def forward(self, inputs):
        """
        inputs : tensor
            Shape [None, height, width, 3], already mean subtracted.
        Returns the logits, or the last feature map without the top.
        """
        out = self.features(inputs)

        if self.include_top:
            out = self.flatten(out)
            return self.classifier(out)
        return out

    @classmethod
    def from_config(cls, config, *args, **kwargs):
        model_class = getattr(config, "model_class", cls.__name__)
        return Registers.models[model_class](config, *args, **kwargs)
