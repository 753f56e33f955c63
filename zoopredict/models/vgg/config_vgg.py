from ...config.config import BaseModelConfig
from ...utils.registry import Registers

cfg = {
    'A': [[64], 'M', [128], 'M', [256, 256], 'M', [512, 512], 'M', [512, 512], 'M'],
    'B': [[64, 64], 'M', [128, 128], 'M', [256, 256], 'M', [512, 512], 'M', [512, 512], 'M'],
    'D':
        [
            [64, 64], 'M', [128, 128], 'M', [256, 256, 256], 'M', [512, 512, 512], 'M', [512, 512, 512], 'M'
        ],
    'E':
        [
            [64, 64], 'M', [128, 128], 'M', [256, 256, 256, 256], 'M', [512, 512, 512, 512], 'M', [512, 512, 512, 512],
            'M'
        ],
}

mapped_cfg = {
    'vgg11': 'A',
    'vgg11_bn': 'A',
    'vgg13': 'B',
    'vgg13_bn': 'B',
    'vgg16': 'D',
    'vgg16_bn': 'D',
    'vgg19': 'E',
    'vgg19_bn': 'E'
}


def check_layers(layers):
    """Raise ValueError unless every group is ``'M'`` or a non-empty list of positive widths."""
    for layer_group in layers:
        if layer_group == 'M':
            continue
        if not isinstance(layer_group, list) or not layer_group:
            raise ValueError(f"layer group must be 'M' or a non-empty list of widths, get {layer_group!r}")
        for n_filter in layer_group:
            if isinstance(n_filter, bool) or not isinstance(n_filter, int) or n_filter < 1:
                raise ValueError(f"convolution width must be a positive int, get {n_filter!r}")
    return layers


@Registers.configs.register
class VGGModelConfig(BaseModelConfig):
    model_type = "vgg"

    def __init__(
            self,
            layer_type="vgg16",
            batch_norm=False,
            layers=None,
            include_top=True,
            fc1_units=4096,
            fc2_units=4096,
            num_labels=1000,
            input_shape=(224, 224, 3),
            dropout=0.5,
            **kwargs
    ):
        """
        :param layer_type: str
            One of vgg11, vgg13, vgg16, vgg19 (optionally with ``_bn``).
        :param batch_norm: boolean
            Whether to put BatchNorm after every convolution. Pretrained
            zoo weights have no BatchNorm parameters.
        :param layers: list
            Explicit layer groups, overrides ``layer_type``. Lists are
            convolution widths, ``'M'`` is a 2x2 max pooling.
        :param include_top: boolean
            Whether to build the three fully connected layers.
        :param input_shape: tuple
            (height, width, channels) of the input images.
        """
        if layers is None and layer_type not in mapped_cfg:
            raise ValueError(f"layer_type must in {list(mapped_cfg)}, get {layer_type}")
        self.layer_type = layer_type
        self.batch_norm = batch_norm
        self.layers = check_layers(layers) if layers is not None else cfg[mapped_cfg[layer_type]]
        self.include_top = include_top
        self.fc1_units = fc1_units
        self.fc2_units = fc2_units
        self.num_labels = num_labels
        self.input_shape = tuple(input_shape)
        self.dropout = dropout

        super(VGGModelConfig, self).__init__(**kwargs)

    def get_feature_map_shape(self):
        """Shape of the last convolution block output for ``input_shape``."""
        height, width, channels = self.input_shape
        for layer_group in self.layers:
            if isinstance(layer_group, list):
                channels = layer_group[-1]
            elif layer_group == 'M':
                # SAME padding rounds up
                height = -(-height // 2)
                width = -(-width // 2)
        return height, width, channels
