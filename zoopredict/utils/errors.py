class ZooError(Exception):
    """Base class of every error raised by zoopredict."""


class ResourceNotFound(ZooError, FileNotFoundError):
    """A named image, weight or label file cannot be located."""

    def __init__(self, name, message=None):
        self.name = name
        if message is None:
            message = f"file not found! {name}"
        super(ResourceNotFound, self).__init__(message)

    def __str__(self):
        return self.args[0]


class UnsupportedModelError(ZooError, ValueError):
    pass


class ShapeMismatchError(ZooError, ValueError):
    pass


class WeightMismatchError(ZooError, ValueError):
    pass


class LabelIndexError(ZooError, IndexError):
    pass


class ModelClosedError(ZooError, RuntimeError):
    pass
