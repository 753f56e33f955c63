from tensorlayerx import logging


class Register(object):
    """
    Classes looked up by name when a saved config is loaded back.

    Config files store ``config_class`` and ``model_class`` as plain strings,
    the matching class is registered here with the decorator when its module
    is imported.
    """

    def __init__(self, name):
        self.name = name
        self._classes = {}

    def register(self, cls):
        """Decorator, keyed by the class name."""
        if not isinstance(cls, type):
            raise TypeError(f"{self.name} only registers classes, get {type(cls)}")
        if cls.__name__ in self._classes:
            logging.warning(f"{cls.__name__} is registered twice in {self.name}")
        self._classes[cls.__name__] = cls
        return cls

    def __getitem__(self, class_name):
        if class_name not in self._classes:
            raise KeyError(f"{class_name} is not registered in {self.name}, "
                           f"registered: {sorted(self._classes)}")
        return self._classes[class_name]

    def __contains__(self, class_name):
        return class_name in self._classes


class Registers(object):
    """The project registers: networks, feature transforms and configs."""

    def __init__(self):
        raise RuntimeError("Registers is a namespace and can't be instantiated")

    models = Register("models")
    features = Register("features")
    configs = Register("configs")
