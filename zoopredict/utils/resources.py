import os

from .errors import ResourceNotFound


def resolve_resource(base_dir, name):
    """
    Resolve ``name`` relative to ``base_dir``.

    :param base_dir: str
        Directory the resource lives under.
    :param name: str
        Relative resource name, e.g. ``datasets/vgg/image1.jpg``.
    :return: str
        Absolute path of an existing file.
    :raises ResourceNotFound: if no such file exists.
    """
    if base_dir is None:
        base_dir = os.getcwd()
    path = os.path.abspath(os.path.join(base_dir, name))
    if not os.path.isfile(path):
        raise ResourceNotFound(name)
    return path
