from .runner import Runner, vgg16_prediction
