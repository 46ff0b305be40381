"""
perceptron package
~~~~~~~~~~~~~~~~~~

Reference feed-forward multilayer perceptron.
Contains the layer and network implementation and the binary model
codec.
"""

from .activations import ActivationFunction, Sigmoid, get_activation
from .codec import decode, encode
from .errors import EncodingError, NotReadyError, PerceptronError, ShapeError
from .layers import HiddenLayer, OutputLayer
from .network import Network, init_network

__version__ = "1.0.0"

__all__ = [
    'ActivationFunction',
    'EncodingError',
    'HiddenLayer',
    'Network',
    'NotReadyError',
    'OutputLayer',
    'PerceptronError',
    'ShapeError',
    'Sigmoid',
    'decode',
    'encode',
    'get_activation',
    'init_network',
]
