"""
errors.py
~~~~~~~~~

Exception types raised by the perceptron core.
"""

from typing import Optional


class PerceptronError(Exception):
    """Base class for every error raised by this package."""


class ShapeError(PerceptronError, ValueError):
    """
    Dimension mismatch between layers, weights, biases or inputs.

    Attributes:
        layer_index: Position of the offending layer in its network, when
            the error was raised while validating a whole network
    """

    def __init__(self, message: str, layer_index: Optional[int] = None):
        super().__init__(message)
        self.layer_index = layer_index

    def __str__(self) -> str:
        message = super().__str__()
        if self.layer_index is None:
            return message
        return f"layer {self.layer_index}: {message}"


class EncodingError(PerceptronError, ValueError):
    """Malformed, truncated or unrepresentable binary model data."""


class NotReadyError(PerceptronError, RuntimeError):
    """A layer or network was used before it was linked and validated."""
