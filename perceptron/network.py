"""
network.py
~~~~~~~~~~

A feed-forward multilayer perceptron built from ``HiddenLayer`` objects
followed by exactly one ``OutputLayer``.

Typical use::

    >>> net = init_network([3, 5, 3], 2, seed=0)
    >>> net.evaluate([1.0, 1.0, 1.0]).shape
    (2,)
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .activations import ActivationFunction
from .errors import NotReadyError, ShapeError
from .layers import ArrayLike, HiddenLayer, OutputLayer

logger = logging.getLogger(__name__)

Layer = Union[HiddenLayer, OutputLayer]


class Network:
    """
    Ordered chain of hidden layers ending in one output layer.

    A hidden layer's successor is always the next entry of ``layers``;
    layers only remember the successor's width, never the successor itself.
    """

    def __init__(
        self,
        hidden_layers: Sequence[HiddenLayer],
        output_layer: OutputLayer
    ):
        """
        Assemble a network without linking it.

        Args:
            hidden_layers: At least one hidden layer, input side first
            output_layer: The terminal layer

        Raises:
            ShapeError: If there are no hidden layers
            TypeError: If a layer has the wrong kind
        """
        if not hidden_layers:
            raise ShapeError("A network needs at least one hidden layer")
        for layer in hidden_layers:
            if not isinstance(layer, HiddenLayer):
                raise TypeError(f"Expected HiddenLayer, got {type(layer).__name__}")
        if not isinstance(output_layer, OutputLayer):
            raise TypeError(
                f"Expected OutputLayer, got {type(output_layer).__name__}"
            )

        self.hidden_layers: List[HiddenLayer] = list(hidden_layers)
        self.output_layer = output_layer

    def __repr__(self) -> str:
        return f"Network(architecture={self.architecture})"

    @property
    def layers(self) -> List[Layer]:
        """All layers in evaluation order."""
        return [*self.hidden_layers, self.output_layer]

    @property
    def architecture(self) -> List[int]:
        """Layer widths in evaluation order, output layer last."""
        return [layer.input_shape() for layer in self.layers]

    def input_shape(self) -> int:
        return self.hidden_layers[0].input_shape()

    def output_shape(self) -> int:
        return self.output_layer.input_shape()

    def parameter_count(self) -> int:
        return sum(layer.parameter_count() for layer in self.layers)

    def link(self, rng: Optional[np.random.Generator] = None) -> 'Network':
        """
        Link every hidden layer to its successor.

        Already linked layers keep their weights, so calling this again is
        harmless.

        Args:
            rng: Random generator used for newly allocated weights

        Returns:
            This network
        """
        layers = self.layers
        for index, layer in enumerate(self.hidden_layers):
            layer.link(layers[index + 1], rng=rng)
        logger.debug(f"Linked network {self.architecture}")
        return self

    def first_unready_layer(self) -> Optional[Tuple[int, ShapeError]]:
        """
        Find the first layer that fails validation.

        Returns:
            ``(layer_index, error)`` for the first failing layer, or None
            if every layer is ready
        """
        layers = self.layers
        for index, layer in enumerate(self.hidden_layers):
            try:
                layer.validate(layers[index + 1])
            except ShapeError as e:
                return index, e
        try:
            self.output_layer.validate()
        except ShapeError as e:
            return len(self.hidden_layers), e
        return None

    def validate(self) -> None:
        """
        Raises:
            ShapeError: For the first layer that is not ready, with
                ``layer_index`` set to its position
        """
        failure = self.first_unready_layer()
        if failure is not None:
            index, error = failure
            raise ShapeError(str(error), layer_index=index) from error

    def is_ready(self) -> bool:
        return self.first_unready_layer() is None

    def evaluate(self, values: ArrayLike) -> np.ndarray:
        """
        Propagate ``values`` through every hidden layer and the output layer.

        Args:
            values: Input vector of length ``input_shape()``

        Returns:
            float64 vector of length ``output_shape()``

        Raises:
            NotReadyError: If the network does not validate
            ShapeError: If ``values`` has the wrong length
        """
        failure = self.first_unready_layer()
        if failure is not None:
            index, error = failure
            raise NotReadyError(
                f"Network is not ready (layer {index}): {error}"
            ) from error

        outputs = values
        for layer in self.hidden_layers:
            outputs = layer.evaluate(outputs)
        return self.output_layer.evaluate(outputs)


def init_network(
    hidden_widths: Sequence[int],
    output_width: int,
    activation: Optional[ActivationFunction] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None
) -> Network:
    """
    Build, link and validate a network.

    Args:
        hidden_widths: Width of each hidden layer, input side first
        output_width: Width of the output layer
        activation: Activation shared by every layer, sigmoid when omitted
        rng: Random generator for all parameters
        seed: Seed for a fresh generator, ignored when ``rng`` is given

    Returns:
        A linked network that passes validation

    Raises:
        ShapeError: If a width is invalid or a layer fails validation

    Example:
        >>> net = init_network([9, 6, 13, 25, 6, 1], 6)
        >>> net.input_shape(), net.output_shape()
        (9, 6)
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    hidden_layers = [
        HiddenLayer(width, activation, rng=rng) for width in hidden_widths
    ]
    output_layer = OutputLayer(output_width, activation, rng=rng)

    network = Network(hidden_layers, output_layer)
    network.link(rng=rng)
    network.validate()

    logger.debug(
        f"Initialized network {network.architecture} with "
        f"{network.parameter_count()} parameters"
    )
    return network
