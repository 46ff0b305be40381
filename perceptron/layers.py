"""
layers.py
~~~~~~~~~

The two layer kinds of a perceptron chain.

A ``HiddenLayer`` owns its biases, its activation and the weight matrix
projecting its activated output into the successor's input space, so a
hidden layer computes::

    activated[i] = activation(input[i] + biases[i])
    output[j]    = sum_i activated[i] * out_weights[i][j]

The ``OutputLayer`` terminates the chain and only applies its activation.
"""

import logging
from numbers import Integral
from typing import Optional, Sequence, Union

import numpy as np

from .activations import ActivationFunction, Sigmoid
from .errors import NotReadyError, ShapeError

logger = logging.getLogger(__name__)

ArrayLike = Union[Sequence[float], np.ndarray]


def _check_width(width) -> int:
    """Return ``width`` as an int, rejecting non-integers and widths < 1."""
    if isinstance(width, bool) or not isinstance(width, Integral):
        raise ShapeError(f"Layer width must be an integer, got {width!r}")
    if width < 1:
        raise ShapeError(f"Layer width must be positive, got {width}")
    return int(width)


def _as_vector(values: ArrayLike, width: int, what: str) -> np.ndarray:
    """Convert ``values`` to a float64 vector of exactly ``width`` entries."""
    try:
        vector = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ShapeError(f"{what} is not a numeric vector: {e}") from e

    if vector.ndim != 1:
        raise ShapeError(
            f"{what} must be one-dimensional, got shape {vector.shape}"
        )
    if vector.shape[0] != width:
        raise ShapeError(
            f"{what} does not match input shape\n"
            f"\texpected input shape: {width}\n"
            f"\tactual input shape: {vector.shape[0]}"
        )
    return vector


def _initial_biases(
    width: int,
    biases: Optional[ArrayLike],
    rng: Optional[np.random.Generator]
) -> np.ndarray:
    if biases is not None:
        return _as_vector(biases, width, 'biases').copy()
    if rng is None:
        rng = np.random.default_rng()
    return rng.random(width)


class HiddenLayer:
    """
    A non-terminal layer: biases, activation and outgoing weights.

    The layer is created unlinked. ``link`` allocates ``out_weights`` once,
    sized against the successor's width; that is the only place the weight
    shape is decided.
    """

    def __init__(
        self,
        width: int,
        activation: Optional[ActivationFunction] = None,
        biases: Optional[ArrayLike] = None,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Build an unlinked hidden layer.

        Args:
            width: Number of neurons
            activation: Activation function, sigmoid when omitted
            biases: Explicit biases; drawn uniformly from [0, 1) when omitted
            rng: Random generator used for the biases
        """
        self.input_width = _check_width(width)
        self.activation = activation if activation is not None else Sigmoid()
        self.biases: Optional[np.ndarray] = _initial_biases(
            self.input_width, biases, rng
        )
        self.out_weights: Optional[np.ndarray] = None
        self.successor_shape: Optional[int] = None
        self.initialized = False

    def __repr__(self) -> str:
        return (
            f"HiddenLayer(width={self.input_width}, "
            f"successor_shape={self.successor_shape}, "
            f"activation={self.activation!r})"
        )

    def input_shape(self) -> int:
        return self.input_width

    def output_shape(self) -> Optional[int]:
        """Width of the successor, or None while unlinked."""
        return self.successor_shape

    def link(
        self,
        successor,
        out_weights: Optional[ArrayLike] = None,
        rng: Optional[np.random.Generator] = None
    ) -> 'HiddenLayer':
        """
        Allocate the outgoing weights against ``successor``'s width.

        Linking an already initialized layer does nothing, so a network can
        be relinked without re-randomizing its parameters.

        Args:
            successor: The next layer (anything with ``input_shape()``)
            out_weights: Explicit ``width x successor width`` matrix;
                drawn uniformly from [0, 1) when omitted
            rng: Random generator used for the weights

        Returns:
            This layer

        Raises:
            ShapeError: If ``out_weights`` has the wrong shape
        """
        if self.initialized:
            return self

        next_width = successor.input_shape()
        expected = (self.input_width, next_width)

        if out_weights is None:
            if rng is None:
                rng = np.random.default_rng()
            weights = rng.random(expected)
        else:
            weights = np.array(out_weights, dtype=np.float64)
            if weights.shape != expected:
                raise ShapeError(
                    f"Weight matrix shape {weights.shape} does not match "
                    f"layer shape {expected}"
                )

        self.out_weights = weights
        self.successor_shape = next_width
        self.initialized = True
        logger.debug(f"Linked {self.input_width}-neuron layer to {next_width}")
        return self

    def validate(self, successor=None) -> None:
        """
        Check that the layer's shapes are consistent.

        Checks run in a fixed order and the first failure is raised.

        Args:
            successor: The layer this one feeds; the width recorded at link
                time is used when omitted

        Raises:
            ShapeError: On the first inconsistency found
        """
        if self.biases is None:
            raise ShapeError("HiddenLayer has no biases / neurons")
        if len(self.biases) != self.input_width:
            raise ShapeError(
                "HiddenLayer input_shape does not match # of biases / neurons"
            )

        if self.initialized:
            state = "HiddenLayer is labeled as initialized but"
        else:
            state = "HiddenLayer is un-initialized and"

        if self.successor_shape is None:
            raise ShapeError(f"{state} has no successor layer")
        if self.out_weights is None:
            raise ShapeError(f"{state} has no output weights")

        rows = self.out_weights.shape[0] if self.out_weights.ndim else 0
        if self.out_weights.ndim != 2 or rows != self.input_width:
            raise ShapeError(
                f"Incorrect weight input shape:\n"
                f"\tNodes: {self.input_width}\n"
                f"\tWeight matrix input shape: {rows}"
            )

        next_width = (
            successor.input_shape() if successor is not None
            else self.successor_shape
        )
        if self.out_weights.shape[1] != next_width:
            raise ShapeError(
                f"Incorrect output shape:\n"
                f"\tNext layer input: {next_width}\n"
                f"\tWeight matrix output shape: {self.out_weights.shape[1]}"
            )

    def is_ready(self, successor=None) -> bool:
        try:
            self.validate(successor)
        except ShapeError:
            return False
        return True

    def evaluate(self, values: ArrayLike) -> np.ndarray:
        """
        Activate this layer's neurons and project them into the successor.

        Args:
            values: Input vector of length ``input_shape()``

        Returns:
            float64 vector of length ``output_shape()``

        Raises:
            NotReadyError: If the layer has not been linked
            ShapeError: If ``values`` has the wrong length
        """
        if not self.initialized:
            raise NotReadyError("HiddenLayer must be linked before evaluation")

        x = _as_vector(values, self.input_width, 'input')
        activated = self.activation.eval(x + self.biases)
        return activated @ self.out_weights

    def parameter_count(self) -> int:
        count = len(self.biases) if self.biases is not None else 0
        if self.out_weights is not None:
            count += self.out_weights.size
        return count

    def summary(self) -> str:
        """Human-readable dump of the layer's shapes and weights."""
        if not self.initialized:
            return (
                f"Summary:\n\tinput_shape: {self.input_width}\n"
                f"\tcount of biases: {len(self.biases)}\n"
                f"\tinitialized? : False\n"
            )

        rows, cols = self.out_weights.shape
        lines = [
            "Summary:",
            f"\tinput_shape: {self.input_width}",
            f"\tcount of out_weights neuron connections: {rows}",
            f"\tcount of out_weights output connections: {cols}",
            f"\tcount of biases: {len(self.biases)}",
            f"\tnext layer input shape: {self.successor_shape}",
            f"\tinitialized? : {self.initialized}",
            "",
            "weight summary:",
        ]
        for i, node in enumerate(self.out_weights):
            lines.append(f"\tnode #{i} outputs")
            for j, weight in enumerate(node):
                lines.append(f"\t\tweight #{j} : {weight}")
        return "\n".join(lines) + "\n"


class OutputLayer:
    """
    Terminal layer: applies its activation elementwise.

    Biases are kept for the model format but not added during evaluation.
    """

    def __init__(
        self,
        width: int,
        activation: Optional[ActivationFunction] = None,
        biases: Optional[ArrayLike] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.input_width = _check_width(width)
        self.activation = activation if activation is not None else Sigmoid()
        self.biases: Optional[np.ndarray] = _initial_biases(
            self.input_width, biases, rng
        )

    def __repr__(self) -> str:
        return (
            f"OutputLayer(width={self.input_width}, "
            f"activation={self.activation!r})"
        )

    def input_shape(self) -> int:
        return self.input_width

    def output_shape(self) -> int:
        return self.input_width

    def validate(self) -> None:
        """
        Raises:
            ShapeError: If the bias count does not match the width
        """
        if self.biases is None or len(self.biases) != self.input_width:
            raise ShapeError(
                "number of biases does not match the input shape"
            )

    def is_ready(self) -> bool:
        try:
            self.validate()
        except ShapeError:
            return False
        return True

    def evaluate(self, values: ArrayLike) -> np.ndarray:
        """
        Raises:
            ShapeError: If ``values`` has the wrong length
        """
        x = _as_vector(values, self.input_width, 'input')
        return self.activation.eval(x)

    def parameter_count(self) -> int:
        return len(self.biases) if self.biases is not None else 0
