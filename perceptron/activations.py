"""
activations.py
~~~~~~~~~~~~~~

Activation functions applied by the layers.

Each activation works on a single float or elementwise on a numpy array.
"""

from typing import Dict, Type, Union

import numpy as np

Scalar = Union[float, np.ndarray]


class ActivationFunction:
    """
    Pure activation: ``eval`` and its analytic ``derivative``.

    Subclasses must keep ``derivative`` consistent with ``eval``; nothing
    checks this at runtime.
    """

    name = 'activation'

    def eval(self, x: Scalar) -> Scalar:
        raise NotImplementedError

    def derivative(self, x: Scalar) -> Scalar:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))


class Sigmoid(ActivationFunction):
    """Logistic function ``1 / (1 + exp(-x))``."""

    name = 'sigmoid'

    def eval(self, x: Scalar) -> Scalar:
        x = np.asarray(x, dtype=np.float64)
        # exp only ever sees non-positive arguments, so it cannot overflow
        z = np.exp(-np.abs(x))
        result = np.where(x >= 0, 1.0 / (1.0 + z), z / (1.0 + z))
        return result[()]

    def derivative(self, x: Scalar) -> Scalar:
        s = self.eval(x)
        return s * (1.0 - s)


_ACTIVATIONS: Dict[str, Type[ActivationFunction]] = {
    Sigmoid.name: Sigmoid,
}


def get_activation(name: str) -> ActivationFunction:
    """
    Look up an activation by name.

    Args:
        name: Registered activation name, e.g. ``'sigmoid'``

    Returns:
        A new activation instance

    Raises:
        ValueError: If no activation is registered under ``name``
    """
    try:
        return _ACTIVATIONS[name.lower()]()
    except KeyError:
        raise ValueError(
            f"Unknown activation '{name}'. "
            f"Available: {sorted(_ACTIVATIONS)}"
        ) from None
