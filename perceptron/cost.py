"""
cost.py
~~~~~~~

Squared-error costs, kept per element so they can be summed when needed.
"""

import numpy as np

from .errors import ShapeError
from .layers import ArrayLike


def individual_cost_mse(actual: ArrayLike, expected: ArrayLike) -> np.ndarray:
    """
    Squared error of every output: ``(expected[i] - actual[i]) ** 2``.

    Raises:
        ShapeError: If the vectors differ in length
    """
    actual = np.asarray(actual, dtype=np.float64)
    expected = np.asarray(expected, dtype=np.float64)
    if actual.shape != expected.shape:
        raise ShapeError(
            f"Cannot compare output of shape {actual.shape} "
            f"with expected shape {expected.shape}"
        )
    return (expected - actual) ** 2


def total_cost_mse(actual: ArrayLike, expected: ArrayLike) -> float:
    return float(np.sum(individual_cost_mse(actual, expected)))
