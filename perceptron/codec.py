"""
codec.py
~~~~~~~~

Binary model format for ``Network`` objects.

Layout (all integers and floats little-endian)::

    uint32            number of layers
    uint32 * n        width of every layer, hidden layers first, output last
    b'|'              header terminator
    float64 * W       hidden layer weights, layer by layer, row-major
    float64           parameter separator, always 420.0
    float64 * B       biases of every layer, output layer last

The activation is not stored; ``decode`` takes it as an argument.
"""

import logging
from numbers import Real
from typing import List, Optional

import numpy as np

from .activations import ActivationFunction
from .errors import EncodingError, NotReadyError, ShapeError
from .layers import HiddenLayer, OutputLayer
from .network import Network

logger = logging.getLogger(__name__)

FLOAT_DTYPE = np.dtype('<f8')
WIDTH_DTYPE = np.dtype('<u4')

HEADER_TERMINATOR = b'|'
PARAMETER_SEPARATOR = 420.0

_MAX_WIDTH = np.iinfo(WIDTH_DTYPE).max


def float64_to_bytes(value: float) -> bytes:
    """
    Encode ``value`` as its 8-byte IEEE-754 bit pattern.

    Raises:
        EncodingError: If ``value`` is not a real number
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise EncodingError(f"Cannot encode {value!r} as a float64")
    return np.array([value], dtype=FLOAT_DTYPE).tobytes()


def bytes_to_float64(data: bytes) -> float:
    """
    Decode an 8-byte IEEE-754 float64.

    Raises:
        EncodingError: If ``data`` is not exactly 8 bytes long
    """
    if len(data) != FLOAT_DTYPE.itemsize:
        raise EncodingError(
            f"Expected {FLOAT_DTYPE.itemsize} bytes for a float64, "
            f"got {len(data)}"
        )
    return float(np.frombuffer(data, dtype=FLOAT_DTYPE)[0])


def encode(network: Network) -> bytes:
    """
    Serialize a ready network.

    Args:
        network: Linked network that passes validation

    Returns:
        The encoded model

    Raises:
        NotReadyError: If the network does not validate
        EncodingError: If a layer width does not fit in 32 bits
    """
    try:
        network.validate()
    except ShapeError as e:
        raise NotReadyError(f"Refusing to encode network: {e}") from e

    widths = network.architecture
    if any(width > _MAX_WIDTH for width in widths):
        raise EncodingError(
            f"Layer widths must fit in 32 bits, got {widths}"
        )

    header = np.array([len(widths), *widths], dtype=WIDTH_DTYPE).tobytes()

    weights = [
        np.ascontiguousarray(layer.out_weights, dtype=FLOAT_DTYPE).tobytes()
        for layer in network.hidden_layers
    ]
    biases = [
        np.ascontiguousarray(layer.biases, dtype=FLOAT_DTYPE).tobytes()
        for layer in network.layers
    ]

    data = b''.join([
        header,
        HEADER_TERMINATOR,
        *weights,
        float64_to_bytes(PARAMETER_SEPARATOR),
        *biases,
    ])
    logger.debug(f"Encoded network {widths} into {len(data)} bytes")
    return data


def _read_widths(data: bytes) -> List[int]:
    count_size = WIDTH_DTYPE.itemsize
    if len(data) < count_size:
        raise EncodingError(
            f"Buffer too small for a header: {len(data)} bytes"
        )

    count = int(np.frombuffer(data[:count_size], dtype=WIDTH_DTYPE)[0])
    if count < 2:
        raise EncodingError(
            f"A model needs at least 2 layers, header declares {count}"
        )

    header_end = count_size * (count + 1)
    if len(data) < header_end + len(HEADER_TERMINATOR):
        raise EncodingError(
            f"Buffer too small for a {count}-layer header: {len(data)} bytes"
        )

    widths = [
        int(width) for width in
        np.frombuffer(data[count_size:header_end], dtype=WIDTH_DTYPE)
    ]
    if any(width == 0 for width in widths):
        raise EncodingError(f"Layer widths must be positive, got {widths}")

    terminator = data[header_end:header_end + len(HEADER_TERMINATOR)]
    if terminator != HEADER_TERMINATOR:
        raise EncodingError(
            f"Missing header terminator, found {terminator!r}"
        )
    return widths


def decode(
    data: bytes,
    activation: Optional[ActivationFunction] = None
) -> Network:
    """
    Rebuild a network from ``encode`` output.

    Args:
        data: Encoded model
        activation: Activation for every layer, sigmoid when omitted

    Returns:
        A linked network with the stored widths, weights and biases

    Raises:
        EncodingError: If the buffer is truncated or malformed
    """
    data = bytes(data)
    widths = _read_widths(data)

    weight_counts = [a * b for a, b in zip(widths[:-1], widths[1:])]
    bias_counts = widths
    float_size = FLOAT_DTYPE.itemsize

    offset = WIDTH_DTYPE.itemsize * (len(widths) + 1) + len(HEADER_TERMINATOR)
    expected = offset + float_size * (
        sum(weight_counts) + 1 + sum(bias_counts)
    )
    if len(data) != expected:
        raise EncodingError(
            f"Expected {expected} bytes for architecture {widths}, "
            f"got {len(data)}"
        )

    floats = np.frombuffer(data, dtype=FLOAT_DTYPE, offset=offset)
    cursor = 0

    weights = []
    for (rows, cols), count in zip(zip(widths[:-1], widths[1:]), weight_counts):
        weights.append(floats[cursor:cursor + count].reshape(rows, cols))
        cursor += count

    separator = floats[cursor]
    if separator != PARAMETER_SEPARATOR:
        raise EncodingError(
            f"Missing parameter separator, found {separator!r}"
        )
    cursor += 1

    biases = []
    for count in bias_counts:
        biases.append(floats[cursor:cursor + count])
        cursor += count

    try:
        output_layer = OutputLayer(widths[-1], activation, biases=biases[-1])
        hidden_layers = [
            HiddenLayer(width, activation, biases=layer_biases)
            for width, layer_biases in zip(widths[:-1], biases[:-1])
        ]
        successors = [*hidden_layers[1:], output_layer]
        for layer, successor, layer_weights in zip(
            hidden_layers, successors, weights
        ):
            layer.link(successor, out_weights=layer_weights)
        network = Network(hidden_layers, output_layer)
        network.validate()
    except ShapeError as e:
        raise EncodingError(f"Decoded parameters are inconsistent: {e}") from e

    logger.debug(f"Decoded network {widths} from {len(data)} bytes")
    return network
