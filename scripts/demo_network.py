#!/usr/bin/env python3
"""
Build a small perceptron, evaluate it, and round-trip it through the
binary model format.

Usage:
    python scripts/demo_network.py [output.mlp]

The script will:
1. Build a 3-5-7-5-3-3 network with a 3-neuron output layer
2. Evaluate the input [1, 1, 1] and print every output
3. Encode the network, decode it again and check the outputs match
4. Optionally write the encoded model to the given path
"""

import logging
import os
import sys

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..'))

from perceptron.codec import encode, decode
from perceptron.errors import PerceptronError
from perceptron.layers import HiddenLayer, OutputLayer
from perceptron.network import Network


def configure_logging() -> None:
    """
    Set up logging from the LOG_LEVEL environment variable.

    DEBUG shows the package's linking and codec messages.
    """
    log_level_str = os.getenv('LOG_LEVEL', 'WARNING').upper()
    log_level = getattr(logging, log_level_str, logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def build_network() -> Network:
    """Assemble and link the demo network layer by layer."""
    print("🧱 Building network...")

    hidden_layers = [HiddenLayer(width) for width in (3, 5, 7, 5, 3, 3)]
    network = Network(hidden_layers, OutputLayer(3))
    network.link()

    failure = network.first_unready_layer()
    if failure is not None:
        index, error = failure
        print(f"❌ bad layer: {index}")
        raise error

    print(f"✅ Ready: architecture {network.architecture}, "
          f"{network.parameter_count()} parameters")
    return network


def main():
    """Main demo function."""
    configure_logging()

    print("=" * 60)
    print("Perceptron Demo")
    print("=" * 60)

    output_path = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        network = build_network()

        inputs = [1.0, 1.0, 1.0]
        outputs = network.evaluate(inputs)
        print(f"\n🔢 Evaluating {inputs}")
        for index, value in enumerate(outputs):
            print(f"   index {index}: {value}")

        data = encode(network)
        print(f"\n💾 Encoded model: {len(data)} bytes")

        restored = decode(data)
        if not np.array_equal(restored.evaluate(inputs), outputs):
            print("❌ Decoded network produced different outputs!")
            sys.exit(1)
        print("✅ Decoded network reproduces the outputs")

        if output_path:
            with open(output_path, 'wb') as f:
                f.write(data)
            print(f"\n📁 Wrote model to {output_path}")

    except PerceptronError as e:
        print(f"\n❌ Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
