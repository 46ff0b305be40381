"""
test_network.py
~~~~~~~~~~~~~~~

Unit tests for network linking, validation and evaluation.
"""

import pytest
import os
import sys

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from perceptron.activations import Sigmoid
from perceptron.errors import NotReadyError, ShapeError
from perceptron.layers import HiddenLayer, OutputLayer
from perceptron.network import Network, init_network


@pytest.fixture
def unlinked_network():
    rng = np.random.default_rng(5)
    hidden_layers = [HiddenLayer(width, rng=rng) for width in (3, 5, 2)]
    return Network(hidden_layers, OutputLayer(4, rng=rng))


@pytest.mark.unit
class TestInitNetwork:

    def test_deep_architecture(self):
        net = init_network([9, 6, 13, 25, 6, 1], 6)

        assert net.hidden_layers[0].input_shape() == 9
        assert net.output_layer.input_shape() == 6
        assert net.architecture == [9, 6, 13, 25, 6, 1, 6]
        assert net.is_ready()

    @pytest.mark.parametrize("hidden_widths,output_width", [
        ([1], 1),
        ([3], 3),
        ([784, 30], 10),
        ([2, 2, 2, 2], 5),
    ])
    def test_ready_immediately(self, hidden_widths, output_width):
        net = init_network(hidden_widths, output_width)

        net.validate()
        assert net.first_unready_layer() is None

    def test_successor_shapes_chain(self):
        net = init_network([4, 7, 2], 3)

        shapes = [layer.out_weights.shape for layer in net.hidden_layers]
        assert shapes == [(4, 7), (7, 2), (2, 3)]

    def test_seed_is_reproducible(self):
        first = init_network([3, 4], 2, seed=11)
        second = init_network([3, 4], 2, seed=11)

        for a, b in zip(first.layers, second.layers):
            assert np.array_equal(a.biases, b.biases)
        for a, b in zip(first.hidden_layers, second.hidden_layers):
            assert np.array_equal(a.out_weights, b.out_weights)

    def test_rejects_empty_hidden_widths(self):
        with pytest.raises(ShapeError):
            init_network([], 3)

    def test_rejects_zero_width(self):
        with pytest.raises(ShapeError):
            init_network([3, 0], 2)

    def test_parameter_count(self):
        net = init_network([3, 4], 2)
        # biases 3 + 4 + 2, weights 3*4 + 4*2
        assert net.parameter_count() == 9 + 20


@pytest.mark.unit
class TestNetworkAssembly:

    def test_requires_hidden_layer(self):
        with pytest.raises(ShapeError):
            Network([], OutputLayer(2))

    def test_rejects_output_layer_in_hidden_position(self):
        with pytest.raises(TypeError):
            Network([OutputLayer(2)], OutputLayer(2))

    def test_rejects_hidden_layer_as_output(self):
        with pytest.raises(TypeError):
            Network([HiddenLayer(2)], HiddenLayer(2))


@pytest.mark.unit
class TestNetworkLink:

    def test_unlinked_network_reports_first_layer(self, unlinked_network):
        index, error = unlinked_network.first_unready_layer()

        assert index == 0
        assert isinstance(error, ShapeError)
        assert unlinked_network.is_ready() is False

    def test_link_makes_network_ready(self, unlinked_network):
        result = unlinked_network.link()

        assert result is unlinked_network
        assert unlinked_network.is_ready()
        assert unlinked_network.hidden_layers[-1].output_shape() == 4

    def test_link_twice_keeps_parameters(self, unlinked_network):
        unlinked_network.link()
        weights = [layer.out_weights.copy() for layer in unlinked_network.hidden_layers]
        biases = [layer.biases.copy() for layer in unlinked_network.layers]

        unlinked_network.link()

        for layer, expected in zip(unlinked_network.hidden_layers, weights):
            assert np.array_equal(layer.out_weights, expected)
        for layer, expected in zip(unlinked_network.layers, biases):
            assert np.array_equal(layer.biases, expected)

    def test_validate_reports_layer_index(self, unlinked_network):
        unlinked_network.link()
        unlinked_network.hidden_layers[1].out_weights = np.zeros((5, 9))

        with pytest.raises(ShapeError) as exc_info:
            unlinked_network.validate()
        assert exc_info.value.layer_index == 1
        assert "layer 1" in str(exc_info.value)

    def test_output_layer_validated_last(self, unlinked_network):
        unlinked_network.link()
        unlinked_network.output_layer.biases = np.zeros(1)

        index, _ = unlinked_network.first_unready_layer()
        assert index == 3


@pytest.mark.unit
class TestNetworkEvaluate:

    def test_three_by_three_in_sigmoid_range(self):
        net = init_network([3], 3)

        output = net.evaluate([1, 1, 1])

        assert output.shape == (3,)
        assert np.all((output > 0.0) & (output < 1.0))

    def test_traverses_every_layer_including_output(self):
        net = init_network([3, 5], 2, seed=3)
        x = np.array([0.2, -0.4, 1.5])

        expected = x
        for layer in net.hidden_layers:
            activated = Sigmoid().eval(expected + layer.biases)
            expected = activated @ layer.out_weights
        expected = Sigmoid().eval(expected)

        assert np.allclose(net.evaluate(x), expected)

    def test_result_length_matches_output_layer(self):
        net = init_network([9, 6, 13, 25, 6, 1], 6)
        assert net.evaluate(np.zeros(9)).shape == (6,)

    @pytest.mark.parametrize("values", [[], [1.0, 1.0], [1.0] * 4])
    def test_wrong_input_length(self, values):
        net = init_network([3], 2)

        with pytest.raises(ShapeError):
            net.evaluate(values)

    def test_unlinked_network_not_ready(self, unlinked_network):
        with pytest.raises(NotReadyError):
            unlinked_network.evaluate([0.0, 0.0, 0.0])

    def test_evaluate_is_deterministic(self):
        net = init_network([4, 4], 4, seed=9)
        x = [0.1, 0.2, 0.3, 0.4]

        assert np.array_equal(net.evaluate(x), net.evaluate(x))
