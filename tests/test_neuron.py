"""
Tests for NeuronState and the per-neuron forward and punish rules.

Small networks are built and their weights overwritten by hand so every
branch of the punish rule can be checked against exact values.
"""

import numpy as np
import pytest

from monkeybrain import LearningConfig, Network, NeuronState


def set_weights(network, weights):
    """Overwrite link weights in link-index order."""
    for index, weight in enumerate(weights):
        network.link(index).weight = weight


# ============================================================================
# NeuronState
# ============================================================================

class TestNeuronState:

    def test_multiplication_selects_weight(self):
        assert NeuronState.ON * 0.7 == 0.7
        assert NeuronState.OFF * 0.7 == 0.0
        assert 0.7 * NeuronState.ON == 0.7

    @pytest.mark.parametrize("value, expected", [
        (1, NeuronState.ON),
        (0, NeuronState.OFF),
        (True, NeuronState.ON),
        (False, NeuronState.OFF),
        (np.int64(1), NeuronState.ON),
        (NeuronState.OFF, NeuronState.OFF),
    ])
    def test_coerce(self, value, expected):
        assert NeuronState.coerce(value) is expected

    @pytest.mark.parametrize("value", [2, -1, "1", 0.5, None])
    def test_coerce_rejects_other_values(self, value):
        with pytest.raises(ValueError):
            NeuronState.coerce(value)

    def test_from_bits(self):
        assert NeuronState.from_bits([1, 0, True]) == [NeuronState.ON, NeuronState.OFF, NeuronState.ON]

    def test_truthiness(self):
        assert NeuronState.ON
        assert not NeuronState.OFF


# ============================================================================
# Forward pass
# ============================================================================

class TestForward:

    @pytest.fixture
    def network(self):
        """Two inputs feeding one output (links 0 and 1)."""
        return Network([2, 1], seed=0)

    def test_activation_at_threshold_switches_on(self, network):
        set_weights(network, [0.5, -0.9])
        assert network.calc([1, 0]) == [NeuronState.ON]
        assert network.neurons[2].activation == 0.5

    def test_activation_below_threshold_stays_off(self, network):
        set_weights(network, [0.3, 0.19])
        assert network.calc([1, 1]) == [NeuronState.OFF]
        assert network.neurons[2].activation == pytest.approx(0.49)

    def test_off_sources_do_not_contribute(self, network):
        set_weights(network, [5.0, 0.1])
        assert network.calc([0, 1]) == [NeuronState.OFF]
        assert network.neurons[2].activation == pytest.approx(0.1)

    def test_custom_sensitivity(self):
        network = Network([2, 1], seed=0, config=LearningConfig(neuron_sensitivity=0.1))
        set_weights(network, [0.2, 0.0])
        assert network.calc([1, 0]) == [NeuronState.ON]

    def test_activation_sums_state_times_weight_over_skip_links(self):
        network = Network([2, 1, 1], seed=0)
        set_weights(network, [0.6, 0.3, 0.25, -0.75, 0.4])
        network.calc([1, 0])

        hidden, output = network.neurons[2], network.neurons[3]
        assert hidden.state is NeuronState.ON
        expected = NeuronState.ON * 0.25 + NeuronState.OFF * -0.75 + NeuronState.ON * 0.4
        assert output.activation == pytest.approx(expected)
        assert output.activation == pytest.approx(0.65)
        assert output.state is NeuronState.ON

    def test_forward_does_not_touch_weights(self, network):
        before = network.links.weights.copy()
        network.calc([1, 1])
        np.testing.assert_array_equal(network.links.weights, before)


# ============================================================================
# Punish rule on output neurons
# ============================================================================

class TestOutputPunish:
    """Output neurons have no forward links, so they always pass blame back."""

    @pytest.fixture
    def network(self):
        """Three inputs feeding one output (links 0, 1, 2)."""
        return Network([3, 1], seed=0)

    def punish_output(self, network):
        output = network.neurons[3]
        assert output.should_punish_back(network.links, network.config)
        output.back(network.neurons, network.links, network.config)

    def test_off_neuron_strengthens_on_sources(self, network):
        set_weights(network, [0.2, 0.3, -0.4])
        assert network.calc([1, 0, 0]) == [NeuronState.OFF]

        self.punish_output(network)

        assert network.link(0).weight == 0.2 + 0.02
        assert network.link(1).weight == 0.3
        assert network.link(2).weight == -0.4

    def test_off_neuron_flags_positive_off_sources(self, network):
        set_weights(network, [0.2, 0.3, -0.4])
        network.calc([1, 0, 0])

        self.punish_output(network)

        assert network.link(0).punish_back is False
        assert network.link(1).punish_back is True
        assert network.link(2).punish_back is False

    def test_on_neuron_weakens_on_sources_by_exactly_the_rate(self, network):
        set_weights(network, [0.7, 0.0, 0.0])
        assert network.calc([1, 0, 0]) == [NeuronState.ON]

        self.punish_output(network)

        assert network.link(0).weight == 0.7 - 0.02

    def test_on_neuron_flags_weakened_links_still_positive(self, network):
        set_weights(network, [0.01, 0.6, 0.0])
        assert network.calc([1, 1, 0]) == [NeuronState.ON]

        self.punish_output(network)

        assert network.link(0).weight == 0.01 - 0.02
        assert network.link(0).punish_back is False
        assert network.link(1).weight == 0.6 - 0.02
        assert network.link(1).punish_back is True

    def test_on_neuron_flags_negative_off_sources(self, network):
        set_weights(network, [0.9, 0.3, -0.4])
        network.calc([1, 0, 0])

        self.punish_output(network)

        assert network.link(1).punish_back is False
        assert network.link(2).punish_back is True
        assert network.link(1).weight == 0.3
        assert network.link(2).weight == -0.4

    def test_custom_rates(self):
        network = Network([1, 1], seed=0, config=LearningConfig(weight_increase_rate=0.1,
                                                                weight_decrease_rate=0.25))
        set_weights(network, [0.4])
        network.calc([1])
        network.neurons[1].back(network.neurons, network.links, network.config)
        assert network.link(0).weight == 0.4 + 0.1

        set_weights(network, [0.9])
        network.calc([1])
        network.neurons[1].back(network.neurons, network.links, network.config)
        assert network.link(0).weight == 0.9 - 0.25


# ============================================================================
# Punish rule on hidden and input neurons
# ============================================================================

class TestHiddenPunish:
    """
    [1, 1, 2] network. Neurons: 0 input, 1 hidden, 2 and 3 outputs.
    Links: 0: 0->1, 1: 0->2, 2: 1->2, 3: 0->3, 4: 1->3.
    """

    @pytest.fixture
    def network(self):
        network = Network([1, 1, 2], seed=0)
        set_weights(network, [0.9, 0.0, 0.0, 0.0, 0.0])
        network.calc([1])
        assert network.neurons[1].state is NeuronState.ON
        return network

    def test_forward_link_layout(self, network):
        np.testing.assert_array_equal(network.neurons[1].back_links, [0])
        np.testing.assert_array_equal(network.neurons[1].forward_links, [2, 4])
        np.testing.assert_array_equal(network.neurons[0].forward_links, [0, 1, 3])

    def test_small_implicated_share_does_not_propagate(self, network):
        hidden = network.neurons[1]
        network.link(2).weight = 0.2
        network.link(4).weight = 0.8
        network.link(2).punish_back = True

        assert not hidden.should_punish_back(network.links, network.config)
        hidden.back(network.neurons, network.links, network.config)

        # On but not propagating: pays on the implicated forward link only
        assert network.link(2).weight == 0.2 - 0.02
        assert network.link(4).weight == 0.8
        assert network.link(0).weight == 0.9
        assert network.link(0).punish_back is False

    def test_large_implicated_share_propagates(self, network):
        hidden = network.neurons[1]
        network.link(2).weight = 0.9
        network.link(4).weight = 0.1
        network.link(2).punish_back = True

        assert hidden.should_punish_back(network.links, network.config)
        hidden.back(network.neurons, network.links, network.config)

        assert network.link(0).weight == 0.9 - 0.02
        assert network.link(0).punish_back is True
        assert network.link(2).weight == 0.9

    def test_share_must_exceed_threshold(self, network):
        hidden = network.neurons[1]
        network.link(2).weight = 0.8
        network.link(4).weight = 0.2
        network.link(2).punish_back = True

        assert not hidden.should_punish_back(network.links, network.config)

    def test_zero_forward_weight_sum_does_not_propagate(self, network):
        hidden = network.neurons[1]
        network.link(2).weight = 0.5
        network.link(4).weight = -0.5
        network.link(2).punish_back = True

        assert not hidden.should_punish_back(network.links, network.config)

    def test_forward_flags_are_cleared(self, network):
        hidden = network.neurons[1]
        network.link(2).punish_back = True
        network.link(4).punish_back = True

        hidden.back(network.neurons, network.links, network.config)

        assert network.link(2).punish_back is False
        assert network.link(4).punish_back is False

    def test_off_neuron_without_propagation_changes_nothing(self, network):
        network.calc([0])
        hidden = network.neurons[1]
        assert hidden.state is NeuronState.OFF
        network.link(2).weight = 0.2
        network.link(4).weight = 0.8
        network.link(2).punish_back = True
        before = network.links.weights.copy()

        hidden.back(network.neurons, network.links, network.config)

        np.testing.assert_array_equal(network.links.weights, before)
        assert network.link(2).punish_back is False

    def test_input_neuron_never_propagates(self, network):
        source = network.neurons[0]
        for link_index in source.forward_links:
            network.link(int(link_index)).punish_back = True

        assert not source.should_punish_back(network.links, network.config)

    def test_on_input_neuron_pays_on_implicated_links(self, network):
        source = network.neurons[0]
        network.link(1).punish_back = True

        source.back(network.neurons, network.links, network.config)

        assert network.link(1).weight == 0.0 - 0.02
        assert network.link(0).weight == 0.9
        assert network.link(3).weight == 0.0
        assert not network.links.punish_back.any()

    def test_off_input_neuron_only_clears_flags(self, network):
        network.calc([0])
        source = network.neurons[0]
        network.link(1).punish_back = True
        before = network.links.weights.copy()

        source.back(network.neurons, network.links, network.config)

        np.testing.assert_array_equal(network.links.weights, before)
        assert network.link(1).punish_back is False

    def test_repr(self, network):
        assert repr(network.neurons[1]) == "Neuron(1, layer=1, state=ON, in=1, out=2)"
