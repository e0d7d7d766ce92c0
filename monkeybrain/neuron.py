import numpy as np
from enum import Enum
from typing import Iterable, List

from .config import LearningConfig
from .link import LinkArena


class NeuronState(Enum):
    """Binary neuron activation."""
    OFF = 0
    ON = 1

    def __mul__(self, weight: float) -> float:
        return weight if self is NeuronState.ON else 0.0

    __rmul__ = __mul__

    def __bool__(self):
        return self is NeuronState.ON

    @classmethod
    def coerce(cls, value) -> 'NeuronState':
        """
        Interpret a state, bool or 0/1 integer as a NeuronState.

        Raises:
            ValueError: If the value is none of those
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, (bool, np.bool_)):
            return cls.ON if value else cls.OFF
        if isinstance(value, (int, np.integer)) and value in (0, 1):
            return cls(int(value))
        raise ValueError(f"cannot interpret {value!r} as a neuron state")

    @classmethod
    def from_bits(cls, values: Iterable) -> List['NeuronState']:
        return [cls.coerce(value) for value in values]


class Neuron:
    """
    A binary neuron wired into a network through link indices.

    The neuron never holds links directly: `back_links` and `forward_links`
    index into the network's LinkArena, and link endpoints index into the
    network's neuron list.

    Attributes:
        index: Position of this neuron in the network's neuron list
        layer_index: Layer the neuron belongs to
        state: Current activation (ON/OFF)
        activation: Weighted input sum computed by the last forward()
        back_links: Indices of incoming links
        forward_links: Indices of outgoing links
    """

    def __init__(self, index: int, layer_index: int):
        self.index = index
        self.layer_index = layer_index
        self.state = NeuronState.OFF
        self.activation = 0.0
        self.back_links = np.zeros(0, dtype=np.intp)
        self.forward_links = np.zeros(0, dtype=np.intp)

    def _source_on(self, neurons: List['Neuron'], links: LinkArena) -> np.ndarray:
        """Mask over back links whose source neuron is on."""
        sources = links.sources[self.back_links]
        return np.fromiter(
            (neurons[source].state is NeuronState.ON for source in sources),
            dtype=bool,
            count=len(sources)
        )

    def forward(self, neurons: List['Neuron'], links: LinkArena, config: LearningConfig):
        """
        Forward pass: switch on if the weighted sum of active inputs
        reaches the sensitivity threshold.

        Args:
            neurons: Neuron list of the owning network
            links: Link arena of the owning network
            config: Learning constants
        """
        sources = links.sources[self.back_links]
        weights = links.weights[self.back_links]
        self.activation = float(sum(
            neurons[source].state * weight for source, weight in zip(sources, weights)
        ))

        if self.activation >= config.neuron_sensitivity:
            self.state = NeuronState.ON
        else:
            self.state = NeuronState.OFF

    def should_punish_back(self, links: LinkArena, config: LearningConfig) -> bool:
        """
        Decide whether this neuron passes blame to its inputs.

        Output neurons (no forward links) always do. Other neurons do when
        the weight on their implicated forward links exceeds
        `punish_back_percent` of their total forward weight. Input neurons
        (no back links) never do, and neither does a neuron whose forward
        weights sum to exactly zero.
        """
        if len(self.forward_links) == 0:
            return True
        if len(self.back_links) == 0:
            return False

        forward_weights = links.weights[self.forward_links]
        weight_sum = float(forward_weights.sum())
        if weight_sum == 0.0:
            return False

        correction_weight = float(forward_weights[links.punish_back[self.forward_links]].sum())
        return correction_weight / weight_sum > config.punish_back_percent

    def back(self, neurons: List['Neuron'], links: LinkArena, config: LearningConfig):
        """
        Backward pass: nudge weights toward the state this neuron should
        have had and flag the upstream links that are to blame.

        Must run after every neuron fed by this one has been punished in
        the same sweep. Leaves every forward link of this neuron unflagged.

        Args:
            neurons: Neuron list of the owning network
            links: Link arena of the owning network
            config: Learning constants
        """
        weights = links.weights
        flags = links.punish_back

        if self.should_punish_back(links, config):
            back = self.back_links
            source_on = self._source_on(neurons, links)
            source_off = ~source_on

            if self.state is NeuronState.OFF:
                # Silent inputs with positive weight could have switched us on
                flags[back[source_off & (weights[back] > 0)]] = True
                weights[back[source_on]] += config.weight_increase_rate
            else:
                flags[back[source_off & (weights[back] < 0)]] = True
                weakened = back[source_on]
                weights[weakened] -= config.weight_decrease_rate
                flags[weakened[weights[weakened] > 0]] = True
        elif self.state is NeuronState.ON:
            implicated = self.forward_links[flags[self.forward_links]]
            weights[implicated] -= config.weight_decrease_rate

        flags[self.forward_links] = False

    def __repr__(self):
        return (f"Neuron({self.index}, layer={self.layer_index}, state={self.state.name}, "
                f"in={len(self.back_links)}, out={len(self.forward_links)})")
