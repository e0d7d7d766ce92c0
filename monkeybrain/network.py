import numpy as np
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import LearningConfig, get_default_config
from .errors import InvalidTopologyError, ShapeMismatchError
from .link import Link, LinkArena
from .neuron import Neuron, NeuronState


class Network:
    """
    A layered network of binary neurons trained by the punish rule.

    Every neuron of a new layer receives a link from every neuron of every
    earlier layer, not only from the layer right before it.

    Attributes:
        neurons: All neurons, indexed by neuron id
        layers: Neuron ids per layer, input layer first
        links: Link arena holding every weight and punish flag
        config: Learning constants
        training_steps: Number of fit() calls so far
    """

    def __init__(self,
                 dimensions: Sequence[int],
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 config: Optional[LearningConfig] = None):
        """
        Build the network.

        Args:
            dimensions: Number of neurons per layer, input layer first
            rng: Source of initial weights (created from `seed` if None)
            seed: Seed for the default generator
            config: Learning constants (global default if None)

        Raises:
            InvalidTopologyError: If dimensions is empty or a size is not a positive integer
        """
        dimensions = self._validate_dimensions(dimensions)
        self.config = config if config is not None else get_default_config()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        neurons, layers, links = self._build(dimensions)
        self.neurons: List[Neuron] = neurons
        self.layers: List[List[int]] = layers
        self.links: LinkArena = links
        self.training_steps = 0

    @staticmethod
    def _validate_dimensions(dimensions: Sequence[int]) -> Tuple[int, ...]:
        dimensions = tuple(dimensions)
        if len(dimensions) == 0:
            raise InvalidTopologyError("network needs at least one layer")
        for layer_index, size in enumerate(dimensions):
            if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
                raise InvalidTopologyError(
                    f"layer {layer_index} size must be an integer, got {size!r}"
                )
            if size <= 0:
                raise InvalidTopologyError(f"layer {layer_index} has {size} neurons")
        return tuple(int(size) for size in dimensions)

    def _build(self, dimensions: Tuple[int, ...]) -> Tuple[List[Neuron], List[List[int]], LinkArena]:
        """Create neurons and links layer by layer with skip-layer connectivity."""
        capacity = 0
        built = 0
        for size in dimensions:
            capacity += size * built
            built += size

        links = LinkArena(capacity)
        neurons: List[Neuron] = []
        layers: List[List[int]] = []
        back: List[List[int]] = []
        forward: List[List[int]] = []
        low, high = self.config.weight_init_low, self.config.weight_init_high

        for layer_index, size in enumerate(dimensions):
            # Every neuron built so far feeds the new layer
            previous = len(neurons)
            layer = []
            for _ in range(size):
                index = len(neurons)
                neurons.append(Neuron(index, layer_index))
                back.append([])
                forward.append([])
                for source in range(previous):
                    link_index = links.add(source, index, self.rng.uniform(low, high))
                    back[index].append(link_index)
                    forward[source].append(link_index)
                layer.append(index)
            layers.append(layer)

        for neuron in neurons:
            neuron.back_links = np.asarray(back[neuron.index], dtype=np.intp)
            neuron.forward_links = np.asarray(forward[neuron.index], dtype=np.intp)

        return neurons, layers, links

    @property
    def dimensions(self) -> Tuple[int, ...]:
        return tuple(len(layer) for layer in self.layers)

    @property
    def input_size(self) -> int:
        return len(self.layers[0])

    @property
    def output_size(self) -> int:
        return len(self.layers[-1])

    @property
    def num_links(self) -> int:
        return len(self.links)

    def layer(self, layer_index: int) -> List[Neuron]:
        """Neurons of one layer, in order."""
        return [self.neurons[index] for index in self.layers[layer_index]]

    def link(self, link_index: int) -> Link:
        return self.links[link_index]

    def states(self, layer_index: int = -1) -> List[NeuronState]:
        """Current states of one layer (output layer by default)."""
        return [self.neurons[index].state for index in self.layers[layer_index]]

    def _coerce(self, values: Iterable, size: int, what: str) -> List[NeuronState]:
        states = NeuronState.from_bits(values)
        if len(states) != size:
            raise ShapeMismatchError(what, size, len(states))
        return states

    def calc(self, inputs: Iterable) -> List[NeuronState]:
        """
        Forward pass.

        Args:
            inputs: One state (or 0/1, bool) per input neuron

        Returns:
            States of the output layer

        Raises:
            ShapeMismatchError: If the number of inputs does not match the input layer
        """
        states = self._coerce(inputs, self.input_size, "input")

        for state, neuron in zip(states, self.layer(0)):
            neuron.state = state

        for layer in self.layers[1:]:
            for index in layer:
                self.neurons[index].forward(self.neurons, self.links, self.config)

        return self.states(-1)

    def fit(self, expected: Iterable):
        """
        Backward pass over the states left by the last calc().

        Output neurons that already match their expected state are skipped;
        every neuron of the other layers is punished, last layer first.

        Args:
            expected: One state (or 0/1, bool) per output neuron

        Raises:
            ShapeMismatchError: If the number of values does not match the output layer
        """
        targets = self._coerce(expected, self.output_size, "expected output")

        for target, neuron in zip(targets, self.layer(-1)):
            if neuron.state != target:
                neuron.back(self.neurons, self.links, self.config)

        for layer in reversed(self.layers[:-1]):
            for index in layer:
                self.neurons[index].back(self.neurons, self.links, self.config)

        self.training_steps += 1

    def train_step(self, inputs: Iterable, expected: Iterable) -> List[NeuronState]:
        """
        Single training step (calc followed by fit).

        Args:
            inputs: Input states
            expected: Expected output states

        Returns:
            Output produced before the weights were updated
        """
        inputs = self._coerce(inputs, self.input_size, "input")
        expected = self._coerce(expected, self.output_size, "expected output")

        output = self.calc(inputs)
        self.fit(expected)
        return output

    def evaluate(self, dataset: Iterable[Tuple[Iterable, Iterable]]) -> float:
        """
        Fraction of (inputs, expected) pairs reproduced exactly.

        Args:
            dataset: Pairs of input states and expected output states

        Returns:
            Accuracy in [0, 1] (0.0 for an empty dataset)
        """
        total = 0
        correct = 0
        for inputs, expected in dataset:
            target = self._coerce(expected, self.output_size, "expected output")
            if self.calc(inputs) == target:
                correct += 1
            total += 1
        return correct / total if total else 0.0

    def get_network_stats(self) -> Dict:
        """Get network structure and weight statistics."""
        weights = self.links.weights[:len(self.links)]
        if len(weights) > 0:
            weight_stats = {
                'mean': float(np.mean(weights)),
                'std': float(np.std(weights)),
                'min': float(np.min(weights)),
                'max': float(np.max(weights)),
            }
        else:
            weight_stats = {'mean': 0.0, 'std': 0.0, 'min': 0.0, 'max': 0.0}

        return {
            'dimensions': list(self.dimensions),
            'total_layers': len(self.layers),
            'total_neurons': len(self.neurons),
            'total_links': self.num_links,
            'active_neurons': sum(1 for neuron in self.neurons if neuron.state is NeuronState.ON),
            'training_steps': self.training_steps,
            'weights': weight_stats,
            'config': self.config.to_dict(),
        }

    def print_network_summary(self):
        """Print a summary of the network structure and weights."""
        stats = self.get_network_stats()

        print("\n" + "="*60)
        print("MONKEYBRAIN NETWORK SUMMARY")
        print("="*60)
        print(f"Training Steps: {stats['training_steps']}")
        print(f"Total Layers: {stats['total_layers']}")
        print(f"Total Neurons: {stats['total_neurons']} ({stats['active_neurons']} on)")
        print(f"Total Links: {stats['total_links']}")
        print()

        print("Layer Details:")
        for i, layer in enumerate(self.layers):
            fan_in = len(self.neurons[layer[0]].back_links)
            print(f"  Layer {i}: {len(layer)} neurons, {fan_in} inputs each")
        print()

        weights = stats['weights']
        print("Weights:")
        print(f"  mean={weights['mean']:+.3f} std={weights['std']:.3f} "
              f"min={weights['min']:+.3f} max={weights['max']:+.3f}")
        print("="*60 + "\n")

    def __repr__(self):
        return f"Network(dimensions={list(self.dimensions)}, links={self.num_links}, steps={self.training_steps})"
