import os
import pickle
import sys
from typing import List, Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt

from monkeybrain import Network, NeuronState


# ============================================================================
# CONFIGURATION
# ============================================================================

CHECKPOINT_DIR = "checkpoints"
NETWORK_CHECKPOINT = os.path.join(CHECKPOINT_DIR, "network_state.pkl")

DIMENSIONS = [4, 1, 1]
EPOCHS = 1000
RECORD_EVERY = 50  # Record accuracy every N epochs
PRINT_EVERY = 100  # Print progress every N epochs

# Single bit on => on, every other pattern shown => off
TRAINING_DATA: List[Tuple[List[int], List[int]]] = [
    ([1, 0, 0, 0], [1]),
    ([0, 1, 0, 0], [1]),
    ([0, 0, 1, 0], [1]),
    ([0, 0, 0, 1], [1]),
    ([1, 1, 0, 0], [0]),
    ([0, 1, 1, 0], [0]),
    ([0, 0, 1, 1], [0]),
    ([1, 1, 1, 1], [0]),
]

PROBES = [
    [1, 0, 0, 1],
    [0, 1, 0, 1],
]


# ============================================================================
# SAVE/LOAD FUNCTIONS
# ============================================================================

def save_network(network: Network, filepath: str = NETWORK_CHECKPOINT):
    """Save the entire network to disk."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    state = {
        'network': network,
        'training_steps': network.training_steps,
    }

    with open(filepath, 'wb') as f:
        pickle.dump(state, f)
    print(f"  💾 Network saved (steps: {network.training_steps})")


def load_network(filepath: str = NETWORK_CHECKPOINT) -> Optional[Network]:
    """Load a network from disk, or None if there is no usable checkpoint."""
    if not os.path.exists(filepath):
        return None

    try:
        with open(filepath, 'rb') as f:
            state = pickle.load(f)
        print(f"  ✓ Network loaded from checkpoint (steps: {state['training_steps']})")
        return state['network']
    except (OSError, pickle.UnpicklingError, EOFError, KeyError, AttributeError) as e:
        print(f"  ✗ Failed to load network: {e}")
        return None


# ============================================================================
# TRAINING
# ============================================================================

def format_states(states: Sequence[NeuronState]) -> str:
    return "".join("1" if state is NeuronState.ON else "0" for state in states)


def train(network: Network,
          dataset: Sequence[Tuple[Sequence[int], Sequence[int]]] = TRAINING_DATA,
          epochs: int = EPOCHS,
          record_every: int = RECORD_EVERY,
          print_every: int = PRINT_EVERY) -> List[float]:
    """
    Train the network on every pattern of the dataset, once per epoch.

    Args:
        network: Network to train
        dataset: (inputs, expected) pairs
        epochs: Number of passes over the dataset
        record_every: Record accuracy every N epochs (0 disables)
        print_every: Print progress every N epochs (0 disables)

    Returns:
        Accuracy history, one entry per recorded epoch
    """
    history = []

    for epoch in range(epochs):
        mistakes = 0
        for inputs, expected in dataset:
            output = network.train_step(inputs, expected)
            if output != NeuronState.from_bits(expected):
                mistakes += 1

        if record_every and (epoch + 1) % record_every == 0:
            history.append(network.evaluate(dataset))

        if print_every and (epoch + 1) % print_every == 0:
            accuracy = network.evaluate(dataset)
            print(f"Epoch {epoch+1:4d}: Mistakes={mistakes}/{len(dataset)}, "
                  f"Accuracy={accuracy*100:5.1f}%, Steps={network.training_steps}")

    return history


def report(network: Network,
           dataset: Sequence[Tuple[Sequence[int], Sequence[int]]] = TRAINING_DATA,
           probes: Sequence[Sequence[int]] = PROBES) -> float:
    """Print per-pattern results and probe outputs; return accuracy."""
    print("\nResults on training patterns:")
    for inputs, expected in dataset:
        output = network.calc(inputs)
        target = NeuronState.from_bits(expected)
        mark = "✓" if output == target else "✗"
        print(f"  {mark} {format_states(NeuronState.from_bits(inputs))} -> "
              f"{format_states(output)} (expected {format_states(target)})")

    accuracy = network.evaluate(dataset)
    print(f"\nAccuracy: {accuracy*100:.1f}%")

    print("\nUnseen patterns:")
    for inputs in probes:
        output = network.calc(inputs)
        print(f"  {format_states(NeuronState.from_bits(inputs))} -> {format_states(output)}")

    return accuracy


def plot_accuracy(history: Sequence[float],
                  output_path: str = "output/training_accuracy.png",
                  record_every: int = RECORD_EVERY):
    """Save a plot of the accuracy history."""
    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    epochs = np.arange(1, len(history) + 1) * record_every

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(epochs, np.array(history) * 100, 'b-', linewidth=2)
    ax.axhline(50, color='#e74c3c', linestyle='--', linewidth=1, label='Chance')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Accuracy (%)')
    ax.set_ylim(0, 105)
    ax.set_title('Training Accuracy')
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"\nAccuracy plot saved as '{output_path}'")


# ============================================================================
# MAIN
# ============================================================================

def main(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv

    print("\n" + "="*60)
    print("MONKEYBRAIN - PUNISH RULE TRAINING DEMO")
    print("="*60)
    print("\nUsage:")
    print("  python train.py          - Continue from checkpoint (or start fresh)")
    print("  python train.py --new    - Start fresh")
    print("  python train.py --test   - Evaluate checkpoint only")
    print("  python train.py --plot   - Also save an accuracy plot")
    print("="*60)

    network = None
    if "--new" not in argv:
        network = load_network()

    if "--test" in argv:
        if network is None:
            print("No saved network found!")
            return 1
        report(network)
        return 0

    if network is None:
        print(f"\n  Creating new network {DIMENSIONS}...")
        network = Network(DIMENSIONS)

    print(f"\nTraining for {EPOCHS} epochs over {len(TRAINING_DATA)} patterns")
    print("-"*60)
    history = train(network, epochs=EPOCHS)

    network.print_network_summary()
    report(network)
    save_network(network)

    if "--plot" in argv:
        plot_accuracy(history)

    return 0


if __name__ == "__main__":
    sys.exit(main())
