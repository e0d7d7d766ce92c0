"""
Network Visualization Script
Displays the structure of a trained network with ASCII art and a PNG diagram
"""

import os
import sys
from datetime import datetime

import numpy as np
import matplotlib.pyplot as plt

from monkeybrain import Network, NeuronState
from train import NETWORK_CHECKPOINT, load_network


def layer_name(layer_idx: int, n_layers: int) -> str:
    if layer_idx == 0:
        return "INPUT"
    if layer_idx == n_layers - 1:
        return "OUTPUT"
    return f"HIDDEN {layer_idx}"


def strongest_inputs(network: Network, neuron_index: int, limit: int = 3):
    """Incoming links of a neuron sorted by absolute weight, strongest first."""
    neuron = network.neurons[neuron_index]
    links = [network.link(int(link_index)) for link_index in neuron.back_links]
    links.sort(key=lambda link: abs(link.weight), reverse=True)
    return links[:limit]


def visualize_network(network: Network):
    """Display network structure with ASCII art"""

    print("\n" + "="*80)
    print("NEURAL NETWORK STRUCTURE VISUALIZATION")
    print("="*80)

    stats = network.get_network_stats()
    print(f"\n📊 Network Summary:")
    print(f"   Total Layers: {stats['total_layers']}")
    print(f"   Total Neurons: {stats['total_neurons']}")
    print(f"   Total Links: {stats['total_links']}")
    print(f"   Training Steps: {stats['training_steps']}")

    print(f"\n📐 Layer Architecture:")
    for i, layer in enumerate(network.layers):
        print(f"   Layer {i} ({layer_name(i, len(network.layers))}): {len(layer)} neurons")

    print(f"\n🔗 Network Connections:")
    print()

    for layer_idx, layer in enumerate(network.layers):
        print(f"  Layer {layer_idx} [{layer_name(layer_idx, len(network.layers))}]")
        print()

        for neuron_idx, index in enumerate(layer):
            neuron = network.neurons[index]
            symbol = "●" if neuron.state is NeuronState.ON else "○"
            print(f"    {symbol} N{neuron.index} [{neuron.state.name}] "
                  f"(in={len(neuron.back_links)}, out={len(neuron.forward_links)}, "
                  f"activation={neuron.activation:+.2f})")

            links = strongest_inputs(network, index)
            if links:
                conn_str = ", ".join(f"N{link.source}({link.weight:+.2f})" for link in links)
                remaining = len(neuron.back_links) - len(links)
                if remaining > 0:
                    conn_str += f" +{remaining} more"
                print(f"      ◄══ Strongest: {conn_str}")
        print()


def visualize_compact(network: Network):
    """Display a compact one-line topology"""
    print("\n" + "="*80)
    print("COMPACT TOPOLOGY")
    print("="*80)

    print("\n  " + " -> ".join(f"[{len(layer)}]" for layer in network.layers))

    # Links that jump over at least one layer
    sources = network.links.sources[:network.num_links]
    targets = network.links.targets[:network.num_links]
    layer_of = np.array([neuron.layer_index for neuron in network.neurons], dtype=np.intp)
    span = layer_of[targets] - layer_of[sources] if network.num_links else np.zeros(0, dtype=np.intp)
    skip_links = int(np.sum(span > 1))

    print(f"\n  {network.num_links} links, {skip_links} skip-layer")
    print()


def show_legend():
    """Display legend for symbols"""
    print("\n📖 Legend:")
    print("  ● = Neuron on")
    print("  ○ = Neuron off")
    print("\nConnections:")
    print("  ◄══ Strongest incoming links by |weight|")
    print("  Blue lines = positive weight, red lines = negative weight (PNG)")
    print()


def generate_network_image(network: Network, output_path: str = "output/network_visualization.png"):
    """Generate a PNG image of the network with connections"""
    print(f"\n🎨 Generating network visualization image...")

    directory = os.path.dirname(output_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    fig, ax = plt.subplots(figsize=(16, 12))
    ax.set_aspect('equal')
    ax.axis('off')

    n_layers = len(network.layers)
    layer_spacing = 1.0 / (n_layers + 1)

    neuron_positions = {}

    for layer_idx, layer in enumerate(network.layers):
        n_neurons = len(layer)
        x = layer_spacing * (layer_idx + 1)

        if n_neurons == 1:
            y_positions = [0.5]
        else:
            y_spacing = 0.8 / max(n_neurons - 1, 1)
            y_start = 0.5 - (n_neurons - 1) * y_spacing / 2
            y_positions = [y_start + i * y_spacing for i in range(n_neurons)]

        for position, index in enumerate(layer):
            y = y_positions[position]
            neuron_positions[index] = (x, y)

            if network.neurons[index].state is NeuronState.ON:
                color = '#2ecc71'  # Green
                edge_color = '#27ae60'
            else:
                color = '#95a5a6'  # Gray
                edge_color = '#7f8c8d'

            circle = plt.Circle((x, y), 0.015, color=color, ec=edge_color,
                                linewidth=2, zorder=3)
            ax.add_patch(circle)
            ax.text(x, y, f'N{index}', ha='center', va='center',
                    fontsize=6, fontweight='bold', color='white', zorder=4)

    weights = network.links.weights[:network.num_links]
    max_weight = float(np.max(np.abs(weights))) if len(weights) else 1.0
    max_weight = max(max_weight, 1e-8)

    for link in network.links:
        x1, y1 = neuron_positions[link.source]
        x2, y2 = neuron_positions[link.target]
        strength = abs(link.weight) / max_weight
        color = '#3498db' if link.weight >= 0 else '#e74c3c'

        # Skip-layer links curve so they do not hide the direct ones
        skip = network.neurons[link.target].layer_index - network.neurons[link.source].layer_index > 1
        if skip:
            xs = np.linspace(x1, x2, 20)
            ys = np.linspace(y1, y2, 20) + 0.08 * np.sin(np.linspace(0, np.pi, 20))
        else:
            xs, ys = [x1, x2], [y1, y2]

        ax.plot(xs, ys, color=color, alpha=0.15 + 0.6 * strength,
                linewidth=0.5 + 2.5 * strength, zorder=1)

    for layer_idx in range(n_layers):
        x = layer_spacing * (layer_idx + 1)
        label = f"{layer_name(layer_idx, n_layers)}\n({len(network.layers[layer_idx])} neurons)"
        ax.text(x, 0.95, label, ha='center', va='top',
                fontsize=10, fontweight='bold',
                bbox=dict(boxstyle='round,pad=0.5', facecolor='lightgray', alpha=0.8))

    title = f"Monkeybrain Network Visualization\n"
    title += f"Training Steps: {network.training_steps} | "
    title += f"Links: {network.num_links}"
    ax.text(0.5, 1.0, title, ha='center', va='top',
            fontsize=12, fontweight='bold', transform=ax.transAxes)

    legend_elements = [
        plt.Line2D([0], [0], color='#2ecc71', lw=4, label='Neuron On'),
        plt.Line2D([0], [0], color='#95a5a6', lw=4, label='Neuron Off'),
        plt.Line2D([0], [0], color='#3498db', lw=2.5, alpha=0.7, label='Positive Weight'),
        plt.Line2D([0], [0], color='#e74c3c', lw=2.5, alpha=0.7, label='Negative Weight'),
    ]
    ax.legend(handles=legend_elements, loc='upper left', bbox_to_anchor=(0, -0.02),
              ncol=2, framealpha=0.9, fontsize=8)

    ax.set_xlim(-0.05, 1.05)
    ax.set_ylim(-0.15, 1.05)

    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    ax.text(0.99, 0.01, f"Generated: {timestamp}", ha='right', va='bottom',
            fontsize=7, style='italic', transform=ax.transAxes, alpha=0.6)

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight', facecolor='white')
    plt.close(fig)

    print(f"✓ Network visualization saved to: {output_path}")


def main(checkpoint_path: str = NETWORK_CHECKPOINT):
    """Main visualization function"""
    print("\n🔍 Loading Neural Network...")

    network = load_network(checkpoint_path)
    if network is None:
        print("❌ No checkpoint found. Train the network first with:")
        print("   python train.py --new")
        return 1

    print("✓ Network loaded successfully!")

    generate_network_image(network)
    visualize_compact(network)
    visualize_network(network)
    show_legend()

    print("="*80)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
