"""
Monkeybrain Package

Binary-state neurons wired into a dense, skip-layer feed-forward network
and trained by a local punish rule instead of gradient descent.
"""

from .network import Network
from .neuron import Neuron, NeuronState
from .link import Link, LinkArena
from .config import LearningConfig, get_default_config
from .errors import MonkeyBrainError, ShapeMismatchError, InvalidTopologyError

__all__ = [
    'Network',
    'Neuron',
    'NeuronState',
    'Link',
    'LinkArena',
    'LearningConfig',
    'get_default_config',
    'MonkeyBrainError',
    'ShapeMismatchError',
    'InvalidTopologyError',
]
