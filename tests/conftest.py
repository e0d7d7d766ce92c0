import matplotlib

matplotlib.use("Agg")

import pytest

from monkeybrain import LearningConfig, Network


@pytest.fixture
def config():
    """Default learning constants, independent of the global default."""
    return LearningConfig()


@pytest.fixture
def small_network(config):
    """[3, 2, 4] network with a fixed seed."""
    return Network([3, 2, 4], seed=7, config=config)

