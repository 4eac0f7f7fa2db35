# tests/conftest.py
import matplotlib

matplotlib.use("Agg")

import pytest

from lorentzsim.physics.params import SimulationParams
from lorentzsim.physics.vector import Vector3


@pytest.fixture
def params():
    """The default control-panel configuration: helical motion about +z."""
    return SimulationParams(mass=2.0, charge=1.0, velocity=Vector3(5, 0, 2), b_field=Vector3(0, 0, 2))


@pytest.fixture
def circular_params():
    """Velocity perpendicular to B: R = 5, T = 2*pi."""
    return SimulationParams(mass=2.0, charge=1.0, velocity=Vector3(5, 0, 0), b_field=Vector3(0, 0, 2))
