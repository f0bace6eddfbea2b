import matplotlib

matplotlib.use("Agg")

import pytest

from step_traversability.dem import make_spike_terrain


@pytest.fixture
def spike_params():
    """Windows reach the four orthogonal neighbours on a 1 m grid."""
    return {
        "critical_value": 0.3,
        "first_window_radius": 1.0,
        "second_window_radius": 1.0,
        "critical_cell_number": 1,
        "map_type": "traversability_step",
    }


@pytest.fixture
def spike_grid():
    return make_spike_terrain(size=5, resolution=1.0, spike_height=1.0)
