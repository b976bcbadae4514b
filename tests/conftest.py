"""Shared pytest fixtures for coxsim tests."""

import numpy as np
import pytest

from coxsim.data.baseline import build_flexible_baseline
from coxsim.data.scenarios import SimulationScenario


@pytest.fixture
def random_seed():
    """Fixed random seed for reproducibility."""
    return 42


@pytest.fixture
def rng(random_seed):
    """Seeded NumPy random generator."""
    return np.random.default_rng(random_seed)


@pytest.fixture
def small_scenario():
    """Small static scenario for fast tests."""
    return SimulationScenario(name="small", n_samples=200, max_time=50)


@pytest.fixture
def baseline(rng):
    """Flexible baseline hazard on a 50-point grid."""
    return build_flexible_baseline(max_time=50, knots=8, spline=True, rng=rng)


@pytest.fixture
def tmp_output_dir(tmp_path):
    """Create a temporary output directory."""
    out_dir = tmp_path / "simulation_test"
    out_dir.mkdir()
    return out_dir
