"""Simulated duration data for the Cox proportional-hazards model."""

from .data import (
    BaselineHazard,
    SimulationScenario,
    SimulationType,
    build_flexible_baseline,
    build_user_baseline,
)
from .analysis import SimulationWarning
from .simulation import (
    MultipleSimulations,
    SimulationResult,
    SimulationRunner,
    SingleSimulation,
    simulate_survival_data,
)

__version__ = "0.1.0"

__all__ = [
    "BaselineHazard",
    "SimulationScenario",
    "SimulationType",
    "build_flexible_baseline",
    "build_user_baseline",
    "SimulationWarning",
    "MultipleSimulations",
    "SimulationResult",
    "SimulationRunner",
    "SingleSimulation",
    "simulate_survival_data",
]
