"""Replicated simulation runs and their results."""

from .results import (
    MultipleSimulations,
    SimulationOutput,
    SimulationResult,
    SingleSimulation,
)
from .logging import SimulationLogger
from .runner import SimulationRunner, simulate_survival_data

__all__ = [
    "MultipleSimulations",
    "SimulationOutput",
    "SimulationResult",
    "SingleSimulation",
    "SimulationLogger",
    "SimulationRunner",
    "simulate_survival_data",
]
