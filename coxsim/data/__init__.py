"""Baseline hazards, duration generation and censoring for simulated data."""

from .types import SimulationType
from .scenarios import SimulationScenario, get_scenario, PREDEFINED_SCENARIOS
from .baseline import BaselineHazard, build_flexible_baseline, build_user_baseline
from .generator import (
    DurationGenerator,
    GeneratedDurations,
    individual_survivor,
    interaction_term,
    linear_predictor,
)
from .censoring import (
    CensoringResult,
    apply_censoring,
    censor_conditional,
    censor_uniform,
    censoring_rate,
)

__all__ = [
    # Types
    "SimulationType",
    # Scenarios
    "SimulationScenario",
    "get_scenario",
    "PREDEFINED_SCENARIOS",
    # Baseline
    "BaselineHazard",
    "build_flexible_baseline",
    "build_user_baseline",
    # Generator
    "DurationGenerator",
    "GeneratedDurations",
    "individual_survivor",
    "interaction_term",
    "linear_predictor",
    # Censoring
    "CensoringResult",
    "apply_censoring",
    "censor_conditional",
    "censor_uniform",
    "censoring_rate",
]
