"""Marginal effects and plausibility diagnostics for simulated data."""

from .marginal_effect import (
    MarginalEffect,
    compute_marginal_effect,
    expected_durations,
)
from .diagnostics import (
    ExtremeDurationCheck,
    SimulationWarning,
    check_administrative_censoring,
    check_extreme_durations,
)

__all__ = [
    "MarginalEffect",
    "compute_marginal_effect",
    "expected_durations",
    "ExtremeDurationCheck",
    "SimulationWarning",
    "check_administrative_censoring",
    "check_extreme_durations",
]
