"""Plausibility checks for simulated durations."""

import warnings
from dataclasses import dataclass

import numpy as np
from scipy.stats import binom

from ..data.baseline import BaselineHazard

ADMIN_CENSORING_THRESHOLD = 0.05
EXTREME_TAIL_THRESHOLD = 0.025


class SimulationWarning(UserWarning):
    """Simulated data are usable but likely distorted."""


@dataclass
class ExtremeDurationCheck:
    """Counts of durations at the grid boundaries and their tail probabilities.

    Attributes:
        n_low: Observations with duration 1.
        n_high: Observations with duration T.
        p_low: Probability of more than n_low failures at t = 1 under the baseline.
        p_high: Probability of more than n_high survivals to T under the baseline.
        flagged: Whether either probability is below the tail threshold.
    """

    n_low: int
    n_high: int
    p_low: float
    p_high: float
    flagged: bool


def check_administrative_censoring(
    n_censored: int,
    n_samples: int,
    user_hazard: bool = False,
) -> bool:
    """Warn when many observations were censored at the last time point.

    Args:
        n_censored: Observations administratively censored at T.
        n_samples: Total number of observations.
        user_hazard: Whether a user-supplied hazard function was used.

    Returns:
        True if a warning was issued.
    """
    if n_censored <= ADMIN_CENSORING_THRESHOLD * n_samples:
        return False

    cause = (
        "the user-supplied hazard function is nonzero at the latest time point"
        if user_hazard
        else "their survivor functions do not reach zero by the latest time point"
    )
    warnings.warn(
        f"{n_censored} additional observations right-censored because {cause}. "
        "To avoid these extra censored observations, increase T",
        SimulationWarning,
        stacklevel=2,
    )
    return True


def check_extreme_durations(
    y: np.ndarray,
    baseline: BaselineHazard,
) -> ExtremeDurationCheck:
    """Compare counts of durations at 1 and T with the baseline expectation.

    The number of durations at 1 is compared with Binomial(N, CDF[1]) and
    the number at T with Binomial(N, Survivor[T - 1]). A warning is issued
    when either upper-tail probability P(X >= count) falls below 0.025. The
    check is skipped for T = 1, where every duration is at both boundaries.

    Args:
        y: Simulated durations.
        baseline: Baseline hazard tables.

    Returns:
        ExtremeDurationCheck with counts and tail probabilities.
    """
    y = np.asarray(y)
    n = y.size
    max_time = baseline.max_time

    n_low = int(np.sum(y == 1))
    n_high = int(np.sum(y == max_time))

    if max_time < 2 or n == 0:
        return ExtremeDurationCheck(n_low, n_high, 1.0, 1.0, False)

    # P(X >= observed); a count of zero is never in the upper tail
    p_low = float(binom.sf(n_low - 1, n, baseline.failure_cdf[0]))
    p_high = float(binom.sf(n_high - 1, n, baseline.survivor[max_time - 2]))
    flagged = p_low < EXTREME_TAIL_THRESHOLD or p_high < EXTREME_TAIL_THRESHOLD

    if flagged:
        warnings.warn(
            f"{n_low + n_high} observations have drawn durations at the minimum "
            "or maximum possible value. The linear predictor may be too large "
            "to produce a useable survivor function, and generating coefficients "
            "and other quantities of interest are unlikely to be returned. "
            "Consider making user-supplied coefficients smaller, making T "
            "bigger, or decreasing the variance of the X variables.",
            SimulationWarning,
            stacklevel=2,
        )

    return ExtremeDurationCheck(n_low, n_high, p_low, p_high, flagged)
