"""Baseline hazard construction over a discrete time grid.

Two builders are provided: a flexible-hazard method that fits a curve to
randomly drawn points, and a builder for user-supplied hazard functions.
Both return a BaselineHazard table holding the failure PDF, failure CDF,
survivor and hazard functions at each time point 1..T.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
import pandas as pd
from scipy.interpolate import PchipInterpolator


@dataclass(frozen=True)
class BaselineHazard:
    """Baseline distribution of durations on the grid 1..T.

    Attributes:
        time: Time points 1..T.
        failure_pdf: Probability of failing at each time point.
        failure_cdf: Probability of failing at or before each time point.
        survivor: Probability of surviving past each time point.
        hazard: Conditional probability of failing given survival to t - 1.
    """

    time: np.ndarray
    failure_pdf: np.ndarray
    failure_cdf: np.ndarray
    survivor: np.ndarray
    hazard: np.ndarray

    @property
    def max_time(self) -> int:
        return len(self.time)

    @classmethod
    def from_cdf(cls, cdf: np.ndarray) -> "BaselineHazard":
        """Derive every baseline table from a failure CDF.

        Args:
            cdf: Non-decreasing failure CDF of shape (T,) with values in [0, 1].

        Returns:
            BaselineHazard instance.
        """
        cdf = np.asarray(cdf, dtype=float)
        if cdf.ndim != 1 or cdf.size == 0:
            raise ValueError(f"cdf must be a non-empty vector, got shape {cdf.shape}")
        if not np.all(np.isfinite(cdf)):
            raise ValueError("cdf contains non-finite values")

        cdf = np.maximum.accumulate(np.clip(cdf, 0.0, 1.0))

        time = np.arange(1, cdf.size + 1)
        failure_pdf = np.diff(cdf, prepend=0.0)
        survivor = 1.0 - cdf

        # Survivor at t - 1, with Survivor[0] = 1
        at_risk = np.concatenate(([1.0], survivor[:-1]))
        hazard = np.divide(
            failure_pdf,
            at_risk,
            out=np.zeros_like(failure_pdf),
            where=at_risk > 0,
        )

        return cls(
            time=time,
            failure_pdf=failure_pdf,
            failure_cdf=cdf,
            survivor=survivor,
            hazard=hazard,
        )

    def to_frame(self) -> pd.DataFrame:
        """Baseline tables as a DataFrame with one row per time point."""
        return pd.DataFrame(
            {
                "time": self.time,
                "failure_pdf": self.failure_pdf,
                "failure_cdf": self.failure_cdf,
                "survivor": self.survivor,
                "hazard": self.hazard,
            }
        )


def build_flexible_baseline(
    max_time: int = 100,
    knots: int = 8,
    spline: bool = True,
    rng: Optional[np.random.Generator] = None,
) -> BaselineHazard:
    """Generate a baseline hazard with the flexible-hazard method.

    Draws ``knots`` distinct interior time points and as many sorted
    Uniform(0, 1) heights, anchors the cumulative curve at (0, 0) and
    (T, 1), then either fits a monotone cubic spline through the points or
    holds each height constant until the next knot. The resulting curve is
    made non-negative, cumulative and normalized to end at 1 before the
    PDF, survivor and hazard are derived from it.

    Args:
        max_time: Number of time points T.
        knots: Number of random points to draw (capped at T - 1).
        spline: If True, smooth with a spline; otherwise use a step function.
        rng: NumPy random generator for reproducibility.

    Returns:
        BaselineHazard of length max_time.
    """
    if rng is None:
        rng = np.random.default_rng()

    if max_time < 1:
        raise ValueError(f"max_time must be >= 1, got {max_time}")
    if knots < 1:
        raise ValueError(f"knots must be >= 1, got {knots}")

    time = np.arange(1, max_time + 1)
    n_knots = min(knots, max_time - 1)

    if n_knots == 0:
        # T = 1: all failures happen at the only time point
        return BaselineHazard.from_cdf(np.ones(1))

    knot_times = np.sort(rng.choice(np.arange(1, max_time), size=n_knots, replace=False))
    heights = np.sort(rng.uniform(0, 1, size=n_knots))

    x = np.concatenate(([0], knot_times, [max_time])).astype(float)
    y = np.concatenate(([0.0], heights, [1.0]))

    if spline:
        curve = PchipInterpolator(x, y)(time)
    else:
        # Right-continuous step: height of the last knot at or before t
        curve = y[np.searchsorted(x, time, side="right") - 1]

    curve = np.maximum.accumulate(np.clip(curve, 0.0, None))
    cdf = curve / curve[-1]

    return BaselineHazard.from_cdf(cdf)


def build_user_baseline(hazard_fun: Callable, max_time: int = 100) -> BaselineHazard:
    """Build baseline tables from a user-supplied hazard function.

    The hazard is evaluated at 1..T and accumulated into a survivor
    function ``exp(-cumsum(h))``. The CDF is closed at T, so mass that
    would fail after T is placed on the last time point.

    Args:
        hazard_fun: Function of time returning the baseline hazard.
        max_time: Number of time points T.

    Returns:
        BaselineHazard of length max_time.

    Raises:
        ValueError: If the hazard function produces unusable output.
    """
    if max_time < 1:
        raise ValueError(f"max_time must be >= 1, got {max_time}")

    time = np.arange(1, max_time + 1)
    hazard = _evaluate_hazard(hazard_fun, time)

    if not np.all(np.isfinite(hazard)):
        bad = time[~np.isfinite(hazard)]
        raise ValueError(
            f"hazard_fun returned non-finite values at times {bad[:10].tolist()}"
        )
    if np.any(hazard < 0):
        bad = time[hazard < 0]
        raise ValueError(
            f"hazard_fun returned negative values at times {bad[:10].tolist()}"
        )
    if not np.any(hazard > 0):
        raise ValueError("hazard_fun is zero everywhere on the time grid")

    cdf = 1.0 - np.exp(-np.cumsum(hazard))
    cdf[-1] = 1.0

    return BaselineHazard.from_cdf(cdf)


def _evaluate_hazard(hazard_fun: Callable, time: np.ndarray) -> np.ndarray:
    """Evaluate a hazard function on the grid, vectorized when possible."""
    try:
        values = np.asarray(hazard_fun(time), dtype=float)
    except (TypeError, ValueError):
        values = None

    if values is None or values.shape != time.shape:
        values = np.array([float(hazard_fun(t)) for t in time])

    return values
