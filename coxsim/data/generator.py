"""Simulated durations under the Cox proportional-hazards model."""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from .baseline import BaselineHazard
from .censoring import censor_uniform
from .scenarios import SimulationScenario
from .types import SimulationType


@dataclass
class GeneratedDurations:
    """Container for one set of generated durations.

    Attributes:
        data: Simulated data frame. Static and tvbeta data have one row per
            observation with ``y`` and ``failed`` columns; tvc data have one
            row per observation per exposure interval with ``id``, ``start``,
            ``end`` and ``failed`` columns.
        X: Covariate matrix of shape (n_samples, n_features), or
            (n_samples * max_time, n_features) for tvc data.
        columns: Covariate column names.
        y: Duration of each observation, shape (n_samples,).
        failed: Event indicator of each observation before censoring is
            applied (tvc data already include censoring).
        admin_censored: Observations whose duration was cut at max_time.
        xb: Linear predictor, shape (n_samples,) for static data,
            (n_samples, max_time) for tvbeta and (n_samples * max_time,) for tvc.
        exp_xb: Exponentiated linear predictor.
        beta: Coefficients, shape (n_features,) or (max_time, n_features).
        inter_mat: Interaction weights used, if any.
        survivor: Individual survivor matrix of shape (n_samples, max_time).
        sim_type: Generative mode.
        n_samples: Number of observations.
    """

    data: pd.DataFrame
    X: np.ndarray
    columns: List[str]
    y: np.ndarray
    failed: np.ndarray
    admin_censored: np.ndarray
    xb: np.ndarray
    exp_xb: np.ndarray
    beta: np.ndarray
    inter_mat: Optional[np.ndarray]
    survivor: np.ndarray
    sim_type: SimulationType
    n_samples: int


def interaction_term(X: np.ndarray, inter_mat: np.ndarray) -> np.ndarray:
    """Compute pairwise interaction contributions to the linear predictor.

    Each pair j < k contributes ``inter_mat[j, k] * X[:, j] * X[:, k]``.

    Args:
        X: Covariate matrix of shape (n_rows, n_features).
        inter_mat: Symmetric weight matrix of shape (n_features, n_features).

    Returns:
        Interaction term of shape (n_rows,).
    """
    upper = np.triu(np.asarray(inter_mat, dtype=float), k=1)
    return np.einsum("ij,jk,ik->i", X, upper, X)


def linear_predictor(
    X: np.ndarray,
    beta: np.ndarray,
    inter_mat: Optional[np.ndarray] = None,
) -> np.ndarray:
    """Compute the linear predictor XB.

    Args:
        X: Covariate matrix of shape (n_rows, n_features).
        beta: Coefficient vector (n_features,) or time-varying
            coefficient matrix (max_time, n_features).
        inter_mat: Optional pairwise interaction weights.

    Returns:
        XB of shape (n_rows,), or (n_rows, max_time) for a coefficient matrix.
    """
    X = np.asarray(X, dtype=float)
    beta = np.asarray(beta, dtype=float)

    xb = X @ beta.T if beta.ndim == 2 else X @ beta

    if inter_mat is not None:
        term = interaction_term(X, inter_mat)
        xb = xb + (term[:, np.newaxis] if xb.ndim == 2 else term)

    return xb


def individual_survivor(baseline: BaselineHazard, exp_xb: np.ndarray) -> np.ndarray:
    """Compute each observation's survivor function on the time grid.

    With a constant relative hazard this is ``S0(t) ** exp(XB)``. With a
    relative hazard that changes over time, each period's conditional
    survival ``S0(t) / S0(t - 1)`` is raised to that period's ``exp(XB)``
    and the results are multiplied cumulatively.

    Args:
        baseline: Baseline hazard tables.
        exp_xb: Relative hazards, shape (n_samples,) or (n_samples, max_time).

    Returns:
        Survivor matrix of shape (n_samples, max_time).
    """
    exp_xb = np.asarray(exp_xb, dtype=float)
    survivor = baseline.survivor

    if exp_xb.ndim == 1:
        return survivor[np.newaxis, :] ** exp_xb[:, np.newaxis]

    previous = np.concatenate(([1.0], survivor[:-1]))
    ratio = np.divide(
        survivor, previous, out=np.zeros_like(survivor), where=previous > 0
    )
    return np.cumprod(ratio[np.newaxis, :] ** exp_xb, axis=1)


class DurationGenerator:
    """Generator for simulated durations given a baseline hazard.

    Covariates and coefficients come from the scenario when supplied and are
    drawn otherwise. Durations are drawn by inverse transform sampling
    against the discretized individual survivor functions, or for
    time-varying covariates by the permutational algorithm of Sylvestre and
    Abrahamowicz (2008).

    Args:
        scenario: Simulation scenario configuration.
        rng: NumPy random generator for reproducibility.
    """

    def __init__(
        self,
        scenario: SimulationScenario,
        rng: Optional[np.random.Generator] = None,
    ):
        self.scenario = scenario
        self.rng = rng if rng is not None else np.random.default_rng()

    def generate(self, baseline: BaselineHazard) -> GeneratedDurations:
        """Generate one set of durations.

        Args:
            baseline: Baseline hazard tables of length max_time.

        Returns:
            GeneratedDurations with data, linear predictors and coefficients.
        """
        if baseline.max_time != self.scenario.max_time:
            raise ValueError(
                f"Baseline has {baseline.max_time} time points but "
                f"max_time is {self.scenario.max_time}"
            )

        X = self._generate_covariates()
        beta = self._generate_coefficients()
        inter_mat = self.scenario.inter_mat if self.scenario.interactions else None

        xb = linear_predictor(X, beta, inter_mat)
        exp_xb = np.exp(xb)

        if self.scenario.sim_type is SimulationType.TVC:
            return self._generate_tvc(baseline, X, beta, inter_mat, xb, exp_xb)

        survivor = individual_survivor(baseline, exp_xb)
        y, admin_censored = self._draw_durations(survivor)

        columns = self.scenario.covariate_names()
        data = pd.DataFrame(X, columns=columns)
        data["y"] = y
        data["failed"] = ~admin_censored

        return GeneratedDurations(
            data=data,
            X=X,
            columns=columns,
            y=y,
            failed=~admin_censored,
            admin_censored=admin_censored,
            xb=xb,
            exp_xb=exp_xb,
            beta=beta,
            inter_mat=inter_mat,
            survivor=survivor,
            sim_type=self.scenario.sim_type,
            n_samples=self.scenario.n_samples,
        )

    def _generate_covariates(self) -> np.ndarray:
        """Return user covariates or draw them from normal distributions."""
        scenario = self.scenario
        if scenario.X is not None:
            return np.asarray(scenario.X, dtype=float)

        p = scenario.n_features
        n_rows = scenario.n_samples
        if scenario.sim_type is SimulationType.TVC:
            n_rows *= scenario.max_time

        mu = np.broadcast_to(np.asarray(scenario.mu, dtype=float), (p,))
        sd = np.broadcast_to(np.asarray(scenario.sd, dtype=float), (p,))
        return self.rng.normal(mu, sd, size=(n_rows, p))

    def _generate_coefficients(self) -> np.ndarray:
        """Return user coefficients or draw them from Normal(0, 0.1).

        For tvbeta data a coefficient vector is expanded to a
        (max_time, n_features) matrix whose first column is multiplied by
        log(t).
        """
        scenario = self.scenario
        if scenario.beta is not None:
            beta = np.array(scenario.beta, dtype=float)
        else:
            beta = self.rng.normal(0, 0.1, size=scenario.n_features)

        if scenario.sim_type is SimulationType.TVBETA and beta.ndim == 1:
            time = np.arange(1, scenario.max_time + 1)
            beta = np.tile(beta, (scenario.max_time, 1))
            beta[:, 0] *= np.log(time)

        return beta

    def _draw_durations(self, survivor: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Draw durations by inverting each individual survivor function.

        The duration is the first time point at which the survivor function
        drops below a Uniform(0, 1) draw. Observations that never drop below
        their draw are placed at max_time.

        Args:
            survivor: Survivor matrix of shape (n_samples, max_time).

        Returns:
            Tuple of (durations, administratively censored mask).
        """
        n, max_time = survivor.shape
        u = self.rng.uniform(0, 1, size=n)

        crossed = survivor < u[:, np.newaxis]
        reached = crossed.any(axis=1)
        y = np.where(reached, crossed.argmax(axis=1) + 1, max_time)

        return y.astype(int), ~reached

    def _generate_tvc(
        self,
        baseline: BaselineHazard,
        X: np.ndarray,
        beta: np.ndarray,
        inter_mat: Optional[np.ndarray],
        xb: np.ndarray,
        exp_xb: np.ndarray,
    ) -> GeneratedDurations:
        """Generate durations with time-varying covariates."""
        n = self.scenario.n_samples
        max_time = self.scenario.max_time
        exp_xb_grid = exp_xb.reshape(n, max_time)

        # Unassigned times drawn from the baseline, censored independently
        times, _ = self._draw_durations(
            np.broadcast_to(baseline.survivor, (n, max_time))
        )
        status = ~censor_uniform(n, self.scenario.censor, self.rng)

        y, failed = self._assign_times(times, status, exp_xb_grid)

        columns = self.scenario.covariate_names()
        data = self._exposure_intervals(X, y, failed, columns)

        return GeneratedDurations(
            data=data,
            X=X,
            columns=columns,
            y=y,
            failed=failed,
            admin_censored=np.zeros(n, dtype=bool),
            xb=xb,
            exp_xb=exp_xb,
            beta=beta,
            inter_mat=inter_mat,
            survivor=individual_survivor(baseline, exp_xb_grid),
            sim_type=self.scenario.sim_type,
            n_samples=n,
        )

    def _assign_times(
        self,
        times: np.ndarray,
        status: np.ndarray,
        exp_xb_grid: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Match times to observations with the permutational algorithm.

        Times are processed in increasing order. An event time goes to an
        observation still at risk with probability proportional to its
        relative hazard at that time; a censoring time goes to an at-risk
        observation chosen uniformly.

        Args:
            times: Durations to assign, shape (n_samples,).
            status: True for event times, False for censoring times.
            exp_xb_grid: Relative hazards of shape (n_samples, max_time).

        Returns:
            Tuple of (durations, event indicators) per observation.
        """
        n = len(times)
        at_risk = np.ones(n, dtype=bool)
        y = np.zeros(n, dtype=int)
        failed = np.zeros(n, dtype=bool)

        for k in np.argsort(times, kind="stable"):
            t = times[k]
            candidates = np.flatnonzero(at_risk)

            if status[k]:
                weights = exp_xb_grid[candidates, t - 1]
                total = weights.sum()
                if not np.isfinite(total) or total <= 0:
                    weights = (weights == weights.max()).astype(float)
                    total = weights.sum()
                chosen = self.rng.choice(candidates, p=weights / total)
            else:
                chosen = self.rng.choice(candidates)

            y[chosen] = t
            failed[chosen] = status[k]
            at_risk[chosen] = False

        return y, failed

    def _exposure_intervals(
        self,
        X: np.ndarray,
        y: np.ndarray,
        failed: np.ndarray,
        columns: List[str],
    ) -> pd.DataFrame:
        """Expand observations into one row per time unit at risk."""
        max_time = self.scenario.max_time

        ids = np.repeat(np.arange(len(y)), y)
        offsets = np.repeat(np.cumsum(y) - y, y)
        period = np.arange(len(ids)) - offsets + 1

        data = pd.DataFrame(
            {
                "id": ids + 1,
                "start": period - 1,
                "end": period,
                "failed": (period == y[ids]) & failed[ids],
            }
        )
        covariates = pd.DataFrame(X[ids * max_time + period - 1], columns=columns)
        return pd.concat([data, covariates], axis=1)
