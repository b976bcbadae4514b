"""Right-censoring of simulated observations."""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class CensoringResult:
    """Outcome of a censoring pass.

    Attributes:
        censored: Boolean mask of censored observations.
        score: Secondary linear predictor used for conditional censoring,
            or None for uniform censoring.
    """

    censored: np.ndarray
    score: Optional[np.ndarray] = None


def censor_uniform(
    n_samples: int,
    censor: float,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Censor each observation independently with probability ``censor``.

    Args:
        n_samples: Number of observations.
        censor: Censoring probability in [0, 1].
        rng: Random number generator.

    Returns:
        Boolean mask of censored observations.
    """
    if rng is None:
        rng = np.random.default_rng()
    return rng.uniform(0, 1, size=n_samples) < censor


def censor_conditional(
    X: np.ndarray,
    censor: float,
    rng: Optional[np.random.Generator] = None,
) -> CensoringResult:
    """Censor the observations with the largest secondary linear predictor.

    Fresh coefficients are drawn from Normal(0, 0.1), independent of the
    coefficients that generated the durations. The ``round(censor * N)``
    observations with the highest ``X @ coefficients`` are censored.

    Args:
        X: Covariate matrix of shape (n_samples, n_features).
        censor: Proportion of observations to censor.
        rng: Random number generator.

    Returns:
        CensoringResult with the censored mask and the secondary score.
    """
    if rng is None:
        rng = np.random.default_rng()

    X = np.asarray(X, dtype=float)
    n = X.shape[0]

    coefficients = rng.normal(0, 0.1, size=X.shape[1])
    score = X @ coefficients

    n_censored = int(round(censor * n))
    censored = np.zeros(n, dtype=bool)
    if n_censored > 0:
        # Stable sort on the negated score keeps earlier rows first on ties
        censored[np.argsort(-score, kind="stable")[:n_censored]] = True

    return CensoringResult(censored=censored, score=score)


def apply_censoring(
    X: np.ndarray,
    censor: float,
    censor_cond: bool = False,
    rng: Optional[np.random.Generator] = None,
) -> CensoringResult:
    """Censor observations uniformly or conditionally on the covariates.

    Args:
        X: Covariate matrix of shape (n_samples, n_features).
        censor: Target censoring proportion.
        censor_cond: If True, censoring depends on the covariates.
        rng: Random number generator.

    Returns:
        CensoringResult for the observations in X.
    """
    if not 0.0 <= censor <= 1.0:
        raise ValueError(f"censor must be in [0.0, 1.0], got {censor}")

    if censor_cond:
        return censor_conditional(X, censor, rng)

    return CensoringResult(censored=censor_uniform(len(X), censor, rng))


def censoring_rate(failed: np.ndarray) -> float:
    """Proportion of observations that are right-censored."""
    failed = np.asarray(failed, dtype=bool)
    if failed.size == 0:
        return 0.0
    return float(1.0 - failed.mean())
