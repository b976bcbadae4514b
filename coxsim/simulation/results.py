"""Result containers for simulated data frames."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import numpy as np
import pandas as pd

from ..data.baseline import BaselineHazard


@dataclass
class SimulationResult:
    """Everything produced by one replication.

    Attributes:
        data: Simulated data frame with durations, censoring and covariates.
        xdata: Covariates only.
        baseline: Baseline hazard tables used for this replication.
        xb: Linear predictor.
        exp_xb: Exponentiated linear predictor.
        betas: Coefficients, varying over time for tvbeta data.
        ind_survive: (N x T) individual survivor matrix, or None when not stored.
        marg_effect: Simulated marginal change in expected duration (high - low).
        marg_effect_data: Counterfactual data frames keyed by "low" and "high".
        n_observations: Number of simulated observations.
        censored_fraction: Proportion of observations right-censored.
        n_admin_censored: Observations censored at the last time point.
    """

    data: pd.DataFrame
    xdata: pd.DataFrame
    baseline: BaselineHazard
    xb: np.ndarray
    exp_xb: np.ndarray
    betas: np.ndarray
    ind_survive: Optional[np.ndarray]
    marg_effect: float
    marg_effect_data: Dict[str, pd.DataFrame] = field(default_factory=dict)
    n_observations: int = 0
    censored_fraction: float = 0.0
    n_admin_censored: int = 0

    def to_csv(self, path: Union[str, Path]) -> None:
        """Save the simulated data frame to a CSV file.

        Args:
            path: Path to save file.
        """
        self.data.to_csv(path, index=False)


@dataclass
class SingleSimulation:
    """Output of a run with one data frame."""

    result: SimulationResult

    @property
    def results(self) -> List[SimulationResult]:
        return [self.result]

    def __len__(self) -> int:
        return 1

    def __iter__(self) -> Iterator[SimulationResult]:
        return iter(self.results)

    def __getitem__(self, index: int) -> SimulationResult:
        return self.results[index]


@dataclass
class MultipleSimulations:
    """Output of a run with several independent data frames."""

    results: List[SimulationResult]

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[SimulationResult]:
        return iter(self.results)

    def __getitem__(self, index: int) -> SimulationResult:
        return self.results[index]


SimulationOutput = Union[SingleSimulation, MultipleSimulations]
