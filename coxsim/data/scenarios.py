"""Scenario configuration for simulated Cox proportional-hazards data."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np
import pandas as pd

from .types import SimulationType

ArrayLike = Union[float, list, np.ndarray]


@dataclass
class SimulationScenario:
    """Configuration for simulated duration data.

    Attributes:
        name: Unique identifier (e.g., "default", "tvc")
        description: Human-readable description
        n_samples: Observations per data frame (replaced by the row count of X)
        max_time: Latest time point at which an observation may fail
        sim_type: Generative mode (static, tvc or tvbeta)
        hazard_fun: Optional baseline hazard function of time
        num_data_frames: Number of independent replications
        fixed_hazard: Reuse one drawn baseline hazard across replications
        knots: Number of points drawn by the flexible-hazard method
        spline: Smooth the flexible cumulative curve (else a step function)
        X: Optional user covariates (array or DataFrame)
        beta: Optional coefficients (vector, or max_time x n_features matrix)
        n_features: Number of covariates to draw (replaced by the columns of X)
        mu: Covariate mean(s), scalar or one per covariate
        sd: Covariate standard deviation(s), scalar or one per covariate
        covariate: Column index or name used for the marginal effect
        low: Low value of the marginal-effect covariate
        high: High value of the marginal-effect covariate
        compare: Reducer applied to per-observation duration differences
        censor: Proportion of observations to right-censor
        censor_cond: Make censoring depend on the covariates
        interactions: Add pairwise covariate interaction terms
        inter_mat: Symmetric (n_features x n_features) interaction weights
        store_survivor: Keep the N x T individual survivor matrix in results
    """

    # Identity
    name: str
    description: str = ""

    # Grid
    n_samples: int = 1000
    max_time: int = 100
    sim_type: Union[SimulationType, str] = SimulationType.STATIC

    # Baseline Hazard
    hazard_fun: Optional[Callable] = None
    num_data_frames: int = 1
    fixed_hazard: bool = False
    knots: int = 8
    spline: bool = True

    # Covariates and Coefficients
    X: Optional[Union[np.ndarray, pd.DataFrame]] = None
    beta: Optional[ArrayLike] = None
    n_features: int = 3
    mu: ArrayLike = 0.0
    sd: ArrayLike = 0.5

    # Marginal Effect
    covariate: Union[int, str] = 0
    low: float = 0.0
    high: float = 1.0
    compare: Callable = np.median

    # Censoring
    censor: float = 0.1
    censor_cond: bool = False

    # Interactions
    interactions: bool = False
    inter_mat: Optional[ArrayLike] = None

    store_survivor: bool = True

    def __post_init__(self) -> None:
        """Normalize inputs and validate configuration."""
        self.sim_type = SimulationType.parse(self.sim_type)

        if self.X is not None:
            if isinstance(self.X, pd.DataFrame):
                self.X = self.X.copy()
            else:
                self.X = np.asarray(self.X, dtype=float)
            if self.X.ndim != 2:
                raise ValueError(f"X must be two-dimensional, got {self.X.ndim} dims")
            self.n_features = self.X.shape[1]
            if self.sim_type is SimulationType.TVC:
                if self.max_time < 1:
                    raise ValueError(f"max_time must be >= 1, got {self.max_time}")
                if self.X.shape[0] % self.max_time != 0:
                    raise ValueError(
                        f"X has {self.X.shape[0]} rows, which is not a multiple of "
                        f"max_time ({self.max_time}) as tvc data requires"
                    )
                self.n_samples = self.X.shape[0] // self.max_time
            else:
                self.n_samples = self.X.shape[0]

        if self.beta is not None:
            self.beta = np.asarray(self.beta, dtype=float)
        if self.inter_mat is not None:
            self.inter_mat = np.asarray(self.inter_mat, dtype=float)

        self.validate()

    @property
    def user_beta(self) -> bool:
        return self.beta is not None

    def covariate_names(self) -> list:
        """Column names of the covariate matrix."""
        if isinstance(self.X, pd.DataFrame):
            return [str(c) for c in self.X.columns]
        return [f"X{i + 1}" for i in range(self.n_features)]

    def covariate_index(self) -> int:
        """Resolve the marginal-effect covariate to a 0-based column index."""
        if isinstance(self.covariate, str):
            names = self.covariate_names()
            if self.covariate not in names:
                raise ValueError(
                    f"Unknown covariate: {self.covariate}. Available: {names}"
                )
            return names.index(self.covariate)
        return int(self.covariate)

    def validate(self) -> None:
        """Validate the scenario configuration.

        Raises:
            ValueError: If configuration is invalid.
        """
        if self.n_samples < 1:
            raise ValueError(f"n_samples must be >= 1, got {self.n_samples}")

        if self.max_time < 1:
            raise ValueError(f"max_time must be >= 1, got {self.max_time}")

        if self.num_data_frames < 1:
            raise ValueError(
                f"num_data_frames must be >= 1, got {self.num_data_frames}"
            )

        if self.n_features < 1:
            raise ValueError(f"n_features must be >= 1, got {self.n_features}")

        if self.knots < 1:
            raise ValueError(f"knots must be >= 1, got {self.knots}")

        if not 0.0 <= self.censor <= 1.0:
            raise ValueError(f"censor must be in [0.0, 1.0], got {self.censor}")

        if self.censor_cond and self.sim_type is SimulationType.TVC:
            raise ValueError(
                "censor_cond is not available for tvc data: censoring happens "
                "inside the permutational algorithm"
            )

        for label, value in (("mu", self.mu), ("sd", self.sd)):
            arr = np.atleast_1d(np.asarray(value, dtype=float))
            if arr.ndim != 1 or arr.size not in (1, self.n_features):
                raise ValueError(
                    f"{label} must be a scalar or have length n_features "
                    f"({self.n_features}), got shape {arr.shape}"
                )
        if np.any(np.asarray(self.sd, dtype=float) < 0):
            raise ValueError("sd must be non-negative")

        self._validate_beta()
        self._validate_inter_mat()

        index = self.covariate_index()
        if not 0 <= index < self.n_features:
            raise ValueError(
                f"covariate index {index} out of range for "
                f"{self.n_features} covariates"
            )

        if not callable(self.compare):
            raise ValueError("compare must be callable")

        if self.hazard_fun is not None and not callable(self.hazard_fun):
            raise ValueError("hazard_fun must be callable")

    def _validate_beta(self) -> None:
        if self.beta is None:
            return

        if self.beta.ndim == 2:
            if self.sim_type is not SimulationType.TVBETA:
                raise ValueError(
                    "A coefficient matrix requires sim_type='tvbeta', "
                    f"got {self.sim_type.name.lower()}"
                )
            expected = (self.max_time, self.n_features)
            if self.beta.shape != expected:
                raise ValueError(
                    f"beta matrix shape {self.beta.shape} does not match "
                    f"(max_time, n_features) = {expected}"
                )
        elif self.beta.ndim == 1:
            if self.beta.size != self.n_features:
                raise ValueError(
                    f"beta has length {self.beta.size} but there are "
                    f"{self.n_features} covariates"
                )
        else:
            raise ValueError(f"beta must be a vector or matrix, got {self.beta.ndim} dims")

    def _validate_inter_mat(self) -> None:
        if not self.interactions:
            return

        if self.inter_mat is None:
            raise ValueError("inter_mat is required when interactions=True")

        expected = (self.n_features, self.n_features)
        if self.inter_mat.shape != expected:
            raise ValueError(
                f"inter_mat shape {self.inter_mat.shape} does not match "
                f"(n_features, n_features) = {expected}"
            )
        if not np.allclose(self.inter_mat, self.inter_mat.T):
            raise ValueError("inter_mat must be symmetric")
        if np.any(np.diag(self.inter_mat) != 0):
            raise ValueError("inter_mat diagonal must be zero (pairwise terms only)")

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization.

        User covariates, the hazard function and the reducer are not included.
        """
        def _listify(value):
            if isinstance(value, np.ndarray):
                return value.tolist()
            return value

        return {
            "name": self.name,
            "description": self.description,
            "n_samples": self.n_samples,
            "max_time": self.max_time,
            "sim_type": self.sim_type.name.lower(),
            "num_data_frames": self.num_data_frames,
            "fixed_hazard": self.fixed_hazard,
            "knots": self.knots,
            "spline": self.spline,
            "beta": _listify(self.beta),
            "n_features": self.n_features,
            "mu": _listify(self.mu),
            "sd": _listify(self.sd),
            "covariate": self.covariate,
            "low": self.low,
            "high": self.high,
            "censor": self.censor,
            "censor_cond": self.censor_cond,
            "interactions": self.interactions,
            "inter_mat": _listify(self.inter_mat),
            "store_survivor": self.store_survivor,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SimulationScenario":
        """Create from dictionary.

        Args:
            data: Dictionary with scenario configuration.

        Returns:
            SimulationScenario instance.
        """
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            n_samples=data.get("n_samples", 1000),
            max_time=data.get("max_time", 100),
            sim_type=data.get("sim_type", "static"),
            num_data_frames=data.get("num_data_frames", 1),
            fixed_hazard=data.get("fixed_hazard", False),
            knots=data.get("knots", 8),
            spline=data.get("spline", True),
            beta=data.get("beta"),
            n_features=data.get("n_features", 3),
            mu=data.get("mu", 0.0),
            sd=data.get("sd", 0.5),
            covariate=data.get("covariate", 0),
            low=data.get("low", 0.0),
            high=data.get("high", 1.0),
            censor=data.get("censor", 0.1),
            censor_cond=data.get("censor_cond", False),
            interactions=data.get("interactions", False),
            inter_mat=data.get("inter_mat"),
            store_survivor=data.get("store_survivor", True),
        )

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "SimulationScenario":
        """Load scenario from JSON file.

        Args:
            path: Path to JSON file.

        Returns:
            SimulationScenario instance.
        """
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def to_json(self, path: Union[str, Path]) -> None:
        """Save scenario to JSON file.

        Args:
            path: Path to save JSON file.
        """
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def _pairwise_interaction(n_features: int, weight: float) -> np.ndarray:
    inter_mat = np.zeros((n_features, n_features))
    inter_mat[0, 1] = inter_mat[1, 0] = weight
    return inter_mat


# Predefined scenarios
PREDEFINED_SCENARIOS = {
    "default": SimulationScenario(
        name="default",
        description="Static covariates, flexible baseline hazard, 10% random censoring",
    ),
    "tvc": SimulationScenario(
        name="tvc",
        description="Time-varying covariates via the permutational algorithm",
        sim_type=SimulationType.TVC,
        n_features=5,
    ),
    "tvbeta": SimulationScenario(
        name="tvbeta",
        description="Time-varying coefficients, first coefficient scaled by log(t)",
        sim_type=SimulationType.TVBETA,
    ),
    "conditional_censoring": SimulationScenario(
        name="conditional_censoring",
        description="Censoring of the 20% highest secondary linear predictors",
        censor=0.2,
        censor_cond=True,
    ),
    "interactions": SimulationScenario(
        name="interactions",
        description="Pairwise interaction between the first two covariates",
        interactions=True,
        inter_mat=_pairwise_interaction(3, 0.5),
    ),
}


def get_scenario(name: str) -> SimulationScenario:
    """Get a predefined scenario by name.

    Args:
        name: Scenario name.

    Returns:
        SimulationScenario instance.

    Raises:
        ValueError: If scenario name is not found.
    """
    if name not in PREDEFINED_SCENARIOS:
        raise ValueError(
            f"Unknown scenario: {name}. "
            f"Available: {list(PREDEFINED_SCENARIOS.keys())}"
        )
    return PREDEFINED_SCENARIOS[name]
