"""Simulation runner for replicated Cox model data frames."""

import sys
from typing import Optional

import numpy as np

from .logging import SimulationLogger
from .results import (
    MultipleSimulations,
    SimulationOutput,
    SimulationResult,
    SingleSimulation,
)
from ..analysis.diagnostics import check_administrative_censoring, check_extreme_durations
from ..analysis.marginal_effect import compute_marginal_effect
from ..data.baseline import BaselineHazard, build_flexible_baseline, build_user_baseline
from ..data.censoring import apply_censoring, censoring_rate
from ..data.generator import DurationGenerator
from ..data.scenarios import SimulationScenario
from ..data.types import SimulationType


class SimulationRunner:
    """Orchestrates replicated data generation.

    Handles:
    - Baseline hazard selection (user function, fixed draw, or fresh draw)
    - Duration generation, censoring and marginal effects per replication
    - Plausibility warnings
    - Assembly of single or multiple results

    All replications consume one random generator seeded once, in order, so
    a fixed seed reproduces the whole run.

    Args:
        scenario: Simulation scenario configuration.
        seed: Random seed for reproducibility.
        verbose: Whether to print progress.
    """

    def __init__(
        self,
        scenario: SimulationScenario,
        seed: Optional[int] = 42,
        verbose: bool = False,
    ):
        self.scenario = scenario
        self.seed = seed
        self.verbose = verbose
        self.rng = np.random.default_rng(seed)

    def run(self, logger: Optional[SimulationLogger] = None) -> SimulationOutput:
        """Generate every replication.

        Args:
            logger: Optional logger receiving run info and one row per replication.

        Returns:
            SingleSimulation if num_data_frames is 1, else MultipleSimulations.
        """
        scenario = self.scenario
        if logger is not None:
            logger.log_run_info({"scenario": scenario.to_dict(), "seed": self.seed})

        shared_baseline = self._shared_baseline()

        results = []
        for i in range(scenario.num_data_frames):
            if shared_baseline is not None:
                baseline = shared_baseline
            else:
                baseline = build_flexible_baseline(
                    scenario.max_time, scenario.knots, scenario.spline, self.rng
                )

            self._log(f"[{i + 1}/{scenario.num_data_frames}] Generating {scenario.name} data")
            result = self.run_replication(baseline)
            results.append(result)

            if logger is not None:
                logger.log_replication(i + 1, result)

        if len(results) == 1:
            return SingleSimulation(results[0])
        return MultipleSimulations(results)

    def _shared_baseline(self) -> Optional[BaselineHazard]:
        """Build the baseline reused by every replication, if any.

        Returns:
            The user-function baseline, a single flexible draw when
            fixed_hazard is set, or None when each replication draws its own.
        """
        scenario = self.scenario
        if scenario.hazard_fun is not None:
            return build_user_baseline(scenario.hazard_fun, scenario.max_time)
        if scenario.fixed_hazard:
            return build_flexible_baseline(
                scenario.max_time, scenario.knots, scenario.spline, self.rng
            )
        return None

    def run_replication(self, baseline: BaselineHazard) -> SimulationResult:
        """Generate one data frame from a baseline hazard.

        Args:
            baseline: Baseline hazard tables for this replication.

        Returns:
            SimulationResult bundle.
        """
        scenario = self.scenario
        generated = DurationGenerator(scenario, self.rng).generate(baseline)
        data = generated.data
        tvc = scenario.sim_type is SimulationType.TVC

        if tvc:
            failed = generated.failed
            admin_censored = generated.admin_censored
            xdata = data.drop(columns=["id", "start", "end", "failed"])
        else:
            censoring = apply_censoring(
                generated.X, scenario.censor, scenario.censor_cond, self.rng
            )

            admin_censored = generated.admin_censored.copy()
            if scenario.hazard_fun is not None:
                admin_censored |= generated.y == scenario.max_time

            failed = ~censoring.censored & ~admin_censored
            data["failed"] = failed
            xdata = data.drop(columns=["y", "failed"])

            check_administrative_censoring(
                int(admin_censored.sum()),
                generated.n_samples,
                user_hazard=scenario.hazard_fun is not None,
            )

        effect = compute_marginal_effect(
            baseline,
            generated,
            covariate=scenario.covariate_index(),
            low=scenario.low,
            high=scenario.high,
            compare=scenario.compare,
        )

        if scenario.user_beta and not tvc:
            check_extreme_durations(generated.y, baseline)

        return SimulationResult(
            data=data,
            xdata=xdata,
            baseline=baseline,
            xb=generated.xb,
            exp_xb=generated.exp_xb,
            betas=generated.beta,
            ind_survive=generated.survivor if scenario.store_survivor else None,
            marg_effect=effect.effect,
            marg_effect_data={"low": effect.data_low, "high": effect.data_high},
            n_observations=generated.n_samples,
            censored_fraction=censoring_rate(failed),
            n_admin_censored=int(admin_censored.sum()),
        )

    def _log(self, message: str) -> None:
        """Log a message if verbose mode is enabled."""
        if self.verbose:
            print(message, file=sys.stderr)


def simulate_survival_data(
    seed: Optional[int] = None,
    logger: Optional[SimulationLogger] = None,
    **kwargs,
) -> SimulationOutput:
    """Simulate duration data for the Cox proportional-hazards model.

    Keyword arguments are SimulationScenario fields, e.g. ``n_samples``,
    ``max_time``, ``sim_type``, ``hazard_fun``, ``beta`` or ``censor``.

    Args:
        seed: Random seed; None draws fresh entropy.
        logger: Optional run logger.

    Returns:
        SingleSimulation if num_data_frames is 1, else MultipleSimulations.

    Example:
        >>> sims = simulate_survival_data(n_samples=1000, max_time=100, num_data_frames=2)
        >>> sims[0].data.head()
    """
    kwargs.setdefault("name", "custom")
    scenario = SimulationScenario(**kwargs)
    return SimulationRunner(scenario, seed=seed).run(logger=logger)
