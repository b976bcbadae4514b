"""Unit tests for plausibility diagnostics."""

import warnings

import numpy as np
import pytest
from scipy.stats import binom

from coxsim.analysis.diagnostics import (
    SimulationWarning,
    check_administrative_censoring,
    check_extreme_durations,
)
from coxsim.data.baseline import BaselineHazard, build_flexible_baseline
from coxsim.data.generator import DurationGenerator
from coxsim.data.scenarios import SimulationScenario


class TestAdministrativeCensoring:
    """Tests for the administrative censoring warning."""

    def test_warns_above_threshold(self):
        """Test a warning when more than 5% are censored at T."""
        with pytest.warns(SimulationWarning, match="increase T"):
            assert check_administrative_censoring(60, 1000, user_hazard=True)

    def test_message_names_user_hazard(self):
        """Test that the message explains the user hazard cause."""
        with pytest.warns(SimulationWarning, match="user-supplied hazard"):
            check_administrative_censoring(100, 1000, user_hazard=True)

    def test_silent_at_threshold(self):
        """Test no warning at or below 5%."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert not check_administrative_censoring(50, 1000)


class TestExtremeDurations:
    """Tests for the boundary-duration check."""

    def test_flags_pile_up_at_last_time_point(self):
        """Test a warning when far too many durations equal T."""
        baseline = build_flexible_baseline(50, rng=np.random.default_rng(0))
        y = np.full(500, 50)

        with pytest.warns(SimulationWarning, match="minimum or maximum"):
            check = check_extreme_durations(y, baseline)

        assert check.flagged
        assert check.n_high == 500
        assert check.p_high < 0.025

    def test_flags_pile_up_at_first_time_point(self):
        """Test a warning when far too many durations equal 1."""
        baseline = BaselineHazard.from_cdf(np.linspace(0.02, 1.0, 50))
        y = np.ones(400, dtype=int)

        with pytest.warns(SimulationWarning):
            check = check_extreme_durations(y, baseline)

        assert check.n_low == 400
        assert check.p_low < 0.025

    def test_plausible_durations_pass(self):
        """Test that durations matching the baseline are not flagged."""
        baseline = BaselineHazard.from_cdf(np.linspace(0.02, 1.0, 50))
        # Uniform baseline: 40 of 2000 durations at every time point
        y = np.repeat(baseline.time, 40)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            check = check_extreme_durations(y, baseline)

        assert not check.flagged

    def test_empty_first_time_point_not_flagged(self):
        """Test that a step baseline with CDF[1] = 0 and no durations at 1 passes."""
        baseline = BaselineHazard.from_cdf(
            np.concatenate([[0.0], np.linspace(0.02, 1.0, 49)])
        )
        # 40 durations at each of t = 2..50, none at t = 1
        y = np.repeat(baseline.time[1:], 40)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            check = check_extreme_durations(y, baseline)

        assert check.n_low == 0
        assert check.p_low == 1.0
        assert not check.flagged

    def test_tail_includes_observed_count(self):
        """Test that the tail probability is P(X >= count), not P(X > count)."""
        baseline = BaselineHazard.from_cdf(np.linspace(0.02, 1.0, 50))
        y = np.repeat(baseline.time, 40)

        check = check_extreme_durations(y, baseline)

        assert check.p_low == pytest.approx(binom.sf(39, 2000, 0.02))
        assert check.p_high == pytest.approx(binom.sf(39, 2000, baseline.survivor[48]))

    def test_zero_coefficients_never_flag_first_time_point(self):
        """Test zero coefficients on a baseline with CDF[1] = 0 never flag t = 1."""
        baseline = BaselineHazard.from_cdf(
            np.concatenate([[0.0], np.linspace(0.01, 1.0, 99)])
        )
        scenario = SimulationScenario(
            name="zero_beta",
            n_samples=1000,
            max_time=100,
            beta=[0.0, 0.0, 0.0],
            spline=False,
            censor=0.0,
        )
        generated = DurationGenerator(scenario, np.random.default_rng(0)).generate(baseline)

        check = check_extreme_durations(generated.y, baseline)

        assert check.n_low == 0
        assert check.p_low == 1.0

    def test_single_time_point_skipped(self):
        """Test that T=1 is never flagged."""
        baseline = BaselineHazard.from_cdf(np.ones(1))
        check = check_extreme_durations(np.ones(10, dtype=int), baseline)

        assert not check.flagged
