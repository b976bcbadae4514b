"""Unit tests for marginal effects."""

import numpy as np
import pytest

from coxsim.analysis.marginal_effect import compute_marginal_effect, expected_durations
from coxsim.data.generator import DurationGenerator
from coxsim.data.scenarios import SimulationScenario


class TestExpectedDurations:
    """Tests for expected duration on the grid."""

    def test_certain_survival_to_end(self):
        """Test that survival 1 until T gives an expected duration of T."""
        survivor = np.array([[1.0, 1.0, 1.0, 0.0]])
        np.testing.assert_allclose(expected_durations(survivor), [4.0])

    def test_immediate_failure(self):
        """Test that failure at t=1 gives an expected duration of 1."""
        np.testing.assert_allclose(expected_durations(np.zeros((2, 5))), [1.0, 1.0])

    def test_matches_pdf_weighted_mean(self, baseline):
        """Test E[Y] equals the PDF-weighted mean of time."""
        expected = (baseline.time * baseline.failure_pdf).sum()
        assert expected_durations(baseline.survivor)[0] == pytest.approx(expected)


class TestMarginalEffect:
    """Tests for the marginal effect calculator."""

    def _generate(self, baseline, **kwargs):
        scenario = SimulationScenario(name="me", n_samples=300, max_time=50, **kwargs)
        return DurationGenerator(scenario, np.random.default_rng(3)).generate(baseline)

    def test_positive_coefficient_shortens_duration(self, baseline):
        """Test the sign convention: high minus low."""
        generated = self._generate(baseline, beta=[0.8, 0.0, 0.0])

        effect = compute_marginal_effect(baseline, generated, covariate=0, low=0, high=1)
        assert effect.effect < 0

        effect = compute_marginal_effect(baseline, generated, covariate=0, low=1, high=0)
        assert effect.effect > 0

    def test_zero_coefficient_has_no_effect(self, baseline):
        """Test that a covariate without effect yields zero."""
        generated = self._generate(baseline, beta=[0.8, 0.0, -0.3])

        effect = compute_marginal_effect(baseline, generated, covariate=1)
        assert effect.effect == pytest.approx(0.0, abs=1e-12)

    def test_counterfactual_data(self, baseline):
        """Test that the chosen column is fixed and durations are attached."""
        generated = self._generate(baseline, beta=[0.3, 0.2, 0.1])

        effect = compute_marginal_effect(baseline, generated, covariate="X2", low=-1, high=2)

        assert np.all(effect.data_low["X2"] == -1)
        assert np.all(effect.data_high["X2"] == 2)
        np.testing.assert_array_equal(effect.data_low["X1"], generated.X[:, 0])
        assert list(effect.data_low.columns) == ["X1", "X2", "X3", "y"]
        diff = effect.data_high["y"] - effect.data_low["y"]
        assert effect.effect == pytest.approx(np.median(diff))

    def test_custom_reducer(self, baseline):
        """Test that any summary function can be used."""
        generated = self._generate(baseline, beta=[0.5, 0.0, 0.0])

        mean_effect = compute_marginal_effect(baseline, generated, compare=np.mean)
        diff = mean_effect.data_high["y"] - mean_effect.data_low["y"]
        assert mean_effect.effect == pytest.approx(diff.mean())

    def test_does_not_modify_covariates(self, baseline):
        """Test that the original covariates are left untouched."""
        generated = self._generate(baseline)
        original = generated.X.copy()

        compute_marginal_effect(baseline, generated, covariate=0, low=5, high=6)
        np.testing.assert_array_equal(generated.X, original)

    def test_interactions_enter_counterfactuals(self, baseline):
        """Test that an interaction makes the effect depend on other covariates."""
        inter_mat = np.zeros((3, 3))
        inter_mat[0, 1] = inter_mat[1, 0] = 1.0
        generated = self._generate(
            baseline, beta=[0.0, 0.0, 0.0], interactions=True, inter_mat=inter_mat
        )

        effect = compute_marginal_effect(baseline, generated, covariate=0, compare=np.std)
        assert effect.effect > 0

    def test_time_varying_modes(self, baseline):
        """Test that tvbeta and tvc data produce finite effects."""
        for sim_type in ("tvbeta", "tvc"):
            generated = self._generate(baseline, sim_type=sim_type, beta=[0.5, 0.0, 0.0])
            effect = compute_marginal_effect(baseline, generated)

            assert np.isfinite(effect.effect)

    def test_tvc_counterfactual_rows(self, baseline):
        """Test tvc counterfactual frames keep one row per observation per time point."""
        generated = self._generate(baseline, sim_type="tvc", beta=[0.5, 0.0, 0.0])
        effect = compute_marginal_effect(baseline, generated)

        assert len(effect.data_low) == 300 * 50
        assert effect.data_low["id"].nunique() == 300

    def test_unknown_covariate(self, baseline):
        """Test that an invalid covariate raises error."""
        generated = self._generate(baseline)

        with pytest.raises(ValueError, match="Unknown covariate"):
            compute_marginal_effect(baseline, generated, covariate="age")
        with pytest.raises(ValueError, match="out of range"):
            compute_marginal_effect(baseline, generated, covariate=7)
