"""Unit tests for censoring."""

import numpy as np
import pytest

from coxsim.data.censoring import (
    apply_censoring,
    censor_conditional,
    censor_uniform,
    censoring_rate,
)


class TestUniformCensoring:
    """Tests for covariate-independent censoring."""

    @pytest.mark.parametrize("censor", [0.1, 0.3, 0.6])
    def test_rate_converges(self, censor):
        """Test that the realized rate is close to the target for large N."""
        censored = censor_uniform(20000, censor, np.random.default_rng(42))

        assert abs(censored.mean() - censor) < 4 * np.sqrt(censor * (1 - censor) / 20000)

    def test_zero_and_full_censoring(self, rng):
        """Test the boundary proportions."""
        assert not censor_uniform(100, 0.0, rng).any()
        assert censor_uniform(100, 1.0, rng).all()


class TestConditionalCensoring:
    """Tests for covariate-dependent censoring."""

    def test_exact_count(self, rng):
        """Test that exactly round(censor * N) observations are censored."""
        X = rng.normal(size=(1000, 3))
        result = censor_conditional(X, 0.2, rng)

        assert result.censored.sum() == 200

    def test_censored_have_highest_scores(self, rng):
        """Test that censored observations have the largest secondary scores."""
        X = rng.normal(size=(500, 4))
        result = censor_conditional(X, 0.25, rng)

        assert result.score is not None
        assert result.score[result.censored].min() >= result.score[~result.censored].max()

    def test_independent_of_durations(self, rng):
        """Test that only covariates are used."""
        X = rng.normal(size=(50, 2))
        result = censor_conditional(X, 0.5, np.random.default_rng(1))
        again = censor_conditional(X, 0.5, np.random.default_rng(1))

        np.testing.assert_array_equal(result.censored, again.censored)

    def test_no_censoring(self, rng):
        """Test censor=0 censors nobody."""
        X = rng.normal(size=(50, 2))
        assert not censor_conditional(X, 0.0, rng).censored.any()


class TestApplyCensoring:
    """Tests for the censoring dispatcher."""

    def test_dispatch(self, rng):
        """Test that the conditional flag selects the policy."""
        X = rng.normal(size=(100, 3))

        assert apply_censoring(X, 0.1, censor_cond=False, rng=rng).score is None
        assert apply_censoring(X, 0.1, censor_cond=True, rng=rng).score is not None

    def test_invalid_proportion(self, rng):
        """Test that a proportion outside [0, 1] raises error."""
        with pytest.raises(ValueError, match="censor"):
            apply_censoring(np.ones((5, 1)), 1.5, rng=rng)

    def test_censoring_rate(self):
        """Test the realized censoring proportion."""
        assert censoring_rate(np.array([True, False, True, True])) == pytest.approx(0.25)
        assert censoring_rate(np.array([], dtype=bool)) == 0.0
