"""
Unit tests for update_recall.

Tests:
- Closed-form posteriors at the half-life
- Precondition checks
- Rebalancing of skewed posteriors
- Numerical-instability errors and their diagnostics
"""

import math

import pytest

from src.recall import (
    ContractViolation,
    EbisuModel,
    InvalidMean,
    InvalidSecondMoment,
    InvalidVariance,
    NumericalInstability,
    model_to_percentile_decay,
    predict_recall,
    update_recall,
)
from src.recall import updater
from src.recall.special import log_beta
from src.recall.updater import _rebalance, _update_recall


class TestUpdateAtHalfLife:
    """At the half-life a Beta(2, 2) prior updates like a coin."""

    def test_success(self, balanced_model):
        success = update_recall(balanced_model, 1, 1, 2.0)

        assert success.alpha == pytest.approx(3.0, rel=1e-10)
        assert success.beta == pytest.approx(2.0, rel=1e-10)
        assert success.time == 2.0

    def test_failure(self, balanced_model):
        failure = update_recall(balanced_model, 0, 1, 2.0)

        assert failure.alpha == pytest.approx(2.0, rel=1e-10)
        assert failure.beta == pytest.approx(3.0, rel=1e-10)
        assert failure.time == 2.0

    def test_binomial_quiz(self, balanced_model):
        """One of two correct at the half-life gives Beta(3, 3)."""
        posterior = update_recall(balanced_model, 1, 2, 2.0)

        assert posterior.alpha == pytest.approx(3.0, rel=1e-10)
        assert posterior.beta == pytest.approx(3.0, rel=1e-10)

    def test_prior_left_untouched(self, balanced_model):
        update_recall(balanced_model, 1, 1, 2.0)

        assert balanced_model == EbisuModel(time=2.0, alpha=2.0, beta=2.0)


class TestDirection:
    """Success strengthens a memory, failure weakens it."""

    @pytest.mark.parametrize("t_now", [2.0, 12.0, 24.0, 60.0])
    def test_success_raises_recall(self, daily_model, t_now):
        posterior = update_recall(daily_model, 1, 1, t_now)

        before = predict_recall(daily_model, daily_model.time, exact=True)
        after = predict_recall(posterior, daily_model.time, exact=True)
        assert after > before

    @pytest.mark.parametrize("t_now", [2.0, 12.0, 24.0, 60.0])
    def test_failure_lowers_recall(self, daily_model, t_now):
        posterior = update_recall(daily_model, 0, 1, t_now)

        before = predict_recall(daily_model, daily_model.time, exact=True)
        after = predict_recall(posterior, daily_model.time, exact=True)
        assert after < before

    def test_success_extends_half_life(self, daily_model):
        posterior = update_recall(daily_model, 1, 1, 24.0)
        assert model_to_percentile_decay(posterior) > model_to_percentile_decay(daily_model)

    @pytest.mark.parametrize("successes,total", [(0, 1), (1, 1), (0, 3), (2, 3), (3, 3)])
    def test_posterior_is_valid(self, daily_model, successes, total):
        posterior = update_recall(daily_model, successes, total, 18.0)

        assert posterior.time > 0
        assert posterior.alpha > 0
        assert posterior.beta > 0


class TestContract:
    """Tests for precondition checks."""

    @pytest.mark.parametrize("successes,total,t_now", [
        (2, 1, 1.0),
        (-1, 1, 1.0),
        (0, 0, 1.0),
        (1, 1, 0.0),
        (1, 1, -5.0),
        (1, 1, math.nan),
        (1.0, 1, 1.0),
        (0, 1.5, 1.0),
        (True, 1, 1.0),
        (0, True, 1.0),
    ])
    def test_rejected(self, balanced_model, successes, total, t_now):
        with pytest.raises(ContractViolation):
            update_recall(balanced_model, successes, total, t_now)

    def test_accepts_any_integral_count(self, balanced_model):
        """Integer types other than int (numpy scalars, for instance) are counts too."""
        np = pytest.importorskip("numpy")

        posterior = update_recall(balanced_model, np.int64(1), np.int64(1), 2.0)

        assert posterior == update_recall(balanced_model, 1, 1, 2.0)


class TestRebalance:
    """Tests for the two-pass rebalancing."""

    def test_balanced_proposal_is_kept(self, balanced_model):
        proposed = EbisuModel(time=2.0, alpha=3.0, beta=2.0)

        assert _rebalance(balanced_model, 1, 1, 2.0, proposed) is proposed

    @pytest.mark.parametrize("alpha,beta", [(10.0, 2.0), (2.0, 10.0)])
    def test_skewed_proposal_is_recomputed(self, daily_model, alpha, beta):
        """A skewed proposal is re-expressed at its rough half-life."""
        proposed = EbisuModel(time=24.0, alpha=alpha, beta=beta)
        rough = model_to_percentile_decay(proposed, percentile=0.5, coarse=True)

        result = _rebalance(daily_model, 1, 1, 30.0, proposed)

        assert result.time == rough
        assert result == _update_recall(daily_model, 1, 1, 30.0, rough)

    def test_skewed_update_moves_reference_time(self):
        """A very surprising success re-centers the posterior near its half-life."""
        prior = EbisuModel(time=1.0, alpha=3.0, beta=3.0)
        proposed = _update_recall(prior, 1, 1, 50.0, prior.time)
        assert proposed.alpha > 2 * proposed.beta

        posterior = update_recall(prior, 1, 1, 50.0)

        assert posterior.time != prior.time
        skew = max(posterior.alpha, posterior.beta) / min(posterior.alpha, posterior.beta)
        assert skew < proposed.alpha / proposed.beta

    def test_rebalanced_mean_is_exact_at_reference_time(self):
        """Moment matching preserves the exact posterior mean at the new reference time."""
        prior = EbisuModel(time=1.0, alpha=3.0, beta=3.0)
        posterior = update_recall(prior, 1, 1, 50.0)

        t_back = posterior.time
        expected = math.exp(
            log_beta(prior.alpha + 50.0 + t_back, prior.beta) - log_beta(prior.alpha + 50.0, prior.beta)
        )
        assert predict_recall(posterior, t_back, exact=True) == pytest.approx(expected, rel=1e-9)


class TestSurprisingQuizzes:
    """Quiz results far outside what the prior expects are rejected, not absorbed."""

    @pytest.fixture
    def long_lived_model(self):
        return EbisuModel(time=1e3, alpha=3.0)

    def test_many_failures_right_after_review(self, long_lived_model):
        """Ten failures moments after a review leave no usable variance."""
        with pytest.raises(InvalidVariance) as exc_info:
            update_recall(long_lived_model, 0, 10, 1e-4)

        diagnostics = exc_info.value.diagnostics
        assert diagnostics["t_now"] == 1e-4
        assert diagnostics["total"] == 10
        assert diagnostics["successes"] == 0

    def test_few_failures_right_after_review(self, long_lived_model):
        """Three failures moments after a review push the mean out of (0, 1)."""
        with pytest.raises(InvalidMean) as exc_info:
            update_recall(long_lived_model, 0, 3, 1e-4)

        assert not 0 < exc_info.value.diagnostics["mean"] < 1
        assert exc_info.value.diagnostics["t_now"] == 1e-4

    @pytest.mark.parametrize("total,t_now", [(3, 1e-4), (3, 0.01), (5, 1e-6), (5, 0.01), (10, 1e-4)])
    def test_surprise_is_numerical_instability(self, long_lived_model, total, t_now):
        with pytest.raises(NumericalInstability):
            update_recall(long_lived_model, 0, total, t_now)


class TestNumericalInstability:
    """Error types, messages and diagnostics of rejected updates."""

    def test_diagnostics_carry_inputs(self):
        with pytest.raises(NumericalInstability) as exc_info:
            update_recall(EbisuModel(time=1e3, alpha=3.0), 0, 10, 1e-4)

        diagnostics = exc_info.value.diagnostics
        assert set(diagnostics) == {
            "alpha", "beta", "time", "successes", "total", "t_now", "mean", "m2", "sig2",
        }
        assert diagnostics["alpha"] == 3.0
        assert diagnostics["time"] == 1e3
        assert "t_now=0.0001" in str(exc_info.value)

    def test_instability_is_arithmetic_error(self):
        with pytest.raises(ArithmeticError):
            update_recall(EbisuModel(time=1e3, alpha=3.0), 0, 3, 1e-4)

    def test_invalid_second_moment(self, monkeypatch, balanced_model):
        """A valid mean with a vanishing second moment is its own error."""
        values = iter([0.0, math.log(0.5), -math.inf])
        monkeypatch.setattr(updater, "log_sum_exp", lambda v, w: next(values))

        with pytest.raises(InvalidSecondMoment) as exc_info:
            update_recall(balanced_model, 1, 1, 2.0)

        assert exc_info.value.value == 0.0
        assert exc_info.value.diagnostics["mean"] == pytest.approx(0.5)
