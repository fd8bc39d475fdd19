"""
Bayesian update of a recall model after a quiz.

The posterior's first two moments are computed in the log domain as a
finite alternating sum of Beta functions, then moment-matched back to a
Beta distribution. When the result is badly skewed it is recomputed at a
reference time near its own half-life, where alpha and beta stay close.
"""

from __future__ import annotations

import math
import numbers

from loguru import logger

from src.recall.errors import (
    ContractViolation,
    InvalidMean,
    InvalidSecondMoment,
    InvalidVariance,
)
from src.recall.model import EbisuModel
from src.recall.percentile import model_to_percentile_decay
from src.recall.special import log_beta, log_binom, log_sum_exp

REBALANCE_RATIO = 2.0


def update_recall(model: EbisuModel, successes: int, total: int, t_now: float) -> EbisuModel:
    """
    Update a prior on recall probability with a quiz result.

    ``total`` is the number of times the fact was quizzed in this review
    session and ``successes`` how many of those were correct, so a single
    flashcard review is ``total=1`` with ``successes`` 1 or 0.

    Stable for small ``total`` (under 5 or so); larger values may raise
    NumericalInstability.

    Args:
        model: Prior
        successes: Correct answers, 0 <= successes <= total
        total: Quiz attempts, >= 1
        t_now: Time elapsed since the last review, > 0

    Returns:
        New posterior model; ``model`` is left untouched

    Raises:
        ContractViolation: If the preconditions above do not hold
        NumericalInstability: If the result is too surprising for the prior.
            Retry with a more reasonable ``t_now``.
    """
    if not _is_count(successes) or not _is_count(total):
        raise ContractViolation(f"successes and total must be integers, got {successes!r}, {total!r}")
    if total < 1:
        raise ContractViolation(f"total must be at least 1, got {total}")
    if not 0 <= successes <= total:
        raise ContractViolation(f"successes must be in [0, {total}], got {successes}")
    if not t_now > 0:
        raise ContractViolation(f"Elapsed time must be positive, got {t_now}")
    successes, total = int(successes), int(total)

    proposed = _update_recall(model, successes, total, t_now, model.time)
    return _rebalance(model, successes, total, t_now, proposed)


def _is_count(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _update_recall(
    model: EbisuModel, successes: int, total: int, t_now: float, t_back: float
) -> EbisuModel:
    """Posterior re-expressed at elapsed time ``t_back``, without rebalancing."""
    alpha, beta = model.alpha, model.beta
    dt = t_now / model.time
    et = t_back / t_now
    failures = total - successes

    binomlns = [log_binom(failures, i) for i in range(failures + 1)]
    signs = [(-1.0) ** i for i in range(failures + 1)]
    log_denominator, log_mean_num, log_m2_num = (
        log_sum_exp(
            [
                binomlns[i] + log_beta(beta, alpha + dt * (successes + i) + m * dt * et)
                for i in range(failures + 1)
            ],
            signs,
        )
        for m in (0, 1, 2)
    )

    try:
        mean = math.exp(log_mean_num - log_denominator)
        m2 = math.exp(log_m2_num - log_denominator)
        mean_sq = math.exp(2 * (log_mean_num - log_denominator))
    except OverflowError:
        # Moments of a probability never exceed 1; reported as an invalid mean below
        mean = m2 = mean_sq = math.inf
    sig2 = m2 - mean_sq

    diagnostics = {
        "alpha": alpha,
        "beta": beta,
        "time": model.time,
        "successes": successes,
        "total": total,
        "t_now": t_now,
        "mean": mean,
        "m2": m2,
        "sig2": sig2,
    }
    if not 0 < mean < 1:
        logger.warning(f"Posterior mean is outside (0, 1): {diagnostics}")
        raise InvalidMean(mean, diagnostics)
    if not m2 > 0:
        logger.warning(f"Posterior second moment is not positive: {diagnostics}")
        raise InvalidSecondMoment(m2, diagnostics)
    if not sig2 > 0:
        logger.warning(f"Posterior variance is not positive: {diagnostics}")
        raise InvalidVariance(sig2, diagnostics)

    # Beta parameters from mean and variance (method of moments)
    tmp = mean * (1.0 - mean) / sig2 - 1.0
    if not tmp > 0:
        logger.warning(f"Posterior variance too large for a Beta distribution: {diagnostics}")
        raise InvalidVariance(sig2, diagnostics)
    new_alpha = mean * tmp
    new_beta = (1.0 - mean) * tmp
    return EbisuModel(time=t_back, alpha=new_alpha, beta=new_beta)


def _rebalance(
    model: EbisuModel, successes: int, total: int, t_now: float, proposed: EbisuModel
) -> EbisuModel:
    """Recompute a skewed posterior at a reference time near its half-life."""
    if proposed.alpha > REBALANCE_RATIO * proposed.beta or proposed.beta > REBALANCE_RATIO * proposed.alpha:
        rough_halflife = model_to_percentile_decay(proposed, percentile=0.5, coarse=True)
        logger.debug(
            f"Rebalancing {proposed!r}: re-expressing at rough half-life {rough_halflife}"
        )
        return _update_recall(model, successes, total, t_now, rough_halflife)
    return proposed
