"""
Elapsed time at which expected recall crosses a given percentile.

The search runs in log-time relative to ``model.time``: first a fixed-width
bracket is shifted until it straddles the root, then golden-section search
refines it (unless a coarse estimate was requested).
"""

from __future__ import annotations

import math

from loguru import logger

from src.recall.errors import BracketingFailure, ConvergenceFailure
from src.recall.golden import minimize
from src.recall.model import EbisuModel
from src.recall.options import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_PERCENTILE,
    DEFAULT_TOLERANCE,
    PercentileOptions,
    resolve,
)
from src.recall.special import log_beta

COARSE_BRACKET_WIDTH = 1.0
FINE_BRACKET_WIDTH = 6.0
MAX_BRACKET_STEPS = 100


def _bracket(f, width: float) -> tuple[float, float]:
    """
    Shift a bracket of fixed width until f(blow) > 0 > f(bhigh).

    Raises:
        BracketingFailure: If no sign change turns up within MAX_BRACKET_STEPS
            shifts in either direction
    """
    blow = -width / 2.0
    bhigh = width / 2.0
    try:
        flow = f(blow)
        fhigh = f(bhigh)

        steps = 0
        while flow > 0 and fhigh > 0 and steps < MAX_BRACKET_STEPS:
            blow, flow = bhigh, fhigh
            bhigh += width
            fhigh = f(bhigh)
            steps += 1

        steps = 0
        while flow < 0 and fhigh < 0 and steps < MAX_BRACKET_STEPS:
            bhigh, fhigh = blow, flow
            blow -= width
            flow = f(blow)
            steps += 1
    except OverflowError as e:
        raise BracketingFailure(
            f"Overflow while bracketing near [{blow}, {bhigh}]",
            {"blow": blow, "bhigh": bhigh},
        ) from e

    if not (flow > 0 and fhigh < 0):
        logger.warning(f"Failed to bracket percentile root: flow={flow}, fhigh={fhigh}")
        raise BracketingFailure(
            f"Failed to bracket: flow={flow}, fhigh={fhigh}",
            {"blow": blow, "bhigh": bhigh, "flow": flow, "fhigh": fhigh},
        )

    logger.debug(f"Bracketed percentile root in [{blow}, {bhigh}]")
    return blow, bhigh


def model_to_percentile_decay(
    model: EbisuModel,
    percentile: float = DEFAULT_PERCENTILE,
    coarse: bool = False,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> float:
    """
    Time at which ``predict_recall(model, t, exact=True)`` equals ``percentile``.

    With the default percentile of 0.5 this is the model's half-life.

    Args:
        model: Recall model
        percentile: Target recall probability in [0, 1]
        coarse: Return a fast, order-of-magnitude estimate
        tolerance: Search accuracy in log-time; ignored when coarse
        max_iterations: Golden-section iteration cap

    Returns:
        Elapsed time, in the same units as ``model.time``

    Raises:
        ContractViolation: For a percentile outside [0, 1] or a non-positive tolerance
        BracketingFailure: If the root cannot be bracketed
        ConvergenceFailure: If the search does not converge (e.g. absurd tolerance)
    """
    options: PercentileOptions = resolve(
        PercentileOptions,
        percentile=percentile,
        coarse=coarse,
        tolerance=tolerance,
        max_iterations=max_iterations,
    )
    return solve_percentile(model, options)


def solve_percentile(model: EbisuModel, options: PercentileOptions) -> float:
    """model_to_percentile_decay with already-resolved options."""
    alpha, beta = model.alpha, model.beta
    log_bab = log_beta(alpha, beta)
    log_percentile = math.log(options.percentile) if options.percentile > 0 else -math.inf

    def f(lndelta: float) -> float:
        return (log_beta(alpha + math.exp(lndelta), beta) - log_bab) - log_percentile

    width = COARSE_BRACKET_WIDTH if options.coarse else FINE_BRACKET_WIDTH
    blow, bhigh = _bracket(f, width)

    if options.coarse:
        return (math.exp(blow) + math.exp(bhigh)) / 2 * model.time

    status = minimize(lambda y: abs(f(y)), blow, bhigh, options.tolerance, options.max_iterations)
    if not status.converged:
        logger.warning(
            f"Percentile search did not converge after {status.iterations} iterations "
            f"(tolerance={options.tolerance})"
        )
        raise ConvergenceFailure(
            f"Golden-section search failed to converge: tolerance={options.tolerance}, "
            f"iterations={status.iterations}",
            status,
        )
    return math.exp(status.argmin) * model.time
