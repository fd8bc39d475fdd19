"""
Golden-section minimization of a scalar function on a bounded interval.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

PHI_RATIO = 2 / (1 + math.sqrt(5))


@dataclass(frozen=True)
class MinimizationStatus:
    """Outcome of a golden-section search."""

    iterations: int
    argmin: float
    minimum: float
    converged: bool


def minimize(
    f: Callable[[float], float],
    x_lower: float,
    x_upper: float,
    tol: float,
    max_iterations: int,
) -> MinimizationStatus:
    """
    Minimize ``f`` over ``[x_lower, x_upper]`` by golden-section search.

    The bracket shrinks by the inverse golden ratio each iteration until its
    width is at most ``tol`` or ``max_iterations`` is reached. The original
    bounds are also evaluated: plain golden-section narrowing approaches a
    minimum sitting on a bound without ever reaching it, so a bound wins
    when it beats the final bracket.

    Args:
        f: Scalar function to minimize
        x_lower: Lower bound of the search interval
        x_upper: Upper bound of the search interval
        tol: Bracket width at which the search stops
        max_iterations: Iteration cap

    Returns:
        MinimizationStatus; ``converged`` is False if either probe value is
        NaN or the cap was hit before the bracket shrank below ``tol``

    ``minimum`` is f at the returned ``argmin``: the bound's own value when a
    bound wins, otherwise the mean of the two final probe values.
    """
    x1 = x_upper - PHI_RATIO * (x_upper - x_lower)
    x2 = x_lower + PHI_RATIO * (x_upper - x_lower)
    f1 = f(x1)
    f2 = f(x2)

    x_lower0, x_upper0 = x_lower, x_upper
    f_lower0 = f(x_lower)
    f_upper0 = f(x_upper)

    iteration = 1
    while iteration < max_iterations and abs(x_upper - x_lower) > tol:
        if f2 > f1:
            x_upper = x2
            x2, f2 = x1, f1
            x1 = x_upper - PHI_RATIO * (x_upper - x_lower)
            f1 = f(x1)
        else:
            x_lower = x1
            x1, f1 = x2, f2
            x2 = x_lower + PHI_RATIO * (x_upper - x_lower)
            f2 = f(x2)
        iteration += 1

    x_final = 0.5 * (x_upper + x_lower)
    f_final = 0.5 * (f1 + f2)
    converged = not math.isnan(f1) and not math.isnan(f2) and iteration < max_iterations

    if f_lower0 < f_final:
        argmin, minimum = x_lower0, f_lower0
    elif f_upper0 < f_final:
        argmin, minimum = x_upper0, f_upper0
    else:
        argmin, minimum = x_final, f_final

    logger.debug(
        f"Golden-section search: {iteration} iterations, argmin={argmin}, converged={converged}"
    )
    return MinimizationStatus(
        iterations=iteration, argmin=argmin, minimum=minimum, converged=converged
    )
