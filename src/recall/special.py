"""
Special functions evaluated in the log domain.

log_gamma uses a fixed Spouge-style rational approximation (g = 607/128,
15 coefficients) rather than math.lgamma, so results agree with other Ebisu
ports.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

# Spouge / Lanczos coefficients for g = 607/128
G_LN = 607.0 / 128.0
P_LN = (
    0.99999999999999709182,
    57.156235665862923517,
    -59.597960355475491248,
    14.136097974741747174,
    -0.49191381609762019978,
    0.33994649984811888699e-4,
    0.46523628927048575665e-4,
    -0.98374475304879564677e-4,
    0.15808870322491248884e-3,
    -0.21026444172410488319e-3,
    0.21743961811521264320e-3,
    -0.16431810653676389022e-3,
    0.84418223983852743293e-4,
    -0.26190838401581408670e-4,
    0.36899182659531622704e-5,
)

_LOG_2PI = math.log(2 * math.pi)


def log_gamma(z: float) -> float:
    """
    Spouge approximation of ln(Gamma(z)).

    Returns NaN for negative z and +inf at the pole z == 0.
    """
    # NaN instead of raising: every caller passes positive model parameters
    if z < 0:
        return math.nan
    if z == 0:
        return math.inf

    x = P_LN[0]
    for i in range(len(P_LN) - 1, 0, -1):
        x += P_LN[i] / (z + i)
    t = z + G_LN + 0.5
    return 0.5 * _LOG_2PI + (z + 0.5) * math.log(t) - t + math.log(x) - math.log(z)


def log_beta(a: float, b: float) -> float:
    """ln(Beta(a, b))."""
    return log_gamma(a) + log_gamma(b) - log_gamma(a + b)


def log_beta_ratio(a1: float, a: float, b: float) -> float:
    """
    ln(Beta(a1, b) / Beta(a, b)) without materializing either Beta value.
    """
    return log_gamma(a1) - log_gamma(a1 + b) + log_gamma(a + b) - log_gamma(a)


def log_binom(n: int, k: int) -> float:
    """ln(n choose k), entirely in the log domain."""
    return -log_beta(1.0 + n - k, 1.0 + k) - math.log(n + 1.0)


def log_sum_exp(values: Sequence[float], weights: Sequence[float] = ()) -> float:
    """
    Stably evaluate ln(|sum(weights[i] * exp(values[i]))|).

    Missing weights (when ``weights`` is shorter than ``values``) count as 1.
    The sign of the sum is discarded; callers only need its magnitude.

    Args:
        values: Exponents, already in the log domain
        weights: Signed multipliers for each term

    Returns:
        Log of the absolute weighted sum, or -inf for empty input
    """
    if not values:
        return -math.inf

    vmax = max(values)
    total = 0.0
    for i, value in enumerate(values):
        weight = weights[i] if i < len(weights) else 1.0
        total += math.exp(value - vmax) * weight

    if total == 0.0:
        return -math.inf
    return math.log(abs(total)) + vmax
