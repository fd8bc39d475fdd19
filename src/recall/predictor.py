"""
Expected recall probability at an arbitrary elapsed time.
"""

from __future__ import annotations

import math

from src.recall.errors import ContractViolation
from src.recall.model import EbisuModel
from src.recall.options import PredictOptions, resolve
from src.recall.special import log_beta_ratio


def predict_recall(model: EbisuModel, t_now: float, exact: bool = False) -> float:
    """
    Expected recall probability `t_now` after the last review.

    With ``exact=False`` the log of the probability is returned, skipping
    the final exponentiation. Both forms order elapsed times identically:
    if exact(t1) < exact(t2) then log(t1) < log(t2), so the cheaper form is
    enough for ranking facts by how forgotten they are.

    Args:
        model: Prior on recall probability
        t_now: Time elapsed since the last review, >= 0
        exact: Return a probability in [0, 1] instead of its log

    Returns:
        Recall probability, or its natural log
    """
    options = resolve(PredictOptions, exact=exact)
    if not t_now >= 0:
        raise ContractViolation(f"Elapsed time must be non-negative, got {t_now}")

    if t_now == 0:
        return 1.0 if options.exact else 0.0

    dt = t_now / model.time
    ret = log_beta_ratio(model.alpha + dt, model.alpha, model.beta)
    return math.exp(ret) if options.exact else ret
