"""
Shift a model's half-life by a constant factor.
"""

from __future__ import annotations

import math

from loguru import logger

from src.recall.errors import ContractViolation, InvalidVariance
from src.recall.model import EbisuModel
from src.recall.percentile import model_to_percentile_decay
from src.recall.special import log_beta


def rescale_halflife(model: EbisuModel, scale: float = 1.0) -> EbisuModel:
    """
    Return a model whose half-life is ``scale`` times the old one.

    Use a large scale for a fact you really know (``scale=5`` pushes reviews
    out five-fold) or a small one for a fact that has become confusable
    with a newer one. The result always has alpha == beta: the old model is
    first moved to its own half-life, where recall is 0.5 by definition.

    Raises:
        ContractViolation: If scale is not positive
        InvalidVariance: If the second moment at the half-life is unusable
    """
    if not scale > 0:
        raise ContractViolation(f"scale must be positive, got {scale}")

    old_halflife = model_to_percentile_decay(model)
    dt = old_halflife / model.time

    log_m2 = log_beta(model.alpha + 2 * dt, model.beta) - log_beta(model.alpha, model.beta)
    m2 = math.exp(log_m2)
    # Beta(a, a) has mean 1/2 and second moment (a + 1) / (4a + 2)
    new_alpha_beta = 1 / (8 * m2 - 2) - 0.5
    if not new_alpha_beta > 0:
        diagnostics = {
            "alpha": model.alpha,
            "beta": model.beta,
            "time": model.time,
            "halflife": old_halflife,
            "m2": m2,
        }
        logger.warning(f"Cannot rescale model, second moment out of range: {diagnostics}")
        raise InvalidVariance(m2 - 0.25, diagnostics)

    return EbisuModel(time=old_halflife * scale, alpha=new_alpha_beta, beta=new_alpha_beta)
