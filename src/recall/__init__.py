"""
Ebisu recall model.

Bayesian estimate of how likely a learner is to recall a fact at any elapsed
time since the last review:
- Prediction of recall probability (exact or log-domain)
- Posterior update after a quiz, with automatic rebalancing
- Half-life / percentile-decay queries
- Half-life rescaling
"""

from src.recall.errors import (
    BracketingFailure,
    ContractViolation,
    ConvergenceFailure,
    EbisuError,
    InvalidMean,
    InvalidSecondMoment,
    InvalidVariance,
    NumericalInstability,
)
from src.recall.model import EbisuModel, approx_equal, default_model, models_equal
from src.recall.options import PercentileOptions, PredictOptions
from src.recall.percentile import model_to_percentile_decay
from src.recall.predictor import predict_recall
from src.recall.rescale import rescale_halflife
from src.recall.updater import update_recall

__all__ = [
    "EbisuModel",
    "default_model",
    "approx_equal",
    "models_equal",
    "predict_recall",
    "update_recall",
    "model_to_percentile_decay",
    "rescale_halflife",
    "PredictOptions",
    "PercentileOptions",
    "EbisuError",
    "ContractViolation",
    "NumericalInstability",
    "InvalidMean",
    "InvalidSecondMoment",
    "InvalidVariance",
    "BracketingFailure",
    "ConvergenceFailure",
]
