"""
Immutable recall model: a Beta(alpha, beta) belief about recall probability
evaluated `time` units after the last review.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.recall.errors import ContractViolation

DEFAULT_ALPHA = 4.0
EQUALITY_RELATIVE_TOLERANCE = 1e-6


def approx_equal(a: float, b: float) -> bool:
    """True if a and b agree to within a relative 1e-6 (or are both NaN)."""
    if a == b:
        return True
    if math.isnan(a) or math.isnan(b):
        return math.isnan(a) and math.isnan(b)
    return abs(a - b) < EQUALITY_RELATIVE_TOLERANCE * max(abs(a), abs(b))


@dataclass(frozen=True, eq=False)
class EbisuModel:
    """
    Beta distribution over recall probability at elapsed interval `time`.

    Units of `time` are up to the caller but must stay consistent across
    every operation on the same fact. Instances are never mutated: updates
    return new models and the old one remains valid.

    Equality is approximate (see ``approx_equal``) while ``hash`` uses the
    exact field values. Two models can therefore compare equal yet hash
    differently; this is a known, accepted inconsistency, so avoid relying
    on models as set members or dict keys when they come from arithmetic.
    """

    time: float
    alpha: float = DEFAULT_ALPHA
    beta: float | None = None

    def __post_init__(self):
        if self.beta is None:
            object.__setattr__(self, "beta", self.alpha)

        if not self.time > 0:
            raise ContractViolation(f"Model time must be positive, got {self.time}")
        if not self.alpha > 0:
            raise ContractViolation(f"Model alpha must be positive, got {self.alpha}")
        if not self.beta > 0:
            raise ContractViolation(f"Model beta must be positive, got {self.beta}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EbisuModel):
            return NotImplemented
        return (
            approx_equal(self.time, other.time)
            and approx_equal(self.alpha, other.alpha)
            and approx_equal(self.beta, other.beta)
        )

    def __hash__(self) -> int:
        # Exact bits: not consistent with the approximate __eq__
        return hash((self.time, self.alpha, self.beta))

    def __repr__(self) -> str:
        return f"EbisuModel(time={self.time}, alpha={self.alpha}, beta={self.beta})"

    def as_tuple(self) -> tuple[float, float, float]:
        """(alpha, beta, time), the ordering other Ebisu ports store."""
        return (self.alpha, self.beta, self.time)


def default_model(t: float, alpha: float = DEFAULT_ALPHA, beta: float | None = None) -> EbisuModel:
    """
    Model for a newly learned fact.

    Args:
        t: Guess at the fact's half-life
        alpha: Beta-distribution alpha
        beta: Beta-distribution beta, defaults to alpha (so t is a true half-life)
    """
    return EbisuModel(time=t, alpha=alpha, beta=beta)


def models_equal(a: EbisuModel, b: EbisuModel) -> bool:
    """Approximate field-by-field equality of two models."""
    return a == b
