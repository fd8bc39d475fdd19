"""
Error taxonomy for the recall model.

- ContractViolation: a caller broke a precondition (fail fast)
- NumericalInstability: posterior moments came out non-positive
- BracketingFailure: the percentile root could not be bracketed
- ConvergenceFailure: golden-section search hit its iteration cap
"""

from __future__ import annotations

from typing import Any


class EbisuError(Exception):
    """Base class for every error raised by the recall model."""


class ContractViolation(EbisuError, ValueError):
    """Raised when an input violates a documented precondition."""


class NumericalInstability(EbisuError, ArithmeticError):
    """
    Raised when the Bayesian update produces an unusable posterior.

    This usually means the quiz result was extremely surprising for the
    prior's time scale (e.g. total failure right after a review). Callers
    should retry with an adjusted elapsed time rather than treat it as fatal.
    """

    quantity = "moment"

    def __init__(self, value: float, diagnostics: dict[str, Any]):
        self.value = value
        self.diagnostics = diagnostics
        details = ", ".join(f"{k}={v}" for k, v in diagnostics.items())
        super().__init__(f"Invalid {self.quantity} {value} found: {details}")


class InvalidMean(NumericalInstability):
    quantity = "mean"


class InvalidSecondMoment(NumericalInstability):
    quantity = "second moment"


class InvalidVariance(NumericalInstability):
    quantity = "variance"


class BracketingFailure(EbisuError, ArithmeticError):
    """Raised when no sign change of the percentile objective can be found."""

    def __init__(self, message: str, context: dict[str, float] | None = None):
        self.context = context or {}
        super().__init__(message)


class ConvergenceFailure(EbisuError, ArithmeticError):
    """Raised when the golden-section search fails to converge."""

    def __init__(self, message: str, status: Any = None):
        self.status = status
        super().__init__(message)
