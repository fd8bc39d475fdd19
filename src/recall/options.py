"""
Named-parameter structures for the recall queries.

Defaults are resolved here, before dispatch, and pydantic validation errors
are surfaced as ContractViolation so callers see a single error taxonomy.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.recall.errors import ContractViolation

DEFAULT_PERCENTILE = 0.5
DEFAULT_TOLERANCE = 1e-4
DEFAULT_MAX_ITERATIONS = 10000


class PredictOptions(BaseModel):
    """Options for predict_recall."""

    model_config = ConfigDict(frozen=True)

    exact: bool = Field(
        default=False,
        description="Return a probability instead of its logarithm",
    )


class PercentileOptions(BaseModel):
    """Options for model_to_percentile_decay."""

    model_config = ConfigDict(frozen=True)

    percentile: float = Field(
        default=DEFAULT_PERCENTILE,
        ge=0.0,
        le=1.0,
        description="Recall probability whose elapsed time is sought",
    )
    coarse: bool = Field(
        default=False,
        description="Return an order-of-magnitude estimate without refinement",
    )
    tolerance: float = Field(
        default=DEFAULT_TOLERANCE,
        gt=0.0,
        description="Bracket width at which the golden-section search stops",
    )
    max_iterations: int = Field(
        default=DEFAULT_MAX_ITERATIONS,
        ge=1,
        description="Iteration cap for the golden-section search",
    )

    @classmethod
    def from_settings(cls, settings: Any = None, **overrides: Any) -> "PercentileOptions":
        """Build options from application settings, with explicit overrides."""
        if settings is None:
            from config import get_settings

            settings = get_settings()
        values = {
            "percentile": settings.default_percentile,
            "tolerance": settings.percentile_tolerance,
            "max_iterations": settings.minimizer_max_iterations,
        }
        values.update(overrides)
        return resolve(cls, **values)


def resolve(options_cls: type[BaseModel], **values: Any) -> Any:
    """Instantiate an options model, mapping validation errors to ContractViolation."""
    try:
        return options_cls(**values)
    except ValidationError as e:
        raise ContractViolation(str(e)) from e
