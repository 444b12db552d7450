"""
Valuation / impact projection output models.

Both models are frozen: a projection is derived fresh from a ``ScoreSet``
on every call and never updated in place.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class DriverScores(BaseModel):
    """Valuation driver sub-scores, each clamped to ``[0, 100]``."""

    model_config = ConfigDict(frozen=True)

    financial: float
    operational: float
    technology: float
    strategic: float

    @field_validator("financial", "operational", "technology", "strategic")
    @classmethod
    def validate_range(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"Driver score must be in [0, 100], got {v}.")
        return v


class ValuationProjection(BaseModel):
    """Approximate financial impact derived from assessment scores.

    Attributes:
        base_multiple:         EBITDA multiple for the overall-score band.
        risk_profile:          Label for the same band, e.g. ``"Low Risk"``.
        driver_scores:         Financial / operational / technology / strategic.
        potential_improvement: Achievable multiple uplift, in ``[0, max]``.
        target_multiple:       ``base_multiple + potential_improvement``.
        ebit_impact_percent:   Expected EBIT improvement from AI adoption.
    """

    model_config = ConfigDict(frozen=True)

    base_multiple: float
    risk_profile: str
    driver_scores: DriverScores
    potential_improvement: float
    target_multiple: float
    ebit_impact_percent: float
