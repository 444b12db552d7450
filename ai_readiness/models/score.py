"""
Canonical score models.

``ScoreSet`` is the single shape every downstream consumer sees, whatever
historical format the raw result arrived in:

    overall     0-100, weighted mean of the dimensions actually present
    dimensions  dimension id → 0-100; an absent key means "not measured"
    activities  activity id  → 0-100 (optional)

Values are validated to be finite and inside ``[0, 100]``, so NaN can never
reach a consumer.  Producers (calculator, normalizer) clamp before building.

``ScoreInsights`` carries the derived labels shown next to the scores.
"""

from __future__ import annotations

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ai_readiness.taxonomy.bands import ActivityReadiness, ReadinessCategory


def _check_score(name: str, v: float) -> float:
    if not math.isfinite(v):
        raise ValueError(f"{name} must be finite, got {v}.")
    if not 0.0 <= v <= 100.0:
        raise ValueError(f"{name} must be in [0, 100], got {v}.")
    return v


class ScoreSet(BaseModel):
    """Canonical normalized scores for one assessment."""

    model_config = ConfigDict(frozen=True)

    overall: float
    dimensions: dict[str, float] = {}
    activities: dict[str, float] = {}

    @field_validator("overall")
    @classmethod
    def validate_overall(cls, v: float) -> float:
        return _check_score("overall", v)

    @field_validator("dimensions", "activities")
    @classmethod
    def validate_map(cls, v: dict[str, float], info) -> dict[str, float]:
        for key, score in v.items():
            _check_score(f"{info.field_name}['{key}']", score)
        return v

    def get(self, dimension: str) -> Optional[float]:
        """Dimension score, or ``None`` when the dimension was not measured."""
        return self.dimensions.get(dimension)

    def is_measured(self, dimension: str) -> bool:
        return dimension in self.dimensions


class IndustryComparison(BaseModel):
    """Where the overall score sits against an industry benchmark."""

    model_config = ConfigDict(frozen=True)

    industry: Optional[str] = None
    industry_average: float
    top_quartile: float
    percentile: int


class ScoreInsights(BaseModel):
    """Labels and comparisons derived from a ``ScoreSet``.

    Attributes:
        readiness_category:    Overall maturity label.
        summary:               One-sentence narrative for the overall score.
        industry_comparison:   Benchmark comparison for the context industry.
        activity_readiness:    Activity id → readiness label.
        unmeasured_dimensions: Configured dimensions absent from the scores.
    """

    model_config = ConfigDict(frozen=True)

    readiness_category: ReadinessCategory
    summary: str
    industry_comparison: IndustryComparison
    activity_readiness: dict[str, ActivityReadiness] = {}
    unmeasured_dimensions: list[str] = []
