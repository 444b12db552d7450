"""
Score bands and recommendation vocabulary.

Every label that selects differently-worded content lives here:
  - ``ScoreBand``        : low / medium / high bucket for a 0-100 score.
  - ``PriorityHint``     : template priority (drives ranking weight).
  - ``PoolSource``       : which recommendation pool a candidate came from.
  - ``ReadinessCategory``: overall maturity label.
  - ``ActivityReadiness``: per-activity maturity label.

Band boundaries are inclusive on the lower bound: with the default
thresholds a score of exactly 40 is ``medium`` and exactly 70 is ``high``.

This module has NO imports from any other ``ai_readiness`` package.
"""

from enum import StrEnum

DEFAULT_BAND_LOW_MAX = 40.0
DEFAULT_BAND_HIGH_MIN = 70.0


class ScoreBand(StrEnum):
    """Score range used to key core and industry recommendation pools."""

    LOW = "low"
    """Below the low threshold (default < 40)."""

    MEDIUM = "medium"
    """Between the thresholds (default 40 <= score < 70)."""

    HIGH = "high"
    """At or above the high threshold (default >= 70)."""


class PriorityHint(StrEnum):
    """Priority carried by a recommendation template."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PoolSource(StrEnum):
    """Recommendation pool a candidate was drawn from.

    Declaration order is the default tie-break precedence.
    """

    CORE = "core"
    ACTIVITY = "activity"
    INDUSTRY = "industry"
    AGENCY_TYPE = "agency_type"


class ReadinessCategory(StrEnum):
    """Overall AI readiness label derived from the overall score."""

    BEGINNING = "beginning"
    DEVELOPING = "developing"
    ADVANCING = "advancing"
    ADVANCED = "advanced"
    AI_LEADER = "ai_leader"


class ActivityReadiness(StrEnum):
    """Readiness label for one marketing activity / agency service."""

    MINIMAL = "minimal"
    BASIC = "basic"
    MODERATE = "moderate"
    PROFICIENT = "proficient"
    ADVANCED = "advanced"


# Aliases accepted when templates are loaded from legacy content.
PRIORITY_ALIASES: dict[str, PriorityHint] = {
    "critical": PriorityHint.HIGH,
    "high": PriorityHint.HIGH,
    "medium": PriorityHint.MEDIUM,
    "med": PriorityHint.MEDIUM,
    "low": PriorityHint.LOW,
}


def band_for(
    score: float,
    low_max: float = DEFAULT_BAND_LOW_MAX,
    high_min: float = DEFAULT_BAND_HIGH_MIN,
) -> ScoreBand:
    """Return the band for a 0-100 score.

    Args:
        score:    Score to classify.
        low_max:  Scores strictly below this are ``LOW``.
        high_min: Scores at or above this are ``HIGH``.

    Returns:
        The matching ``ScoreBand``.
    """
    if score < low_max:
        return ScoreBand.LOW
    if score < high_min:
        return ScoreBand.MEDIUM
    return ScoreBand.HIGH
