"""
Recommendation content and output models.

``RecommendationTemplate`` is a piece of configured advice.  Templates live
in four independent pools (``RecommendationPools``):

  core         dimension id  → band → templates
  activity     activity id   → templates
  industry     industry id   → band (of the overall score) → templates
  agency_type  agency / department type id → templates

The selector turns matching templates into ``RecommendationCandidate``
objects; the prioritizer materialises them as ranked ``Recommendation``
objects grouped in ``PrioritizedRecommendations``.

Legacy content used ``dimension`` / ``activity`` single-value keys and
upper-case priorities such as ``"CRITICAL"``; both are accepted on input and
normalised to the canonical fields.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ai_readiness.taxonomy.bands import (
    PRIORITY_ALIASES,
    PoolSource,
    PriorityHint,
    ScoreBand,
)


def _slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


_BAND_ALIASES: dict[str, str] = {
    "lowScore": ScoreBand.LOW.value,
    "midScore": ScoreBand.MEDIUM.value,
    "highScore": ScoreBand.HIGH.value,
}

# Phase order used when legacy content groups a band's templates by phase.
_PHASES = ("immediate", "shortTerm", "strategic")


def _flatten_phases(templates: Any) -> Any:
    if not isinstance(templates, dict):
        return templates
    unknown = sorted(set(templates) - set(_PHASES))
    if unknown:
        raise ValueError(f"Unknown recommendation phase(s) {unknown}; expected {list(_PHASES)}.")
    flat: list[Any] = []
    for phase in _PHASES:
        flat.extend(templates.get(phase) or [])
    return flat


class RecommendationTemplate(BaseModel):
    """A configured recommendation.

    Attributes:
        id:              Stable identifier; duplicates across pools are
                         collapsed by the selector.  Derived from the title
                         when omitted.
        title:           Short headline.
        description:     Longer explanation.
        priority:        Priority hint (low / medium / high).
        dimensions:      Dimension tags (used for grouping and gap lookup).
        activities:      Activity / service tags (used for grouping).
        industry:        Optional industry tag.
        score_threshold: Activity-pool only: keep the template only when the
                         activity score is at or below this value.
        timeline:        Optional timeline tag, e.g. ``"2-4 weeks"``.
        impact:          Optional impact tag, e.g. ``"high"``.
        condition:       Predicate key → allowed values (see ``Context``).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    priority: PriorityHint = PriorityHint.MEDIUM
    dimensions: list[str] = []
    activities: list[str] = []
    industry: Optional[str] = None
    score_threshold: Optional[float] = None
    timeline: Optional[str] = None
    impact: Optional[str] = None
    condition: dict[str, list[Any]] = {}

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("id") and data.get("title"):
            data["id"] = _slugify(str(data["title"]))
        for single, plural in (("dimension", "dimensions"), ("activity", "activities")):
            value = data.pop(single, None)
            if value:
                tags = list(data.get(plural) or [])
                if value not in tags:
                    tags.insert(0, value)
                data[plural] = tags
        if "scoreThreshold" in data and "score_threshold" not in data:
            data["score_threshold"] = data.pop("scoreThreshold")
        return data

    @field_validator("priority", mode="before")
    @classmethod
    def normalize_priority(cls, v: Any) -> Any:
        if isinstance(v, str):
            key = v.strip().lower()
            if key not in PRIORITY_ALIASES:
                raise ValueError(
                    f"Unknown priority '{v}'. Must be one of {sorted(PRIORITY_ALIASES)}."
                )
            return PRIORITY_ALIASES[key]
        return v

    @field_validator("score_threshold")
    @classmethod
    def validate_threshold(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0.0 <= v <= 100.0:
            raise ValueError(f"score_threshold must be in [0, 100], got {v}.")
        return v


class RecommendationPools(BaseModel):
    """The four independent recommendation pools.

    A key absent from a pool simply contributes nothing.

    Legacy content keyed bands as ``lowScore`` / ``midScore`` / ``highScore``
    and grouped each band's templates by phase
    (``{"immediate": [...], "shortTerm": [...], "strategic": [...]}``).
    Both are accepted; phases are flattened in that order.
    """

    model_config = ConfigDict(frozen=True)

    core: dict[str, dict[ScoreBand, list[RecommendationTemplate]]] = {}
    activity: dict[str, list[RecommendationTemplate]] = {}
    industry: dict[str, dict[ScoreBand, list[RecommendationTemplate]]] = {}
    agency_type: dict[str, list[RecommendationTemplate]] = {}

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_layout(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for name in ("core", "industry"):
            pool = data.get(name)
            if isinstance(pool, dict):
                data[name] = {
                    key: {
                        _BAND_ALIASES.get(band, band): _flatten_phases(templates)
                        for band, templates in bands.items()
                    } if isinstance(bands, dict) else bands
                    for key, bands in pool.items()
                }
        for name in ("activity", "agency_type"):
            pool = data.get(name)
            if isinstance(pool, dict):
                data[name] = {key: _flatten_phases(t) for key, t in pool.items()}
        return data

    def template_count(self) -> int:
        total = sum(len(t) for bands in self.core.values() for t in bands.values())
        total += sum(len(t) for t in self.activity.values())
        total += sum(len(t) for bands in self.industry.values() for t in bands.values())
        total += sum(len(t) for t in self.agency_type.values())
        return total


class RecommendationCandidate(BaseModel):
    """A template selected for one assessment, before ranking.

    Attributes:
        template:       The selected template.
        source:         Pool the template was drawn from.
        dimensions:     Dimension tags (template tags plus the core key).
        activities:     Activity tags (template tags plus the activity key).
        band:           Band used to key the pool lookup, if any.
        relevant_score: Score of the weakest area this template addresses;
                        ``gap = 100 - relevant_score``.
        sequence:       Insertion order within the selection (0-based).
    """

    model_config = ConfigDict(frozen=True)

    template: RecommendationTemplate
    source: PoolSource
    dimensions: list[str] = []
    activities: list[str] = []
    band: Optional[ScoreBand] = None
    relevant_score: float
    sequence: int

    @property
    def gap(self) -> float:
        return max(0.0, 100.0 - self.relevant_score)


class Recommendation(BaseModel):
    """A ranked, materialised recommendation ready for a results view."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    priority: PriorityHint
    source: PoolSource
    dimensions: list[str] = []
    activities: list[str] = []
    industry: Optional[str] = None
    band: Optional[ScoreBand] = None
    gap: float
    relevance_score: float
    timeline: str
    impact: str


class PrioritizedRecommendations(BaseModel):
    """Ranked recommendations plus non-exclusive groupings.

    ``by_dimension`` / ``by_activity`` preserve the ranking order inside
    each group; a recommendation tagged with several keys appears under
    each of them.
    """

    model_config = ConfigDict(frozen=True)

    ordered: list[Recommendation] = []
    by_dimension: dict[str, list[Recommendation]] = {}
    by_activity: dict[str, list[Recommendation]] = {}

    @property
    def is_empty(self) -> bool:
        return not self.ordered
