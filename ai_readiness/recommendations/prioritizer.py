"""
Recommendation prioritizer: candidates → ranked, grouped recommendations.

Ranking (highest first)
-----------------------
    1. priority weight      high=3, medium=2, low=1 (configurable)
    2. score gap            100 - relevant score; weaker areas first
    3. pool precedence      core > activity > industry > agency_type
    4. insertion order      candidate.sequence

The sort key is total, so identical inputs always give identical output.

Each ``Recommendation`` carries

    relevance_score = weight_rank * 101 + gap      (2 decimals)

``weight_rank`` is the 1-based position of the priority weight among the
distinct configured weights (low=1, medium=2, high=3 by default).  Because a
gap never exceeds 100 the score orders the same way as keys 1 and 2 for any
weight values.

Timeline and impact
-------------------
A template's own ``timeline`` / ``impact`` tag wins.  Otherwise:

    timeline  high → "Immediate (0-30 days)"
              medium → "Short-term (1-3 months)"
              low → "Strategic (3-6 months)"
    impact    gap >= 60 → "high", gap >= 30 → "medium", else "low"
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Optional

from ai_readiness.config import RecommendationConfig
from ai_readiness.models.recommendation import (
    PrioritizedRecommendations,
    Recommendation,
    RecommendationCandidate,
)
from ai_readiness.taxonomy.bands import PriorityHint

logger = logging.getLogger(__name__)

DEFAULT_TIMELINES: dict[PriorityHint, str] = {
    PriorityHint.HIGH:   "Immediate (0-30 days)",
    PriorityHint.MEDIUM: "Short-term (1-3 months)",
    PriorityHint.LOW:    "Strategic (3-6 months)",
}

_IMPACT_BANDS: tuple[tuple[float, str], ...] = (
    (60.0, "high"),
    (30.0, "medium"),
    (0.0,  "low"),
)


def resolve_timeline(candidate: RecommendationCandidate) -> str:
    return candidate.template.timeline or DEFAULT_TIMELINES[candidate.template.priority]


def resolve_impact(candidate: RecommendationCandidate) -> str:
    if candidate.template.impact:
        return candidate.template.impact
    for floor, label in _IMPACT_BANDS:
        if candidate.gap >= floor:
            return label
    return "low"


def weight_rank(priority: PriorityHint, config: RecommendationConfig) -> int:
    """1-based rank of a priority's weight among the distinct configured weights."""
    distinct = sorted(set(config.priority_weights.values()))
    return distinct.index(config.priority_weights[priority.value]) + 1


def relevance_score(candidate: RecommendationCandidate, config: RecommendationConfig) -> float:
    rank = weight_rank(candidate.template.priority, config)
    return round(rank * 101.0 + candidate.gap, 2)


def _sort_key(candidate: RecommendationCandidate, config: RecommendationConfig) -> tuple:
    precedence = config.pool_precedence.index(candidate.source.value)
    return (
        -config.priority_weights[candidate.template.priority.value],
        -candidate.gap,
        precedence,
        candidate.sequence,
    )


def _materialise(
    candidate: RecommendationCandidate,
    config: RecommendationConfig,
) -> Recommendation:
    template = candidate.template
    return Recommendation(
        id=template.id,
        title=template.title,
        description=template.description,
        priority=template.priority,
        source=candidate.source,
        dimensions=list(candidate.dimensions),
        activities=list(candidate.activities),
        industry=template.industry,
        band=candidate.band,
        gap=round(candidate.gap, 2),
        relevance_score=relevance_score(candidate, config),
        timeline=resolve_timeline(candidate),
        impact=resolve_impact(candidate),
    )


def prioritize(
    candidates: Iterable[RecommendationCandidate],
    config: Optional[RecommendationConfig] = None,
) -> PrioritizedRecommendations:
    """Rank candidates and build non-exclusive groupings.

    Args:
        candidates: Output of ``selector.select()``.
        config:     Priority weights and pool precedence.

    Returns:
        ``PrioritizedRecommendations``; empty lists and maps when there are
        no candidates.
    """
    config = config or RecommendationConfig()
    ranked = sorted(candidates, key=lambda c: _sort_key(c, config))
    ordered = [_materialise(c, config) for c in ranked]

    by_dimension: dict[str, list[Recommendation]] = defaultdict(list)
    by_activity: dict[str, list[Recommendation]] = defaultdict(list)
    for rec in ordered:
        for dim in rec.dimensions:
            by_dimension[dim].append(rec)
        for activity in rec.activities:
            by_activity[activity].append(rec)

    logger.debug(
        "Prioritized %d recommendation(s) across %d dimension group(s).",
        len(ordered), len(by_dimension),
    )
    return PrioritizedRecommendations(
        ordered=ordered,
        by_dimension=dict(by_dimension),
        by_activity=dict(by_activity),
    )
