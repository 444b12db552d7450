"""
Recommendation selector: ScoreSet + Context + pools → candidate list.

Pools are visited in a fixed order and their matches concatenated:

1. core         for each measured dimension, its band's templates
                (low < 40 <= medium < 70 <= high, lower bounds inclusive)
2. activity     for each selected activity, its templates; a template with a
                ``score_threshold`` is kept only if the activity score is
                unknown or at or below the threshold
3. industry     context.industry × band of the overall score
4. agency_type  context.agency_type

Templates whose ``condition`` does not match ``context.predicate_values()``
are skipped.  Duplicates (same template id) are collapsed: the first
occurrence wins, so a core match beats the same template in a later pool.

A key absent from a pool contributes nothing.  An empty result is valid.

Relevant score (drives ``gap`` in the prioritizer)
--------------------------------------------------
    core         the dimension's own score
    activity     the activity score; else the first measured dimension tag;
                 else the overall score
    industry     the first measured dimension tag; else the overall score
    agency_type  same as industry
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ai_readiness.config import ScoringConfig
from ai_readiness.models.assessment import Context, condition_matches
from ai_readiness.models.recommendation import (
    RecommendationCandidate,
    RecommendationPools,
    RecommendationTemplate,
)
from ai_readiness.models.score import ScoreSet
from ai_readiness.taxonomy.bands import PoolSource, ScoreBand, band_for

logger = logging.getLogger(__name__)


def _merge_tags(key: Optional[str], tags: Iterable[str]) -> list[str]:
    merged: list[str] = [key] if key else []
    for tag in tags:
        if tag not in merged:
            merged.append(tag)
    return merged


def _tagged_score(template: RecommendationTemplate, score_set: ScoreSet) -> float:
    for dim in template.dimensions:
        value = score_set.get(dim)
        if value is not None:
            return value
    return score_set.overall


class _Selection:
    """Accumulates candidates in order, de-duplicating by template id."""

    def __init__(self, predicates: dict) -> None:
        self._predicates = predicates
        self._seen: set[str] = set()
        self.candidates: list[RecommendationCandidate] = []

    def add(
        self,
        template: RecommendationTemplate,
        source: PoolSource,
        relevant_score: float,
        band: Optional[ScoreBand] = None,
        dimension: Optional[str] = None,
        activity: Optional[str] = None,
    ) -> None:
        if template.id in self._seen:
            logger.debug("Template '%s' already selected; %s copy skipped.", template.id, source)
            return
        if template.condition and not condition_matches(template.condition, self._predicates):
            return
        self._seen.add(template.id)
        self.candidates.append(
            RecommendationCandidate(
                template=template,
                source=source,
                dimensions=_merge_tags(dimension, template.dimensions),
                activities=_merge_tags(activity, template.activities),
                band=band,
                relevant_score=relevant_score,
                sequence=len(self.candidates),
            )
        )


def select(
    score_set: ScoreSet,
    context: Optional[Context],
    pools: RecommendationPools,
    config: Optional[ScoringConfig] = None,
) -> list[RecommendationCandidate]:
    """Pull candidate recommendations from the four pools.

    Args:
        score_set: Canonical scores.
        context:   Respondent context; ``None`` behaves like an empty context.
        pools:     Configured recommendation pools.
        config:    Band thresholds (defaults to 40 / 70).

    Returns:
        Candidates in pool order, de-duplicated by template id.
    """
    config = config or ScoringConfig()
    context = context or Context()
    selection = _Selection(context.predicate_values())

    def band(value: float) -> ScoreBand:
        return band_for(value, config.band_low_max, config.band_high_min)

    # 1. Core pool
    for dim, dim_score in score_set.dimensions.items():
        dim_band = band(dim_score)
        for template in pools.core.get(dim, {}).get(dim_band, []):
            selection.add(template, PoolSource.CORE, dim_score, band=dim_band, dimension=dim)

    # 2. Activity pool
    for activity in context.selected_activities:
        activity_score = score_set.activities.get(activity)
        for template in pools.activity.get(activity, []):
            if (
                template.score_threshold is not None
                and activity_score is not None
                and activity_score > template.score_threshold
            ):
                continue
            relevant = (
                activity_score if activity_score is not None
                else _tagged_score(template, score_set)
            )
            selection.add(template, PoolSource.ACTIVITY, relevant, activity=activity)

    # 3. Industry pool
    if context.industry:
        overall_band = band(score_set.overall)
        for template in pools.industry.get(context.industry, {}).get(overall_band, []):
            selection.add(
                template, PoolSource.INDUSTRY, _tagged_score(template, score_set),
                band=overall_band,
            )

    # 4. Agency / department-type pool
    if context.agency_type:
        for template in pools.agency_type.get(context.agency_type, []):
            selection.add(template, PoolSource.AGENCY_TYPE, _tagged_score(template, score_set))

    logger.debug(
        "Selected %d candidate(s) from %d configured template(s).",
        len(selection.candidates), pools.template_count(),
    )
    return selection.candidates
