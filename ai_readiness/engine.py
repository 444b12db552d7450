"""
End-to-end assessment run: answers + context → ``AssessmentResult``.

Flow
----
    answers ──► calculator.score() ──► ScoreSet
                                         │
                  (legacy fragment) ──► normalizer.reconcile()
                                         │
              ┌──────────────┬───────────┴────────────┐
              ▼              ▼                        ▼
     selector.select()   insights.build_insights()   projector.project()
              │
              ▼
     prioritizer.prioritize()

Everything is derived fresh on every call from the explicit arguments; no
module-level state is read or written, so concurrent runs are independent.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from ai_readiness.config import AppConfig
from ai_readiness.models.assessment import AssessmentDefinition, Context
from ai_readiness.models.recommendation import PrioritizedRecommendations
from ai_readiness.models.score import ScoreInsights, ScoreSet
from ai_readiness.models.valuation import ValuationProjection
from ai_readiness.recommendations.prioritizer import prioritize
from ai_readiness.recommendations.selector import select
from ai_readiness.scoring.calculator import score
from ai_readiness.scoring.insights import build_insights
from ai_readiness.scoring.normalizer import reconcile
from ai_readiness.valuation.projector import project

logger = logging.getLogger(__name__)


class AssessmentResult(BaseModel):
    """Everything a results view needs for one completed assessment."""

    model_config = ConfigDict(frozen=True)

    assessment_id: str
    score_set: ScoreSet
    insights: ScoreInsights
    recommendations: PrioritizedRecommendations
    valuation: ValuationProjection


def run_assessment(
    definition: AssessmentDefinition,
    answers: Mapping[str, Any],
    context: Optional[Context] = None,
    config: Optional[AppConfig] = None,
    legacy: Optional[Mapping[str, Any]] = None,
) -> AssessmentResult:
    """Score answers and derive insights, recommendations and valuation.

    Args:
        definition: Validated assessment definition.
        answers:    Question id → selected option score.
        context:    Respondent context from the qualifying steps.
        config:     Application config (defaults to built-in constants).
        legacy:     Optional externally supplied result fragment in any
                    historical shape; fills dimensions the answers did not
                    measure.

    Returns:
        A new ``AssessmentResult``.

    Raises:
        ConfigError:        If a question has no dimension or the measured
                            dimension weights sum to zero.
        NormalizationError: If ``legacy`` is malformed, or a mandatory
                            dimension is still unmeasured after reconciling.
    """
    config = config or AppConfig()
    context = context or Context()
    weights = definition.weights_for(context.industry)

    score_set = score(answers, definition.questions_by_dimension(), weights, context)
    if legacy is not None:
        score_set = reconcile(
            score_set,
            legacy,
            dimensions=definition.dimension_ids,
            mandatory=definition.mandatory_dimensions,
            weights=weights,
        )

    logger.info(
        "Assessment '%s': overall %.2f over %d/%d dimension(s).",
        definition.id,
        score_set.overall,
        len(score_set.dimensions),
        len(definition.dimensions),
    )

    candidates = select(score_set, context, definition.pools, config.scoring)
    recommendations = prioritize(candidates, config.recommendations)

    return AssessmentResult(
        assessment_id=definition.id,
        score_set=score_set,
        insights=build_insights(
            score_set,
            context,
            benchmarks=definition.industry_benchmarks,
            configured_dimensions=definition.dimension_ids,
            config=config.scoring,
        ),
        recommendations=recommendations,
        valuation=project(score_set, config.valuation, definition.valuation_dimensions),
    )
