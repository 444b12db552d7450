"""
Derived labels for a ``ScoreSet``: readiness category, activity readiness,
industry benchmark comparison and a one-line summary.

Industry percentile (simplified normal approximation)
-----------------------------------------------------
    score <= average:  percentile = round(score / average * 50)
    score >  average:  std        = (top_quartile - average) / 0.67
                       percentile = round(50 + min((score - average) / (2 * std) * 50, 50))

A zero average yields percentile 0 for scores at or below it; a benchmark
whose top quartile equals its average puts every above-average score at
the 100th percentile.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ai_readiness.config import Benchmark, ScoringConfig
from ai_readiness.models.assessment import Context
from ai_readiness.models.score import IndustryComparison, ScoreInsights, ScoreSet
from ai_readiness.taxonomy.bands import ActivityReadiness, ReadinessCategory

_READINESS_LABELS = (
    ReadinessCategory.AI_LEADER,
    ReadinessCategory.ADVANCED,
    ReadinessCategory.ADVANCING,
    ReadinessCategory.DEVELOPING,
)

_ACTIVITY_LABELS = (
    ActivityReadiness.ADVANCED,
    ActivityReadiness.PROFICIENT,
    ActivityReadiness.MODERATE,
    ActivityReadiness.BASIC,
)


def readiness_category(
    overall: float,
    config: Optional[ScoringConfig] = None,
) -> ReadinessCategory:
    """Map an overall score to a readiness label (lower bounds inclusive)."""
    thresholds = (config or ScoringConfig()).readiness_thresholds
    for threshold, label in zip(thresholds, _READINESS_LABELS):
        if overall >= threshold:
            return label
    return ReadinessCategory.BEGINNING


def activity_readiness(
    score: float,
    config: Optional[ScoringConfig] = None,
) -> ActivityReadiness:
    """Map an activity score to a readiness label (lower bounds inclusive)."""
    thresholds = (config or ScoringConfig()).activity_readiness_thresholds
    for threshold, label in zip(thresholds, _ACTIVITY_LABELS):
        if score >= threshold:
            return label
    return ActivityReadiness.MINIMAL


def industry_percentile(score: float, benchmark: Benchmark) -> int:
    avg = benchmark.average
    if score <= avg:
        return round(score / avg * 50) if avg > 0 else 0
    spread = (benchmark.top_quartile - avg) / 0.67
    if spread <= 0:
        return 100
    above = min((score - avg) / (2 * spread) * 50, 50)
    return round(50 + above)


def industry_comparison(
    overall: float,
    industry: Optional[str],
    benchmarks: Mapping[str, Benchmark],
    default: Optional[Benchmark] = None,
) -> IndustryComparison:
    """Compare ``overall`` with the benchmark for ``industry``.

    Unknown or missing industries fall back to ``default``.
    """
    benchmark = benchmarks.get(industry or "") or default or Benchmark()
    return IndustryComparison(
        industry=industry,
        industry_average=benchmark.average,
        top_quartile=benchmark.top_quartile,
        percentile=industry_percentile(overall, benchmark),
    )


def summarize(overall: float) -> str:
    if overall < 30:
        return (
            "Your organization is in the early stages of AI readiness. "
            "There are significant opportunities to improve."
        )
    if overall < 60:
        return (
            "Your organization has established some AI foundations but needs "
            "further development in key areas."
        )
    if overall < 80:
        return (
            "Your organization demonstrates good AI maturity with specific "
            "opportunities for optimization."
        )
    return (
        "Your organization shows high AI maturity across multiple dimensions. "
        "Focus on refinement and innovation."
    )


def build_insights(
    score_set: ScoreSet,
    context: Optional[Context] = None,
    benchmarks: Optional[Mapping[str, Benchmark]] = None,
    configured_dimensions: Iterable[str] = (),
    config: Optional[ScoringConfig] = None,
) -> ScoreInsights:
    """Assemble all derived labels for one ``ScoreSet``.

    Args:
        score_set:             Canonical scores.
        context:               Respondent context (industry for benchmarks).
        benchmarks:            Industry id → benchmark.
        configured_dimensions: Dimensions the assessment defines; those not in
                               ``score_set`` are reported as unmeasured.
        config:                Scoring thresholds.

    Returns:
        A new ``ScoreInsights``.
    """
    config = config or ScoringConfig()
    industry = context.industry if context else None
    return ScoreInsights(
        readiness_category=readiness_category(score_set.overall, config),
        summary=summarize(score_set.overall),
        industry_comparison=industry_comparison(
            score_set.overall, industry, benchmarks or {}, config.default_benchmark
        ),
        activity_readiness={
            activity: activity_readiness(value, config)
            for activity, value in score_set.activities.items()
        },
        unmeasured_dimensions=[
            d for d in configured_dimensions if not score_set.is_measured(d)
        ],
    )
