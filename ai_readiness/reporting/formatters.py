"""
ASCII terminal formatters for CLI output.

All formatters accept result models and return plain multi-line strings
suitable for ``typer.echo()``.  No markup, no colour codes.

Score bars
----------
Dimension and activity scores are drawn as 20-character bars so that a
glance down the column shows the weakest areas::

    people_skills          58.0  [###########.........]  medium
"""

from __future__ import annotations

from typing import Optional

from ai_readiness.models.recommendation import PrioritizedRecommendations
from ai_readiness.models.score import ScoreInsights, ScoreSet
from ai_readiness.models.valuation import ValuationProjection
from ai_readiness.taxonomy.bands import band_for

_BAR_WIDTH = 20


def _bar(value: float) -> str:
    filled = int(round(value / 100.0 * _BAR_WIDTH))
    return "[" + "#" * filled + "." * (_BAR_WIDTH - filled) + "]"


def _score_row(name: str, value: float) -> str:
    return f"    {name[:22]:<22}  {value:>5.1f}  {_bar(value)}  {band_for(value)}"


# ── Scores ────────────────────────────────────────────────────────────────────


def format_score_summary(
    score_set: ScoreSet,
    insights: Optional[ScoreInsights] = None,
    title: str = "",
) -> str:
    """Format overall, dimension and activity scores.

    Args:
        score_set: Canonical scores.
        insights:  Optional derived labels (readiness, benchmark, summary).
        title:     Optional assessment title for the header.

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== AI Readiness Scores ===")
    if title:
        lines.append(f"  Assessment: {title}")
    lines.append(f"  Overall:    {score_set.overall:.1f} / 100")

    if insights is not None:
        comparison = insights.industry_comparison
        lines.append(f"  Readiness:  {insights.readiness_category}")
        lines.append(
            f"  Benchmark:  {comparison.industry or 'default'} "
            f"(avg {comparison.industry_average:.0f}, "
            f"top quartile {comparison.top_quartile:.0f}) "
            f"-> percentile {comparison.percentile}"
        )
        lines.append(f"  {insights.summary}")

    lines.append("")
    lines.append("  [DIMENSIONS]")
    if score_set.dimensions:
        for dim, value in score_set.dimensions.items():
            lines.append(_score_row(dim, value))
    else:
        lines.append("    (no dimensions measured)")
    if insights is not None and insights.unmeasured_dimensions:
        lines.append(f"    not measured: {', '.join(insights.unmeasured_dimensions)}")

    if score_set.activities:
        lines.append("")
        lines.append("  [ACTIVITIES]")
        for activity, value in score_set.activities.items():
            row = _score_row(activity, value)
            if insights is not None and activity in insights.activity_readiness:
                row += f"  ({insights.activity_readiness[activity]})"
            lines.append(row)

    return "\n".join(lines)


# ── Recommendations ───────────────────────────────────────────────────────────


def format_recommendations(
    recommendations: PrioritizedRecommendations,
    top_n: Optional[int] = None,
) -> str:
    """Format ranked recommendations, highest relevance first.

    Args:
        recommendations: Prioritizer output.
        top_n:           Show only the first N (``None`` = all).

    Returns:
        Multi-line string.
    """
    lines: list[str] = []
    lines.append("")
    lines.append("=== Recommendations ===")

    if recommendations.is_empty:
        lines.append("  (no recommendations matched these scores and context)")
        return "\n".join(lines)

    shown = recommendations.ordered if top_n is None else recommendations.ordered[:top_n]
    for rank, rec in enumerate(shown, start=1):
        tags = ", ".join(rec.dimensions + rec.activities) or "-"
        lines.append("")
        lines.append(f"  {rank:>2}. [{rec.priority.upper()}] {rec.title}")
        lines.append(
            f"      source: {rec.source}  gap: {rec.gap:.1f}  "
            f"relevance: {rec.relevance_score:.2f}"
        )
        lines.append(f"      timeline: {rec.timeline}  impact: {rec.impact}  tags: {tags}")
        if rec.description:
            lines.append(f"      {rec.description}")

    hidden = len(recommendations.ordered) - len(shown)
    if hidden > 0:
        lines.append("")
        lines.append(f"  ... {hidden} more (use --top to show more)")
    return "\n".join(lines)


# ── Valuation ─────────────────────────────────────────────────────────────────


def format_valuation(projection: ValuationProjection) -> str:
    """Format the valuation / impact projection."""
    drivers = projection.driver_scores
    lines: list[str] = []
    lines.append("")
    lines.append("=== Valuation Impact ===")
    lines.append(
        f"  Base multiple:   {projection.base_multiple:.1f}x  ({projection.risk_profile})"
    )
    lines.append(
        f"  Potential:       +{projection.potential_improvement:.2f}x  "
        f"-> target {projection.target_multiple:.2f}x"
    )
    lines.append(f"  EBIT impact:     {projection.ebit_impact_percent:.0f}%")
    lines.append("")
    lines.append("  [DRIVERS]")
    for name in ("financial", "operational", "technology", "strategic"):
        lines.append(_score_row(name, getattr(drivers, name)))
    return "\n".join(lines)
