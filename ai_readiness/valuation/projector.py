"""
Valuation / impact projector: ScoreSet → ``ValuationProjection``.

All constants come from ``ValuationConfig``; the defaults are shown here.

Base multiple and risk profile (step table on the overall score)
---------------------------------------------------------------
    overall >= 80   7.5x   "Low Risk"
    overall >= 60   6.0x   "Medium Risk"
    overall >= 40   4.5x   "Medium-High Risk"
    otherwise       3.0x   "High Risk"

Driver sub-scores (each clamped to [0, 100])
--------------------------------------------
    financial    = F + (O - 50) * 0.10
    operational  = O + (A - 50) * 0.15
    technology   = A
    strategic    = S * 0.6 + mean(F, O, A) * 0.4

F / O / A / S are the dimensions named by ``dimension_map`` (financial,
operational, ai, strategic by default).  An unmeasured base dimension
contributes 0; an adjustment is applied only when the adjusting dimension is
measured; S falls back to the overall score; the mean covers only the
measured dimensions among F, O and A.

Potential improvement
---------------------
    points      = Σ (100 - score_d) * impact_weight_d      d in F, O, A, S
    improvement = clamp(points / 100 * max_improvement, 0, max_improvement)

An unmeasured dimension counts as a full gap of 100.

EBIT impact
-----------
Step table on the overall score (25 / 15 / 10 / 5 %), plus ``ai_ebit_delta``
when A >= ``ai_high_threshold`` and minus it when A <= ``ai_low_threshold``,
floored at 0.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from ai_readiness.config import ValuationConfig
from ai_readiness.models.score import ScoreSet
from ai_readiness.models.valuation import DriverScores, ValuationProjection
from ai_readiness.utils.math_utils import clamp, clamp_score

logger = logging.getLogger(__name__)

_DRIVERS = ("financial", "operational", "technology", "strategic")


def base_multiple(overall: float, config: Optional[ValuationConfig] = None) -> tuple[float, str]:
    """Return ``(multiple, risk_label)`` for an overall score."""
    config = config or ValuationConfig()
    for floor, multiple, label in config.multiple_bands:
        if overall >= floor:
            return multiple, label
    # Tables end at 0 and scores are never negative.
    _, multiple, label = config.multiple_bands[-1]
    return multiple, label


def ebit_impact_percent(
    overall: float,
    ai_score: Optional[float],
    config: Optional[ValuationConfig] = None,
) -> float:
    config = config or ValuationConfig()
    impact = config.ebit_bands[-1][1]
    for floor, percent in config.ebit_bands:
        if overall >= floor:
            impact = percent
            break
    if ai_score is not None:
        if ai_score >= config.ai_high_threshold:
            impact += config.ai_ebit_delta
        elif ai_score <= config.ai_low_threshold:
            impact -= config.ai_ebit_delta
    return max(0.0, impact)


def driver_scores(
    score_set: ScoreSet,
    config: Optional[ValuationConfig] = None,
    dimension_map: Optional[Mapping[str, str]] = None,
) -> DriverScores:
    """Compute the four valuation driver sub-scores."""
    config = config or ValuationConfig()
    dims = {**config.dimension_map, **(dimension_map or {})}
    fin = score_set.get(dims["financial"])
    ops = score_set.get(dims["operational"])
    ai = score_set.get(dims["technology"])
    strat = score_set.get(dims["strategic"])
    pivot = config.adjustment_pivot

    financial = fin or 0.0
    if ops is not None:
        financial += (ops - pivot) * config.operational_adjustment

    operational = ops or 0.0
    if ai is not None:
        operational += (ai - pivot) * config.ai_adjustment

    measured = [v for v in (fin, ops, ai) if v is not None]
    others = sum(measured) / len(measured) if measured else 0.0
    anchor = strat if strat is not None else score_set.overall
    strategic = anchor * config.strategic_blend + others * (1.0 - config.strategic_blend)

    return DriverScores(
        financial=round(clamp_score(financial), 2),
        operational=round(clamp_score(operational), 2),
        technology=round(clamp_score(ai or 0.0), 2),
        strategic=round(clamp_score(strategic), 2),
    )


def potential_improvement(
    score_set: ScoreSet,
    config: Optional[ValuationConfig] = None,
    dimension_map: Optional[Mapping[str, str]] = None,
) -> float:
    """Achievable multiple uplift, bounded to ``[0, max_improvement]``."""
    config = config or ValuationConfig()
    dims = {**config.dimension_map, **(dimension_map or {})}
    points = 0.0
    for driver in _DRIVERS:
        value = score_set.get(dims[driver])
        gap = 100.0 - (value if value is not None else 0.0)
        points += gap * config.impact_weights[driver]
    improvement = points / 100.0 * config.max_improvement
    return round(clamp(improvement, 0.0, config.max_improvement), 2)


def project(
    score_set: ScoreSet,
    config: Optional[ValuationConfig] = None,
    dimension_map: Optional[Mapping[str, str]] = None,
) -> ValuationProjection:
    """Derive the valuation projection for one ``ScoreSet``.

    Args:
        score_set:     Canonical scores.
        config:        Step tables and weights.
        dimension_map: Per-assessment override of ``config.dimension_map``.

    Returns:
        A new ``ValuationProjection``.
    """
    config = config or ValuationConfig()
    # A partial override keeps the configured names for the other drivers.
    dims = {**config.dimension_map, **(dimension_map or {})}

    unmeasured = [dims[d] for d in _DRIVERS if not score_set.is_measured(dims[d])]
    if unmeasured:
        logger.debug("Valuation dimensions not measured: %s", unmeasured)

    multiple, risk = base_multiple(score_set.overall, config)
    improvement = potential_improvement(score_set, config, dims)
    return ValuationProjection(
        base_multiple=multiple,
        risk_profile=risk,
        driver_scores=driver_scores(score_set, config, dims),
        potential_improvement=improvement,
        target_multiple=round(multiple + improvement, 2),
        ebit_impact_percent=ebit_impact_percent(
            score_set.overall, score_set.get(dims["technology"]), config
        ),
    )
