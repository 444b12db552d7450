"""
Dimension score calculator: raw answers + question configuration → ``ScoreSet``.

Formula
-------
For every dimension, over the *answered* and *applicable* questions only:

    answer_pct  = clamp(selected_score / question.scale_max * 100, 0, 100)
    dimension   = Σ(answer_pct · question.weight) / Σ(question.weight)

    overall     = Σ(dimension · dim_weight) / Σ(dim_weight)   over measured dims

Unanswered questions are excluded, never scored as 0.  A dimension with no
answered question is omitted from ``ScoreSet.dimensions`` and therefore
excluded from the overall mean.  Question and dimension weights default to 1.

Activity scores use the same weighted mean, grouped by the question's
``activity`` tag.

Applicability (only when a ``Context`` is supplied)
---------------------------------------------------
    - activity-tagged questions apply only if the activity was selected
      (or no activities were selected at all);
    - industry-tagged questions apply only to that industry;
    - ``condition`` predicates must match ``context.predicate_values()``.
Non-applicable questions are treated as unanswered.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Mapping, Optional

from ai_readiness.errors import ConfigError
from ai_readiness.models.assessment import Context, Question, condition_matches
from ai_readiness.models.score import ScoreSet
from ai_readiness.scoring.normalizer import overall_from_dimensions
from ai_readiness.utils.math_utils import clamp_score, safe_float, weighted_mean

logger = logging.getLogger(__name__)


def is_applicable(question: Question, context: Optional[Context]) -> bool:
    """Return True if ``question`` applies to the respondent in ``context``."""
    if context is None:
        return True
    if (
        question.activity
        and context.selected_activities
        and question.activity not in context.selected_activities
    ):
        return False
    if question.industry and question.industry != context.industry:
        return False
    if question.condition and not condition_matches(
        question.condition, context.predicate_values()
    ):
        return False
    return True


def answer_percent(question: Question, value: Any) -> Optional[float]:
    """Convert a selected-option score into a clamped 0-100 percentage.

    Returns ``None`` for values that cannot be scored (missing, non-numeric,
    non-finite), which the caller treats as unanswered.
    """
    number = safe_float(value)
    if number is None:
        return None
    return clamp_score(number / question.scale_max * 100.0)


def _scored_pairs(
    answers: Mapping[str, Any],
    questions: Iterable[Question],
    context: Optional[Context],
) -> Iterable[tuple[Question, float]]:
    for q in questions:
        if answers.get(q.id) is None or not is_applicable(q, context):
            continue
        pct = answer_percent(q, answers[q.id])
        if pct is None:
            logger.warning("Answer for question '%s' is not a finite number; ignored.", q.id)
            continue
        yield q, pct


def calculate_activity_scores(
    answers: Mapping[str, Any],
    questions: Iterable[Question],
    context: Optional[Context] = None,
) -> dict[str, float]:
    """Weighted mean answer score per activity tag.

    Activities with no answered, applicable question (or zero total weight)
    are omitted.

    Args:
        answers:   Question id → selected option score.
        questions: All configured questions.
        context:   Optional context for applicability filtering.

    Returns:
        Activity id → score in ``[0, 100]``, rounded to 2 decimals.
    """
    return _activity_means(_scored_pairs(answers, questions, context))


def _activity_means(scored: Iterable[tuple[Question, float]]) -> dict[str, float]:
    grouped: dict[str, list[tuple[float, float]]] = defaultdict(list)
    for q, pct in scored:
        if q.activity:
            grouped[q.activity].append((pct, q.weight))

    scores: dict[str, float] = {}
    for activity, pairs in grouped.items():
        mean = weighted_mean(pairs)
        if mean is not None:
            scores[activity] = round(clamp_score(mean), 2)
    return scores


def score(
    answers: Mapping[str, Any],
    questions_by_dimension: Mapping[str, Iterable[Question]],
    weights: Optional[Mapping[str, float]] = None,
    context: Optional[Context] = None,
) -> ScoreSet:
    """Compute per-dimension, per-activity and overall scores.

    Args:
        answers:                Question id → selected option's numeric score.
        questions_by_dimension: Dimension id → questions in that dimension.
        weights:                Dimension id → weight (missing ⇒ 1).
        context:                Optional context for applicability filtering.

    Returns:
        A new ``ScoreSet``; unmeasured dimensions are absent.

    Raises:
        ConfigError: If any question has no dimension assigned, or the
            weights of the measured dimensions sum to zero.
    """
    all_questions: list[Question] = []
    for group, questions in questions_by_dimension.items():
        for q in questions:
            if not q.dimension:
                raise ConfigError(
                    f"Question '{q.id}' (listed under '{group}') has no dimension assigned."
                )
            all_questions.append(q)

    known_ids = {q.id for q in all_questions}
    unknown = sorted(set(answers) - known_ids)
    if unknown:
        logger.warning("Ignoring answers for unknown question ids: %s", unknown)

    scored = list(_scored_pairs(answers, all_questions, context))
    by_dim: dict[str, list[tuple[float, float]]] = defaultdict(list)
    for q, pct in scored:
        by_dim[q.dimension].append((pct, q.weight))

    dimensions: dict[str, float] = {}
    for dim in questions_by_dimension:
        pairs = by_dim.get(dim)
        mean = weighted_mean(pairs) if pairs else None
        if mean is not None:
            dimensions[dim] = round(clamp_score(mean), 2)
    # Questions may name a dimension other than the group they are listed in.
    for dim, pairs in by_dim.items():
        if dim not in dimensions:
            mean = weighted_mean(pairs)
            if mean is not None:
                dimensions[dim] = round(clamp_score(mean), 2)

    unmeasured = [d for d in questions_by_dimension if d not in dimensions]
    if unmeasured:
        logger.debug("No answered questions for dimensions %s; omitted.", unmeasured)

    overall = overall_from_dimensions(dimensions, weights)

    return ScoreSet(
        overall=overall,
        dimensions=dimensions,
        activities=_activity_means(scored),
    )
