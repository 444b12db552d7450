"""
Input normalizer: reconcile raw results of any historical shape into a
canonical ``ScoreSet``.

Result shapes seen in the wild
------------------------------
    flat       {"overall": 62, "people_skills": 58, ...}
    nested     {"scores": {"overall": 62, "dimensions": {"people_skills": 58}}}
    hybrid     both of the above in one object (flat wins)
    canonical  {"overall": 62, "dimensions": {...}, "activities": {...}}
    legacy     {"overallScore": 62, "dimensionScores": {...}, "activityScores": {...}}

Each value may be a bare number, a numeric string, or an object carrying a
``score`` key (``{"score": 58, "readiness": "moderate"}``).

Resolution
----------
Shape probes are tried in a fixed order and the first one that yields a
usable number wins, per dimension:

    1. flat      top-level property named after the dimension
    2. nested    ``scores.dimensions.<dimension>``
    3. canonical ``dimensions.<dimension>``
    4. legacy    ``dimensionScores.<dimension>``

A dimension no probe resolves is "not measured" (absent from the result).
The overall score is probed the same way (``overall``, ``scores.overall``,
``overallScore``); if no shape carries one, it is the weighted mean of the
resolved dimensions.  All values are clamped to ``[0, 100]``.

Only a *mandatory* dimension that no probe resolves is an error.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from ai_readiness.errors import ConfigError, NormalizationError
from ai_readiness.models.score import ScoreSet
from ai_readiness.utils.math_utils import clamp_score, safe_float, weighted_mean

logger = logging.getLogger(__name__)

# Top-level keys that belong to a container shape, never to a dimension.
_RESERVED_KEYS = frozenset({
    "overall", "overallScore", "scores", "dimensions", "dimensionScores",
    "activities", "activityScores",
})


def _section(raw: Mapping[str, Any], *path: str) -> Mapping[str, Any]:
    node: Any = raw
    for key in path:
        if not isinstance(node, Mapping):
            return {}
        node = node.get(key)
    return node if isinstance(node, Mapping) else {}


def _flat(raw: Mapping[str, Any], key: str) -> Any:
    return None if key in _RESERVED_KEYS else raw.get(key)


def _nested(raw: Mapping[str, Any], key: str) -> Any:
    return _section(raw, "scores", "dimensions").get(key)


def _canonical(raw: Mapping[str, Any], key: str) -> Any:
    return _section(raw, "dimensions").get(key)


def _legacy(raw: Mapping[str, Any], key: str) -> Any:
    return _section(raw, "dimensionScores").get(key)


Probe = Callable[[Mapping[str, Any], str], Any]

DIMENSION_PROBES: tuple[tuple[str, Probe], ...] = (
    ("flat", _flat),
    ("nested", _nested),
    ("canonical", _canonical),
    ("legacy", _legacy),
)

OVERALL_PROBES: tuple[tuple[str, Callable[[Mapping[str, Any]], Any]], ...] = (
    ("flat", lambda raw: raw.get("overall")),
    ("nested", lambda raw: _section(raw, "scores").get("overall")),
    ("legacy", lambda raw: raw.get("overallScore")),
)

# Containers whose keys name dimensions (used when dimensions are not given).
_DIMENSION_CONTAINERS: tuple[tuple[str, ...], ...] = (
    ("scores", "dimensions"),
    ("dimensions",),
    ("dimensionScores",),
)

_ACTIVITY_CONTAINERS: tuple[tuple[str, ...], ...] = (
    ("activities",),
    ("scores", "activities"),
    ("activityScores",),
)


def _score_value(value: Any) -> Optional[float]:
    """Extract a clamped score from a number, numeric string or ``{"score": x}``."""
    if isinstance(value, Mapping):
        value = value.get("score")
    number = safe_float(value)
    return None if number is None else clamp_score(number)


def overall_from_dimensions(
    dimensions: Mapping[str, float],
    weights: Optional[Mapping[str, float]] = None,
) -> float:
    """Weighted mean of the dimensions present, rounded to 2 decimals.

    Absent dimensions never count as 0.  A dimension missing from
    ``weights`` has weight 1.

    Returns:
        The overall score; 0.0 when no dimension is present.

    Raises:
        ConfigError: If a weight is negative, or the weights of the present
            dimensions sum to zero.
    """
    if not dimensions:
        return 0.0
    weights = weights or {}
    pairs: list[tuple[float, float]] = []
    for dim, score in dimensions.items():
        weight = float(weights.get(dim, 1.0))
        if weight < 0.0:
            raise ConfigError(f"Dimension '{dim}' has negative weight {weight}.")
        pairs.append((score, weight))
    mean = weighted_mean(pairs)
    if mean is None:
        raise ConfigError(
            f"Dimension weights sum to zero for measured dimensions {sorted(dimensions)}."
        )
    return round(clamp_score(mean), 2)


def _discover_dimensions(raw: Mapping[str, Any]) -> list[str]:
    # Flat results carry dimensions as top-level keys beside metadata, so only
    # keys holding a score-like value count.
    found = [
        key for key, value in raw.items()
        if key not in _RESERVED_KEYS and _score_value(value) is not None
    ]
    for path in _DIMENSION_CONTAINERS:
        for key in _section(raw, *path):
            if key not in found:
                found.append(key)
    return found


def _resolve_dimension(raw: Mapping[str, Any], dim: str) -> Optional[float]:
    for shape, probe in DIMENSION_PROBES:
        score = _score_value(probe(raw, dim))
        if score is not None:
            logger.debug("Dimension '%s' resolved from %s shape: %.2f", dim, shape, score)
            return score
    return None


def _resolve_activities(raw: Mapping[str, Any]) -> dict[str, float]:
    activities: dict[str, float] = {}
    for path in _ACTIVITY_CONTAINERS:
        for key, value in _section(raw, *path).items():
            if key in activities:
                continue
            score = _score_value(value)
            if score is not None:
                activities[key] = score
    return activities


def normalize(
    raw: Any,
    dimensions: Optional[Iterable[str]] = None,
    mandatory: Iterable[str] = (),
    weights: Optional[Mapping[str, float]] = None,
) -> ScoreSet:
    """Reconcile a raw result object into a canonical ``ScoreSet``.

    Normalizing an already-canonical ``ScoreSet`` (or its ``model_dump()``)
    returns an equal ``ScoreSet``.

    Args:
        raw:        Result object in any supported shape, or a ``ScoreSet``.
        dimensions: Dimension ids to resolve.  When ``None``, the keys of
                    every dimension container in ``raw`` are used, plus
                    top-level keys holding a score-like value.
        mandatory:  Dimensions that must resolve.
        weights:    Dimension weights for computing a missing overall score.

    Returns:
        A new ``ScoreSet``.

    Raises:
        NormalizationError: If ``raw`` is not a mapping, or a mandatory
            dimension cannot be resolved through any known shape.
        ConfigError: If the overall score must be computed and the weights
            of the resolved dimensions sum to zero.
    """
    if isinstance(raw, ScoreSet):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        raise NormalizationError(
            f"Cannot normalize result of type {type(raw).__name__}; expected a mapping."
        )

    mandatory = list(mandatory)
    wanted = list(dimensions) if dimensions is not None else _discover_dimensions(raw)
    for dim in mandatory:
        if dim not in wanted:
            wanted.append(dim)

    resolved: dict[str, float] = {}
    for dim in wanted:
        score = _resolve_dimension(raw, dim)
        if score is not None:
            resolved[dim] = score

    missing = [d for d in mandatory if d not in resolved]
    if missing:
        raise NormalizationError(
            f"Mandatory dimension(s) {missing} not found in any known result shape.",
            missing=missing,
        )

    overall: Optional[float] = None
    for shape, probe in OVERALL_PROBES:
        overall = _score_value(probe(raw))
        if overall is not None:
            logger.debug("Overall resolved from %s shape: %.2f", shape, overall)
            break
    if overall is None:
        overall = overall_from_dimensions(resolved, weights)

    not_measured = [d for d in wanted if d not in resolved]
    if not_measured:
        logger.debug("Dimensions not measured: %s", not_measured)

    return ScoreSet(
        overall=overall,
        dimensions=resolved,
        activities=_resolve_activities(raw),
    )


def reconcile(
    computed: ScoreSet,
    fragment: Any,
    dimensions: Optional[Iterable[str]] = None,
    mandatory: Iterable[str] = (),
    weights: Optional[Mapping[str, float]] = None,
) -> ScoreSet:
    """Merge an externally supplied legacy / partial result into ``computed``.

    Computed dimension and activity scores always win; the fragment only
    fills dimensions and activities the computation did not measure.  The
    overall score is recomputed from the merged dimensions.

    Raises:
        NormalizationError: If the fragment is not a mapping, or a mandatory
            dimension is still unresolved after merging.
        ConfigError: If the merged dimensions' weights sum to zero.
    """
    dims = list(dimensions) if dimensions is not None else None
    legacy = normalize(fragment, dimensions=dims, weights=weights)

    merged_dims = dict(computed.dimensions)
    for dim, score in legacy.dimensions.items():
        merged_dims.setdefault(dim, score)
    if dims is not None:
        merged_dims = {d: merged_dims[d] for d in dims if d in merged_dims} | {
            d: s for d, s in merged_dims.items() if d not in dims
        }

    merged_activities = dict(computed.activities)
    for activity, score in legacy.activities.items():
        merged_activities.setdefault(activity, score)

    missing = [d for d in mandatory if d not in merged_dims]
    if missing:
        raise NormalizationError(
            f"Mandatory dimension(s) {missing} missing after reconciling legacy result.",
            missing=missing,
        )

    filled = sorted(set(merged_dims) - set(computed.dimensions))
    if filled:
        logger.info("Filled dimensions %s from legacy result.", filled)

    return ScoreSet(
        overall=overall_from_dimensions(merged_dims, weights),
        dimensions=merged_dims,
        activities=merged_activities,
    )
