"""
Guarded arithmetic shared by the scoring, selection and valuation code.

No function here ever returns NaN or infinity: non-finite inputs are
rejected and empty or zero-weight denominators produce ``None`` so callers
can decide between "not measured" and a defined 0.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_score(value: float) -> float:
    """Clamp a score into ``[0, 100]``."""
    return clamp(value, SCORE_MIN, SCORE_MAX)


def safe_float(value: Any) -> float | None:
    """Coerce ``value`` to a finite float, or ``None`` when impossible.

    Booleans are rejected (``True`` is not a score of 1). Numeric strings
    are accepted because legacy result files stored answers as strings.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None


def weighted_mean(pairs: Iterable[tuple[float, float]]) -> float | None:
    """Weighted mean of ``(value, weight)`` pairs.

    Returns:
        The mean, or ``None`` if there are no pairs or the weights sum to 0.
    """
    total = 0.0
    weight_sum = 0.0
    for value, weight in pairs:
        total += value * weight
        weight_sum += weight
    if weight_sum <= 0.0:
        return None
    return total / weight_sum
