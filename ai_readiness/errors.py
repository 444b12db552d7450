"""
Exception hierarchy for the assessment engine.

All engine failures are raised synchronously to the immediate caller; nothing
is retried, because every operation is deterministic.
"""

from __future__ import annotations

from typing import Iterable


class AssessmentError(Exception):
    """Base class for every error raised by ``ai_readiness``."""


class ConfigError(AssessmentError, ValueError):
    """The assessment configuration cannot produce meaningful scores.

    Raised when a question has no dimension, when dimension weights over the
    measured dimensions sum to zero, or when a definition file is invalid.
    """


class NormalizationError(AssessmentError, ValueError):
    """A raw result could not be reconciled into a ``ScoreSet``.

    Attributes:
        missing: Mandatory dimensions that no known result shape provided.
    """

    def __init__(self, message: str, missing: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.missing: tuple[str, ...] = tuple(missing)
