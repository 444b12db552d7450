"""
Assessment definition models: questions, answer options, dimensions, context.

``AssessmentDefinition`` is validated once when the definition file is
loaded (see ``ai_readiness.assessment.loader``); the scoring and
recommendation code then trusts it as canonical input.

``Context`` is produced by earlier wizard steps (industry, agency or
department type, selected activities, qualifying answers) and is only ever
read by the engine.  Qualifying answers act purely as filter predicates.

All models are frozen: answers and configuration are read-only inputs.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ai_readiness.config import Benchmark
from ai_readiness.errors import ConfigError
from ai_readiness.models.recommendation import RecommendationPools


def _predicate_key(value: Any) -> str:
    return str(value).strip().lower()


def condition_matches(condition: dict[str, list[Any]], values: dict[str, Any]) -> bool:
    """Return True if every condition key has an allowed value in ``values``.

    Values are compared case-insensitively as strings so that ``true`` in a
    JSON definition matches a Python ``True`` answer.  A key missing from
    ``values`` fails the condition.  An empty condition always matches.
    """
    for key, allowed in condition.items():
        if key not in values or values[key] is None:
            return False
        if _predicate_key(values[key]) not in {_predicate_key(a) for a in allowed}:
            return False
    return True


class AnswerOption(BaseModel):
    """One selectable answer with its numeric score."""

    model_config = ConfigDict(frozen=True)

    label: str
    score: float


class Question(BaseModel):
    """A single assessment question.

    Attributes:
        id:        Unique question identifier (answers are keyed by it).
        dimension: Dimension this question scores.  ``None`` is representable
                   so that scoring can reject it with a ``ConfigError``.
        text:      Question wording (display only).
        weight:    Relative weight inside its dimension (default 1).
        options:   Ordered answer options, each with a numeric score.
        scale_max: Score of a "perfect" answer; selected scores are mapped
                   to percent as ``value / scale_max * 100``.
        activity:  Optional activity/service tag (feeds activity scores).
        industry:  Optional industry tag; only applies to that industry.
        condition: Predicate key → allowed values gating applicability.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    dimension: Optional[str] = None
    text: str = ""
    weight: float = 1.0
    options: list[AnswerOption] = []
    scale_max: float = 100.0
    activity: Optional[str] = None
    industry: Optional[str] = None
    condition: dict[str, list[Any]] = {}

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"Question weight must be >= 0, got {v}.")
        return v

    @field_validator("scale_max")
    @classmethod
    def validate_scale_max(cls, v: float) -> float:
        if v <= 0.0:
            raise ValueError(f"scale_max must be > 0, got {v}.")
        return v


class Context(BaseModel):
    """Answers from the wizard's qualifying steps.

    Attributes:
        industry:            Industry identifier, e.g. ``"b2b_saas"``.
        agency_type:         Agency or in-house department type identifier.
        selected_activities: Activity / service ids chosen by the respondent.
        qualifying_answers:  Free-form key → value answers used as filters.
        company_size:        Company-size class, e.g. ``"mid_market"``.
    """

    model_config = ConfigDict(frozen=True)

    industry: Optional[str] = None
    agency_type: Optional[str] = None
    selected_activities: list[str] = []
    qualifying_answers: dict[str, Any] = {}
    company_size: Optional[str] = None

    def predicate_values(self) -> dict[str, Any]:
        """Values visible to question/template ``condition`` predicates."""
        values: dict[str, Any] = dict(self.qualifying_answers)
        for key in ("industry", "agency_type", "company_size"):
            value = getattr(self, key)
            if value is not None:
                values.setdefault(key, value)
        return values


class DimensionSpec(BaseModel):
    """A configured scoring dimension."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str = ""
    weight: float = 1.0
    mandatory: bool = False

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"Dimension weight must be >= 0, got {v}.")
        return v


class AssessmentDefinition(BaseModel):
    """Everything the engine needs to score one assessment type.

    Validation rules:
      - Dimension ids are unique.
      - Question ids are unique and every question names a declared dimension.
      - ``industry_weights`` only override declared dimensions, with
        non-negative weights.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    dimensions: list[DimensionSpec]
    questions: list[Question] = []
    pools: RecommendationPools = Field(default_factory=RecommendationPools)
    industry_benchmarks: dict[str, Benchmark] = {}
    industry_weights: dict[str, dict[str, float]] = {}
    valuation_dimensions: Optional[dict[str, str]] = None

    @model_validator(mode="after")
    def validate_references(self) -> "AssessmentDefinition":
        dim_ids = [d.id for d in self.dimensions]
        if len(set(dim_ids)) != len(dim_ids):
            raise ValueError(f"Duplicate dimension ids in {dim_ids}.")

        seen: set[str] = set()
        for q in self.questions:
            if q.id in seen:
                raise ValueError(f"Duplicate question id '{q.id}'.")
            seen.add(q.id)
            if not q.dimension:
                raise ValueError(f"Question '{q.id}' has no dimension assigned.")
            if q.dimension not in dim_ids:
                raise ValueError(
                    f"Question '{q.id}' references undeclared dimension '{q.dimension}'."
                )

        for industry, weights in self.industry_weights.items():
            for dim, weight in weights.items():
                if dim not in dim_ids:
                    raise ValueError(
                        f"industry_weights['{industry}'] references undeclared dimension '{dim}'."
                    )
                if weight < 0.0:
                    raise ValueError(
                        f"industry_weights['{industry}']['{dim}'] must be >= 0, got {weight}."
                    )
        return self

    @property
    def dimension_ids(self) -> list[str]:
        return [d.id for d in self.dimensions]

    @property
    def dimension_weights(self) -> dict[str, float]:
        return {d.id: d.weight for d in self.dimensions}

    def weights_for(self, industry: Optional[str]) -> dict[str, float]:
        """Dimension weights with the industry's overrides applied, if any."""
        return self.dimension_weights | self.industry_weights.get(industry or "", {})

    @property
    def mandatory_dimensions(self) -> list[str]:
        return [d.id for d in self.dimensions if d.mandatory]

    def questions_by_dimension(self) -> dict[str, list[Question]]:
        """Group questions under their dimension, in declaration order.

        Every declared dimension gets an entry, even with no questions.
        """
        return group_by_dimension(self.questions, self.dimension_ids)


def group_by_dimension(
    questions: list[Question],
    dimension_ids: list[str] | None = None,
) -> dict[str, list[Question]]:
    """Group ``questions`` by their ``dimension``.

    Raises:
        ConfigError: If any question has no dimension assigned.
    """
    grouped: dict[str, list[Question]] = {d: [] for d in dimension_ids or []}
    for q in questions:
        if not q.dimension:
            raise ConfigError(f"Question '{q.id}' has no dimension assigned.")
        grouped.setdefault(q.dimension, []).append(q)
    return grouped
