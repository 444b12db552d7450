"""
Shared pytest fixtures for the AI readiness test suite.

Provides:
  - ``definition``: a small in-memory ``AssessmentDefinition`` with three
    dimensions, activity-tagged questions and all four pools populated.
  - ``context``: a matching respondent ``Context``.
  - ``score_set``: a canonical ``ScoreSet`` spanning all three bands.
  - ``inhouse_definition_path`` / ``agency_definition_path``: the shipped
    sample definitions under ``config/assessments/``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from ai_readiness.config import Benchmark
from ai_readiness.models.assessment import (
    AnswerOption,
    AssessmentDefinition,
    Context,
    DimensionSpec,
    Question,
)
from ai_readiness.models.recommendation import RecommendationPools, RecommendationTemplate
from ai_readiness.models.score import ScoreSet

PROJECT_ROOT = Path(__file__).parent.parent


def _template(id: str, priority: str = "medium", **kwargs) -> RecommendationTemplate:
    return RecommendationTemplate(id=id, title=id.replace("-", " ").title(), priority=priority, **kwargs)


def _likert(qid: str, dimension: str, **kwargs) -> Question:
    return Question(
        id=qid,
        dimension=dimension,
        scale_max=5,
        options=[AnswerOption(label=str(i), score=i) for i in range(1, 6)],
        **kwargs,
    )


# ── Assessment fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def pools() -> RecommendationPools:
    """Pools with one or two templates per key, across all four sources."""
    return RecommendationPools(
        core={
            "people": {
                "low": [_template("train-team", "high")],
                "medium": [_template("champions", "medium")],
                "high": [_template("thought-leadership", "low")],
            },
            "process": {
                "low": [_template("centralize-data", "high")],
                "medium": [_template("automate-tasks", "medium")],
                "high": [_template("optimize-workflows", "low")],
            },
            "strategy": {
                "low": [_template("write-strategy", "high")],
                "medium": [_template("define-kpis", "medium")],
                "high": [_template("innovation-partners", "low")],
            },
        },
        activity={
            "content": [
                _template("content-stack", "high", score_threshold=40),
                _template("content-intelligence", "medium", score_threshold=80),
                _template("content-review", "low"),
            ],
        },
        industry={
            "b2b_saas": {
                "medium": [_template("product-analytics", "medium", dimensions=["process"])],
            },
        },
        agency_type={
            "centralized_team": [_template("shared-playbook", "medium", dimensions=["people"])],
        },
    )


@pytest.fixture
def definition(pools: RecommendationPools) -> AssessmentDefinition:
    return AssessmentDefinition(
        id="test_assessment",
        title="Test Assessment",
        dimensions=[
            DimensionSpec(id="people", weight=1.0, mandatory=True),
            DimensionSpec(id="process", weight=1.0),
            DimensionSpec(id="strategy", weight=2.0),
        ],
        questions=[
            _likert("p1", "people"),
            _likert("p2", "people", activity="content"),
            _likert("r1", "process"),
            _likert("r2", "process", activity="social"),
            _likert("s1", "strategy"),
            _likert("s2", "strategy", condition={"company_size": ["enterprise"]}),
        ],
        pools=pools,
        industry_benchmarks={"b2b_saas": Benchmark(average=75.0, top_quartile=90.0)},
        industry_weights={"b2b_saas": {"strategy": 1.0}},
    )


@pytest.fixture
def context() -> Context:
    return Context(
        industry="b2b_saas",
        agency_type="centralized_team",
        selected_activities=["content"],
        company_size="mid_market",
    )


@pytest.fixture
def score_set() -> ScoreSet:
    """people=30 (low), process=55 (medium), strategy=80 (high)."""
    return ScoreSet(
        overall=55.0,
        dimensions={"people": 30.0, "process": 55.0, "strategy": 80.0},
        activities={"content": 35.0},
    )


# ── Shipped sample definitions ────────────────────────────────────────────────

@pytest.fixture
def inhouse_definition_path() -> Path:
    return PROJECT_ROOT / "config" / "assessments" / "inhouse_marketing.json"


@pytest.fixture
def agency_definition_path() -> Path:
    return PROJECT_ROOT / "config" / "assessments" / "agency.json"
