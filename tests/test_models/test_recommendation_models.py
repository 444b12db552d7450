"""Tests for recommendation models: legacy field handling and pool layout."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ai_readiness.models.recommendation import (
    PrioritizedRecommendations,
    RecommendationCandidate,
    RecommendationPools,
    RecommendationTemplate,
)
from ai_readiness.taxonomy.bands import PoolSource, PriorityHint, ScoreBand


def _raw(id: str, **kwargs) -> dict:
    return {"id": id, "title": id, **kwargs}


class TestRecommendationTemplate:
    def test_defaults(self):
        t = RecommendationTemplate(id="x", title="X")
        assert t.priority == PriorityHint.MEDIUM
        assert t.dimensions == []
        assert t.condition == {}
        assert t.score_threshold is None

    def test_id_derived_from_title(self):
        t = RecommendationTemplate(title="Build an AI Council!")
        assert t.id == "build-an-ai-council"

    def test_explicit_id_kept(self):
        t = RecommendationTemplate(id="council", title="Build an AI Council")
        assert t.id == "council"

    def test_missing_id_and_title_rejected(self):
        with pytest.raises(ValidationError):
            RecommendationTemplate(description="orphan")

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("CRITICAL", PriorityHint.HIGH),
            ("High", PriorityHint.HIGH),
            ("med", PriorityHint.MEDIUM),
            (" low ", PriorityHint.LOW),
        ],
    )
    def test_priority_aliases(self, raw, expected):
        assert RecommendationTemplate(id="x", title="x", priority=raw).priority == expected

    def test_unknown_priority_rejected(self):
        with pytest.raises(ValidationError, match="Unknown priority"):
            RecommendationTemplate(id="x", title="x", priority="urgent")

    def test_legacy_single_dimension(self):
        t = RecommendationTemplate(id="x", title="x", dimension="people", dimensions=["process"])
        assert t.dimensions == ["people", "process"]

    def test_legacy_dimension_not_duplicated(self):
        t = RecommendationTemplate(id="x", title="x", dimension="people", dimensions=["people"])
        assert t.dimensions == ["people"]

    def test_legacy_single_activity(self):
        t = RecommendationTemplate(id="x", title="x", activity="seo")
        assert t.activities == ["seo"]

    def test_legacy_score_threshold_key(self):
        t = RecommendationTemplate.model_validate(_raw("x", scoreThreshold=60))
        assert t.score_threshold == 60.0

    def test_threshold_out_of_range(self):
        with pytest.raises(ValidationError, match="score_threshold"):
            RecommendationTemplate(id="x", title="x", score_threshold=120)


class TestRecommendationPools:
    def test_canonical_layout(self):
        pools = RecommendationPools.model_validate(
            {"core": {"people": {"low": [_raw("a")], "high": [_raw("b")]}}}
        )
        assert [t.id for t in pools.core["people"][ScoreBand.LOW]] == ["a"]
        assert ScoreBand.MEDIUM not in pools.core["people"]

    def test_legacy_band_keys(self):
        pools = RecommendationPools.model_validate(
            {
                "core": {
                    "people": {
                        "lowScore": [_raw("a")],
                        "midScore": [_raw("b")],
                        "highScore": [_raw("c")],
                    }
                }
            }
        )
        bands = pools.core["people"]
        assert [t.id for t in bands[ScoreBand.LOW]] == ["a"]
        assert [t.id for t in bands[ScoreBand.MEDIUM]] == ["b"]
        assert [t.id for t in bands[ScoreBand.HIGH]] == ["c"]

    def test_phases_flattened_in_order(self):
        pools = RecommendationPools.model_validate(
            {
                "industry": {
                    "retail": {
                        "lowScore": {
                            "strategic": [_raw("s")],
                            "immediate": [_raw("i")],
                            "shortTerm": [_raw("m")],
                        }
                    }
                },
                "activity": {"seo": {"immediate": [_raw("seo-1")], "strategic": [_raw("seo-2")]}},
            }
        )
        assert [t.id for t in pools.industry["retail"][ScoreBand.LOW]] == ["i", "m", "s"]
        assert [t.id for t in pools.activity["seo"]] == ["seo-1", "seo-2"]

    def test_unknown_phase_rejected(self):
        with pytest.raises(ValidationError, match="Unknown recommendation phase"):
            RecommendationPools.model_validate(
                {"agency_type": {"team": {"someday": [_raw("x")]}}}
            )

    def test_unknown_band_rejected(self):
        with pytest.raises(ValidationError):
            RecommendationPools.model_validate({"core": {"people": {"extreme": [_raw("x")]}}})

    def test_template_count(self, pools):
        assert pools.template_count() == 14

    def test_empty(self):
        assert RecommendationPools().template_count() == 0


class TestCandidateAndResult:
    def test_gap(self):
        cand = RecommendationCandidate(
            template=RecommendationTemplate(id="x", title="x"),
            source=PoolSource.CORE,
            relevant_score=30.0,
            sequence=0,
        )
        assert cand.gap == 70.0

    def test_gap_never_negative(self):
        cand = RecommendationCandidate(
            template=RecommendationTemplate(id="x", title="x"),
            source=PoolSource.ACTIVITY,
            relevant_score=100.0,
            sequence=3,
        )
        assert cand.gap == 0.0

    def test_empty_result(self):
        assert PrioritizedRecommendations().is_empty
