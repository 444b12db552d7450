"""
Tests for ai_readiness/recommendations/selector.py.

What we test
------------
- Core pool: each measured dimension's band picks its templates; 40 is
  medium and 70 is high (lower bound inclusive).
- Unmeasured dimensions contribute nothing.
- Activity pool: score_threshold keeps templates only when the activity
  score is unknown or at/below the threshold.
- Industry pool keyed by context.industry × overall band.
- Agency-type pool keyed by context.agency_type.
- Template conditions filter against context predicates.
- De-duplication by template id: first pool wins.
- Keys absent from every pool -> empty list, not an error.
- Candidates carry source, band, relevant score, tags and sequence.
"""

from __future__ import annotations

from ai_readiness.config import ScoringConfig
from ai_readiness.models.assessment import Context
from ai_readiness.models.recommendation import RecommendationPools, RecommendationTemplate
from ai_readiness.models.score import ScoreSet
from ai_readiness.recommendations.selector import select
from ai_readiness.taxonomy.bands import PoolSource, ScoreBand


def _template(id: str, priority: str = "medium", **kwargs) -> RecommendationTemplate:
    return RecommendationTemplate(id=id, title=id, priority=priority, **kwargs)


def _ids(candidates) -> list[str]:
    return [c.template.id for c in candidates]


def _core_pools() -> RecommendationPools:
    return RecommendationPools(
        core={
            "a": {
                "low": [_template("a-low")],
                "medium": [_template("a-medium")],
                "high": [_template("a-high")],
            }
        }
    )


class TestCorePool:
    def test_all_sources_in_pool_order(self, score_set, context, pools):
        result = select(score_set, context, pools)
        assert _ids(result) == [
            "train-team",
            "automate-tasks",
            "innovation-partners",
            "content-stack",
            "content-intelligence",
            "content-review",
            "product-analytics",
            "shared-playbook",
        ]

    def test_band_40_is_medium(self):
        ss = ScoreSet(overall=40.0, dimensions={"a": 40.0})
        assert _ids(select(ss, None, _core_pools())) == ["a-medium"]

    def test_band_70_is_high(self):
        ss = ScoreSet(overall=70.0, dimensions={"a": 70.0})
        assert _ids(select(ss, None, _core_pools())) == ["a-high"]

    def test_band_just_below_40_is_low(self):
        ss = ScoreSet(overall=39.99, dimensions={"a": 39.99})
        assert _ids(select(ss, None, _core_pools())) == ["a-low"]

    def test_configured_band_thresholds(self):
        ss = ScoreSet(overall=45.0, dimensions={"a": 45.0})
        cfg = ScoringConfig(band_low_max=50.0, band_high_min=80.0)
        assert _ids(select(ss, None, _core_pools(), cfg)) == ["a-low"]

    def test_unmeasured_dimension_contributes_nothing(self):
        ss = ScoreSet(overall=50.0, dimensions={"other": 50.0})
        assert select(ss, None, _core_pools()) == []

    def test_core_candidate_fields(self, score_set, context, pools):
        first = select(score_set, context, pools)[0]
        assert first.source == PoolSource.CORE
        assert first.band == ScoreBand.LOW
        assert first.relevant_score == 30.0
        assert first.gap == 70.0
        assert first.dimensions == ["people"]
        assert first.sequence == 0


class TestActivityPool:
    def _pools(self) -> RecommendationPools:
        return RecommendationPools(
            activity={
                "seo": [
                    _template("seo-basic", score_threshold=40),
                    _template("seo-any"),
                ]
            }
        )

    def test_threshold_excludes_strong_activity(self):
        ss = ScoreSet(overall=50.0, activities={"seo": 41.0})
        result = select(ss, Context(selected_activities=["seo"]), self._pools())
        assert _ids(result) == ["seo-any"]

    def test_threshold_inclusive(self):
        ss = ScoreSet(overall=50.0, activities={"seo": 40.0})
        result = select(ss, Context(selected_activities=["seo"]), self._pools())
        assert _ids(result) == ["seo-basic", "seo-any"]

    def test_unknown_activity_score_keeps_template(self):
        ss = ScoreSet(overall=50.0)
        result = select(ss, Context(selected_activities=["seo"]), self._pools())
        assert _ids(result) == ["seo-basic", "seo-any"]
        # Falls back to the overall score for the gap.
        assert result[0].relevant_score == 50.0

    def test_unselected_activity_ignored(self):
        ss = ScoreSet(overall=50.0, activities={"seo": 10.0})
        assert select(ss, Context(selected_activities=["email"]), self._pools()) == []

    def test_activity_tag_recorded(self):
        ss = ScoreSet(overall=50.0, activities={"seo": 10.0})
        result = select(ss, Context(selected_activities=["seo"]), self._pools())
        assert result[0].activities == ["seo"]
        assert result[0].source == PoolSource.ACTIVITY


class TestIndustryAndAgencyPools:
    def test_industry_uses_overall_band(self, pools):
        ss = ScoreSet(overall=85.0, dimensions={"process": 20.0})
        result = select(ss, Context(industry="b2b_saas"), pools)
        # Only the "medium" band exists for b2b_saas.
        assert "product-analytics" not in _ids(result)

    def test_industry_relevant_score_from_tagged_dimension(self, pools):
        ss = ScoreSet(overall=55.0, dimensions={"process": 20.0})
        result = select(ss, Context(industry="b2b_saas"), pools)
        analytics = [c for c in result if c.template.id == "product-analytics"][0]
        assert analytics.relevant_score == 20.0
        assert analytics.band == ScoreBand.MEDIUM

    def test_agency_type(self, pools):
        ss = ScoreSet(overall=50.0)
        result = select(ss, Context(agency_type="centralized_team"), pools)
        assert _ids(result) == ["shared-playbook"]
        assert result[0].source == PoolSource.AGENCY_TYPE

    def test_absent_keys_yield_empty(self, pools):
        ss = ScoreSet(overall=50.0)
        ctx = Context(industry="aerospace", agency_type="boutique", selected_activities=["vr"])
        assert select(ss, ctx, pools) == []


class TestFilteringAndDedup:
    def test_condition_filters_template(self):
        pools = RecommendationPools(
            agency_type={
                "team": [
                    _template("enterprise-only", condition={"company_size": ["enterprise"]}),
                    _template("everyone"),
                ]
            }
        )
        ss = ScoreSet(overall=50.0)
        smb = select(ss, Context(agency_type="team", company_size="smb"), pools)
        ent = select(ss, Context(agency_type="team", company_size="enterprise"), pools)
        assert _ids(smb) == ["everyone"]
        assert _ids(ent) == ["enterprise-only", "everyone"]

    def test_duplicate_id_first_pool_wins(self):
        shared = _template("shared", "high")
        pools = RecommendationPools(
            core={"a": {"low": [shared]}},
            agency_type={"team": [shared]},
        )
        ss = ScoreSet(overall=10.0, dimensions={"a": 10.0})
        result = select(ss, Context(agency_type="team"), pools)
        assert len(result) == 1
        assert result[0].source == PoolSource.CORE

    def test_sequences_are_contiguous(self, score_set, context, pools):
        result = select(score_set, context, pools)
        assert [c.sequence for c in result] == list(range(len(result)))

    def test_empty_pools(self, score_set, context):
        assert select(score_set, context, RecommendationPools()) == []
