"""Personalized weighted scoring and ranking."""

import pytest

from conftest import NOW, days_ago, make_item
from relevance.models.config import DEFAULT_CONFIG
from relevance.models.profile import Interactions, Preferences, UserProfile
from relevance.stages.personalized import rank_by_trust, rank_personalized, score_items
from relevance.stages.weighted_scoring import (
    ScoringContext,
    WeightedScorer,
    keyword_matches,
    personalized_scorer,
)


@pytest.fixture
def omega_profile():
    return UserProfile(
        user_id="u1",
        preferences=Preferences(
            categories=["supplements"],
            keywords=["omega3"],
            source_types=["paper"],
            min_trust_score=60,
        ),
    )


class TestPersonalizedScore:
    def test_worked_example(self, omega_profile):
        item = make_item(
            "x", category="supplements", tags=["omega3", "fish"], source_type="paper",
            trust_score=80, published_date=days_ago(5), view_count=20, like_count=5,
        )
        [scored] = score_items([item], omega_profile, now=NOW)
        assert scored.score == pytest.approx(0.7933, abs=1e-3)
        assert scored.breakdown["tag_match"] == pytest.approx(0.125)
        assert scored.breakdown["popularity"] == pytest.approx(0.015)

    def test_category_match_adds_its_weight(self, omega_profile):
        base = dict(tags=["omega3"], trust_score=70, published_date=days_ago(3))
        inside = make_item("a", category="supplements", **base)
        outside = make_item("b", category="diet", **base)
        a, b = score_items([inside, outside], omega_profile, now=NOW)
        assert a.score - b.score == pytest.approx(0.30)

    def test_scores_stay_in_unit_interval(self, omega_profile):
        extremes = [
            make_item("hi", tags=["omega3"], trust_score=100, published_date=NOW, view_count=10**6, like_count=10**6),
            make_item("lo", category="", tags=[], trust_score=0, source_type="manual", published_date=days_ago(3650)),
            make_item("future", published_date=days_ago(-10)),
        ]
        for s in score_items(extremes, omega_profile, now=NOW):
            assert 0.0 <= s.score <= 1.0

    def test_missing_data_scores_zero_factors(self, omega_profile):
        item = make_item("bare", category="", tags=[], trust_score=0, source_type="manual",
                         published_date=days_ago(400))
        [scored] = score_items([item], omega_profile, now=NOW)
        assert scored.score == 0.0

    def test_undated_item_gets_no_recency(self, omega_profile):
        item = make_item("legacy", category="", tags=[], trust_score=0, source_type="manual",
                         published_date=None)
        [scored] = score_items([item], omega_profile, now=NOW)
        assert scored.breakdown["recency"] == 0.0
        assert scored.score == 0.0


class TestKeywordMatching:
    def test_substring_either_direction_case_insensitive(self):
        assert keyword_matches("Omega3-Fish", ["omega3"])
        assert keyword_matches("vit", ["Vitamin"])
        assert not keyword_matches("keto", ["omega3"])

    def test_blank_keyword_never_matches(self):
        assert not keyword_matches("anything", [""])


class TestWeightedScorer:
    def test_context_defaults_to_shared_config(self):
        assert ScoringContext().config is DEFAULT_CONFIG
        assert ScoringContext(now=NOW).config is ScoringContext().config

    def test_unknown_factor_rejected(self):
        with pytest.raises(ValueError):
            WeightedScorer({"nope": 1.0}, {})

    def test_breakdown_sums_to_score(self, omega_profile):
        scorer = personalized_scorer(DEFAULT_CONFIG)
        item = make_item("x", tags=["omega3", "fish"], published_date=days_ago(2))
        ctx = ScoringContext(preferences=omega_profile.preferences, now=NOW)
        total, parts = scorer.score(item, ctx)
        assert total == pytest.approx(sum(parts.values()))


class TestRankPersonalized:
    def test_filters_and_orders(self, omega_profile, items):
        ranked = rank_personalized(omega_profile, items, 10, now=NOW)
        ids = [s.item.id for s in ranked]
        # p5 is below the trust floor, p6 is a draft, p7 is inactive
        assert set(ids) == {"p1", "p2", "p3", "p4"}
        scores = [s.score for s in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_excludes_recent_views(self, omega_profile, items):
        profile = omega_profile.model_copy(update={"interactions": Interactions(views=["p2"])})
        ids = [s.item.id for s in rank_personalized(profile, items, 10, now=NOW)]
        assert "p2" not in ids

    def test_only_last_fifty_views_are_excluded(self, omega_profile, items):
        views = ["p2"] + [f"v{i}" for i in range(50)]
        profile = omega_profile.model_copy(update={"interactions": Interactions(views=views)})
        ids = [s.item.id for s in rank_personalized(profile, items, 10, now=NOW)]
        assert "p2" in ids

    def test_limit(self, omega_profile, items):
        assert len(rank_personalized(omega_profile, items, 2, now=NOW)) == 2

    def test_trust_fallback_ignores_floor(self, omega_profile, items):
        ranked = rank_by_trust(omega_profile, items, 10, now=NOW)
        ids = [s.item.id for s in ranked]
        assert ids[0] == "p4"
        assert "p5" in ids
        assert "p6" not in ids and "p7" not in ids
        trust = [s.item.trust_score for s in ranked]
        assert trust == sorted(trust, reverse=True)
