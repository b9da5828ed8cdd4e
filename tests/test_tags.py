"""Tag relevance ranking, co-occurrence suggestions, and the tag registry."""

import pytest

from conftest import NOW, FixedClock, days_ago, make_item
from relevance.models.tag import Tag, TagLink
from relevance.stages.tag_candidates import (
    matching_tags_by_item,
    normalize_tag_names,
    score_tag_candidates,
)
from relevance.stages.tag_cooccurrence import association_score, rank_related_tags
from relevance_server.services import InMemoryTagRegistry


def _rank(query, items, exclude_id=None, limit=10):
    registry = InMemoryTagRegistry.from_items(items)
    tags = registry.resolve(query)
    links = registry.items_for_tags([t.id for t in tags])
    matches = matching_tags_by_item(tags, links, exclude_id)
    by_id = {i.id: i for i in items}
    return score_tag_candidates(query, matches, by_id, exclude_id, limit, now=NOW)


class TestTagRelevance:
    def test_tie_break_on_engagement(self):
        a = make_item("A", tags=["immune", "x"], view_count=50, like_count=10, published_date=days_ago(400))
        b = make_item("B", tags=["immune", "y"], view_count=5, like_count=1, published_date=days_ago(400))
        ranked = _rank(["immune"], [b, a])
        assert [c.id for c in ranked] == ["A", "B"]
        assert ranked[0].matching_tag_count == 1

    def test_relevance_formula(self):
        item = make_item("a", tags=["immune", "zinc"], view_count=100, like_count=20, published_date=days_ago(73))
        [c] = _rank(["immune", "zinc", "sleep"], [item])
        # ratio 2/3, precision 2/2, popularity (10 + 10) / 100, recency 1 - 73/365
        expected = 0.4 * (2 / 3) + 0.3 * 1.0 + 0.2 * 0.2 + 0.1 * (1 - 73 / 365)
        assert c.relevance_score == pytest.approx(expected)

    def test_recency_uses_year_window(self):
        fresh = make_item("fresh", tags=["t"], published_date=days_ago(0))
        year = make_item("year", tags=["t"], published_date=days_ago(365))
        by_id = {c.id: c for c in _rank(["t"], [fresh, year])}
        assert by_id["fresh"].relevance_score - by_id["year"].relevance_score == pytest.approx(0.1)

    def test_excludes_query_item_drafts_and_inactive(self):
        items = [
            make_item("q", tags=["t"]),
            make_item("draft", tags=["t"], is_draft=True),
            make_item("off", tags=["t"], is_active=False),
            make_item("ok", tags=["t"]),
        ]
        assert [c.id for c in _rank(["t"], items, exclude_id="q")] == ["ok"]

    def test_empty_or_unknown_tags(self, items):
        assert _rank([], items) == []
        assert _rank(["no-such-tag"], items) == []

    def test_normalize_tag_names(self):
        assert normalize_tag_names([" a", "b", "a", "", "  "]) == ["a", "b"]


class TestCooccurrence:
    def _links(self, rows):
        return [TagLink(item_id=i, tag_id=t) for i, t in rows]

    def test_monotonic_in_count(self):
        q = Tag(id="q", name="q", global_post_count=3)
        a = Tag(id="a", name="a", global_post_count=10)
        b = Tag(id="b", name="b", global_post_count=10)
        links = self._links([
            ("1", "q"), ("2", "q"), ("3", "q"),
            ("1", "a"), ("2", "a"),
            ("3", "b"),
        ])
        input_links = [l for l in links if l.tag_id == "q"]
        ranked = rank_related_tags([q], input_links, links, {"a": a, "b": b}, 5)
        assert [s.name for s in ranked] == ["a", "b"]
        assert ranked[0].co_occurrence_count == 2
        assert ranked[0].co_occurrence_rate == pytest.approx(2 / 3)
        assert ranked[0].association_score >= ranked[1].association_score

    def test_association_formula(self):
        # popularity 20/100, specificity 1 - 20/50
        assert association_score(0.5, 20) == pytest.approx(0.6 * 0.5 + 0.2 * 0.2 + 0.2 * 0.6)

    def test_specificity_floor_for_common_tags(self):
        assert association_score(0.0, 500) == pytest.approx(0.2)

    def test_unresolved_input_is_empty(self):
        assert rank_related_tags([], [], [], {}, 5) == []

    def test_input_tags_not_suggested(self, items):
        registry = InMemoryTagRegistry.from_items(items)
        tags = registry.resolve(["omega3"])
        input_links = registry.items_for_tags([t.id for t in tags])
        item_links = registry.tags_for_items([l.item_id for l in input_links])
        by_id = {t.id: t for t in registry.list_tags()}
        names = [s.name for s in rank_related_tags(tags, input_links, item_links, by_id, 10)]
        assert "omega3" not in names
        assert set(names) == {"fish", "heart"}


class TestTagRegistry:
    def test_global_counts_skip_drafts_and_inactive(self, items):
        registry = InMemoryTagRegistry.from_items(items)
        counts = {t.name: t.global_post_count for t in registry.list_tags()}
        assert counts["omega3"] == 2
        assert counts["keto"] == 1

    def test_resolve_drops_unknown(self, items):
        registry = InMemoryTagRegistry.from_items(items)
        assert [t.name for t in registry.resolve(["fish", "nope", "fish"])] == ["fish"]

    def test_source_registry_picks_up_new_items_after_max_age(self, items):
        clock = FixedClock()
        posts = list(items)
        registry = InMemoryTagRegistry.from_source(lambda: posts, max_age_seconds=300, clock=clock)
        posts.append(make_item("p8", tags=["zinc", "omega3"]))
        assert registry.resolve(["zinc"]) == []
        clock.advance(300)
        assert [t.name for t in registry.resolve(["zinc"])] == ["zinc"]
        assert "p8" in {link.item_id for link in registry.items_for_tags(["omega3"])}
        counts = {t.name: t.global_post_count for t in registry.list_tags()}
        assert counts["omega3"] == 3

    def test_failed_refresh_keeps_previous_snapshot(self, items):
        clock = FixedClock()
        calls = []

        def source():
            calls.append(clock.now)
            if len(calls) > 1:
                raise ConnectionError("posts unavailable")
            return items

        registry = InMemoryTagRegistry.from_source(source, max_age_seconds=300, clock=clock)
        clock.advance(301)
        assert [t.name for t in registry.resolve(["keto"])] == ["keto"]
        assert len(calls) == 2
