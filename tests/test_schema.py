"""Store-boundary migration of profiles and content, and dual-source merging."""

import json
import threading

from conftest import days_ago, make_item
from relevance.models.profile import UserProfile
from relevance.stages.source_merge import merge_by_id, richness
from relevance_server.schema import (
    is_canonical_profile,
    is_legacy_format,
    profile_to_document,
    to_canonical_profile,
    to_content_item,
)
from relevance_server.services import (
    ContentQuery,
    DualSourceContentStore,
    InMemoryContentStore,
    JsonContentStore,
    JsonProfileStore,
)


class TestProfileMigration:
    def test_missing_document_gives_defaults(self):
        profile = to_canonical_profile(None, "u1")
        assert profile == UserProfile.default("u1")
        assert profile.preferences.categories == ["diet", "supplements", "research"]
        assert profile.preferences.min_trust_score == 60
        assert profile.preferences.language == "ko"

    def test_flat_layout(self):
        doc = {"categories": "diet, sleep", "keywords": ["keto"], "bookmarks": ["a"], "likes": "b,c"}
        profile = to_canonical_profile(doc, "u1")
        assert profile.preferences.categories == ["diet", "sleep"]
        assert profile.interactions.bookmarks == ["a"]
        assert profile.interactions.likes == ["b", "c"]

    def test_camel_case_and_singular_keys(self):
        doc = {
            "userId": "ignored",
            "preferences": {"sourceTypes": ["video"], "minTrustScore": 80},
            "interactions": {"like": ["x"], "view": ["y", "y"]},
        }
        assert not is_canonical_profile(doc)
        profile = to_canonical_profile(doc, "u1")
        assert profile.user_id == "u1"
        assert profile.preferences.source_types == ["video"]
        assert profile.preferences.min_trust_score == 80
        assert profile.interactions.likes == ["x"]
        assert profile.interactions.views == ["y"]

    def test_canonical_round_trip(self):
        profile = UserProfile.default("u1")
        doc = profile_to_document(profile)
        assert is_canonical_profile(doc)
        assert to_canonical_profile(doc, "u1") == profile

    def test_json_profile_store_reads_legacy_and_persists(self, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps([{"userId": "u1", "categories": ["sleep"], "likes": ["p1"]}]))
        store = JsonProfileStore(path)
        profile = store.get_profile("u1")
        assert profile.preferences.categories == ["sleep"]
        assert store.get_profile("nobody") is None
        store.save_profile(UserProfile.default("u2"))
        reloaded = JsonProfileStore(path)
        assert {p.user_id for p in reloaded.list_profiles()} == {"u1", "u2"}


class TestContentMigration:
    def test_legacy_flat_record(self):
        doc = {
            "id": 7, "category": "diet", "tags": ["keto"], "trustScore": 70, "sourceType": "youtube",
            "collectedDate": "2025-01-01T00:00:00", "publishedDate": "2025-02-01T00:00:00",
            "viewCount": 3, "isActive": True,
        }
        assert is_legacy_format(doc)
        item = to_content_item(doc)
        assert item.id == "7"
        assert item.source_type.value == "video"
        assert item.published_date.month == 2
        assert item.published_date.tzinfo is not None
        assert item.view_count == 3 and item.like_count == 0

    def test_rich_record_nested_category_and_tags(self):
        doc = {
            "id": "r1", "categories": {"name": "research"},
            "post_tags": [{"tags": {"name": "immune"}}, {"tags": {"name": "zinc"}}],
            "trust_score": 90, "source_type": "paper", "published_date": "2025-03-01T00:00:00Z",
        }
        item = to_content_item(doc)
        assert item.category == "research"
        assert item.tags == ["immune", "zinc"]

    def test_missing_or_null_dates_leave_item_undated(self):
        assert to_content_item({"id": "a", "trustScore": 0, "sourceType": "manual"}).published_date is None
        assert to_content_item({"id": "b", "publishedDate": None}).published_date is None
        collected = to_content_item({"id": "c", "publishedDate": None, "collectedDate": "2025-01-01T00:00:00"})
        assert collected.published_date.year == 2025

    def test_tag_objects_without_a_name_are_dropped(self):
        item = to_content_item({"id": "a", "tags": [{"name": "keto"}, {"slug": "x"}, None, ""]})
        assert item.tags == ["keto"]


class TestDualSource:
    def test_merge_prefers_richer_record(self):
        rich = make_item("a", tags=["x", "y"], title="Full")
        thin = make_item("a", tags=[], category="")
        legacy_only = make_item("b", published_date=days_ago(30))
        merged = merge_by_id([thin], [rich, legacy_only])
        assert [i.id for i in merged] == ["a", "b"]
        assert merged[0].title == "Full"
        assert richness(rich) > richness(thin)

    def test_primary_wins_ties(self):
        primary = make_item("a", title="primary")
        legacy = make_item("a", title="legacy")
        assert merge_by_id([primary], [legacy])[0].title == "primary"

    def test_store_survives_failing_primary(self):
        class Broken:
            def query(self, filters):
                raise ConnectionError("down")

            def get_by_id(self, item_id):
                raise ConnectionError("down")

        legacy = InMemoryContentStore([make_item("b")])
        store = DualSourceContentStore(Broken(), legacy)
        assert [i.id for i in store.query(ContentQuery())] == ["b"]
        assert store.get_by_id("b").id == "b"

    def test_pagination_after_merge(self):
        primary = InMemoryContentStore([make_item("a", published_date=days_ago(1))])
        legacy = InMemoryContentStore([make_item("b", published_date=days_ago(2)), make_item("c", published_date=days_ago(3))])
        store = DualSourceContentStore(primary, legacy)
        assert [i.id for i in store.query(ContentQuery(limit=2, offset=1))] == ["b", "c"]

    def test_undated_items_sort_as_oldest(self):
        store = InMemoryContentStore([make_item("undated", published_date=None), make_item("dated")])
        assert [i.id for i in store.query(ContentQuery())] == ["dated", "undated"]
        assert [i.id for i in store.query(ContentQuery(published_after=days_ago(10)))] == ["dated"]

    def test_json_content_store_persists_counters(self, tmp_path):
        path = tmp_path / "content.json"
        path.write_text(json.dumps({"items": [{"id": "a", "category": "diet", "viewCount": 1}]}))
        store = JsonContentStore(path)
        store.increment_counter("a", "view_count")
        assert JsonContentStore(path).get_by_id("a").view_count == 2

    def test_json_content_store_concurrent_increments(self, tmp_path):
        path = tmp_path / "content.json"
        path.write_text(json.dumps({"items": [{"id": "a", "category": "diet"}]}))
        store = JsonContentStore(path)
        threads = [
            threading.Thread(target=store.increment_counter, args=("a", "like_count"))
            for _ in range(20)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert JsonContentStore(path).get_by_id("a").like_count == 20
