"""Shared fixtures: a small fixed catalog, in-memory stores, and a fixed clock."""

from datetime import datetime, timedelta, timezone

import pytest

from relevance.models.content import ContentItem
from relevance_server.services import (
    InMemoryContentStore,
    InMemoryProfileStore,
    InMemoryTagRegistry,
    ListingCache,
    RecommendationService,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def make_item(item_id: str, **fields) -> ContentItem:
    data = {
        "id": item_id,
        "category": "supplements",
        "tags": [],
        "trust_score": 70,
        "source_type": "paper",
        "published_date": days_ago(1),
    }
    data.update(fields)
    return ContentItem.model_validate(data)


def catalog():
    return [
        make_item("p1", category="supplements", tags=["omega3", "fish"], trust_score=80,
                  published_date=days_ago(5), view_count=20, like_count=5),
        make_item("p2", category="supplements", tags=["omega3", "heart"], trust_score=90,
                  published_date=days_ago(2), view_count=150, like_count=12),
        make_item("p3", category="diet", tags=["keto", "fish"], trust_score=65,
                  published_date=days_ago(10), view_count=40),
        make_item("p4", category="research", tags=["immune", "vitamin-d"], trust_score=95,
                  published_date=days_ago(40), view_count=5, like_count=1),
        make_item("p5", category="supplements", tags=["vitamin-d", "immune"], trust_score=50,
                  published_date=days_ago(3), view_count=8),
        make_item("p6", category="diet", tags=["keto"], trust_score=85,
                  published_date=days_ago(1), is_draft=True),
        make_item("p7", category="supplements", tags=["omega3"], trust_score=75,
                  published_date=days_ago(60), is_active=False),
    ]


class FixedClock:
    """Monotonic clock for ListingCache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def items():
    return catalog()


@pytest.fixture
def content_store(items):
    return InMemoryContentStore(items)


@pytest.fixture
def profile_store():
    return InMemoryProfileStore()


@pytest.fixture
def tag_registry(items):
    return InMemoryTagRegistry.from_items(items)


@pytest.fixture
def cache_clock():
    return FixedClock()


@pytest.fixture
def service(content_store, profile_store, tag_registry, cache_clock):
    return RecommendationService(
        content_store,
        profile_store,
        tag_registry,
        cache=ListingCache(300, clock=cache_clock),
        adapter_timeout=2.0,
        clock=lambda: NOW,
    )
