"""HTTP surface: routes, response shapes, and error status mapping."""

import pytest
from fastapi.testclient import TestClient

from relevance_server.app import create_app
from relevance_server.config import ServerConfig
from relevance_server.state import AppState, set_state


@pytest.fixture
def client(service):
    set_state(AppState(ServerConfig(), service=service))
    with TestClient(create_app()) as c:
        yield c
    set_state(None)


class TestRoot:
    def test_root(self, client):
        body = client.get("/").json()
        assert body["status"] == "ok"
        assert body["stores"]["content"] == "InMemoryContentStore"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestRecommendationRoutes:
    def test_personalized(self, client):
        resp = client.get("/api/recommendations/personalized/u1", params={"limit": 2})
        assert resp.status_code == 200
        body = resp.json()
        assert body["user_id"] == "u1"
        assert len(body["items"]) == 2
        assert 0.0 <= body["items"][0]["score"] <= 1.0

    def test_bad_limit_is_400(self, client):
        assert client.get("/api/recommendations/personalized/u1", params={"limit": 0}).status_code == 400

    def test_related(self, client):
        body = client.get("/api/recommendations/related/p1", params={"limit": 5}).json()
        ids = [entry["item"]["id"] for entry in body["items"]]
        assert "p1" not in ids
        assert body["items"][0]["reason"]

    def test_related_unknown_item_is_404(self, client):
        assert client.get("/api/recommendations/related/missing").status_code == 404

    def test_collaborative(self, client):
        body = client.get("/api/recommendations/collaborative/u1").json()
        assert body == {"user_id": "u1", "items": []}


class TestTagRoutes:
    def test_related_post_and_get(self, client):
        posted = client.post("/api/tags/related", json={"tags": ["omega3"], "limit": 5}).json()
        fetched = client.get("/api/tags/related", params={"tags": ["omega3"]}).json()
        assert {t["name"] for t in posted["tags"]} == {"fish", "heart"}
        assert posted == fetched

    def test_suggestions_and_popular(self, client):
        assert [t["name"] for t in client.get("/api/tags/suggestions", params={"q": "keto"}).json()["tags"]] == ["keto"]
        assert client.get("/api/tags/popular", params={"limit": 2}).status_code == 200


class TestUserRoutes:
    def test_interaction_flow(self, client):
        resp = client.post("/api/users/u1/interactions", json={"item_id": "p2", "kind": "like"})
        assert resp.status_code == 200
        assert resp.json()["interactions"]["likes"] == ["p2"]
        status = client.get("/api/users/u1/status/p2").json()
        assert status["liked"] is True and status["bookmarked"] is False
        removed = client.delete("/api/users/u1/interactions/like/p2").json()
        assert removed["interactions"]["likes"] == []

    def test_unknown_kind_is_400(self, client):
        resp = client.post("/api/users/u1/interactions", json={"item_id": "p2", "kind": "share"})
        assert resp.status_code == 400

    def test_preferences_and_derive(self, client):
        resp = client.patch("/api/users/u1/preferences", json={"keywords": ["zinc"]})
        assert resp.json()["preferences"]["keywords"] == ["zinc"]
        client.post("/api/users/u1/interactions", json={"item_id": "p3", "kind": "bookmark"})
        derived = client.post("/api/users/u1/derive-interests").json()["preferences"]
        assert derived["keywords"] == ["zinc", "keto", "fish"]
        assert derived["categories"][0] == "diet"

    def test_default_profile(self, client):
        body = client.get("/api/users/someone").json()
        assert body["preferences"]["language"] == "ko"
        assert body["interactions"] == {"bookmarks": [], "likes": [], "views": []}
