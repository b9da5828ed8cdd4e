"""RecommendationConfig validation/loading and ServerConfig from environment."""

import json

import pytest

from relevance.models.config import DEFAULT_CONFIG, RecommendationConfig, resolve_config
from relevance_server.config import ServerConfig


class TestRecommendationConfig:
    def test_defaults_preserve_weight_sets(self):
        sets = DEFAULT_CONFIG.weight_sets()
        assert sets["personalized"] == {
            "category_match": 0.30, "tag_match": 0.25, "source_type_match": 0.15,
            "trust": 0.15, "recency": 0.10, "popularity": 0.05,
        }
        assert sets["tag_relevance"] == {"match_ratio": 0.4, "precision": 0.3, "popularity": 0.2, "recency": 0.1}
        assert sets["integrated"]["tag_relevance"] == 0.40
        assert DEFAULT_CONFIG.similarity_threshold == 0.3
        assert DEFAULT_CONFIG.max_similar_users == 10

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            RecommendationConfig(personal_weight_category=0.9)

    def test_from_dict_nested(self):
        config = RecommendationConfig.from_dict({
            "weights": {
                "personalized": {
                    "category_match": 0.25, "tag_match": 0.30, "source_type_match": 0.15,
                    "trust": 0.15, "recency": 0.10, "popularity": 0.05,
                },
            },
            "collaborative": {"similarity_threshold": 0.5, "max_similar_users": 4},
            "unknown_key": 1,
        })
        assert config.personal_weight_category == 0.25
        assert config.personal_weight_tags == 0.30
        assert config.similarity_threshold == 0.5
        assert config.max_similar_users == 4

    def test_from_dict_flat(self):
        assert RecommendationConfig.from_dict({"recent_views_excluded": 20}).recent_views_excluded == 20

    def test_resolve_config(self):
        custom = RecommendationConfig(max_similar_users=2)
        assert resolve_config(None) is DEFAULT_CONFIG
        assert resolve_config(custom) is custom


class TestServerConfig:
    def test_from_env(self, monkeypatch, tmp_path):
        content = tmp_path / "content.json"
        content.write_text("[]")
        monkeypatch.setenv("DATA_SOURCE", "JSON")
        monkeypatch.setenv("CONTENT_JSON_PATH", str(content))
        monkeypatch.setenv("PORT", "9001")
        monkeypatch.setenv("CACHE_TTL_SECONDS", "60")
        monkeypatch.delenv("ALGORITHM_CONFIG_PATH", raising=False)
        config = ServerConfig.from_env()
        assert config.data_source == "json"
        assert config.port == 9001
        assert config.cache_ttl_seconds == 60.0
        assert config.content_json_path == content
        ok, errors = config.validate()
        assert ok, errors

    def test_unknown_data_source_ignored(self, monkeypatch):
        monkeypatch.setenv("DATA_SOURCE", "mongo")
        assert ServerConfig.from_env().data_source is None

    def test_validate_reports_missing_files(self, tmp_path):
        config = ServerConfig(data_source="json", content_json_path=tmp_path / "missing.json", adapter_timeout_seconds=0)
        ok, errors = config.validate()
        assert not ok
        assert len(errors) == 2

    def test_load_algorithm_config(self, tmp_path):
        path = tmp_path / "algo.json"
        path.write_text(json.dumps({"windows": {"category_window_days": 14}}))
        config = ServerConfig(algorithm_config_path=path)
        assert config.load_algorithm_config().category_window_days == 14
        assert ServerConfig().load_algorithm_config() is DEFAULT_CONFIG
