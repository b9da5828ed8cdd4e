"""
Engine configuration: weight sets, windows, and thresholds for every stage.

RecommendationConfig defaults are defined here. The server may pass a dict
(e.g. from ALGORITHM_CONFIG_PATH); from_dict() merges it with these defaults.
"""

from typing import Dict, Optional

from pydantic import BaseModel, model_validator


class RecommendationConfig(BaseModel):
    """Configuration for the relevance engine."""

    # -------------------------------------------------------------------------
    # Personalized scoring weights (must sum to 1.0)
    # score = Σ weight * factor over category/tag/source/trust/recency/popularity
    # -------------------------------------------------------------------------

    personal_weight_category: float = 0.30
    personal_weight_tags: float = 0.25
    personal_weight_source_type: float = 0.15
    personal_weight_trust: float = 0.15
    personal_weight_recency: float = 0.10
    personal_weight_popularity: float = 0.05

    # Recency decays linearly to 0 over this many days for personalized scoring.
    personal_recency_window_days: int = 30

    # Most recent views excluded from personalized candidates (anti-repetition).
    recent_views_excluded: int = 50

    # Upper bound on the candidate fetch for personalized scoring.
    personal_candidate_limit: int = 1000

    # -------------------------------------------------------------------------
    # Tag relevance weights (must sum to 1.0)
    # relevance = match_ratio, precision, popularity, recency
    # -------------------------------------------------------------------------

    tag_weight_match_ratio: float = 0.4
    tag_weight_precision: float = 0.3
    tag_weight_popularity: float = 0.2
    tag_weight_recency: float = 0.1

    # Recency for tag relevance and integrated scoring decays over a year.
    tag_recency_window_days: int = 365

    # -------------------------------------------------------------------------
    # Integrated scoring weights (must sum to 1.0)
    # final = category, tag relevance, both-match bonus, popularity, recency
    # -------------------------------------------------------------------------

    integrated_weight_category: float = 0.30
    integrated_weight_tag_relevance: float = 0.40
    integrated_weight_both_match: float = 0.10
    integrated_weight_popularity: float = 0.15
    integrated_weight_recency: float = 0.05

    # Each retriever is asked for ceil(limit * overfetch) candidates before merging.
    integrated_overfetch: float = 1.5

    # Reason qualifiers: "popular" above these counts, "recent" within these days.
    popular_like_threshold: int = 10
    popular_view_threshold: int = 100
    recent_reason_days: int = 7

    # -------------------------------------------------------------------------
    # Category retrieval
    # -------------------------------------------------------------------------

    # Items newer than this are preferred; older ones only backfill.
    category_window_days: int = 30

    # -------------------------------------------------------------------------
    # Tag co-occurrence weights (must sum to 1.0)
    # association = co-occurrence rate, popularity, specificity
    # -------------------------------------------------------------------------

    cooccurrence_weight_rate: float = 0.6
    cooccurrence_weight_popularity: float = 0.2
    cooccurrence_weight_specificity: float = 0.2

    # popularity = min(global / popularity_scale, 1); specificity = max(0, 1 - global / specificity_scale)
    tag_popularity_scale: int = 100
    tag_specificity_scale: int = 50

    # -------------------------------------------------------------------------
    # Collaborative filtering
    # -------------------------------------------------------------------------

    # Profiles must share strictly more than this fraction of categories.
    similarity_threshold: float = 0.3
    # Only the most similar profiles contribute likes.
    max_similar_users: int = 10

    # -------------------------------------------------------------------------
    # Interest derivation
    # -------------------------------------------------------------------------

    derived_top_categories: int = 5
    derived_top_tags: int = 10

    @model_validator(mode="after")
    def weights_sum_to_one(self):
        for name, weights in self.weight_sets().items():
            total = sum(weights.values())
            if abs(total - 1.0) > 0.01:
                raise ValueError(f"{name} weights must sum to 1.0, got {total}")
        return self

    def weight_sets(self) -> Dict[str, Dict[str, float]]:
        """Factor name -> weight for each scoring formula."""
        return {
            "personalized": {
                "category_match": self.personal_weight_category,
                "tag_match": self.personal_weight_tags,
                "source_type_match": self.personal_weight_source_type,
                "trust": self.personal_weight_trust,
                "recency": self.personal_weight_recency,
                "popularity": self.personal_weight_popularity,
            },
            "tag_relevance": {
                "match_ratio": self.tag_weight_match_ratio,
                "precision": self.tag_weight_precision,
                "popularity": self.tag_weight_popularity,
                "recency": self.tag_weight_recency,
            },
            "integrated": {
                "category_match": self.integrated_weight_category,
                "tag_relevance": self.integrated_weight_tag_relevance,
                "both_match": self.integrated_weight_both_match,
                "popularity": self.integrated_weight_popularity,
                "recency": self.integrated_weight_recency,
            },
            "cooccurrence": {
                "rate": self.cooccurrence_weight_rate,
                "popularity": self.cooccurrence_weight_popularity,
                "specificity": self.cooccurrence_weight_specificity,
            },
        }

    @classmethod
    def from_dict(cls, config_dict: Dict) -> "RecommendationConfig":
        """Create config from dictionary (e.g., loaded from JSON).

        Accepts flat field names or nested sections:
        {"weights": {"personalized": {"category_match": 0.3, ...}, ...},
         "collaborative": {"similarity_threshold": 0.3, "max_similar_users": 10}}
        """
        flat = {k: v for k, v in config_dict.items() if not isinstance(v, dict)}
        prefixes = {
            "personalized": "personal_weight_",
            "tag_relevance": "tag_weight_",
            "integrated": "integrated_weight_",
            "cooccurrence": "cooccurrence_weight_",
        }
        personal_names = {
            "category_match": "category",
            "tag_match": "tags",
            "source_type_match": "source_type",
        }
        integrated_names = {"category_match": "category"}
        for set_name, weights in (config_dict.get("weights") or {}).items():
            prefix = prefixes.get(set_name)
            if prefix is None:
                continue
            for factor, value in weights.items():
                if set_name == "personalized":
                    factor = personal_names.get(factor, factor)
                elif set_name == "integrated":
                    factor = integrated_names.get(factor, factor)
                flat[f"{prefix}{factor}"] = value
        for section in ("collaborative", "windows", "interests", "reasons"):
            if isinstance(config_dict.get(section), dict):
                flat.update(config_dict[section])
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = RecommendationConfig()


def resolve_config(config: Optional["RecommendationConfig"]) -> "RecommendationConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
