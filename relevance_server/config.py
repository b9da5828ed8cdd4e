"""
Server Configuration

Loads configuration from environment variables and provides defaults.
Supports loading from .env file using python-dotenv.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from relevance.models.config import RecommendationConfig, DEFAULT_CONFIG

# Single .env at the project root
_ROOT_ENV = Path(__file__).resolve().parent.parent / ".env"
if _ROOT_ENV.exists():
    load_dotenv(_ROOT_ENV)


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Data source: "json" | "firebase" | None (empty in-memory stores)
    data_source: Optional[str] = None
    # When data_source=json: catalog files and the profile file
    content_json_path: Optional[Path] = None
    legacy_content_json_path: Optional[Path] = None
    profiles_json_path: Optional[Path] = None
    # When data_source=firebase: path to service account JSON and optional project id
    firebase_credentials_path: Optional[Path] = None
    firebase_project_id: Optional[str] = None

    # Listing cache lifetime; entries are cleared on every write.
    cache_ttl_seconds: float = 300.0
    # Per adapter call; a slower call is treated as upstream unavailable.
    adapter_timeout_seconds: float = 5.0

    # Optional JSON file with RecommendationConfig overrides
    algorithm_config_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        base_dir = Path(__file__).parent.parent
        data_source = os.getenv("DATA_SOURCE", "").strip().lower() or None
        if data_source and data_source not in ("json", "firebase"):
            data_source = None

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (base_dir / p).resolve()

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            data_source=data_source,
            content_json_path=_path_env("CONTENT_JSON_PATH"),
            legacy_content_json_path=_path_env("LEGACY_CONTENT_JSON_PATH"),
            profiles_json_path=_path_env("PROFILES_JSON_PATH", base_dir / "data" / "profiles.json"),
            firebase_credentials_path=_path_env("FIREBASE_CREDENTIALS_PATH") or _path_env("GOOGLE_APPLICATION_CREDENTIALS"),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            cache_ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", "300")),
            adapter_timeout_seconds=float(os.getenv("ADAPTER_TIMEOUT_SECONDS", "5")),
            algorithm_config_path=_path_env("ALGORITHM_CONFIG_PATH"),
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        if self.data_source == "json":
            if not self.content_json_path or not self.content_json_path.exists():
                errors.append(f"Content JSON not found: {self.content_json_path}")
            if self.legacy_content_json_path and not self.legacy_content_json_path.exists():
                errors.append(f"Legacy content JSON not found: {self.legacy_content_json_path}")

        if self.data_source == "firebase":
            if not self.firebase_credentials_path or not self.firebase_credentials_path.is_file():
                errors.append(f"Firebase credentials file not found: {self.firebase_credentials_path}")

        if self.algorithm_config_path and not self.algorithm_config_path.exists():
            errors.append(f"Algorithm config not found: {self.algorithm_config_path}")

        if self.cache_ttl_seconds <= 0:
            errors.append("CACHE_TTL_SECONDS must be positive")
        if self.adapter_timeout_seconds <= 0:
            errors.append("ADAPTER_TIMEOUT_SECONDS must be positive")

        return len(errors) == 0, errors

    def load_algorithm_config(self) -> RecommendationConfig:
        """RecommendationConfig from algorithm_config_path, or defaults."""
        if not self.algorithm_config_path:
            return DEFAULT_CONFIG
        with open(self.algorithm_config_path) as f:
            return RecommendationConfig.from_dict(json.load(f))


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
