"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class ListingConfig(BaseSettings):
    default_page_size: int = 20


class AuthConfig(BaseSettings):
    session_max_age_days: int = 7


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/biens.db"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    listing: ListingConfig = Field(default_factory=ListingConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _yaml
    listing = ListingConfig(**y.get("listing", {}))
    auth = AuthConfig(**y.get("auth", {}))
    overrides = {}
    db_url = y.get("database", {}).get("url")
    if db_url:
        overrides["database_url"] = db_url
    if "log_level" in y:
        overrides["log_level"] = y["log_level"]
    if "cors_origins" in y:
        overrides["cors_origins"] = y["cors_origins"]
    return Settings(listing=listing, auth=auth, **overrides)
