"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB (leave empty to run on the in-memory store)
    mongodb_uri: str = ""
    mongodb_db: str = "internhub"
    mongodb_timeout_ms: int = 2000

    # HTTP
    cors_origins: List[str] = [
        "http://localhost:8080",
        "http://localhost:8081",
        "http://localhost:8082",
        "http://localhost:8083",
    ]

    # Listing
    default_page_limit: int = 20
    max_page_limit: int = 100

    # App
    seed_demo_data: bool = True
    log_level: str = "INFO"
    debug: bool = False

    @property
    def use_mongo(self) -> bool:
        """True when a MongoDB URI has been configured."""
        return bool(self.mongodb_uri.strip())

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
