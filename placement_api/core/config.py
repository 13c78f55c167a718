"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "placement_pro"

    # Adzuna job search (empty or demo_* values switch to demo data)
    adzuna_app_id: str = ""
    adzuna_api_key: str = ""
    adzuna_base_url: str = "https://api.adzuna.com/v1/api/jobs"
    adzuna_country: str = "in"
    adzuna_results_per_page: int = 20

    # HTTP
    api_prefix: str = ""
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:3004",
        "http://localhost:3005",
    ]

    # App
    service_name: str = "placement-api"
    log_level: str = "INFO"
    debug: bool = False

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
