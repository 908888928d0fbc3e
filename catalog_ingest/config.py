"""
Application Configuration

Load settings from environment variables with validation.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Seeder settings from environment variables."""

    # Environment
    environment: str = "development"
    debug: bool = False
    log_level: Optional[str] = None

    # Firebase
    firebase_credentials_path: str = "./service-account.json"
    firebase_project_id: Optional[str] = None

    # Redis (quota tracking across runs; empty keeps it in-process)
    redis_url: str = ""

    # External APIs
    youtube_api_key: Optional[str] = None
    http_timeout_seconds: float = 20.0

    # Quota Management
    youtube_daily_quota_limit: int = 9000
    request_delay_seconds: float = 0.15

    # Ingestion
    target_region: str = "IN"
    channel_queries: List[str] = ["Muse Asia", "Ani-One Asia"]
    max_playlists_per_channel: int = 5
    max_videos_per_playlist: int = 30
    max_additional_searches_per_genre: int = 6
    min_playable_episodes: int = 3
    min_episodes_per_genre: int = 3
    series_name_max_length: int = 200

    # Maintenance jobs
    max_status_refresh_videos: int = 200

    # Ask before purging externally-sourced series
    offer_reset: bool = False

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @field_validator("target_region")
    @classmethod
    def _upper_region(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator(
        "max_playlists_per_channel",
        "max_videos_per_playlist",
        "max_additional_searches_per_genre",
        "min_playable_episodes",
        "min_episodes_per_genre",
        "series_name_max_length",
        "max_status_refresh_videos",
    )
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value

    @field_validator("request_delay_seconds")
    @classmethod
    def _non_negative_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("delay cannot be negative")
        return value


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
