"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Kuba", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    workbook_path: Path = Field(
        default=Path("data/library.xlsx"), alias="WORKBOOK_PATH"
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./kuba.db", alias="DATABASE_URL"
    )
    engagement_storage_key: str = Field(
        default="userInteractionHistory_v3",
        alias="ENGAGEMENT_STORAGE_KEY",
        min_length=1,
        max_length=255,
    )

    hot_term_limit: int = Field(default=5, alias="HOT_TERM_LIMIT", ge=1, le=50)
    title_match_bonus: int = Field(
        default=5, alias="TITLE_MATCH_BONUS", ge=0, le=1_000
    )
    ticker_lane_count: int = Field(
        default=2, alias="TICKER_LANE_COUNT", ge=1, le=2
    )
    ticker_min_words_per_lane: int = Field(
        default=8, alias="TICKER_MIN_WORDS_PER_LANE", ge=1, le=200
    )

    catalog_api_url: HttpUrl | None = Field(default=None, alias="CATALOG_API_URL")
    catalog_fetch_timeout: float = Field(
        default=5.0, alias="CATALOG_FETCH_TIMEOUT", gt=0, le=120
    )

    seed_demo_engagement: bool = Field(default=False, alias="SEED_DEMO_ENGAGEMENT")

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("engagement_storage_key", mode="before")
    @classmethod
    def _strip_storage_key(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
