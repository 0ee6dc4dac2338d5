"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    redis_url: str = "redis://localhost:6379/0"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 30.0
    search_cache_ttl_seconds: int = 300
    notification_inbox_capacity: int = 100
    default_page_size: int = 20
    max_page_size: int = 100
    default_search_radius_km: float = 10.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_csv(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated query value into trimmed, non-empty parts."""
    if raw is None:
        return ()
    values = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value:
            values.append(value)
    return tuple(values)
