"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_tokens: str | None = None
    default_week_start_day: str = "MONDAY"
    default_page_limit: int = 20
    max_page_limit: int = 100
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_api_tokens(raw: str | None) -> dict[str, str]:
    """Parse ``token=tenant`` pairs from env into a token lookup."""
    if raw is None:
        return {}
    tokens: dict[str, str] = {}
    for chunk in raw.split(","):
        token, separator, tenant_id = chunk.strip().partition("=")
        token = token.strip()
        tenant_id = tenant_id.strip()
        if not separator or not token or not tenant_id:
            continue
        tokens[token] = tenant_id
    return tokens
