"""
Application settings loaded from environment variables and an optional '.env' file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = Field(default="Base Chat")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    # Provider credentials
    openai_api_key: str = Field(default="")
    anthropic_api_key: str = Field(default="")
    google_api_key: str = Field(default="")

    # Retrieval service
    ragie_api_key: str = Field(default="")
    ragie_api_url: str = Field(default="https://api.ragie.ai")
    retrieval_top_k: int = Field(default=6)
    retrieval_rerank: bool = Field(default=True)
    retrieval_timeout: float = Field(default=30.0)

    # Generation
    generation_temperature: float = Field(default=0.3)
    generation_timeout: float | None = Field(default=None)  # seconds; None waits forever
    anthropic_max_tokens: int = Field(default=4096)


@lru_cache
def get_settings() -> Settings:
    return Settings()
