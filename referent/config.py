"""Centralized configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Completion service (OpenRouter, OpenAI-compatible)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    completion_model: str = "deepseek/deepseek-chat"

    # Image synthesis (Hugging Face inference API)
    huggingface_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("HUGGINGFACE_API_KEY", "HF_API_KEY"),
    )
    image_retry_delay: float = 10.0

    # Sent to OpenRouter as HTTP-Referer / X-Title
    app_url: str = "http://localhost:8000"
    app_title: str = "Referent"

    # Language the summaries, theses, posts and translations are written in
    target_language: str = "Russian"

    # Articles longer than this many characters are processed in chunks
    chunk_threshold: int = 80_000
    fetch_timeout: float = 30.0

    # "development" adds raw upstream payloads to error responses
    environment: str = "production"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
