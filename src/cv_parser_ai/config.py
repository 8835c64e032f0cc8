"""Configuration management for cv-parser-ai."""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["google", "gemini", "openai", "anthropic", "claude", "groq"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CV_PARSER_",
        env_file=".env.local",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # API Keys (no prefix, standard env vars)
    google_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY"),
    )
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    anthropic_api_key: str | None = Field(default=None, alias="ANTHROPIC_API_KEY")
    groq_api_key: str | None = Field(default=None, alias="GROQ_API_KEY")

    # Provider configuration
    provider: ProviderName = "google"
    model: str | None = Field(
        default=None,
        description="Overrides the provider's recommended model",
    )
    parsing_level: Literal["low", "moderate", "high", "ultra"] | None = Field(
        default=None,
        description="Default parsing level; unset builds the full prompt",
    )
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4000, ge=1, le=100000)
    request_timeout: float = Field(
        default=120.0,
        ge=1.0,
        le=600.0,
        description="Per-request timeout in seconds for provider calls",
    )

    # Pipeline configuration
    confidence_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Results scoring below this are flagged as low confidence",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Additional attempts for the LLM extraction stage",
    )
    retry_delay_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Linear backoff base between extraction attempts",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    def api_key_for(self, provider: str) -> str | None:
        """Get the API key configured for a provider name or alias."""
        from cv_parser_ai.llm.base import normalize_provider_name

        return {
            "google": self.google_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
            "groq": self.groq_api_key,
        }.get(normalize_provider_name(provider))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
