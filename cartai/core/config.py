"""
Application configuration using pydantic-settings.

WHAT: Centralized config from environment variables
WHY: Type-safe, validated config with sensible defaults
HOW: Pydantic BaseSettings reads from .env and environment
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import Literal
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=[
            str(Path(__file__).parent.parent.parent / ".env"),
            ".env",
        ],
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App metadata
    APP_NAME: str = "CartAI"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Saved conversations
    DATABASE_URL: str = "sqlite:///./data/cartai.db"

    # LLM Provider Selection
    LLM_PROVIDER: Literal["openrouter"] = "openrouter"

    # LLM Request Configuration
    LLM_MAX_RETRIES: int = 1
    LLM_RETRY_DELAY: float = 1.0  # seconds, base for exponential backoff
    LLM_DEFAULT_TEMPERATURE: float = 0.8
    LLM_DEFAULT_MAX_TOKENS: int = 300

    # OpenRouter Configuration
    LLM_ENABLE_OPENROUTER: bool = False
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_TIMEOUT: float = 30.0  # seconds

    # Model labels (opaque to the negotiation engine)
    BUYER_MODEL: str = "openai/gpt-4o-mini"
    SELLER_MODEL: str = "openai/gpt-4o-mini"
    REASONING_MODEL: str = "anthropic/claude-3-opus"
    FALLBACK_MODEL: str = "anthropic/claude-3-haiku"

    # Negotiation Configuration
    MULTI_SELLER_ROUNDS: int = 6
    SINGLE_SELLER_ROUNDS: int = 4
    NEGOTIATION_PACING_SECONDS: float = 0.3  # UX pacing between streamed events

    # CORS - accepts comma-separated string or list
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:3001"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, list):
            return ",".join(v)
        return v

    def get_cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "./data/logs/app.log"


# Singleton instance
settings = Settings()
