"""Application configuration using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Upstream search API
    SEARCH_API_URL: str = "https://api.perplexity.ai/chat/completions"
    SEARCH_MODEL: str = "llama-3.1-sonar-large-128k-online"
    SEARCH_TEMPERATURE: float = 0.2
    SEARCH_MAX_TOKENS: int = 1000
    SEARCH_TIMEOUT_SECONDS: float = 30.0
    ERROR_BODY_MAX_CHARS: int = 500

    # Dispatch
    MAX_CONCURRENT_QUERIES: int = 0

    # Langfuse
    LANGFUSE_PUBLIC_KEY: Optional[str] = None
    LANGFUSE_SECRET_KEY: Optional[str] = None
    LANGFUSE_HOST: str = "https://us.cloud.langfuse.com"

    # Application
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def langfuse_enabled(self) -> bool:
        return bool(self.LANGFUSE_PUBLIC_KEY and self.LANGFUSE_SECRET_KEY)


# Global settings instance
settings = Settings()
