"""Configuration management for the question generation service."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    env: str = "development"
    log_level: str = "INFO"

    # LLM API Keys
    gemini_api_key: Optional[str] = None
    deepseek_api_key: Optional[str] = None
    moonshot_api_key: Optional[str] = None

    # LLM Models
    gemini_model_name: str = "gemini-2.5-flash"
    deepseek_model_name: str = "deepseek/deepseek-r1"
    moonshot_model_name: str = "moonshot-v1-8k"

    # OpenRouter attribution headers (used by the deepseek provider)
    openrouter_referer: str = "https://yourapp.com"
    openrouter_title: str = "Exam Prep App"

    # Provider priority, comma-separated (first = tried first)
    provider_priority: str = "gemini,deepseek,moonshot"

    # Question Generation Settings
    max_batch_size: int = Field(default=12, ge=1)
    max_attempts: int = Field(default=5, ge=1)
    acceptance_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    batch_timeout_seconds: float = Field(default=60.0, gt=0)

    # Delays between batches and attempts (informal rate limiting)
    backoff_strategy: str = Field(default="constant", pattern="^(constant|exponential)$")
    batch_delay_seconds: float = Field(default=2.0, ge=0)
    attempt_delay_seconds: float = Field(default=3.0, ge=0)
    max_delay_seconds: float = Field(default=30.0, ge=0)

    # Exam catalog (None = packaged default)
    exam_catalog_path: Optional[str] = None

    def get_provider_priority(self) -> List[str]:
        """Return the provider priority list with blanks removed."""
        return [
            name.strip().lower()
            for name in self.provider_priority.split(",")
            if name.strip()
        ]


# Global settings instance
settings = Settings()
