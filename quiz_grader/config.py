"""
Configuration management for the Quiz Grader system.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Nothing here is required: grading works without any environment, and
    the tutor client only needs an API key once it is actually used.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # AI Tutor Configuration
    # ==========================================================================
    openai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible tutor endpoint",
    )

    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL for the tutor API",
    )

    tutor_model: str = Field(
        default="gpt-4o-mini",
        description="Model used by the AI tutor",
    )

    tutor_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for tutor replies",
    )

    tutor_max_tokens: int = Field(
        default=1000,
        ge=1,
        description="Maximum tokens in a single tutor reply",
    )

    # ==========================================================================
    # AI Usage Limits
    # ==========================================================================
    ai_rate_limit_per_hour: int = Field(
        default=50,
        ge=1,
        description="AI requests allowed per user within the rate window",
    )

    ai_rate_window_seconds: int = Field(
        default=3600,
        ge=1,
        description="Length of the sliding rate-limit window in seconds",
    )

    ai_rate_sweep_probability: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Chance per request of sweeping stale users from memory",
    )

    ai_daily_token_limit: int = Field(
        default=50_000,
        ge=1,
        description="AI tokens allowed per user per calendar day",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )

    log_json: bool = Field(
        default=True,
        description="Render log events as JSON lines (console rendering otherwise)",
    )

    @field_validator("openai_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL doesn't have trailing slash."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
