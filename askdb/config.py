"""
Application Configuration

Pydantic-based settings management using environment variables.
Supports nested configuration, validation, and caching.

Usage:
    from askdb.config import get_settings

    settings = get_settings()
    print(settings.llm.openai_model)
    print(settings.quota.limit)
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, PostgresDsn, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Language model provider configuration."""

    openai_api_key: str | None = Field(
        None,
        description="OpenAI API key",
        validation_alias=AliasChoices("LLM_OPENAI_API_KEY", "OPENAI_API_KEY", "OPENAI_KEY"),
    )
    openai_model: str = Field(default="gpt-4.1", description="Model used for every task")
    base_url: str | None = Field(
        None,
        description="Optional OpenAI-compatible endpoint (proxy, vLLM, Ollama /v1)",
    )

    # SQL generation must be deterministic
    sql_temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    sql_max_tokens: int = Field(default=256, gt=0, le=16000)

    title_temperature: float = Field(default=0.5, ge=0.0, le=2.0)
    title_max_tokens: int = Field(default=32, gt=0, le=1000)

    suggestions_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    suggestions_max_tokens: int = Field(default=256, gt=0, le=4000)

    timeout: int = Field(
        default=30,
        gt=0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("openai_api_key", "base_url", mode="before")
    @classmethod
    def normalize_empty(cls, v: str | None) -> str | None:
        """Treat empty strings as missing."""
        if v == "":
            return None
        return v

    @model_validator(mode="after")
    def validate_openai_key(self) -> "LLMSettings":
        """Keys for api.openai.com start with 'sk-'; custom endpoints use their own format."""
        key = self.openai_api_key
        if key and self.base_url is None and not key.startswith("sk-"):
            raise ValueError("OpenAI API key must start with 'sk-'")
        return self


class RedisSettings(BaseSettings):
    """Shared counter store configuration."""

    url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for the global request counter",
        validation_alias=AliasChoices("REDIS_URL"),
    )

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only redis:// and rediss:// URLs are usable."""
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("REDIS_URL must use redis://, rediss:// or unix:// scheme.")
        return v


class QuotaSettings(BaseSettings):
    """System-wide language model quota."""

    limit: int = Field(default=100, gt=0, description="Requests allowed per window")
    window_seconds: int = Field(
        default=24 * 60 * 60,
        gt=0,
        description="Window length, started by the first request",
    )
    key: str = Field(default="llm_request_count_daily", description="Counter key")
    reset_password: str | None = Field(
        None,
        description="Shared secret for the quota reset endpoint",
        validation_alias=AliasChoices("QUOTA_RESET_PASSWORD", "RESET_PASSWORD"),
    )

    model_config = SettingsConfigDict(
        env_prefix="QUOTA_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("reset_password", mode="before")
    @classmethod
    def normalize_password(cls, v: str | None) -> str | None:
        """Treat empty strings as missing."""
        if v == "":
            return None
        return v


class SystemDatabaseSettings(BaseSettings):
    """System database configuration (chat session persistence)."""

    url: PostgresDsn | None = Field(
        None,
        description="System PostgreSQL connection URL for saved chat sessions",
    )

    model_config = SettingsConfigDict(
        env_prefix="SYSTEM_DATABASE_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, v: str | PostgresDsn | None) -> str | PostgresDsn | None:
        """Treat empty strings as missing."""
        if v == "":
            return None
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log timestamp format",
    )
    file: Path | None = Field(
        default=None,
        description="Optional log file path (None = stdout only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        extra="ignore",
    )

    def configure(self) -> None:
        """Configure Python logging with these settings."""
        handlers: list[logging.Handler] = [logging.StreamHandler()]

        if self.file:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.file))

        logging.basicConfig(
            level=getattr(logging, self.level),
            format=self.format,
            datefmt=self.date_format,
            handlers=handlers,
            force=True,  # Override any existing configuration
        )


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    Settings are nested by concern (llm, redis, quota, system_database, logging).

    Environment Variables:
        ENVIRONMENT: Deployment environment (development, staging, production)
        APP_NAME: Application name for logging
        DEBUG: Enable debug mode
        API_HOST: API server host
        API_PORT: API server port
        CORS_ORIGINS: Comma separated list of allowed origins
        LLM_*: Model provider configuration (see LLMSettings)
        REDIS_URL: Shared counter store (see RedisSettings)
        QUOTA_*: Request quota (see QuotaSettings)
        SYSTEM_DATABASE_*: Chat session persistence (see SystemDatabaseSettings)
        LOG_*: Logging configuration (see LoggingSettings)

    Example:
        >>> settings = get_settings()
        >>> settings.quota.limit
        100
        >>> settings.is_production
        False
    """

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    app_name: str = Field(
        default="AskDB",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    api_port: int = Field(
        default=8000,
        gt=0,
        le=65535,
        description="API server port",
    )
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma separated list of allowed CORS origins",
    )

    # Nested settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    quota: QuotaSettings = Field(default_factory=QuotaSettings)
    system_database: SystemDatabaseSettings = Field(default_factory=SystemDatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def model_post_init(self, __context) -> None:
        """Configure logging and log configuration on initialization."""
        self.logging.configure()
        logger = logging.getLogger(__name__)
        logger.info(
            f"Settings loaded for {self.app_name} ({self.environment})",
            extra={
                "environment": self.environment,
                "debug": self.debug,
                "llm_model": self.llm.openai_model,
                "llm_configured": self.llm.openai_api_key is not None,
                "quota_limit": self.quota.limit,
            },
        )


_DOTENV_PATH = Path(__file__).resolve().parents[1] / ".env"


def _apply_dotenv_precedence() -> None:
    env_source = os.getenv("ASKDB_ENV_SOURCE", "dotenv").lower()
    if env_source not in {"dotenv", "envfile", "file"}:
        return
    if _DOTENV_PATH.exists():
        load_dotenv(_DOTENV_PATH, override=True)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses functools.lru_cache to ensure settings are loaded only once.

    Returns:
        Settings: Singleton settings instance
    """
    _apply_dotenv_precedence()
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
