# app/config.py
"""
Centralized configuration with validation.

Uses pydantic-settings to load and validate all environment variables at startup.
Fail fast with clear error messages if required config is missing.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = Field(
        ...,
        description="PostgreSQL connection URL (sqlite:/// works for local dev and tests)",
    )

    # Authentication
    ADMIN_API_KEY: str | None = Field(
        default=None,
        description="API key for admin endpoints (refresh-all, retention cleanup)",
    )

    # LLM Providers
    OPENAI_API_KEY: str | None = Field(
        default=None,
        description="OpenAI API key for classification. Classification is skipped when unset.",
    )
    LLM_PROVIDER: str = Field(
        default="openai",
        description="Active LLM provider: openai",
    )

    # Classification
    CLASSIFICATION_MODEL: str = Field(
        default="gpt-4o-mini",
        description="Model used for topic tags and summaries",
    )
    CLASSIFICATION_TEMPERATURE: float = Field(default=0.3, ge=0.0, le=2.0)
    CLASSIFICATION_MAX_TOKENS: int = Field(default=300, ge=1)
    CLASSIFICATION_MIN_BODY_CHARS: int = Field(
        default=10,
        description="Bodies at or below this length are not sent for classification",
    )
    CLASSIFICATION_MAX_BODY_CHARS: int = Field(
        default=1500,
        description="Body prefix length embedded in the classification prompt",
    )

    # Transport
    FETCH_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single fetch attempt",
    )
    FEED_PROXY_CHAIN: str = Field(
        default="direct,corsproxy,allorigins,thingproxy,cors-anywhere",
        description="Comma-separated, ordered list of feed access strategies",
    )
    USER_AGENT: str = Field(
        default="ContentCollector/1.0 (+feed-reader)",
    )

    # Platform imports
    PLATFORM_FETCH_LIMIT: int = Field(default=20, ge=1, le=100)

    # Retention
    RETENTION_DAYS: int = Field(
        default=30,
        ge=1,
        description="Age after which unsaved, untransformed feed articles may be removed",
    )

    # CORS
    CORS_ORIGINS: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins",
    )

    # Application
    ENVIRONMENT: str = Field(
        default="development",
        description="Environment: development, staging, production",
    )
    LOG_JSON: bool = Field(default=False, description="Emit single-line JSON logs")
    LOG_LEVEL: str = Field(default="INFO")

    @field_validator("DATABASE_URL")
    @classmethod
    def fix_database_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but SQLAlchemy needs postgresql+psycopg2://"""
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg2://", 1)
        return v

    @property
    def proxy_chain(self) -> list[str]:
        return [name.strip() for name in self.FEED_PROXY_CHAIN.split(",") if name.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings. Call at startup to validate config."""
    return Settings()
